"""Grant a role to an existing account.

Privileged roles are never handed out through the API; this is the
operator path for creating moderators and admins.
"""
from __future__ import annotations

import argparse
import logging
import sys

from chow.core.errors import UserNotFoundError
from chow.core.logging import configure_logging
from chow.core.settings import settings
from chow.db.session import Database
from chow.models.user import Role
from chow.services.auth import AuthService, get_token_service

logger = logging.getLogger("chow.set_role")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Set the role of a registered user")
    parser.add_argument("email", help="Email address the account registered with")
    parser.add_argument("role", choices=[role.value for role in Role])
    args = parser.parse_args(argv)
    configure_logging(settings.log_level)

    database = Database.from_settings(settings)
    try:
        with database.session() as db:
            AuthService(db, get_token_service()).set_role(args.email, Role(args.role))
    except UserNotFoundError:
        logger.error("No user registered with %s", args.email)
        return 1
    finally:
        database.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
