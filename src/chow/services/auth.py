# src/chow/services/auth.py
"""Account registration, credential checks and session tokens."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chow.core.errors import (
    AlreadyExistsError,
    InvalidCredentialsError,
    NotFoundError,
    PersistenceError,
    TokenExpiredError,
    TokenInvalidError,
    UserNotFoundError,
)
from chow.core.security import hash_password, verify_password
from chow.core.settings import Settings, settings
from chow.db.time import utcnow
from chow.models.user import Role, User
from chow.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

_REQUIRED_CLAIMS = ("sub", "username", "role", "iat", "exp")


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Caller identity recovered from a verified session token."""

    user_id: uuid.UUID
    username: str
    role: Role


class TokenService:
    """Issue and verify HMAC-signed, time-bound session tokens."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60) -> None:
        if not algorithm.startswith("HS"):
            raise ValueError("Session tokens require a symmetric HMAC algorithm")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, config: Settings) -> TokenService:
        return cls(
            config.secret_key,
            algorithm=config.jwt_algorithm,
            expire_minutes=config.access_token_expire_minutes,
        )

    def issue(self, user: User, *, issued_at: datetime | None = None) -> str:
        """Create a signed token for ``user``.

        Args:
            user: The account the token identifies.
            issued_at: Override for the issue time; expiry is computed from it.

        Returns:
            The encoded token string.
        """
        now = issued_at or utcnow()
        claims = {
            "sub": str(user.id),
            "username": user.username,
            "role": Role(user.role).value,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=self.expire_minutes)).timestamp()),
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> AuthenticatedIdentity:
        """Validate ``token`` and return the identity it carries.

        Raises:
            TokenExpiredError: The signature is valid but the expiry has passed.
            TokenInvalidError: Bad signature, malformed token, missing claims,
                or a subject that is not a UUID.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError as err:
            raise TokenExpiredError() from err
        except JWTError as err:
            raise TokenInvalidError() from err

        if any(payload.get(claim) is None for claim in _REQUIRED_CLAIMS):
            raise TokenInvalidError("Token is missing required claims")

        try:
            user_id = uuid.UUID(str(payload["sub"]))
            role = Role(payload["role"])
        except ValueError as err:
            raise TokenInvalidError() from err

        username = payload["username"]
        if not isinstance(username, str):
            raise TokenInvalidError()

        return AuthenticatedIdentity(user_id=user_id, username=username, role=role)


class AuthService:
    """Registration and login on top of the user store."""

    def __init__(self, db: Session, tokens: TokenService) -> None:
        self.db = db
        self.users = UserRepository(db)
        self.tokens = tokens

    def register(self, *, email: str, username: str, password: str) -> User:
        """Create a plain ``user`` account.

        Raises:
            AlreadyExistsError: If the email or username is already registered.
        """
        if self.users.find_by_email_or_username(email, username) is not None:
            logger.info("Registration rejected: email or username already taken")
            raise AlreadyExistsError("User already exists")

        try:
            user = self.users.create(
                email=email,
                username=username,
                password_hash=hash_password(password),
                role=Role.USER,
            )
            self.db.commit()
        except AlreadyExistsError:
            logger.info("Registration rejected: concurrent registration won")
            raise
        except SQLAlchemyError as err:
            self.db.rollback()
            logger.exception("Failed to register account")
            raise PersistenceError() from err

        logger.info("Registered user %s", user.id)
        return user

    def login(self, *, email: str, password: str) -> tuple[User, str]:
        """Verify credentials and return the user plus a fresh access token.

        Unknown email and wrong password are indistinguishable to the caller.
        """
        try:
            user = self.users.get_by_email(email)
        except NotFoundError as err:
            logger.info("Login failed: unknown account")
            raise InvalidCredentialsError() from err

        if not verify_password(password, user.password_hash):
            logger.info("Login failed for user %s", user.id)
            raise InvalidCredentialsError()

        return user, self.tokens.issue(user)

    def set_role(self, email: str, role: Role) -> User:
        """Grant ``role`` to the account registered with ``email``."""
        try:
            user = self.users.get_by_email(email)
        except NotFoundError as err:
            raise UserNotFoundError() from err
        self.users.update_role(user.id, role)
        self.db.commit()
        logger.info("User %s now has role %s", user.id, role.value)
        return user


def get_token_service() -> TokenService:
    """Return a token service configured from the process settings."""
    return TokenService.from_settings(settings)
