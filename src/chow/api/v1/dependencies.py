"""Shared API dependencies for authentication and common functionality."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from chow.core.errors import ForbiddenError, UnauthenticatedError
from chow.db.session import get_db
from chow.models.user import Role
from chow.schemas.common import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Pagination
from chow.services.auth import AuthenticatedIdentity, TokenService, get_token_service

# HTTP Bearer scheme; missing credentials are reported by get_current_identity
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]


def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    tokens: TokenServiceDep,
) -> AuthenticatedIdentity:
    """Resolve the caller from the bearer token.

    Identity comes from the verified claims alone; the user table is not read.

    Raises:
        UnauthenticatedError: If no bearer token was sent.
        TokenExpiredError: If the token's expiry has passed.
        TokenInvalidError: If the token fails verification.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Authorization header required")
    return tokens.verify(credentials.credentials)


# Type alias for current identity dependency
CurrentIdentityDep = Annotated[AuthenticatedIdentity, Depends(get_current_identity)]


def require_role(minimum: Role) -> Callable[[AuthenticatedIdentity], AuthenticatedIdentity]:
    """Build a dependency admitting callers whose role is at least ``minimum``."""

    def _check(identity: CurrentIdentityDep) -> AuthenticatedIdentity:
        if not identity.role.satisfies(minimum):
            raise ForbiddenError()
        return identity

    return _check


ModeratorDep = Annotated[AuthenticatedIdentity, Depends(require_role(Role.MODERATOR))]
AdminDep = Annotated[AuthenticatedIdentity, Depends(require_role(Role.ADMIN))]


def get_pagination(
    page: Annotated[int, Query(ge=1)] = DEFAULT_PAGE,
    page_size: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE, alias="pageSize")] = DEFAULT_PAGE_SIZE,
) -> Pagination:
    """Read ``page``/``pageSize`` query parameters."""
    return Pagination(page=page, page_size=page_size)


PaginationDep = Annotated[Pagination, Depends(get_pagination)]
