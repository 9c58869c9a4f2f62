# src/chow/api/errors.py
"""Translate domain errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from chow.core.errors import (
    AlreadyExistsError,
    ChowError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    PersistenceError,
    RadiusExceededError,
    TokenError,
    UnauthenticatedError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_DETAIL = "Internal server error"

# Most specific classes first; the first isinstance match wins.
_STATUS_BY_ERROR: tuple[tuple[type[ChowError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AlreadyExistsError, status.HTTP_409_CONFLICT),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (TokenError, status.HTTP_401_UNAUTHORIZED),
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (RadiusExceededError, status.HTTP_400_BAD_REQUEST),
    (ValidationFailedError, status.HTTP_422_UNPROCESSABLE_ENTITY),
)

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def status_for(error: ChowError) -> int:
    """Return the HTTP status code for a domain error."""
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def chow_error_handler(request: Request, exc: ChowError) -> JSONResponse:
    code = status_for(exc)
    if code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        if not isinstance(exc, PersistenceError):
            logger.error("Unhandled domain error on %s %s: %r", request.method, request.url.path, exc)
        return JSONResponse(status_code=code, content={"detail": INTERNAL_ERROR_DETAIL})

    if isinstance(exc, ValidationFailedError):
        content = {"detail": [{"field": exc.field, "message": exc.message}]}
    else:
        content = {"detail": exc.message}

    headers = None
    if isinstance(exc, (TokenError, UnauthenticatedError)):
        headers = _BEARER_CHALLENGE
    return JSONResponse(status_code=code, content=content, headers=headers)


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Database error on %s %s",
        request.method,
        request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR_DETAIL},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain and database error handlers on ``app``."""
    app.add_exception_handler(ChowError, chow_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)  # type: ignore[arg-type]
