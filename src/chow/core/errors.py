"""Domain error taxonomy shared by repositories, services and the API layer."""

from __future__ import annotations


class ChowError(Exception):
    """Base exception for all domain failures.

    The API layer maps each subclass to an HTTP status; anything not derived
    from this class is treated as an unexpected server error.
    """

    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class NotFoundError(ChowError):
    """Raised when a lookup matches no rows."""

    default_message = "Not found"


class JointNotFoundError(NotFoundError):
    default_message = "Joint not found"


class ComplaintNotFoundError(NotFoundError):
    default_message = "Complaint not found"


class UserNotFoundError(NotFoundError):
    default_message = "User not found"


class AlreadyExistsError(ChowError):
    """Raised when a uniqueness rule would be violated."""

    default_message = "Already exists"


class InvalidCredentialsError(ChowError):
    default_message = "Invalid credentials"


class TokenError(ChowError):
    """Base class for session token verification failures."""

    default_message = "Invalid token"


class TokenExpiredError(TokenError):
    """Raised for a correctly signed token whose expiry has elapsed.

    Kept distinct from TokenInvalidError so clients can re-authenticate
    instead of treating the credential as forged.
    """

    default_message = "Token has expired"


class TokenInvalidError(TokenError):
    default_message = "Invalid token"


class UnauthenticatedError(ChowError):
    default_message = "Authentication required"


class ForbiddenError(ChowError):
    default_message = "User not authorized to perform this action"


class RadiusExceededError(ChowError):
    """Raised when a proximity query asks for more than the configured cap."""

    def __init__(self, radius_m: float, max_radius_m: float) -> None:
        super().__init__(
            f"Maximum search radius exceeded ({radius_m:g}m > {max_radius_m:g}m)"
        )
        self.radius_m = radius_m
        self.max_radius_m = max_radius_m


class ValidationFailedError(ChowError):
    """Caller-fixable input problem tied to a single field."""

    default_message = "Validation failed"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class PersistenceError(ChowError):
    """Catch-all for store failures; details are logged, never returned."""

    default_message = "Persistence failure"
