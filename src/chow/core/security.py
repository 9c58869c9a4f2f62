"""Password hashing helpers built on bcrypt."""
from __future__ import annotations

import bcrypt

# bcrypt only considers the first 72 bytes of its input.
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Check ``password`` against a stored bcrypt hash.

    Args:
        password: Plain-text password submitted by the client.
        hashed_password: Hash previously produced by :func:`hash_password`.

    Returns:
        True if the password matches; False otherwise, including when the
        stored value is not a valid bcrypt hash.
    """
    try:
        return bcrypt.checkpw(_encode(password), hashed_password.encode("utf-8"))
    except ValueError:
        return False
