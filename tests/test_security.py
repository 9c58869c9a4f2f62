# tests/test_security.py
"""Tests for password hashing."""

from chow.core.security import hash_password, verify_password


def test_hash_is_salted_and_verifiable() -> None:
    first = hash_password("s3cret-password")
    second = hash_password("s3cret-password")
    assert first != second
    assert first != "s3cret-password"
    assert verify_password("s3cret-password", first)
    assert verify_password("s3cret-password", second)


def test_wrong_password_is_rejected() -> None:
    hashed = hash_password("s3cret-password")
    assert not verify_password("another-password", hashed)


def test_garbage_hash_is_rejected_without_raising() -> None:
    assert not verify_password("s3cret-password", "not-a-bcrypt-hash")
