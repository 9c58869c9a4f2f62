"""Data access helpers for user accounts."""
from __future__ import annotations

import uuid

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chow.core.errors import AlreadyExistsError, NotFoundError
from chow.models.user import Role, User

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for user entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def create(self, *, email: str, username: str, password_hash: str, role: Role) -> User:
        """Insert a new user and return the persisted ORM instance.

        Raises:
            AlreadyExistsError: If the email or username is already taken.
        """
        user = User(email=email, username=username, password_hash=password_hash, role=role)
        self.session.add(user)
        try:
            self.session.flush()
        except IntegrityError as err:
            self.session.rollback()
            raise AlreadyExistsError("User already exists") from err
        return user

    def get_by_id(self, user_id: uuid.UUID) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_by_email(self, email: str) -> User:
        """Return the user registered with ``email``."""
        user = self.session.scalars(select(User).where(User.email == email)).first()
        if user is None:
            raise NotFoundError("User not found")
        return user

    def find_by_email_or_username(self, email: str, username: str) -> User | None:
        """Return any user holding either identifier, or None."""
        return self.session.scalars(
            select(User).where(or_(User.email == email, User.username == username))
        ).first()

    def update_role(self, user_id: uuid.UUID, role: Role) -> User:
        user = self.get_by_id(user_id)
        user.role = role
        self.session.flush()
        return user
