"""Data access helpers for the vote ledger."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import NamedTuple

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from chow.core.errors import PersistenceError
from chow.db.time import utcnow
from chow.models.user import User
from chow.models.vote import Vote, VoteDirection

__all__ = ["VoteRepository", "Voter"]

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class Voter(NamedTuple):
    user_id: uuid.UUID
    username: str
    direction: VoteDirection
    created_at: datetime
    updated_at: datetime


class VoteRepository:
    """Thin wrapper around database access for vote rows."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_user_joint_vote(self, user_id: uuid.UUID, joint_id: uuid.UUID) -> Vote | None:
        """Return the caller's vote on a joint, or None when they have not voted."""
        return self.session.scalars(
            select(Vote)
            .where(Vote.user_id == user_id, Vote.joint_id == joint_id)
            .execution_options(populate_existing=True)
        ).first()

    def upsert(self, user_id: uuid.UUID, joint_id: uuid.UUID, direction: VoteDirection) -> Vote:
        """Insert the (user, joint) vote or overwrite its direction in one statement.

        Conflict resolution happens in the database on ``uq_votes_user_joint``,
        so two racing inserts for the same pair leave exactly one row.

        Raises:
            PersistenceError: If the session is bound to neither PostgreSQL nor SQLite.
        """
        dialect = self.session.get_bind().dialect.name
        try:
            insert = _UPSERT_DIALECTS[dialect]
        except KeyError as err:
            logger.error("Vote upsert requested on unsupported database dialect %s", dialect)
            raise PersistenceError(f"Unsupported database dialect: {dialect}") from err

        now = utcnow()
        stmt = insert(Vote).values(
            id=uuid.uuid4(),
            user_id=user_id,
            joint_id=joint_id,
            direction=direction,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Vote.user_id, Vote.joint_id],
            set_={"direction": stmt.excluded.direction, "updated_at": now},
        ).returning(Vote)
        return self.session.scalars(
            stmt,
            execution_options={"populate_existing": True},
        ).one()

    def count_for_joint(self, joint_id: uuid.UUID, direction: VoteDirection) -> int:
        """Count ledger rows for a joint in one direction."""
        return self.session.scalar(
            select(func.count())
            .select_from(Vote)
            .where(Vote.joint_id == joint_id, Vote.direction == direction)
        ) or 0

    def list_voters(self, joint_id: uuid.UUID, offset: int, limit: int) -> list[Voter]:
        """Return voters on a joint with their usernames, latest vote first."""
        rows = self.session.execute(
            select(
                Vote.user_id,
                User.username,
                Vote.direction,
                Vote.created_at,
                Vote.updated_at,
            )
            .join(User, User.id == Vote.user_id)
            .where(Vote.joint_id == joint_id)
            .order_by(Vote.updated_at.desc(), Vote.user_id)
            .offset(offset)
            .limit(limit)
        )
        return [Voter(*row) for row in rows]
