# src/chow/models/vote.py
"""Models capturing voting interactions on joints."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from chow.db.session import Base
from chow.db.time import utcnow


class VoteDirection(str, enum.Enum):
    UP = "up"
    DOWN = "down"


class Vote(Base):
    """Per-user vote on a joint.

    The unique constraint is the conflict target of the vote upsert; it is
    what guarantees a single row per (user, joint) under concurrent requests.
    """

    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("user_id", "joint_id", name="uq_votes_user_joint"),
        Index("ix_votes_joint_id", "joint_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    joint_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("joints.id", ondelete="CASCADE"),
        nullable=False,
    )
    direction: Mapped[VoteDirection] = mapped_column(
        Enum(
            VoteDirection,
            name="vote_direction",
            native_enum=False,
            values_callable=lambda directions: [d.value for d in directions],
            validate_strings=True,
        ),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
