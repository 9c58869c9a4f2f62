# src/chow/models/joint.py
"""SQLAlchemy model for joints (user-submitted points of interest)."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from chow.db.session import Base
from chow.db.time import utcnow


class Joint(Base):
    """A point of interest at a WGS84 coordinate.

    ``upvotes``/``downvotes`` mirror the vote ledger: each must equal the
    number of ``votes`` rows for this joint in that direction. They are only
    changed by the voting coordinator, inside the same transaction as the
    ledger write.
    """

    __tablename__ = "joints"
    __table_args__ = (
        CheckConstraint("latitude BETWEEN -90 AND 90", name="ck_joints_latitude"),
        CheckConstraint("longitude BETWEEN -180 AND 180", name="ck_joints_longitude"),
        CheckConstraint("upvotes >= 0", name="ck_joints_upvotes"),
        CheckConstraint("downvotes >= 0", name="ck_joints_downvotes"),
        # Bounding-box prefilter for proximity search.
        Index("ix_joints_lat_lon", "latitude", "longitude"),
        Index("ix_joints_approved_created", "is_approved", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    creator_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
