"""Data access helpers for working with joints."""
from __future__ import annotations

import uuid

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.orm import Session

from chow.core.errors import NotFoundError
from chow.models.joint import Joint
from chow.models.vote import VoteDirection
from chow.utils.geo import Coordinate, bounding_box, haversine_meters

__all__ = ["JointRepository", "escape_like"]

_COUNTER_COLUMNS = {
    VoteDirection.UP: Joint.upvotes,
    VoteDirection.DOWN: Joint.downvotes,
}


def escape_like(value: str) -> str:
    """Escape LIKE-special characters (%, _) so they match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class JointRepository:
    """Thin wrapper around database access for joint entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def create(
        self,
        *,
        name: str,
        coordinate: Coordinate,
        creator_id: uuid.UUID,
        description: str | None = None,
        photo_url: str | None = None,
        is_approved: bool = False,
    ) -> Joint:
        """Insert a new joint and return the persisted ORM instance."""
        joint = Joint(
            name=name,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            description=description,
            photo_url=photo_url,
            is_approved=is_approved,
            creator_id=creator_id,
        )
        self.session.add(joint)
        self.session.flush()
        return joint

    def get_by_id(self, joint_id: uuid.UUID) -> Joint:
        """Return a joint by identifier.

        Raises:
            NotFoundError: If no joint has this id.
        """
        joint = self.session.get(Joint, joint_id)
        if joint is None:
            raise NotFoundError("Joint not found")
        return joint

    def lock_for_update(self, joint_id: uuid.UUID) -> Joint:
        """Return the joint with its row locked until the transaction ends.

        SQLite ignores FOR UPDATE; there the transaction already holds the
        database write lock from its BEGIN IMMEDIATE.
        """
        joint = self.session.scalars(
            select(Joint)
            .where(Joint.id == joint_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).first()
        if joint is None:
            raise NotFoundError("Joint not found")
        return joint

    def list_approved(self, offset: int, limit: int) -> list[Joint]:
        """Return approved joints, newest first."""
        result = self.session.scalars(
            select(Joint)
            .where(Joint.is_approved.is_(True))
            .order_by(Joint.created_at.desc(), Joint.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result)

    def search(self, query: str, offset: int, limit: int) -> list[Joint]:
        """Case-insensitive substring match over approved joints' name or description."""
        pattern = f"%{escape_like(query)}%"
        result = self.session.scalars(
            select(Joint)
            .where(
                Joint.is_approved.is_(True),
                or_(
                    Joint.name.ilike(pattern, escape="\\"),
                    Joint.description.ilike(pattern, escape="\\"),
                ),
            )
            .order_by(Joint.name, Joint.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result)

    def list_within_radius(
        self,
        center: Coordinate,
        radius_m: float,
        offset: int,
        limit: int,
    ) -> list[tuple[Joint, float]]:
        """Return approved joints within ``radius_m`` of ``center``, nearest first.

        A latitude/longitude box narrows candidates through ``ix_joints_lat_lon``;
        exact great-circle distance then decides membership and order.
        """
        box = bounding_box(center, radius_m)
        conditions = [
            Joint.is_approved.is_(True),
            Joint.latitude.between(box.min_latitude, box.max_latitude),
        ]
        if box.longitude_ranges:
            conditions.append(
                or_(*(Joint.longitude.between(low, high) for low, high in box.longitude_ranges))
            )

        candidates = self.session.scalars(select(Joint).where(and_(*conditions)))
        matches: list[tuple[Joint, float]] = []
        for joint in candidates:
            distance = haversine_meters(center, Coordinate(joint.latitude, joint.longitude))
            if distance <= radius_m:
                matches.append((joint, distance))

        matches.sort(key=lambda match: (match[1], str(match[0].id)))
        return matches[offset:offset + limit]

    def update_details(
        self,
        joint_id: uuid.UUID,
        *,
        name: str,
        coordinate: Coordinate,
        description: str | None,
    ) -> Joint:
        """Overwrite the mutable descriptive fields of a joint."""
        joint = self.get_by_id(joint_id)
        joint.name = name
        joint.latitude = coordinate.latitude
        joint.longitude = coordinate.longitude
        joint.description = description
        self.session.flush()
        return joint

    def set_approved(self, joint_id: uuid.UUID, approved: bool = True) -> Joint:
        joint = self.get_by_id(joint_id)
        joint.is_approved = approved
        self.session.flush()
        return joint

    def delete(self, joint_id: uuid.UUID) -> None:
        result = self.session.execute(delete(Joint).where(Joint.id == joint_id))
        if result.rowcount == 0:
            raise NotFoundError("Joint not found")

    def adjust_votes(
        self,
        joint_id: uuid.UUID,
        direction: VoteDirection,
        previous: VoteDirection | None,
    ) -> Joint:
        """Apply a vote to the joint's counters in one UPDATE statement.

        A first vote increments ``direction``; a flip additionally decrements
        ``previous``. Must run inside the transaction that wrote the ledger row.

        Raises:
            NotFoundError: If the joint does not exist.
        """
        values = {_COUNTER_COLUMNS[direction].key: _COUNTER_COLUMNS[direction] + 1}
        if previous is not None and previous is not direction:
            values[_COUNTER_COLUMNS[previous].key] = _COUNTER_COLUMNS[previous] - 1

        joint = self.session.scalars(
            update(Joint)
            .where(Joint.id == joint_id)
            .values(values)
            .returning(Joint),
            execution_options={"synchronize_session": False, "populate_existing": True},
        ).first()
        if joint is None:
            raise NotFoundError("Joint not found")
        return joint
