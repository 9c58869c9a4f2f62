"""Data access helpers for complaints."""
from __future__ import annotations

import uuid

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from chow.core.errors import NotFoundError
from chow.models.complaint import Complaint, ComplaintStatus

__all__ = ["ComplaintRepository"]


class ComplaintRepository:
    """Thin wrapper around database access for complaint entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def create(self, *, joint_id: uuid.UUID, user_id: uuid.UUID, reason: str) -> Complaint:
        """Insert a new open complaint and return the persisted ORM instance."""
        complaint = Complaint(
            joint_id=joint_id,
            user_id=user_id,
            reason=reason,
            status=ComplaintStatus.OPEN,
        )
        self.session.add(complaint)
        self.session.flush()
        return complaint

    def get_by_id(self, complaint_id: uuid.UUID) -> Complaint:
        complaint = self.session.get(Complaint, complaint_id)
        if complaint is None:
            raise NotFoundError("Complaint not found")
        return complaint

    def _page(self, stmt: Select[tuple[Complaint]], offset: int, limit: int) -> list[Complaint]:
        result = self.session.scalars(
            stmt.order_by(Complaint.created_at.desc(), Complaint.id).offset(offset).limit(limit)
        )
        return list(result)

    def list_all(self, offset: int, limit: int) -> list[Complaint]:
        return self._page(select(Complaint), offset, limit)

    def list_by_user(self, user_id: uuid.UUID, offset: int, limit: int) -> list[Complaint]:
        """Return complaints filed by ``user_id``."""
        return self._page(select(Complaint).where(Complaint.user_id == user_id), offset, limit)

    def list_by_joint(self, joint_id: uuid.UUID, offset: int, limit: int) -> list[Complaint]:
        """Return every complaint filed against ``joint_id``."""
        return self._page(select(Complaint).where(Complaint.joint_id == joint_id), offset, limit)

    def list_by_user_and_joint(
        self,
        user_id: uuid.UUID,
        joint_id: uuid.UUID,
        offset: int,
        limit: int,
    ) -> list[Complaint]:
        stmt = select(Complaint).where(
            Complaint.user_id == user_id,
            Complaint.joint_id == joint_id,
        )
        return self._page(stmt, offset, limit)

    def update_status(self, complaint_id: uuid.UUID, status: ComplaintStatus) -> Complaint:
        complaint = self.get_by_id(complaint_id)
        complaint.status = status
        self.session.flush()
        return complaint
