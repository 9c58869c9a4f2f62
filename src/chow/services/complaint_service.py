# src/chow/services/complaint_service.py
"""Complaint filing and moderation."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chow.core.errors import (
    ComplaintNotFoundError,
    JointNotFoundError,
    NotFoundError,
    PersistenceError,
)
from chow.models.complaint import Complaint, ComplaintStatus
from chow.models.user import Role
from chow.repositories.complaint_repo import ComplaintRepository
from chow.repositories.joint_repo import JointRepository
from chow.services.auth import AuthenticatedIdentity

logger = logging.getLogger(__name__)


class ComplaintService:
    """Business rules for complaints against joints."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.complaints = ComplaintRepository(db)
        self.joints = JointRepository(db)

    def _ensure_joint(self, joint_id: uuid.UUID) -> None:
        try:
            self.joints.get_by_id(joint_id)
        except NotFoundError as err:
            raise JointNotFoundError() from err

    def file_complaint(
        self,
        filer: AuthenticatedIdentity,
        joint_id: uuid.UUID,
        reason: str,
    ) -> Complaint:
        """Record an open complaint by ``filer`` against an existing joint."""
        self._ensure_joint(joint_id)
        complaint = self.complaints.create(joint_id=joint_id, user_id=filer.user_id, reason=reason)
        try:
            self.db.commit()
        except SQLAlchemyError as err:
            self.db.rollback()
            logger.exception("Failed to file complaint against joint %s", joint_id)
            raise PersistenceError() from err
        logger.info("Complaint %s filed against joint %s", complaint.id, joint_id)
        return complaint

    def get_complaint(self, complaint_id: uuid.UUID) -> Complaint:
        try:
            return self.complaints.get_by_id(complaint_id)
        except NotFoundError as err:
            raise ComplaintNotFoundError() from err

    def list_complaints(self, offset: int, limit: int) -> list[Complaint]:
        return self.complaints.list_all(offset, limit)

    def list_user_complaints(self, user_id: uuid.UUID, offset: int, limit: int) -> list[Complaint]:
        return self.complaints.list_by_user(user_id, offset, limit)

    def list_joint_complaints(
        self,
        viewer: AuthenticatedIdentity,
        joint_id: uuid.UUID,
        offset: int,
        limit: int,
    ) -> list[Complaint]:
        """List complaints on a joint.

        Moderators and admins see every complaint; other users only their own.
        """
        self._ensure_joint(joint_id)
        if viewer.role.satisfies(Role.MODERATOR):
            return self.complaints.list_by_joint(joint_id, offset, limit)
        return self.complaints.list_by_user_and_joint(viewer.user_id, joint_id, offset, limit)

    def resolve_complaint(self, complaint_id: uuid.UUID, resolver: AuthenticatedIdentity) -> Complaint:
        """Move a complaint to ``resolved``; resolving twice is a no-op."""
        try:
            complaint = self.complaints.get_by_id(complaint_id)
        except NotFoundError as err:
            raise ComplaintNotFoundError() from err
        if complaint.status == ComplaintStatus.RESOLVED:
            return complaint

        complaint = self.complaints.update_status(complaint_id, ComplaintStatus.RESOLVED)
        try:
            self.db.commit()
        except SQLAlchemyError as err:
            self.db.rollback()
            logger.exception("Failed to resolve complaint %s", complaint_id)
            raise PersistenceError() from err
        logger.info("Complaint %s resolved by %s", complaint_id, resolver.user_id)
        return complaint
