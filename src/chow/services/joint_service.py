# src/chow/services/joint_service.py
"""Joint lifecycle: submission, listing, editing and approval."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chow.core.errors import (
    ForbiddenError,
    JointNotFoundError,
    NotFoundError,
    PersistenceError,
)
from chow.core.settings import Settings, settings
from chow.models.joint import Joint
from chow.models.user import Role
from chow.repositories.joint_repo import JointRepository
from chow.repositories.vote_repo import VoteRepository, Voter
from chow.services.auth import AuthenticatedIdentity
from chow.services.proximity import NearbyJoint, ProximityPlanner
from chow.utils.geo import Coordinate

logger = logging.getLogger(__name__)

# Marks a field the caller did not send, as opposed to an explicit null.
UNCHANGED = object()


class JointService:
    """Service wrapping the joint store with domain errors and ownership rules."""

    def __init__(self, db: Session, config: Settings | None = None) -> None:
        self.db = db
        self.joints = JointRepository(db)
        self.votes = VoteRepository(db)
        self.planner = ProximityPlanner(
            self.joints,
            max_radius_m=(config or settings).max_nearby_radius_m,
        )

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as err:
            self.db.rollback()
            logger.exception("Failed to %s", action)
            raise PersistenceError() from err

    def create_joint(
        self,
        creator: AuthenticatedIdentity,
        *,
        name: str,
        coordinate: Coordinate,
        description: str | None = None,
        photo_url: str | None = None,
    ) -> Joint:
        """Submit a joint; it stays out of public listings until approved."""
        joint = self.joints.create(
            name=name,
            coordinate=coordinate,
            creator_id=creator.user_id,
            description=description,
            photo_url=photo_url,
        )
        self._commit("create joint")
        logger.info("Joint %s submitted by %s", joint.id, creator.user_id)
        return joint

    def get_joint(self, joint_id: uuid.UUID) -> Joint:
        try:
            return self.joints.get_by_id(joint_id)
        except NotFoundError as err:
            raise JointNotFoundError() from err

    def list_joints(self, offset: int, limit: int) -> list[Joint]:
        return self.joints.list_approved(offset, limit)

    def search_joints(self, query: str, offset: int, limit: int) -> list[Joint]:
        return self.joints.search(query, offset, limit)

    def nearby_joints(
        self,
        center: Coordinate,
        radius_m: float,
        offset: int,
        limit: int,
    ) -> list[NearbyJoint]:
        return self.planner.find_nearby(center, radius_m, offset, limit)

    def update_joint(
        self,
        joint_id: uuid.UUID,
        editor: AuthenticatedIdentity,
        *,
        name: str | None = None,
        coordinate: Coordinate | None = None,
        description: str | None | object = UNCHANGED,
    ) -> Joint:
        """Edit a joint's name, location or description.

        ``name`` and ``coordinate`` keep their current value when None. The
        description is kept only when omitted; passing None clears it.

        Raises:
            JointNotFoundError: If the joint does not exist.
            ForbiddenError: If the editor is neither the creator nor an admin.
        """
        joint = self.get_joint(joint_id)
        if joint.creator_id != editor.user_id and not editor.role.satisfies(Role.ADMIN):
            raise ForbiddenError()

        joint = self.joints.update_details(
            joint_id,
            name=name if name is not None else joint.name,
            coordinate=coordinate or Coordinate(joint.latitude, joint.longitude),
            description=joint.description if description is UNCHANGED else description,
        )
        self._commit("update joint")
        return joint

    def delete_joint(self, joint_id: uuid.UUID) -> None:
        try:
            self.joints.delete(joint_id)
        except NotFoundError as err:
            self.db.rollback()
            raise JointNotFoundError() from err
        self._commit("delete joint")
        logger.info("Joint %s deleted", joint_id)

    def approve_joint(self, joint_id: uuid.UUID) -> Joint:
        """Mark a joint as approved so it appears in public listings."""
        try:
            joint = self.joints.set_approved(joint_id, True)
        except NotFoundError as err:
            raise JointNotFoundError() from err
        self._commit("approve joint")
        logger.info("Joint %s approved", joint_id)
        return joint

    def list_voters(self, joint_id: uuid.UUID, offset: int, limit: int) -> list[Voter]:
        self.get_joint(joint_id)
        return self.votes.list_voters(joint_id, offset, limit)
