# src/chow/services/voting.py
"""Vote application: keeps the vote ledger and joint counters in lockstep."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chow.core.errors import JointNotFoundError, NotFoundError, PersistenceError
from chow.models.joint import Joint
from chow.models.vote import Vote, VoteDirection
from chow.repositories.joint_repo import JointRepository
from chow.repositories.vote_repo import VoteRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoteApplied:
    """The vote was written and the joint's counters adjusted."""

    joint: Joint
    vote: Vote


@dataclass(frozen=True)
class VoteUnchanged:
    """The caller already held this vote; nothing was written."""

    vote: Vote


VoteResult = VoteApplied | VoteUnchanged


class VotingCoordinator:
    """Apply votes so that counters always equal the ledger.

    The ledger upsert and the counter update share one transaction. The joint
    row is locked before the prior vote is re-read, so concurrent votes on the
    same joint serialize and each sees the committed direction of the last.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.joints = JointRepository(db)
        self.votes = VoteRepository(db)

    def apply_vote(
        self,
        user_id: uuid.UUID,
        joint_id: uuid.UUID,
        direction: VoteDirection,
    ) -> VoteResult:
        """Cast or flip ``user_id``'s vote on ``joint_id``.

        Returns:
            ``VoteApplied`` with the updated joint, or ``VoteUnchanged`` when the
            user already voted ``direction``.

        Raises:
            JointNotFoundError: If the joint does not exist.
            PersistenceError: On any store failure; the transaction is rolled back.
        """
        try:
            existing = self.votes.get_user_joint_vote(user_id, joint_id)
            if existing is not None and existing.direction == direction:
                logger.debug("Vote unchanged: user=%s joint=%s", user_id, joint_id)
                return VoteUnchanged(existing)

            self.joints.lock_for_update(joint_id)
            previous = self.votes.get_user_joint_vote(user_id, joint_id)
            if previous is not None and previous.direction == direction:
                self.db.rollback()
                logger.debug("Vote unchanged after lock: user=%s joint=%s", user_id, joint_id)
                return VoteUnchanged(previous)

            prior_direction = previous.direction if previous is not None else None
            vote = self.votes.upsert(user_id, joint_id, direction)
            joint = self.joints.adjust_votes(joint_id, direction, prior_direction)
            self.db.commit()
        except NotFoundError as err:
            self.db.rollback()
            raise JointNotFoundError() from err
        except SQLAlchemyError as err:
            self.db.rollback()
            logger.exception("Failed to apply vote: user=%s joint=%s", user_id, joint_id)
            raise PersistenceError() from err
        except BaseException:
            # Interrupted mid-transaction: leave no partial vote behind.
            self.db.rollback()
            raise

        logger.info(
            "Vote applied: user=%s joint=%s direction=%s previous=%s",
            user_id,
            joint_id,
            direction.value,
            prior_direction.value if prior_direction else None,
        )
        return VoteApplied(joint=joint, vote=vote)

    def get_vote(self, user_id: uuid.UUID, joint_id: uuid.UUID) -> Vote | None:
        """Return the caller's current vote on a joint, if any."""
        try:
            self.joints.get_by_id(joint_id)
        except NotFoundError as err:
            raise JointNotFoundError() from err
        return self.votes.get_user_joint_vote(user_id, joint_id)
