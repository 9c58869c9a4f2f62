# src/chow/api/v1/endpoints/votes.py
"""Vote-related endpoints for the Chow API."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends

from chow.api.v1.dependencies import CurrentIdentityDep, PaginationDep, SessionDep
from chow.schemas.joint import JointResponse
from chow.schemas.vote import MyVoteResponse, VoteCreate, VoterResponse, VoteResultResponse
from chow.services.joint_service import JointService
from chow.services.voting import VoteApplied, VotingCoordinator

router = APIRouter(prefix="/joints", tags=["votes"])


def get_voting_coordinator(db: SessionDep) -> VotingCoordinator:
    return VotingCoordinator(db)


VotingDep = Annotated[VotingCoordinator, Depends(get_voting_coordinator)]


@router.post("/{joint_id}/vote", response_model=VoteResultResponse)
def cast_vote(
    joint_id: uuid.UUID,
    vote_data: VoteCreate,
    identity: CurrentIdentityDep,
    voting: VotingDep,
) -> VoteResultResponse:
    """Cast or flip the caller's vote on a joint.

    Repeating the vote the caller already holds is accepted and changes nothing.
    """
    result = voting.apply_vote(identity.user_id, joint_id, vote_data.direction)
    if isinstance(result, VoteApplied):
        return VoteResultResponse(status="applied", joint=JointResponse.model_validate(result.joint))

    joint = JointService(voting.db).get_joint(joint_id)
    return VoteResultResponse(status="unchanged", joint=JointResponse.model_validate(joint))


@router.get("/{joint_id}/vote", response_model=MyVoteResponse)
def get_my_vote(
    joint_id: uuid.UUID,
    identity: CurrentIdentityDep,
    voting: VotingDep,
) -> MyVoteResponse:
    """Get current user's vote on a specific joint."""
    vote = voting.get_vote(identity.user_id, joint_id)
    return MyVoteResponse(direction=vote.direction if vote else None)


@router.get("/{joint_id}/votes", response_model=list[VoterResponse])
def list_voters(
    joint_id: uuid.UUID,
    pagination: PaginationDep,
    _identity: CurrentIdentityDep,
    db: SessionDep,
) -> list[VoterResponse]:
    """List who voted on a joint and how."""
    voters = JointService(db).list_voters(joint_id, pagination.offset, pagination.limit)
    return [VoterResponse.model_validate(voter) for voter in voters]
