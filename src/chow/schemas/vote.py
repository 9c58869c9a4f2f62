# src/chow/schemas/vote.py
"""Vote-related Pydantic schemas."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from chow.models.vote import VoteDirection
from chow.schemas.joint import JointResponse


class VoteCreate(BaseModel):
    """Schema for casting or flipping a vote."""

    direction: VoteDirection = Field(..., description="'up' or 'down'")


class VoteResultResponse(BaseModel):
    """Outcome of a vote request.

    ``unchanged`` means the caller already held this vote and nothing was written.
    """

    status: Literal["applied", "unchanged"]
    joint: JointResponse


class MyVoteResponse(BaseModel):
    direction: VoteDirection | None = None


class VoterResponse(BaseModel):
    user_id: uuid.UUID
    username: str
    direction: VoteDirection
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
