# src/chow/schemas/complaint.py
"""Complaint-related Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from chow.models.complaint import ComplaintStatus


class ComplaintCreate(BaseModel):
    """Schema for filing a complaint against a joint."""

    reason: str = Field(..., min_length=6, max_length=2000)


class ComplaintResponse(BaseModel):
    """Response schema for complaint data."""

    id: uuid.UUID
    joint_id: uuid.UUID
    user_id: uuid.UUID
    reason: str
    status: ComplaintStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
