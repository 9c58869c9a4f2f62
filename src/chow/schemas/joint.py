# src/chow/schemas/joint.py
"""Joint-related Pydantic schemas."""

import uuid
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

Latitude = Annotated[float, Field(ge=-90, le=90, description="WGS84 latitude in decimal degrees")]
Longitude = Annotated[float, Field(ge=-180, le=180, description="WGS84 longitude in decimal degrees")]


class JointCreate(BaseModel):
    """Schema for submitting a new joint."""

    name: str = Field(..., min_length=3, max_length=255)
    latitude: Latitude
    longitude: Longitude
    description: str | None = None
    photo_url: str | None = Field(None, max_length=2048)


class JointUpdate(BaseModel):
    """Partial update; location must be given as a pair.

    Omitted fields keep their value. An explicit null description clears it.
    """

    name: str | None = Field(None, min_length=3, max_length=255)
    latitude: Latitude | None = None
    longitude: Longitude | None = None
    description: str | None = None

    @model_validator(mode="after")
    def check_coordinate_pair(self) -> "JointUpdate":
        """Reject a latitude without a longitude and vice versa."""
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be updated together")
        return self


class JointResponse(BaseModel):
    """Response schema for joint data."""

    id: uuid.UUID
    name: str
    latitude: float
    longitude: float
    distance: float | None = Field(None, description="Meters from the search center (nearby only)")
    description: str | None
    is_approved: bool
    creator_id: uuid.UUID
    photo_url: str | None
    upvotes: int
    downvotes: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
