# src/chow/api/v1/endpoints/joints.py
"""Joint endpoints: listing, search, proximity and editing."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from chow.api.v1.dependencies import (
    AdminDep,
    CurrentIdentityDep,
    ModeratorDep,
    PaginationDep,
    SessionDep,
)
from chow.core.settings import PROTOCOL_MAX_RADIUS_METERS
from chow.schemas.joint import JointCreate, JointResponse, JointUpdate
from chow.services.joint_service import UNCHANGED, JointService
from chow.services.proximity import NearbyJoint
from chow.utils.geo import Coordinate

router = APIRouter(prefix="/joints", tags=["joints"])


def get_joint_service(db: SessionDep) -> JointService:
    return JointService(db)


JointServiceDep = Annotated[JointService, Depends(get_joint_service)]


def _nearby_response(match: NearbyJoint) -> JointResponse:
    response = JointResponse.model_validate(match.joint)
    return response.model_copy(update={"distance": match.distance_m})


@router.get("", response_model=list[JointResponse])
def list_joints(pagination: PaginationDep, joints: JointServiceDep) -> list[JointResponse]:
    """Return approved joints, newest first."""
    items = joints.list_joints(pagination.offset, pagination.limit)
    return [JointResponse.model_validate(joint) for joint in items]


@router.get("/search", response_model=list[JointResponse])
def search_joints(
    q: Annotated[str, Query(min_length=1, max_length=200)],
    pagination: PaginationDep,
    joints: JointServiceDep,
) -> list[JointResponse]:
    """Case-insensitive substring search over approved joints."""
    items = joints.search_joints(q, pagination.offset, pagination.limit)
    return [JointResponse.model_validate(joint) for joint in items]


@router.get("/nearby", response_model=list[JointResponse])
def nearby_joints(
    latitude: Annotated[float, Query(ge=-90, le=90)],
    longitude: Annotated[float, Query(ge=-180, le=180)],
    radius: Annotated[float, Query(gt=0, le=PROTOCOL_MAX_RADIUS_METERS, description="Meters")],
    pagination: PaginationDep,
    joints: JointServiceDep,
) -> list[JointResponse]:
    """Return approved joints within ``radius`` meters, nearest first."""
    matches = joints.nearby_joints(
        Coordinate(latitude, longitude),
        radius,
        pagination.offset,
        pagination.limit,
    )
    return [_nearby_response(match) for match in matches]


@router.post("", response_model=JointResponse, status_code=status.HTTP_201_CREATED)
def create_joint(
    payload: JointCreate,
    identity: CurrentIdentityDep,
    joints: JointServiceDep,
) -> JointResponse:
    """Submit a joint; it is unapproved until a moderator approves it."""
    joint = joints.create_joint(
        identity,
        name=payload.name,
        coordinate=Coordinate(payload.latitude, payload.longitude),
        description=payload.description,
        photo_url=payload.photo_url,
    )
    return JointResponse.model_validate(joint)


@router.get("/{joint_id}", response_model=JointResponse)
def get_joint(joint_id: uuid.UUID, joints: JointServiceDep) -> JointResponse:
    return JointResponse.model_validate(joints.get_joint(joint_id))


@router.patch("/{joint_id}", response_model=JointResponse)
def update_joint(
    joint_id: uuid.UUID,
    payload: JointUpdate,
    identity: CurrentIdentityDep,
    joints: JointServiceDep,
) -> JointResponse:
    """Edit a joint. Only its creator or an admin may do this."""
    coordinate = None
    if payload.latitude is not None and payload.longitude is not None:
        coordinate = Coordinate(payload.latitude, payload.longitude)
    description = payload.description if "description" in payload.model_fields_set else UNCHANGED
    joint = joints.update_joint(
        joint_id,
        identity,
        name=payload.name,
        coordinate=coordinate,
        description=description,
    )
    return JointResponse.model_validate(joint)


@router.delete("/{joint_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_joint(joint_id: uuid.UUID, _admin: AdminDep, joints: JointServiceDep) -> Response:
    """Delete a joint along with its votes and complaints."""
    joints.delete_joint(joint_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{joint_id}/approve", response_model=JointResponse)
def approve_joint(
    joint_id: uuid.UUID,
    _moderator: ModeratorDep,
    joints: JointServiceDep,
) -> JointResponse:
    """Publish a joint in public listings."""
    return JointResponse.model_validate(joints.approve_joint(joint_id))
