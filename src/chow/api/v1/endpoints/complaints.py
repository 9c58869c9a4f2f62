# src/chow/api/v1/endpoints/complaints.py
"""Complaint endpoints: filing by users, review by moderators."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status

from chow.api.v1.dependencies import CurrentIdentityDep, ModeratorDep, PaginationDep, SessionDep
from chow.models.complaint import Complaint
from chow.schemas.complaint import ComplaintCreate, ComplaintResponse
from chow.services.complaint_service import ComplaintService

router = APIRouter(tags=["complaints"])


def get_complaint_service(db: SessionDep) -> ComplaintService:
    return ComplaintService(db)


ComplaintServiceDep = Annotated[ComplaintService, Depends(get_complaint_service)]


def _to_response(items: list[Complaint]) -> list[ComplaintResponse]:
    return [ComplaintResponse.model_validate(item) for item in items]


@router.post(
    "/joints/{joint_id}/complaints",
    response_model=ComplaintResponse,
    status_code=status.HTTP_201_CREATED,
)
def file_complaint(
    joint_id: uuid.UUID,
    payload: ComplaintCreate,
    identity: CurrentIdentityDep,
    complaints: ComplaintServiceDep,
) -> ComplaintResponse:
    """File a complaint against a joint."""
    complaint = complaints.file_complaint(identity, joint_id, payload.reason)
    return ComplaintResponse.model_validate(complaint)


@router.get("/joints/{joint_id}/complaints", response_model=list[ComplaintResponse])
def list_joint_complaints(
    joint_id: uuid.UUID,
    pagination: PaginationDep,
    identity: CurrentIdentityDep,
    complaints: ComplaintServiceDep,
) -> list[ComplaintResponse]:
    """Complaints on a joint: all of them for moderators, the caller's own otherwise."""
    items = complaints.list_joint_complaints(identity, joint_id, pagination.offset, pagination.limit)
    return _to_response(items)


@router.get("/complaints", response_model=list[ComplaintResponse])
def list_complaints(
    pagination: PaginationDep,
    _moderator: ModeratorDep,
    complaints: ComplaintServiceDep,
) -> list[ComplaintResponse]:
    return _to_response(complaints.list_complaints(pagination.offset, pagination.limit))


@router.get("/complaints/me", response_model=list[ComplaintResponse])
def list_my_complaints(
    pagination: PaginationDep,
    identity: CurrentIdentityDep,
    complaints: ComplaintServiceDep,
) -> list[ComplaintResponse]:
    """Complaints filed by the caller."""
    items = complaints.list_user_complaints(identity.user_id, pagination.offset, pagination.limit)
    return _to_response(items)


@router.get("/complaints/{complaint_id}", response_model=ComplaintResponse)
def get_complaint(
    complaint_id: uuid.UUID,
    _identity: CurrentIdentityDep,
    complaints: ComplaintServiceDep,
) -> ComplaintResponse:
    return ComplaintResponse.model_validate(complaints.get_complaint(complaint_id))


@router.patch("/complaints/{complaint_id}/resolve", response_model=ComplaintResponse)
def resolve_complaint(
    complaint_id: uuid.UUID,
    moderator: ModeratorDep,
    complaints: ComplaintServiceDep,
) -> ComplaintResponse:
    """Mark a complaint as resolved."""
    return ComplaintResponse.model_validate(complaints.resolve_complaint(complaint_id, moderator))
