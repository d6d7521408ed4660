# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Commitment create, read, modify, cancel.
Thin HTTP layer: delegates ALL logic to CommitmentService.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from mealsignup.controllers.errors import to_http
from mealsignup.core.dependencies import get_actor, get_commitment_service
from mealsignup.core.errors import MealSignupError
from mealsignup.models.domain import Actor, Commitment, CommitmentStatus
from mealsignup.schemas.signup import (
    CommitmentCreateRequest,
    CommitmentListResponse,
    CommitmentUpdateRequest,
)
from mealsignup.services.commitment_service import CommitmentService

router = APIRouter(prefix="/api/v1", tags=["Commitments"])


@router.post("/commitments", status_code=201, response_model=Commitment)
async def create_commitment(
    payload: CommitmentCreateRequest,
    actor: Actor = Depends(get_actor),
    service: CommitmentService = Depends(get_commitment_service),
):
    """Sign up to bring a meal to a team on a date."""
    try:
        return await service.create_commitment(
            actor,
            team_id=payload.team_id,
            meal_date=payload.meal_date,
            guest_count=payload.guest_count,
            user_phone=payload.user_phone,
            contact_preference=payload.contact_preference,
            notes=payload.notes,
        )
    except MealSignupError as e:
        raise to_http(e)


@router.get("/commitments", response_model=CommitmentListResponse)
async def list_commitments(
    user_id: Optional[str] = None,
    status: Optional[CommitmentStatus] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    actor: Actor = Depends(get_actor),
    service: CommitmentService = Depends(get_commitment_service),
):
    """The caller's commitments (admins may pass ``user_id``), latest first."""
    try:
        items = await service.list_commitments_for_user(actor, user_id, status, start, end)
    except MealSignupError as e:
        raise to_http(e)
    return CommitmentListResponse(
        user_id=user_id or actor.user_id, total=len(items), commitments=items
    )


@router.get("/commitments/{commitment_id}", response_model=Commitment)
async def get_commitment(
    commitment_id: str,
    actor: Actor = Depends(get_actor),
    service: CommitmentService = Depends(get_commitment_service),
):
    try:
        return await service.get_commitment(actor, commitment_id)
    except MealSignupError as e:
        raise to_http(e)


@router.patch("/commitments/{commitment_id}", response_model=Commitment)
async def update_commitment(
    commitment_id: str,
    payload: CommitmentUpdateRequest,
    actor: Actor = Depends(get_actor),
    service: CommitmentService = Depends(get_commitment_service),
):
    """Edit contact details or notes. Changing the date means cancel and re-create."""
    try:
        return await service.modify_commitment(
            actor,
            commitment_id,
            user_phone=payload.user_phone,
            contact_preference=payload.contact_preference,
            notes=payload.notes,
        )
    except MealSignupError as e:
        raise to_http(e)


@router.post("/commitments/{commitment_id}/cancel", response_model=Commitment)
async def cancel_commitment(
    commitment_id: str,
    actor: Actor = Depends(get_actor),
    service: CommitmentService = Depends(get_commitment_service),
):
    try:
        return await service.cancel_commitment(actor, commitment_id)
    except MealSignupError as e:
        raise to_http(e)
