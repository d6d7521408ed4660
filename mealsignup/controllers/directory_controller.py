# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Team and member directory endpoints.
Reads are open; upserts require the admin role.
"""

from fastapi import APIRouter, Depends

from mealsignup.controllers.errors import to_http
from mealsignup.core.dependencies import get_actor, get_directory_service
from mealsignup.core.errors import MealSignupError
from mealsignup.models.domain import Actor, Member, Team
from mealsignup.schemas.signup import MemberUpsertRequest, TeamUpsertRequest
from mealsignup.services.directory_service import DirectoryService

router = APIRouter(prefix="/api/v1", tags=["Directory"])


# ── Teams ──

@router.get("/teams", response_model=list[Team])
async def list_teams(
    active_only: bool = False,
    service: DirectoryService = Depends(get_directory_service),
):
    return await service.list_teams(active_only)


@router.get("/teams/{team_id}", response_model=Team)
async def get_team(team_id: str, service: DirectoryService = Depends(get_directory_service)):
    try:
        return await service.get_team(team_id)
    except MealSignupError as e:
        raise to_http(e)


@router.put("/teams/{team_id}", response_model=Team)
async def upsert_team(
    team_id: str,
    payload: TeamUpsertRequest,
    actor: Actor = Depends(get_actor),
    service: DirectoryService = Depends(get_directory_service),
):
    """Create or replace a team. Weekday changes never touch existing commitments."""
    try:
        return await service.save_team(actor, payload.to_team(team_id))
    except MealSignupError as e:
        raise to_http(e)


# ── Members ──

@router.get("/members", response_model=list[Member])
async def list_members(
    active_only: bool = False,
    service: DirectoryService = Depends(get_directory_service),
):
    return await service.list_members(active_only)


@router.get("/members/{member_id}", response_model=Member)
async def get_member(member_id: str, service: DirectoryService = Depends(get_directory_service)):
    try:
        return await service.get_member(member_id)
    except MealSignupError as e:
        raise to_http(e)


@router.put("/members/{member_id}", response_model=Member)
async def upsert_member(
    member_id: str,
    payload: MemberUpsertRequest,
    actor: Actor = Depends(get_actor),
    service: DirectoryService = Depends(get_directory_service),
):
    try:
        return await service.save_member(actor, payload.to_member(member_id))
    except MealSignupError as e:
        raise to_http(e)
