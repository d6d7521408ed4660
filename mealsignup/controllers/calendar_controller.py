# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Calendar grids and per-team slot listings.
Thin HTTP layer: delegates ALL logic to CalendarService.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from mealsignup.controllers.errors import to_http
from mealsignup.core.dependencies import get_calendar_service
from mealsignup.core.errors import MealSignupError
from mealsignup.models.domain import VirtualSlot
from mealsignup.schemas.signup import CalendarResponse, SlotListResponse
from mealsignup.services.calendar_service import CalendarService
from mealsignup.services.dates import week_end, week_start

router = APIRouter(prefix="/api/v1", tags=["Calendar"])


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(
    start: date,
    end: date,
    team_id: Optional[list[str]] = Query(default=None),
    service: CalendarService = Depends(get_calendar_service),
):
    """Calendar grid for an arbitrary period, optionally limited to some teams."""
    try:
        days = await service.get_calendar_for_period(team_id, start, end)
    except MealSignupError as e:
        raise to_http(e)
    return CalendarResponse(start=start, end=end, team_ids=team_id, days=days)


@router.get("/calendar/month/{year}/{month}", response_model=CalendarResponse)
async def get_calendar_month(
    year: int,
    month: int,
    team_id: Optional[list[str]] = Query(default=None),
    service: CalendarService = Depends(get_calendar_service),
):
    try:
        days = await service.get_calendar_for_month(year, month, team_id)
    except MealSignupError as e:
        raise to_http(e)
    in_period = [d.date for d in days if d.is_in_requested_period]
    return CalendarResponse(start=in_period[0], end=in_period[-1], team_ids=team_id, days=days)


@router.get("/calendar/week", response_model=CalendarResponse)
async def get_calendar_week(
    day: date = Query(..., alias="date"),
    team_id: Optional[list[str]] = Query(default=None),
    service: CalendarService = Depends(get_calendar_service),
):
    """Sunday-to-Saturday week containing ``date``."""
    try:
        days = await service.get_calendar_for_week(day, team_id)
    except MealSignupError as e:
        raise to_http(e)
    return CalendarResponse(start=week_start(day), end=week_end(day), team_ids=team_id, days=days)


@router.get("/teams/{team_id}/slots", response_model=SlotListResponse)
async def list_team_slots(
    team_id: str,
    start: date,
    end: date,
    available_only: bool = False,
    service: CalendarService = Depends(get_calendar_service),
):
    try:
        slots = await service.get_slots_for_team(team_id, start, end, available_only)
    except MealSignupError as e:
        raise to_http(e)
    return SlotListResponse(
        team_id=team_id,
        start=start,
        end=end,
        available_only=available_only,
        total=len(slots),
        slots=slots,
    )


@router.get("/teams/{team_id}/slots/{meal_date}", response_model=VirtualSlot)
async def get_team_slot(
    team_id: str,
    meal_date: date,
    service: CalendarService = Depends(get_calendar_service),
):
    """Availability of one (team, date) pair, e.g. before opening a signup form."""
    try:
        slot = await service.get_slot(team_id, meal_date)
    except MealSignupError as e:
        raise to_http(e)
    if slot is None:
        raise HTTPException(
            status_code=404,
            detail={
                "error": "not_scheduled",
                "detail": f"Team '{team_id}' has no meal slot on {meal_date.isoformat()}",
            },
        )
    return slot
