# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Admin meal statistics.
"""

from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends

from mealsignup.controllers.errors import to_http
from mealsignup.core.dependencies import get_actor, get_stats_service
from mealsignup.core.errors import Forbidden, MealSignupError
from mealsignup.models.domain import Actor
from mealsignup.schemas.signup import TeamMealStats, WeekdayPattern
from mealsignup.services.stats_service import StatsService

router = APIRouter(prefix="/api/v1/stats", tags=["Stats"])


def _require_admin(actor: Actor) -> None:
    if not actor.is_admin:
        raise to_http(Forbidden("Statistics are restricted to admins"))


@router.get("/teams", response_model=list[TeamMealStats])
async def team_meal_stats(
    reference_date: Optional[date] = None,
    actor: Actor = Depends(get_actor),
    service: StatsService = Depends(get_stats_service),
):
    """Meals per active team for this week, last week and the last four weeks."""
    _require_admin(actor)
    return await service.get_team_meal_stats(reference_date)


@router.get("/weekdays", response_model=list[WeekdayPattern])
async def weekday_patterns(
    start: Optional[date] = None,
    end: Optional[date] = None,
    actor: Actor = Depends(get_actor),
    service: StatsService = Depends(get_stats_service),
):
    """Share of commitments per weekday; defaults to the last 90 days."""
    _require_admin(actor)
    end = end or date.today()
    start = start or end - timedelta(days=90)
    try:
        return await service.get_weekday_patterns(start, end)
    except MealSignupError as e:
        raise to_http(e)
