# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Recurrence expansion: pure computation, no side effects.
"""

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from mealsignup.core.config import settings
from mealsignup.models.domain import CandidateDate, Member, Team
from mealsignup.services.dates import iter_days, weekday_name, weekday_number


def active_member_count(team: Team, active_members: Mapping[str, Member]) -> int:
    return sum(1 for member_id in team.member_ids if member_id in active_members)


def expected_guest_count(active_count: int) -> int:
    return active_count or settings.DEFAULT_GUEST_COUNT


def _weekday_set(team: Any) -> set[int]:
    days = getattr(team, "days_of_week", None)
    if not days:
        return set()
    return {d for d in days if isinstance(d, int) and 0 <= d <= 6}


def expand(
    team: Team,
    window_start: date,
    window_end: date,
    active_members: Mapping[str, Member],
) -> list[CandidateDate]:
    """
    Every date in [window_start, window_end] whose weekday is in the team's
    schedule, ascending. Each candidate expects one guest per active member
    of the team; ``active_members`` is keyed by member id. A team without a
    usable weekday set has no candidates; that is a data state, not an error.
    """
    weekdays = _weekday_set(team)
    if not weekdays:
        return []
    guest_count = expected_guest_count(active_member_count(team, active_members))
    return [
        CandidateDate(
            team_id=team.id,
            meal_date=day,
            day_of_week=weekday_name(day),
            guest_count=guest_count,
        )
        for day in iter_days(window_start, window_end)
        if weekday_number(day) in weekdays
    ]


def expand_all(
    teams: Iterable[Team],
    window_start: date,
    window_end: date,
    active_members: Mapping[str, Member],
) -> list[CandidateDate]:
    """Expand each active team independently and concatenate in team order."""
    candidates: list[CandidateDate] = []
    for team in teams:
        if not team.is_active:
            continue
        candidates.extend(expand(team, window_start, window_end, active_members))
    return candidates
