# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Calendar grid assembly and team display joins.
Pure computation: the caller supplies every lookup.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import date

from mealsignup.models.domain import (
    CalendarDay,
    CalendarSlot,
    Member,
    Team,
    TeamDisplay,
    VirtualSlot,
)
from mealsignup.services.dates import iter_days, week_end, week_start

NO_ACTIVE_MEMBERS = "No Active Members"


def grid_range(period_start: date, period_end: date) -> tuple[date, date]:
    """Sunday on/before the period start through Saturday on/after its end."""
    return week_start(period_start), week_end(period_end)


def active_members_of(team: Team, members: Mapping[str, Member]) -> list[Member]:
    return [
        members[member_id]
        for member_id in team.member_ids
        if member_id in members and members[member_id].is_active
    ]


def display_name(team: Team, members: Mapping[str, Member]) -> str:
    names = sorted(m.name for m in active_members_of(team, members))
    if not names:
        return NO_ACTIVE_MEMBERS
    return " & ".join(names)


def team_display(team: Team, members: Mapping[str, Member]) -> TeamDisplay:
    active = active_members_of(team, members)
    return TeamDisplay(
        team_id=team.id,
        area=team.area,
        phone=team.phone,
        address=team.address,
        display_name=display_name(team, members),
        member_names=sorted(m.name for m in active),
        allergies=sorted({a for m in active for a in m.allergies if a}),
        dinner_preferences=sorted({p for m in active for p in m.dinner_preferences if p}),
    )


def assemble_grid(
    slots: Iterable[VirtualSlot],
    period_start: date,
    period_end: date,
    teams: Mapping[str, Team],
    members: Mapping[str, Member],
) -> list[CalendarDay]:
    """
    Group slots by date over the full Sunday→Saturday grid covering the
    period. Days without slots are kept as empty days. Slots whose team is
    unknown to ``teams`` are dropped.
    """
    by_date: dict[date, list[VirtualSlot]] = defaultdict(list)
    for slot in slots:
        by_date[slot.meal_date].append(slot)

    displays: dict[str, TeamDisplay] = {}
    first, last = grid_range(period_start, period_end)
    days: list[CalendarDay] = []
    for day in iter_days(first, last):
        entries: list[CalendarSlot] = []
        for slot in by_date.get(day, []):
            team = teams.get(slot.team_id)
            if team is None:
                continue
            if team.id not in displays:
                displays[team.id] = team_display(team, members)
            entries.append(CalendarSlot(slot=slot, team=displays[team.id]))
        days.append(
            CalendarDay(
                date=day,
                is_in_requested_period=period_start <= day <= period_end,
                slots=entries,
            )
        )
    return days
