# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Calendar reads: expand, index, reconcile, assemble.
Every call re-reads the stores; nothing is cached between requests.
"""

import asyncio
from collections.abc import Sequence
from datetime import date
from typing import Optional

from mealsignup.core.config import settings
from mealsignup.core.errors import InvalidWindow, NotFound
from mealsignup.core.logging import get_logger
from mealsignup.metrics.prometheus import CALENDAR_BUILD_SECONDS, CALENDAR_BUILDS
from mealsignup.models.domain import CalendarDay, Member, Team, VirtualSlot
from mealsignup.repositories.commitment_repository import CommitmentRepository
from mealsignup.repositories.member_repository import MemberRepository
from mealsignup.repositories.team_repository import TeamRepository
from mealsignup.services.calendar_assembler import assemble_grid
from mealsignup.services.commitment_index import load_range
from mealsignup.services.dates import month_bounds, week_end, week_start
from mealsignup.services.reconciler import reconcile
from mealsignup.services.recurrence import expand, expand_all

logger = get_logger(__name__)


class CalendarService:
    """Derives availability on demand from schedules and commitments."""

    def __init__(
        self,
        team_repo: TeamRepository,
        member_repo: MemberRepository,
        commitment_repo: CommitmentRepository,
    ) -> None:
        self._teams = team_repo
        self._members = member_repo
        self._commitments = commitment_repo

    # ── Calendar grids ──

    async def get_calendar_for_period(
        self,
        team_scope: Optional[Sequence[str]],
        period_start: date,
        period_end: date,
    ) -> list[CalendarDay]:
        """
        Calendar grid for the period. ``team_scope`` of None means every
        active team; otherwise only the listed teams (unknown ids raise
        NotFound, inactive ones contribute no slots).
        """
        self._check_window(period_start, period_end)
        with CALENDAR_BUILD_SECONDS.time():
            (teams, members), index = await asyncio.gather(
                self._load_directory(team_scope),
                load_range(self._commitments, period_start, period_end),
            )
            members_by_id = {m.id: m for m in members}
            candidates = expand_all(teams, period_start, period_end, members_by_id)
            slots = reconcile(candidates, index)
            days = assemble_grid(
                slots, period_start, period_end, {t.id: t for t in teams}, members_by_id
            )
        CALENDAR_BUILDS.inc()
        logger.info(
            "Calendar built: period=%s..%s, teams=%d, slots=%d, taken=%d",
            period_start, period_end, len(teams), len(slots),
            sum(1 for s in slots if s.status == "taken"),
        )
        return days

    async def get_calendar_for_month(
        self, year: int, month: int, team_scope: Optional[Sequence[str]] = None
    ) -> list[CalendarDay]:
        try:
            first, last = month_bounds(year, month)
        except ValueError as exc:
            raise InvalidWindow(f"Invalid month {year}-{month}: {exc}")
        return await self.get_calendar_for_period(team_scope, first, last)

    async def get_calendar_for_week(
        self, day: date, team_scope: Optional[Sequence[str]] = None
    ) -> list[CalendarDay]:
        return await self.get_calendar_for_period(team_scope, week_start(day), week_end(day))

    # ── Single-team slots ──

    async def get_slots_for_team(
        self,
        team_id: str,
        window_start: date,
        window_end: date,
        available_only: bool = False,
    ) -> list[VirtualSlot]:
        self._check_window(window_start, window_end)
        team = await self._teams.get_team(team_id)
        if team is None:
            raise NotFound("Team", team_id)
        if not team.is_active:
            return []
        members, index = await asyncio.gather(
            self._members.get_active_members(),
            load_range(self._commitments, window_start, window_end),
        )
        slots = reconcile(expand(team, window_start, window_end, {m.id: m for m in members}), index)
        if available_only:
            slots = [s for s in slots if s.status == "available"]
        return slots

    async def get_slot(self, team_id: str, day: date) -> Optional[VirtualSlot]:
        """The virtual slot for (team, day), or None when the team is not scheduled."""
        slots = await self.get_slots_for_team(team_id, day, day)
        return slots[0] if slots else None

    # ── Internal ──

    async def _load_directory(
        self, team_scope: Optional[Sequence[str]]
    ) -> tuple[list[Team], list[Member]]:
        if team_scope is not None:
            team_scope = list(dict.fromkeys(team_scope))
            found = await asyncio.gather(*(self._teams.get_team(t) for t in team_scope))
            for team_id, team in zip(team_scope, found):
                if team is None:
                    raise NotFound("Team", team_id)
            teams = [t for t in found if t.is_active]
        else:
            teams = await self._teams.get_active_teams()
        members = await self._members.get_active_members()
        return teams, members

    @staticmethod
    def _check_window(start: date, end: date) -> None:
        if start > end:
            raise InvalidWindow(f"Window start {start} is after end {end}")
        if (end - start).days + 1 > settings.MAX_CALENDAR_DAYS:
            raise InvalidWindow(
                f"Window of {(end - start).days + 1} days exceeds {settings.MAX_CALENDAR_DAYS}"
            )
