# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Admin meal statistics.
Aggregates non-cancelled commitments per team and per weekday.
"""

from collections import Counter
from datetime import date, timedelta
from typing import Any, Optional

from mealsignup.core.errors import InvalidWindow
from mealsignup.core.logging import get_logger
from mealsignup.repositories.commitment_repository import CommitmentRepository
from mealsignup.repositories.team_repository import TeamRepository
from mealsignup.services.commitment_index import load_range
from mealsignup.services.dates import DAY_NAMES, week_start, weekday_number

logger = get_logger(__name__)

STATS_WEEKS = 4


class StatsService:
    """Read-only meal statistics for the admin dashboard."""

    def __init__(self, team_repo: TeamRepository, commitment_repo: CommitmentRepository) -> None:
        self._teams = team_repo
        self._commitments = commitment_repo

    async def get_team_meal_stats(self, reference: Optional[date] = None) -> list[dict[str, Any]]:
        """
        Per active team: meals this week (Sunday up to ``reference``), last
        week, the last four weeks, the four-week weekly average and the most
        recent meal date on or before ``reference``. Busiest teams first.
        """
        reference = reference or date.today()
        this_week = week_start(reference)
        last_week = this_week - timedelta(days=7)
        four_weeks_ago = this_week - timedelta(days=7 * STATS_WEEKS)

        teams = await self._teams.get_active_teams()
        index = await load_range(self._commitments, four_weeks_ago, reference)
        by_team: dict[str, list[date]] = {}
        for key in index:
            by_team.setdefault(key.team_id, []).append(key.meal_date)

        stats = []
        for team in teams:
            dates = by_team.get(team.id, [])
            last_four = sum(1 for d in dates if d >= four_weeks_ago)
            stats.append(
                {
                    "team_id": team.id,
                    "area": team.area,
                    "meals_this_week": sum(1 for d in dates if d >= this_week),
                    "meals_last_week": sum(1 for d in dates if last_week <= d < this_week),
                    "meals_last_4_weeks": last_four,
                    "average_meals_per_week": round(last_four / STATS_WEEKS, 2),
                    "last_meal_date": max(dates) if dates else None,
                }
            )
        stats.sort(key=lambda s: s["meals_this_week"], reverse=True)
        return stats

    async def get_weekday_patterns(self, start: date, end: date) -> list[dict[str, Any]]:
        """Commitment counts and percentage share per weekday, Sunday first."""
        if start > end:
            raise InvalidWindow(f"Window start {start} is after end {end}")
        index = await load_range(self._commitments, start, end)
        counts = Counter(weekday_number(key.meal_date) for key in index)
        total = sum(counts.values())
        return [
            {
                "day_name": name,
                "day_number": number,
                "signup_count": counts.get(number, 0),
                "percentage": 0 if total == 0 else round(counts.get(number, 0) * 100 / total, 2),
            }
            for number, name in enumerate(DAY_NAMES)
        ]
