# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Team and member directory management.
Admin upserts, read-through queries, and first-run seed data.
"""

from typing import Any, Optional

from mealsignup.core.config import settings
from mealsignup.core.errors import Forbidden, NotFound
from mealsignup.core.logging import get_logger
from mealsignup.models.domain import Actor, Member, Team
from mealsignup.repositories.member_repository import MemberRepository
from mealsignup.repositories.team_repository import TeamRepository

logger = get_logger(__name__)

DEFAULT_MEMBERS: list[dict[str, Any]] = [
    {
        "id": "elder-smith",
        "name": "Elder Smith",
        "email": "elder.smith@missionary.org",
        "dinner_preferences": ["Italian", "Vegetarian"],
        "allergies": ["Nuts"],
        "notes": "Vegetarian, prefers simple meals",
    },
    {
        "id": "elder-johnson",
        "name": "Elder Johnson",
        "email": "elder.johnson@missionary.org",
        "dinner_preferences": ["Mexican", "Home cooking"],
        "allergies": ["Shellfish"],
        "notes": "Loves spicy food",
    },
    {
        "id": "elder-davis",
        "name": "Elder Davis",
        "email": "elder.davis@missionary.org",
        "dinner_preferences": ["American", "Asian"],
        "allergies": [],
        "notes": "Easy going with food",
    },
    {
        "id": "elder-wilson",
        "name": "Elder Wilson",
        "email": "elder.wilson@missionary.org",
        "dinner_preferences": ["Healthy options", "Grilled food"],
        "allergies": [],
        "notes": "Enjoys trying new cuisines",
    },
]

DEFAULT_TEAMS: list[dict[str, Any]] = [
    {
        "id": "downtown",
        "area": "Downtown",
        "address": "123 Main St, Apt 4B",
        "apartment_number": "4B",
        "phone": "(555) 123-4567",
        "notes": "Prefer dinner between 5-7 PM.",
        "member_ids": ["elder-smith", "elder-johnson"],
        "days_of_week": [1, 2, 3, 4, 5, 6],
    },
    {
        "id": "northside",
        "area": "Northside",
        "address": "456 Oak Avenue, Unit 12",
        "apartment_number": "12",
        "phone": "(555) 234-5678",
        "notes": "Available most evenings.",
        "member_ids": ["elder-davis", "elder-wilson"],
        "days_of_week": [0, 1, 2, 3, 4, 5, 6],
    },
]


def normalise_weekdays(days: Optional[list[int]]) -> list[int]:
    """Sorted, de-duplicated weekday set; empty falls back to the configured default."""
    cleaned = sorted({d for d in days or [] if 0 <= d <= 6})
    return cleaned or sorted(set(settings.DEFAULT_DAYS_OF_WEEK))


class DirectoryService:
    """Business logic for the team and member directories."""

    def __init__(self, team_repo: TeamRepository, member_repo: MemberRepository) -> None:
        self._teams = team_repo
        self._members = member_repo

    # ── Teams ──

    async def list_teams(self, active_only: bool = False) -> list[Team]:
        if active_only:
            return await self._teams.get_active_teams()
        return await self._teams.list_teams()

    async def get_team(self, team_id: str) -> Team:
        team = await self._teams.get_team(team_id)
        if team is None:
            raise NotFound("Team", team_id)
        return team

    async def save_team(self, actor: Actor, team: Team) -> Team:
        """
        Create or replace a team. Schedule edits only change future
        expansion; existing commitments are never touched.
        """
        self._require_admin(actor)
        team = team.model_copy(update={"days_of_week": normalise_weekdays(team.days_of_week)})
        saved = await self._teams.save(team)
        logger.info(
            "Team saved: id=%s, area=%s, days=%s, members=%d, by=%s",
            saved.id, saved.area, saved.days_of_week, len(saved.member_ids), actor.user_id,
        )
        return saved

    # ── Members ──

    async def list_members(self, active_only: bool = False) -> list[Member]:
        if active_only:
            return await self._members.get_active_members()
        return await self._members.list_members()

    async def get_member(self, member_id: str) -> Member:
        member = await self._members.get_member(member_id)
        if member is None:
            raise NotFound("Member", member_id)
        return member

    async def save_member(self, actor: Actor, member: Member) -> Member:
        self._require_admin(actor)
        saved = await self._members.save(member)
        logger.info("Member saved: id=%s, active=%s, by=%s", saved.id, saved.is_active, actor.user_id)
        return saved

    # ── Seed ──

    async def seed_defaults(self) -> int:
        """Create sample teams so an empty install is usable immediately."""
        if await self._teams.count() > 0:
            return 0
        for data in DEFAULT_MEMBERS:
            await self._members.save(Member(**data))
        for data in DEFAULT_TEAMS:
            await self._teams.save(Team(**data))
        logger.info(
            "Seeded %d default teams with %d members", len(DEFAULT_TEAMS), len(DEFAULT_MEMBERS)
        )
        return len(DEFAULT_TEAMS)

    @staticmethod
    def _require_admin(actor: Actor) -> None:
        if not actor.is_admin:
            raise Forbidden("Only admins may edit the directory")
