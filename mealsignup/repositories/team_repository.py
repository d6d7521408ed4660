# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Team directory data access.
Encapsulates all read/write operations on the teams table.
NO business rules here: pure CRUD.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncEngine

from mealsignup.models.domain import Team
from mealsignup.repositories.tables import teams


def _row_to_team(row) -> Team:
    return Team(**dict(row._mapping))


class TeamRepository:
    """Team directory backed by the ``teams`` table."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    # ── Read ──

    async def get_active_teams(self) -> list[Team]:
        async with self._engine.connect() as conn:
            result = await conn.execute(
                select(teams).where(teams.c.is_active.is_(True)).order_by(teams.c.area, teams.c.id)
            )
            return [_row_to_team(r) for r in result]

    async def list_teams(self) -> list[Team]:
        async with self._engine.connect() as conn:
            result = await conn.execute(select(teams).order_by(teams.c.area, teams.c.id))
            return [_row_to_team(r) for r in result]

    async def get_team(self, team_id: str) -> Optional[Team]:
        async with self._engine.connect() as conn:
            row = (
                await conn.execute(select(teams).where(teams.c.id == team_id))
            ).first()
        return _row_to_team(row) if row else None

    async def count(self) -> int:
        async with self._engine.connect() as conn:
            return (await conn.execute(select(func.count()).select_from(teams))).scalar() or 0

    # ── Write ──

    async def save(self, team: Team) -> Team:
        """Insert or replace a team, keeping its original created_at."""
        now = datetime.now(timezone.utc)
        values = team.model_dump(exclude={"created_at", "updated_at"})
        async with self._engine.begin() as conn:
            existing = (
                await conn.execute(select(teams.c.created_at).where(teams.c.id == team.id))
            ).first()
            if existing is None:
                await conn.execute(insert(teams).values(**values, created_at=now, updated_at=now))
                created_at = now
            else:
                await conn.execute(
                    update(teams).where(teams.c.id == team.id).values(**values, updated_at=now)
                )
                created_at = existing.created_at
        return team.model_copy(update={"created_at": created_at, "updated_at": now})
