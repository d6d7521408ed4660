# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Commitment store data access.

Rows are returned as plain dicts; turning them into domain objects (and
normalising their dates) is the caller's job. Date-range filters include
both bounds.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine

from mealsignup.core.logging import get_logger
from mealsignup.repositories.tables import commitments

logger = get_logger(__name__)


def _row_to_dict(row) -> Dict[str, Any]:
    return dict(row._mapping)


def _active_on(team_id: str, meal_date: date):
    return (
        (commitments.c.team_id == team_id)
        & (commitments.c.meal_date == meal_date)
        & (commitments.c.status != "cancelled")
    )


class CommitmentRepository:
    def __init__(self, engine: AsyncEngine):
        self._engine = engine

    # ── Read ──────────────────────────────────────────────────────────

    async def query_by_date_range(self, start: date, end: date,
                                  include_cancelled: bool = False) -> List[Dict[str, Any]]:
        stmt = select(commitments).where(
            commitments.c.meal_date >= start, commitments.c.meal_date <= end
        )
        if not include_cancelled:
            stmt = stmt.where(commitments.c.status != "cancelled")
        stmt = stmt.order_by(commitments.c.meal_date, commitments.c.created_at)
        async with self._engine.connect() as conn:
            result = await conn.execute(stmt)
            return [_row_to_dict(r) for r in result]

    async def query_by_team_and_date(self, team_id: str, meal_date: date) -> Optional[Dict[str, Any]]:
        """The non-cancelled commitment for (team, date), if any."""
        async with self._engine.connect() as conn:
            row = (
                await conn.execute(select(commitments).where(_active_on(team_id, meal_date)))
            ).first()
        return _row_to_dict(row) if row else None

    async def get(self, commitment_id: str) -> Optional[Dict[str, Any]]:
        async with self._engine.connect() as conn:
            row = (
                await conn.execute(select(commitments).where(commitments.c.id == commitment_id))
            ).first()
        return _row_to_dict(row) if row else None

    async def query_by_user(self, user_id: str, status: Optional[str] = None,
                            start: Optional[date] = None,
                            end: Optional[date] = None) -> List[Dict[str, Any]]:
        stmt = select(commitments).where(commitments.c.user_id == user_id)
        if status:
            stmt = stmt.where(commitments.c.status == status)
        if start:
            stmt = stmt.where(commitments.c.meal_date >= start)
        if end:
            stmt = stmt.where(commitments.c.meal_date <= end)
        stmt = stmt.order_by(commitments.c.meal_date.desc(), commitments.c.created_at.desc())
        async with self._engine.connect() as conn:
            result = await conn.execute(stmt)
            return [_row_to_dict(r) for r in result]

    # ── Write ─────────────────────────────────────────────────────────

    async def insert(self, record: Dict[str, Any]) -> Optional[str]:
        """
        Insert ``record`` unless its (team, date) already has a non-cancelled
        commitment. Returns the new id, or None when the slot was occupied,
        whether seen by the in-transaction check or by the unique index.
        """
        try:
            async with self._engine.begin() as conn:
                occupied = (
                    await conn.execute(
                        select(commitments.c.id)
                        .where(_active_on(record["team_id"], record["meal_date"]))
                        .limit(1)
                    )
                ).first()
                if occupied is not None:
                    return None
                await conn.execute(insert(commitments).values(**record))
        except IntegrityError as exc:
            logger.info("Conditional insert lost race: team=%s, date=%s (%s)",
                        record["team_id"], record["meal_date"], type(exc).__name__)
            return None
        return record["id"]

    async def update(self, commitment_id: str, fields: Dict[str, Any]) -> bool:
        async with self._engine.begin() as conn:
            result = await conn.execute(
                update(commitments).where(commitments.c.id == commitment_id).values(**fields)
            )
        return result.rowcount > 0

    async def ping(self) -> None:
        async with self._engine.connect() as conn:
            await conn.execute(select(1))
