# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Member directory data access.
NO business rules here: pure CRUD.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncEngine

from mealsignup.models.domain import Member
from mealsignup.repositories.tables import members


def _row_to_member(row) -> Member:
    return Member(**dict(row._mapping))


class MemberRepository:
    """Member directory backed by the ``members`` table."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    # ── Read ──

    async def get_active_members(self) -> list[Member]:
        async with self._engine.connect() as conn:
            result = await conn.execute(
                select(members).where(members.c.is_active.is_(True)).order_by(members.c.name)
            )
            return [_row_to_member(r) for r in result]

    async def list_members(self) -> list[Member]:
        async with self._engine.connect() as conn:
            result = await conn.execute(select(members).order_by(members.c.name))
            return [_row_to_member(r) for r in result]

    async def get_member(self, member_id: str) -> Optional[Member]:
        async with self._engine.connect() as conn:
            row = (
                await conn.execute(select(members).where(members.c.id == member_id))
            ).first()
        return _row_to_member(row) if row else None

    # ── Write ──

    async def save(self, member: Member) -> Member:
        now = datetime.now(timezone.utc)
        values = member.model_dump(exclude={"created_at", "updated_at"})
        async with self._engine.begin() as conn:
            existing = (
                await conn.execute(select(members.c.created_at).where(members.c.id == member.id))
            ).first()
            if existing is None:
                await conn.execute(insert(members).values(**values, created_at=now, updated_at=now))
                created_at = now
            else:
                await conn.execute(
                    update(members).where(members.c.id == member.id).values(**values, updated_at=now)
                )
                created_at = existing.created_at
        return member.model_copy(update={"created_at": created_at, "updated_at": now})
