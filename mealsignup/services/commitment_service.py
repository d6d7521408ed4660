# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Commitment lifecycle: create, read, modify, cancel.

Creation is serialised per (team, date) inside this process and backed by
the store's conditional insert across processes, so two racing callers
for one slot get exactly one success.
"""

import asyncio
import uuid
import weakref
from datetime import date, datetime, timezone
from typing import Any, Optional

from mealsignup.core.errors import (
    Forbidden,
    InvalidTransition,
    NotFound,
    SlotUnavailable,
)
from mealsignup.core.logging import get_logger
from mealsignup.metrics.prometheus import (
    COMMITMENTS_CANCELLED,
    COMMITMENTS_CREATED,
    SLOT_CONFLICTS,
)
from mealsignup.models.domain import TERMINAL_STATUSES, Actor, Commitment, SlotKey
from mealsignup.repositories.commitment_repository import CommitmentRepository
from mealsignup.repositories.member_repository import MemberRepository
from mealsignup.repositories.team_repository import TeamRepository
from mealsignup.services.dates import weekday_name, weekday_number
from mealsignup.services.recurrence import active_member_count, expected_guest_count

logger = get_logger(__name__)

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"cancelled", "completed"},
    "completed": set(),
    "cancelled": set(),
}

EDITABLE_FIELDS = ("user_phone", "contact_preference", "notes")


class CommitmentService:
    """Business logic for meal commitments."""

    def __init__(
        self,
        team_repo: TeamRepository,
        member_repo: MemberRepository,
        commitment_repo: CommitmentRepository,
    ) -> None:
        self._teams = team_repo
        self._members = member_repo
        self._commitments = commitment_repo
        self._slot_locks: "weakref.WeakValueDictionary[SlotKey, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    # ── Commands ──

    async def create_commitment(
        self,
        actor: Actor,
        team_id: str,
        meal_date: date,
        guest_count: Optional[int] = None,
        user_phone: str = "",
        contact_preference: str = "email",
        notes: str = "",
    ) -> Commitment:
        """
        Claim the (team, date) slot for ``actor``.

        Raises NotFound for an unknown team and SlotUnavailable when the team
        is inactive, does not eat on that weekday, or the slot is taken.
        """
        team = await self._teams.get_team(team_id)
        if team is None:
            raise NotFound("Team", team_id)
        if not team.is_active:
            raise self._conflict(team_id, meal_date, SlotUnavailable.TEAM_INACTIVE)
        if weekday_number(meal_date) not in set(team.days_of_week):
            raise self._conflict(team_id, meal_date, SlotUnavailable.NOT_SCHEDULED)

        if guest_count is None:
            members = await self._members.get_active_members()
            guest_count = expected_guest_count(
                active_member_count(team, {m.id: m for m in members})
            )

        now = datetime.now(timezone.utc)
        record: dict[str, Any] = {
            "id": str(uuid.uuid4()),
            "user_id": actor.user_id,
            "user_name": actor.name or actor.user_id,
            "user_email": actor.email,
            "user_phone": user_phone,
            "team_id": team_id,
            "meal_date": meal_date,
            "day_of_week": weekday_name(meal_date),
            "guest_count": guest_count,
            "status": "confirmed",
            "contact_preference": contact_preference,
            "notes": notes,
            "created_at": now,
            "updated_at": now,
        }

        async with self._lock_for(SlotKey(team_id, meal_date)):
            if await self._commitments.query_by_team_and_date(team_id, meal_date):
                raise self._conflict(team_id, meal_date, SlotUnavailable.TAKEN)
            if await self._commitments.insert(record) is None:
                raise self._conflict(team_id, meal_date, SlotUnavailable.TAKEN)

        COMMITMENTS_CREATED.inc()
        logger.info(
            "Commitment created: team=%s, date=%s, user=%s",
            team_id, meal_date, actor.user_id,
            extra={"commitment_id": record["id"], "team_id": team_id, "meal_date": meal_date},
        )
        return Commitment(**record)

    async def modify_commitment(
        self,
        actor: Actor,
        commitment_id: str,
        *,
        user_phone: Optional[str] = None,
        contact_preference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Commitment:
        """Edit contact details and notes. Team and date are fixed once created."""
        commitment = await self.get_commitment(actor, commitment_id)
        if commitment.status in TERMINAL_STATUSES:
            raise InvalidTransition(
                f"Commitment {commitment_id} is {commitment.status} and can no longer be edited"
            )

        requested = {
            "user_phone": user_phone,
            "contact_preference": contact_preference,
            "notes": notes,
        }
        changes = {k: v for k, v in requested.items() if v is not None}
        if not changes:
            return commitment

        changes["updated_at"] = datetime.now(timezone.utc)
        await self._commitments.update(commitment_id, changes)
        logger.info(
            "Commitment updated: fields=%s, by=%s",
            sorted(k for k in changes if k in EDITABLE_FIELDS), actor.user_id,
            extra={"commitment_id": commitment_id},
        )
        return commitment.model_copy(update=changes)

    async def cancel_commitment(self, actor: Actor, commitment_id: str) -> Commitment:
        """
        Cancel a commitment, freeing its slot. Cancelling twice is a no-op
        that returns the already-cancelled record.
        """
        commitment = await self.get_commitment(actor, commitment_id)
        if commitment.status == "cancelled":
            return commitment
        if "cancelled" not in ALLOWED_TRANSITIONS.get(commitment.status, set()):
            raise InvalidTransition(
                f"Cannot cancel commitment {commitment_id} in status '{commitment.status}'"
            )

        changes = {"status": "cancelled", "updated_at": datetime.now(timezone.utc)}
        await self._commitments.update(commitment_id, changes)

        COMMITMENTS_CANCELLED.labels(actor_role=actor.role).inc()
        logger.info(
            "Commitment cancelled: team=%s, date=%s, by=%s",
            commitment.team_id, commitment.meal_date, actor.user_id,
            extra={"commitment_id": commitment_id},
        )
        return commitment.model_copy(update=changes)

    # ── Queries ──

    async def get_commitment(self, actor: Actor, commitment_id: str) -> Commitment:
        row = await self._commitments.get(commitment_id)
        if row is None:
            raise NotFound("Commitment", commitment_id)
        commitment = Commitment(**row)
        if commitment.user_id != actor.user_id and not actor.is_admin:
            raise Forbidden(f"Commitment {commitment_id} belongs to another user")
        return commitment

    async def list_commitments_for_user(
        self,
        actor: Actor,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[Commitment]:
        """A user's commitments, latest meal first. Admins may list anyone's."""
        user_id = user_id or actor.user_id
        if user_id != actor.user_id and not actor.is_admin:
            raise Forbidden("Only admins may list another user's commitments")
        rows = await self._commitments.query_by_user(user_id, status, start, end)
        return [Commitment(**r) for r in rows]

    # ── Internal ──

    def _lock_for(self, key: SlotKey) -> asyncio.Lock:
        lock = self._slot_locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._slot_locks[key] = lock
        return lock

    @staticmethod
    def _conflict(team_id: str, meal_date: date, reason: str) -> SlotUnavailable:
        SLOT_CONFLICTS.labels(reason=reason).inc()
        logger.info(
            "Slot unavailable: team=%s, date=%s, reason=%s", team_id, meal_date, reason,
            extra={"team_id": team_id, "meal_date": meal_date, "reason": reason},
        )
        return SlotUnavailable(team_id, meal_date, reason)
