# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection: wire repositories and services.
"""

from typing import Optional

from fastapi import Header, HTTPException

from mealsignup.core.database import engine
from mealsignup.models.domain import Actor
from mealsignup.repositories.commitment_repository import CommitmentRepository
from mealsignup.repositories.member_repository import MemberRepository
from mealsignup.repositories.team_repository import TeamRepository
from mealsignup.services.calendar_service import CalendarService
from mealsignup.services.commitment_service import CommitmentService
from mealsignup.services.directory_service import DirectoryService
from mealsignup.services.stats_service import StatsService

# ── Singleton repository instances (shared async engine) ──
_team_repo = TeamRepository(engine)
_member_repo = MemberRepository(engine)
_commitment_repo = CommitmentRepository(engine)

# ── Service instances (with injected dependencies) ──
_calendar_service = CalendarService(
    team_repo=_team_repo,
    member_repo=_member_repo,
    commitment_repo=_commitment_repo,
)
_commitment_service = CommitmentService(
    team_repo=_team_repo,
    member_repo=_member_repo,
    commitment_repo=_commitment_repo,
)
_directory_service = DirectoryService(team_repo=_team_repo, member_repo=_member_repo)
_stats_service = StatsService(team_repo=_team_repo, commitment_repo=_commitment_repo)

VALID_ROLES = ("member", "admin", "missionary")


# ── FastAPI dependency functions ──
def get_calendar_service() -> CalendarService:
    return _calendar_service


def get_commitment_service() -> CommitmentService:
    return _commitment_service


def get_directory_service() -> DirectoryService:
    return _directory_service


def get_stats_service() -> StatsService:
    return _stats_service


def get_commitment_repo() -> CommitmentRepository:
    return _commitment_repo


def get_actor(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: str = Header(default="member"),
    x_user_name: str = Header(default=""),
    x_user_email: str = Header(default=""),
) -> Actor:
    """Identity resolved upstream and forwarded by the gateway as headers."""
    if not x_user_id:
        raise HTTPException(
            status_code=401,
            detail={"error": "unauthenticated", "detail": "X-User-Id header is required"},
        )
    role = x_user_role.lower().strip()
    if role not in VALID_ROLES:
        raise HTTPException(
            status_code=400,
            detail={"error": "invalid_role", "detail": f"X-User-Role must be one of {VALID_ROLES}"},
        )
    return Actor(user_id=x_user_id, role=role, name=x_user_name, email=x_user_email)
