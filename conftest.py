# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Shared fixtures: a fresh SQLite file database per test, repositories and
services wired to it, and sample Downtown / Northside teams.
"""

import os
import tempfile

# Settings are read once at import time, so the app database must be
# pointed at a scratch file before anything from mealsignup is imported.
_SCRATCH_DIR = tempfile.mkdtemp(prefix="mealsignup-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_SCRATCH_DIR}/app.db"
os.environ["AUTO_CREATE_SCHEMA"] = "true"
os.environ["SEED_DEFAULT_TEAMS"] = "true"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from mealsignup.core.database import build_engine, create_schema
from mealsignup.models.domain import Actor, Member, Team
from mealsignup.repositories import CommitmentRepository, MemberRepository, TeamRepository
from mealsignup.services.calendar_service import CalendarService
from mealsignup.services.commitment_service import CommitmentService
from mealsignup.services.directory_service import DirectoryService
from mealsignup.services.stats_service import StatsService

MEMBERS = [
    Member(id="m-smith", name="Elder Smith", allergies=["Nuts"], dinner_preferences=["Italian"]),
    Member(id="m-johnson", name="Elder Johnson", allergies=["Shellfish"],
           dinner_preferences=["Mexican", "Italian"]),
    Member(id="m-davis", name="Elder Davis", dinner_preferences=["Asian"]),
    Member(id="m-wilson", name="Elder Wilson", is_active=False),
]

DOWNTOWN = Team(
    id="downtown",
    area="Downtown",
    phone="(555) 123-4567",
    member_ids=["m-smith", "m-johnson"],
    days_of_week=[1, 2, 3, 4, 5, 6],
)
NORTHSIDE = Team(
    id="northside",
    area="Northside",
    phone="(555) 234-5678",
    member_ids=["m-davis", "m-wilson"],
    days_of_week=[0, 1, 2, 3, 4, 5, 6],
)
EASTSIDE = Team(
    id="eastside",
    area="Eastside",
    member_ids=["m-wilson"],
    days_of_week=[2, 4],
)


# ============================================
# Store fixtures
# ============================================
@pytest.fixture
async def engine(tmp_path):
    db_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path}/meal_signup.db")
    await create_schema(db_engine)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def team_repo(engine):
    return TeamRepository(engine)


@pytest.fixture
def member_repo(engine):
    return MemberRepository(engine)


@pytest.fixture
def commitment_repo(engine):
    return CommitmentRepository(engine)


@pytest.fixture
async def seeded(team_repo, member_repo):
    """Downtown (Mon-Sat, two active), Northside (daily, one active), Eastside (Tue/Thu, none active)."""
    for member in MEMBERS:
        await member_repo.save(member)
    for team in (DOWNTOWN, NORTHSIDE, EASTSIDE):
        await team_repo.save(team)


# ============================================
# Service fixtures
# ============================================
@pytest.fixture
def calendar_service(team_repo, member_repo, commitment_repo):
    return CalendarService(team_repo, member_repo, commitment_repo)


@pytest.fixture
def commitment_service(team_repo, member_repo, commitment_repo):
    return CommitmentService(team_repo, member_repo, commitment_repo)


@pytest.fixture
def directory_service(team_repo, member_repo):
    return DirectoryService(team_repo, member_repo)


@pytest.fixture
def stats_service(team_repo, commitment_repo):
    return StatsService(team_repo, commitment_repo)


# ============================================
# Actors
# ============================================
@pytest.fixture
def alice():
    return Actor(user_id="user-alice", role="member", name="Alice Host", email="alice@example.com")


@pytest.fixture
def bob():
    return Actor(user_id="user-bob", role="member", name="Bob Host", email="bob@example.com")


@pytest.fixture
def admin():
    return Actor(user_id="user-admin", role="admin", name="Ward Admin")
