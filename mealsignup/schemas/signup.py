# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas: API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from mealsignup.models.domain import (
    CalendarDay,
    Commitment,
    ContactPreference,
    Member,
    Team,
    VirtualSlot,
)


# ── Commitment Schemas ──

class CommitmentCreateRequest(BaseModel):
    team_id: str = Field(..., min_length=1, max_length=64)
    meal_date: date
    guest_count: Optional[int] = Field(
        default=None, ge=1, le=20,
        description="Defaults to the team's active member count",
    )
    user_phone: str = Field(default="", max_length=50)
    contact_preference: ContactPreference = "email"
    notes: str = Field(default="", max_length=2000)


class CommitmentUpdateRequest(BaseModel):
    """Partial update model for PATCH /api/v1/commitments/{id}."""
    user_phone: Optional[str] = Field(default=None, max_length=50)
    contact_preference: Optional[ContactPreference] = None
    notes: Optional[str] = Field(default=None, max_length=2000)


class CommitmentListResponse(BaseModel):
    user_id: str
    total: int
    commitments: list[Commitment]


# ── Slot & Calendar Schemas ──

class SlotListResponse(BaseModel):
    team_id: str
    start: date
    end: date
    available_only: bool
    total: int
    slots: list[VirtualSlot]


class CalendarResponse(BaseModel):
    start: date
    end: date
    team_ids: Optional[list[str]] = None
    days: list[CalendarDay]


# ── Directory Schemas ──

class TeamUpsertRequest(BaseModel):
    area: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(default="", max_length=50)
    address: str = Field(default="", max_length=500)
    apartment_number: Optional[str] = Field(default=None, max_length=50)
    member_ids: list[str] = Field(default_factory=list)
    days_of_week: list[int] = Field(
        default_factory=list,
        description="0=Sunday .. 6=Saturday; empty uses the configured default",
    )
    notes: Optional[str] = Field(default=None, max_length=2000)
    is_active: bool = True

    @field_validator("days_of_week")
    @classmethod
    def check_weekdays(cls, v: list[int]) -> list[int]:
        bad = [d for d in v if not 0 <= d <= 6]
        if bad:
            raise ValueError(f"days_of_week entries must be 0..6, got {bad}")
        return v

    def to_team(self, team_id: str) -> Team:
        return Team(id=team_id, **self.model_dump())


class MemberUpsertRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    dinner_preferences: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=2000)
    is_active: bool = True

    def to_member(self, member_id: str) -> Member:
        return Member(id=member_id, **self.model_dump())


# ── Stats Schemas ──

class TeamMealStats(BaseModel):
    team_id: str
    area: str
    meals_this_week: int
    meals_last_week: int
    meals_last_4_weeks: int
    average_meals_per_week: float
    last_meal_date: Optional[date] = None


class WeekdayPattern(BaseModel):
    day_name: str
    day_number: int
    signup_count: int
    percentage: float
