# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models: pure data structures, NO FastAPI dependency.
"""

from datetime import date, datetime
from typing import Literal, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

CommitmentStatus = Literal["confirmed", "pending", "cancelled", "completed"]
ContactPreference = Literal["email", "phone", "both"]
SlotStatus = Literal["available", "taken"]
Role = Literal["member", "admin", "missionary"]

ACTIVE_STATUSES: tuple[str, ...] = ("confirmed", "pending", "completed")
TERMINAL_STATUSES: tuple[str, ...] = ("cancelled", "completed")


class Team(BaseModel):
    """A companionship serving one area on a weekly schedule."""

    id: str = Field(..., min_length=1, max_length=64)
    area: str = Field(..., min_length=1, max_length=255)
    phone: str = ""
    address: str = ""
    apartment_number: Optional[str] = None
    member_ids: list[str] = Field(default_factory=list)
    days_of_week: list[int] = Field(
        default_factory=list, description="0=Sunday .. 6=Saturday"
    )
    notes: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Member(BaseModel):
    """A missionary. Display data only, never part of scheduling."""

    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = None
    dinner_preferences: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    notes: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Commitment(BaseModel):
    """The only persisted scheduling fact: one meal for one team on one date."""

    id: str
    user_id: str
    user_name: str
    user_email: str = ""
    user_phone: str = ""
    team_id: str
    meal_date: date
    day_of_week: str
    guest_count: int
    status: CommitmentStatus = "confirmed"
    contact_preference: ContactPreference = "email"
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status != "cancelled"


class Actor(BaseModel):
    """Already-resolved caller identity."""

    user_id: str = Field(..., min_length=1)
    role: Role = "member"
    name: str = ""
    email: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class SlotKey(NamedTuple):
    """Structural identity of a virtual slot."""

    team_id: str
    meal_date: date


class CandidateDate(BaseModel):
    model_config = ConfigDict(frozen=True)

    team_id: str
    meal_date: date
    day_of_week: str
    guest_count: int

    @property
    def key(self) -> SlotKey:
        return SlotKey(self.team_id, self.meal_date)


class VirtualSlot(BaseModel):
    """Computed, never stored. Equal iff (team_id, meal_date) match."""

    model_config = ConfigDict(frozen=True)

    team_id: str
    meal_date: date
    day_of_week: str
    guest_count: int
    status: SlotStatus
    commitment: Optional[Commitment] = None

    @property
    def key(self) -> SlotKey:
        return SlotKey(self.team_id, self.meal_date)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VirtualSlot):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


class TeamDisplay(BaseModel):
    team_id: str
    area: str
    phone: str
    address: str = ""
    display_name: str
    member_names: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    dinner_preferences: list[str] = Field(default_factory=list)


class CalendarSlot(BaseModel):
    slot: VirtualSlot
    team: TeamDisplay


class CalendarDay(BaseModel):
    date: date
    is_in_requested_period: bool
    slots: list[CalendarSlot] = Field(default_factory=list)
