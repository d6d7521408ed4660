# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Typed error taxonomy for the scheduling core.

Every precondition failure carries a stable ``code`` so the HTTP boundary can
map it to a distinct status and user-facing message.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

SLOT_UNAVAILABLE_MESSAGE = "This slot is no longer available, please choose another."


class MealSignupError(Exception):
    """Base class for all typed core errors."""

    code: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SlotUnavailable(MealSignupError):
    """The (team, date) pair cannot take a new commitment."""

    code = "slot_unavailable"

    TAKEN = "taken"
    NOT_SCHEDULED = "not_scheduled"
    TEAM_INACTIVE = "team_inactive"

    def __init__(self, team_id: str, meal_date: date, reason: str) -> None:
        super().__init__(
            f"Team '{team_id}' cannot take a commitment on {meal_date.isoformat()} ({reason})"
        )
        self.team_id = team_id
        self.meal_date = meal_date
        self.reason = reason


class NotFound(MealSignupError):
    code = "not_found"

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} '{identifier}' not found")
        self.kind = kind
        self.identifier = identifier


class Forbidden(MealSignupError):
    code = "forbidden"


class InvalidTransition(MealSignupError):
    """Mutation attempted on a commitment in a terminal status."""

    code = "invalid_transition"


class InvalidWindow(MealSignupError):
    code = "invalid_window"


@dataclass
class DataIntegrityWarning:
    """Non-fatal record problem found while indexing commitments.

    Collected and logged, never raised.
    """

    kind: str
    commitment_id: Optional[str]
    detail: str
    context: dict[str, Any] = field(default_factory=dict)

    DUPLICATE_KEY = "duplicate_key"
    UNPARSEABLE_DATE = "unparseable_date"
    MALFORMED_RECORD = "malformed_record"
