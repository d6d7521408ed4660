# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Typed core errors → HTTP responses.
The one place where error codes meet status codes.
"""

from fastapi import HTTPException

from mealsignup.core.errors import (
    SLOT_UNAVAILABLE_MESSAGE,
    Forbidden,
    InvalidTransition,
    InvalidWindow,
    MealSignupError,
    NotFound,
    SlotUnavailable,
)

STATUS_BY_ERROR: dict[type, int] = {
    SlotUnavailable: 409,
    NotFound: 404,
    Forbidden: 403,
    InvalidTransition: 409,
    InvalidWindow: 400,
}


def status_for(exc: MealSignupError) -> int:
    for error_type, status in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status
    return 400


def error_body(exc: MealSignupError) -> dict:
    if isinstance(exc, SlotUnavailable):
        return {"error": exc.code, "detail": SLOT_UNAVAILABLE_MESSAGE, "reason": exc.reason}
    return {"error": exc.code, "detail": exc.message}


def to_http(exc: MealSignupError) -> HTTPException:
    return HTTPException(status_code=status_for(exc), detail=error_body(exc))
