# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Slot reconciliation: pure merge of candidate dates and the index.
"""

from collections.abc import Iterable

from mealsignup.models.domain import CandidateDate, VirtualSlot
from mealsignup.services.commitment_index import CommitmentIndex
from mealsignup.services.dates import slot_key


def reconcile(
    candidates: Iterable[CandidateDate], index: CommitmentIndex
) -> list[VirtualSlot]:
    """
    One VirtualSlot per candidate, same order. ``taken`` with the commitment
    attached when the index holds the candidate's key, else ``available``.
    Neither input is mutated.
    """
    slots: list[VirtualSlot] = []
    for candidate in candidates:
        commitment = index.get(slot_key(candidate.team_id, candidate.meal_date))
        slots.append(
            VirtualSlot(
                team_id=candidate.team_id,
                meal_date=candidate.meal_date,
                day_of_week=candidate.day_of_week,
                guest_count=candidate.guest_count,
                status="taken" if commitment is not None else "available",
                commitment=commitment,
            )
        )
    return slots
