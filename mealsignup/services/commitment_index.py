# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Commitment index: (team, date) → active commitment for one window.

Built in one pass from the store. Bad records are skipped and reported as
DataIntegrityWarning values so a single row never blanks the calendar.
"""

from collections.abc import Iterable, Iterator, Mapping
from datetime import date
from typing import Any, Optional, Protocol

from pydantic import ValidationError

from mealsignup.core.errors import DataIntegrityWarning
from mealsignup.core.logging import get_logger
from mealsignup.metrics.prometheus import INTEGRITY_WARNINGS
from mealsignup.models.domain import Commitment, SlotKey
from mealsignup.services.dates import InvalidDateError, slot_key

logger = get_logger(__name__)


class CommitmentSource(Protocol):
    async def query_by_date_range(self, start: date, end: date) -> list[Any]:
        ...


class CommitmentIndex:
    """Read-only lookup of non-cancelled commitments keyed by SlotKey."""

    def __init__(self, window_start: date, window_end: date) -> None:
        self.window_start = window_start
        self.window_end = window_end
        self._entries: dict[SlotKey, Commitment] = {}
        self.warnings: list[DataIntegrityWarning] = []

    # ── Read ──

    def get(self, key: SlotKey) -> Optional[Commitment]:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SlotKey]:
        return iter(self._entries)

    def commitments(self) -> list[Commitment]:
        return list(self._entries.values())

    # ── Build ──

    @classmethod
    def build(
        cls, records: Iterable[Any], window_start: date, window_end: date
    ) -> "CommitmentIndex":
        index = cls(window_start, window_end)
        for record in records:
            index._add(record)
        return index

    def _add(self, record: Any) -> None:
        data = _as_mapping(record)
        commitment_id = data.get("id")
        if data.get("status") == "cancelled":
            return
        if not data.get("team_id"):
            self._warn(DataIntegrityWarning.MALFORMED_RECORD, commitment_id, "missing team_id")
            return
        try:
            key = slot_key(data.get("team_id"), data.get("meal_date"))
        except InvalidDateError as exc:
            self._warn(DataIntegrityWarning.UNPARSEABLE_DATE, commitment_id, str(exc))
            return
        if not (self.window_start <= key.meal_date <= self.window_end):
            return
        try:
            commitment = Commitment(**{**data, "meal_date": key.meal_date})
        except ValidationError as exc:
            self._warn(
                DataIntegrityWarning.MALFORMED_RECORD,
                commitment_id,
                f"{exc.error_count()} invalid field(s)",
            )
            return

        existing = self._entries.get(key)
        if existing is not None:
            self._warn(
                DataIntegrityWarning.DUPLICATE_KEY,
                commitment.id,
                f"replaces {existing.id} for team={key.team_id} date={key.meal_date}",
                context={"replaced_id": existing.id},
            )
        self._entries[key] = commitment

    def _warn(
        self,
        kind: str,
        commitment_id: Optional[str],
        detail: str,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        warning = DataIntegrityWarning(
            kind=kind, commitment_id=commitment_id, detail=detail, context=context or {}
        )
        self.warnings.append(warning)
        INTEGRITY_WARNINGS.labels(kind=kind).inc()
        logger.warning(
            "Commitment index integrity issue: kind=%s, detail=%s",
            kind,
            detail,
            extra={"commitment_id": commitment_id},
        )


def _as_mapping(record: Any) -> Mapping[str, Any]:
    if isinstance(record, Commitment):
        return record.model_dump()
    if isinstance(record, Mapping):
        return record
    return dict(getattr(record, "_mapping", {}))


async def load_range(
    store: CommitmentSource, window_start: date, window_end: date
) -> CommitmentIndex:
    """Fetch every commitment in the inclusive window and index it."""
    if window_start > window_end:
        return CommitmentIndex(window_start, window_end)
    records = await store.query_by_date_range(window_start, window_end)
    index = CommitmentIndex.build(records, window_start, window_end)
    logger.debug(
        "Commitment index built: window=%s..%s, entries=%d, warnings=%d",
        window_start, window_end, len(index), len(index.warnings),
    )
    return index
