"""In-memory review set of scanned events awaiting user confirmation.

Rows are addressed by their position in the set. Filtered views carry
indices, never row objects, so bulk operations stay correct no matter how
rows are copied or replaced.
"""
from __future__ import annotations

import dataclasses
import threading
from collections import Counter
from collections.abc import Iterable, Iterator
from datetime import date
from typing import Any

from jobmail.classifier import classify_all
from jobmail.log import get_logger
from jobmail.models import ALL_STATUSES, JOB_STATUSES, CanonicalJobEvent, StagingRow
from jobmail.normalizer import parse_date

log = get_logger(__name__)

EDITABLE_FIELDS: frozenset[str] = frozenset(
    f.name for f in dataclasses.fields(StagingRow) if f.name != "message_id"
)


def _check_status(status: str) -> str:
    if status not in JOB_STATUSES:
        raise ValueError(f"Unknown status {status!r}; expected one of {', '.join(JOB_STATUSES)}")
    return status


def _coerce_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    day = parse_date(value)
    if day is None:
        raise ValueError(f"Cannot parse applied_date {value!r}")
    return day


class StagingView:
    """Lazy, restartable filter over a StagingSet.

    Every iteration re-evaluates the filter against the current rows.
    """

    def __init__(self, staging: StagingSet, search_query: str = "", status_filter: str = ALL_STATUSES) -> None:
        self._staging = staging
        self.query = (search_query or "").strip().lower()
        self.status_filter = status_filter or ALL_STATUSES

    def matches(self, row: StagingRow) -> bool:
        if self.status_filter != ALL_STATUSES and row.status != self.status_filter:
            return False
        if not self.query:
            return True
        q = self.query
        return (
            q in row.company.lower()
            or q in row.title.lower()
            or q in row.subject.lower()
            or q in row.snippet.lower()
        )

    def items(self) -> Iterator[tuple[int, StagingRow]]:
        for idx, row in enumerate(self._staging.rows):
            if self.matches(row):
                yield idx, row

    def indices(self) -> list[int]:
        return [idx for idx, _ in self.items()]

    def __iter__(self) -> Iterator[StagingRow]:
        for _, row in self.items():
            yield row

    def __len__(self) -> int:
        return sum(1 for _ in self.items())


class StagingSet:
    def __init__(self, rows: Iterable[StagingRow] = ()) -> None:
        self._rows: list[StagingRow] = list(rows)
        self._lock = threading.RLock()

    @classmethod
    def from_events(cls, events: Iterable[CanonicalJobEvent]) -> StagingSet:
        """Build rows (all selected) and run rejection detection once."""
        rows = [StagingRow.from_event(e) for e in events]
        classify_all(rows)
        return cls(rows)

    @property
    def rows(self) -> list[StagingRow]:
        """Snapshot of the rows; edit through set_field, not this list."""
        with self._lock:
            return [dataclasses.replace(r) for r in self._rows]

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, index: int) -> StagingRow:
        with self._lock:
            return dataclasses.replace(self._rows[index])

    @property
    def selected_count(self) -> int:
        with self._lock:
            return sum(1 for r in self._rows if r.selected)

    def status_counts(self) -> dict[str, int]:
        with self._lock:
            counts = Counter(r.status for r in self._rows)
        return {s: counts.get(s, 0) for s in JOB_STATUSES}

    def replace(self, rows: Iterable[StagingRow]) -> None:
        """Swap in a new scan's rows; a newer scan always wins."""
        with self._lock:
            self._rows = list(rows)

    def clear(self) -> None:
        with self._lock:
            self._rows = []

    def set_field(self, index: int, patch: dict[str, Any]) -> StagingRow:
        unknown = set(patch) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")
        changes = dict(patch)
        if "status" in changes:
            _check_status(changes["status"])
        if "applied_date" in changes:
            changes["applied_date"] = _coerce_date(changes["applied_date"])
        for name in ("selected", "expanded"):
            if name in changes and not isinstance(changes[name], bool):
                raise ValueError(f"{name} must be True or False, got {changes[name]!r}")
        for name in ("company", "title", "subject", "snippet", "link"):
            if name in changes and changes[name] is None:
                changes[name] = ""

        with self._lock:
            if not -len(self._rows) <= index < len(self._rows):
                raise IndexError(f"Row {index} out of range ({len(self._rows)} rows)")
            row = dataclasses.replace(self._rows[index], **changes)
            self._rows[index] = row
            return dataclasses.replace(row)

    def filtered_view(self, search_query: str = "", status_filter: str = ALL_STATUSES) -> StagingView:
        if status_filter != ALL_STATUSES:
            _check_status(status_filter)
        return StagingView(self, search_query, status_filter)

    def toggle_select_all_visible(self, view: StagingView) -> bool:
        """Select every visible row, or deselect them if all already are.

        Returns the new selection state of the visible rows.
        """
        with self._lock:
            visible = view.indices()
            if not visible:
                return False
            select = not all(self._rows[i].selected for i in visible)
            for i in visible:
                self._rows[i] = dataclasses.replace(self._rows[i], selected=select)
        log.debug("%s %d visible row(s)", "Selected" if select else "Deselected", len(visible))
        return select

    def bulk_set_status(self, status: str) -> int:
        """Apply ``status`` to every selected row, visible or not."""
        _check_status(status)
        with self._lock:
            changed = 0
            for i, row in enumerate(self._rows):
                if row.selected:
                    self._rows[i] = dataclasses.replace(row, status=status)
                    changed += 1
        log.info("Marked %d items as %s", changed, status)
        return changed

    def select_by_status(self, status: str) -> int:
        """Replace the selection with exactly the rows in ``status``."""
        _check_status(status)
        with self._lock:
            self._rows = [dataclasses.replace(r, selected=r.status == status) for r in self._rows]
            return sum(1 for r in self._rows if r.selected)

    def summary(self, view: StagingView | None = None) -> dict[str, int]:
        with self._lock:
            return {
                "selected": self.selected_count,
                "shown": len(view) if view is not None else len(self._rows),
                "total": len(self._rows),
            }
