"""Track applications in a local CSV file with file locking."""
from __future__ import annotations

import csv
import fcntl
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jobmail.errors import StoreError, ValidationError
from jobmail.log import get_logger
from jobmail.models import JOB_STATUSES, ApplicationList, ImportRequest, StoredApplication
from jobmail.store.base import ApplicationStore

log = get_logger(__name__)

HEADERS: list[str] = [
    "id", "company", "position", "status", "applied_date", "url",
    "notes", "location", "gmail_message_id", "created_at",
]


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


def _matches(row: dict[str, str], filters: dict[str, Any]) -> bool:
    status = filters.get("status")
    if status and row.get("status") != status:
        return False
    company = (filters.get("company") or "").lower()
    if company and company not in row.get("company", "").lower():
        return False
    search = (filters.get("search") or "").lower()
    if search:
        haystack = " ".join(row.get(k, "") for k in ("company", "position", "notes")).lower()
        if search not in haystack:
            return False
    return True


class CsvApplicationStore(ApplicationStore):
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def ensure(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                with open(self.path, "w", newline="", encoding="utf-8") as f:
                    _lock(f)
                    csv.writer(f).writerow(HEADERS)
                    _unlock(f)
                log.info("Created application store → %s", self.path.name)
        except OSError as exc:
            raise StoreError(f"Cannot create {self.path}: {exc}") from exc

    def _read(self) -> list[dict[str, str]]:
        self.ensure()
        try:
            with open(self.path, "r", newline="", encoding="utf-8") as f:
                _lock(f, exclusive=False)
                rows = list(csv.DictReader(f))
                _unlock(f)
        except OSError as exc:
            raise StoreError(f"Cannot read {self.path}: {exc}") from exc
        return rows

    def list(self, filters: dict[str, Any] | None = None) -> ApplicationList:
        rows = self._read()
        counts = Counter(r.get("status", "") for r in rows)
        items = [StoredApplication.from_dict(r) for r in rows if _matches(r, filters or {})]
        return ApplicationList(
            items=items,
            aggregate_counts={s: counts.get(s, 0) for s in JOB_STATUSES},
        )

    def create(self, request: ImportRequest) -> StoredApplication:
        if not request.company.strip() or not request.position.strip():
            raise ValidationError("company and position are required")
        if request.status not in JOB_STATUSES:
            raise ValidationError(f"invalid status {request.status!r}")

        self.ensure()
        payload = request.to_payload()
        try:
            with open(self.path, "a+", newline="", encoding="utf-8") as f:
                _lock(f)
                try:
                    f.seek(0)
                    rows = list(csv.DictReader(f))
                    if request.gmail_message_id:
                        for r in rows:
                            if r.get("gmail_message_id") == request.gmail_message_id:
                                log.debug("Already tracked: %s — keeping existing row", request.gmail_message_id)
                                return StoredApplication.from_dict(r)
                    next_id = max((int(r["id"]) for r in rows if r.get("id", "").isdigit()), default=0) + 1
                    row = {k: payload.get(k, "") for k in HEADERS}
                    row["id"] = str(next_id)
                    row["created_at"] = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M")
                    f.seek(0, 2)
                    csv.DictWriter(f, fieldnames=HEADERS).writerow(row)
                finally:
                    _unlock(f)
        except OSError as exc:
            raise StoreError(f"Cannot write {self.path}: {exc}") from exc
        log.debug("Tracked: %s @ %s [%s]", request.position, request.company, request.status)
        return StoredApplication.from_dict(row)
