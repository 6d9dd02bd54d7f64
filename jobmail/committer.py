"""Turn confirmed staging rows into store creations, tolerating partial failure."""
from __future__ import annotations

import threading
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed

from jobmail.errors import ValidationError
from jobmail.log import get_logger
from jobmail.models import (
    IMPORT_NOTE_PREFIX,
    UNKNOWN_COMPANY,
    UNKNOWN_POSITION,
    CommitResult,
    ImportRequest,
    StagingRow,
)
from jobmail.staging import StagingSet
from jobmail.store.base import ApplicationStore

log = get_logger(__name__)

NOTHING_SELECTED = "Please select at least one job to import"

_CREATED = "created"
_CANCELLED = "cancelled"


def to_import_request(row: StagingRow) -> ImportRequest:
    return ImportRequest(
        company=row.company.strip() or UNKNOWN_COMPANY,
        position=row.title.strip() or UNKNOWN_POSITION,
        status=row.status,
        applied_date=f"{row.applied_date.isoformat()}T00:00:00Z" if row.applied_date else None,
        url=row.link.strip() or None,
        notes=f"{IMPORT_NOTE_PREFIX} {row.subject}",
        location="",
        gmail_message_id=row.message_id,
    )


def build_import_requests(rows: Iterable[StagingRow]) -> list[ImportRequest]:
    """Selected rows with a company or title; blank rows are dropped silently."""
    return [to_import_request(r) for r in rows if r.eligible]


class ImportCommitter:
    """Issues one create per eligible row; a failed create never stops the rest.

    Message ids created successfully are remembered for the committer's
    lifetime, so resubmitting the same rows skips them instead of creating
    duplicates. Setting ``cancel_event`` stops creations that have not
    started yet; finished ones are kept.
    """

    def __init__(
        self,
        store: ApplicationStore,
        *,
        max_workers: int = 4,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.store = store
        self.max_workers = max(1, max_workers)
        self.cancel_event = cancel_event or threading.Event()
        self._imported: set[str] = set()
        self._lock = threading.Lock()

    @property
    def imported_ids(self) -> set[str]:
        with self._lock:
            return set(self._imported)

    def _create(self, request: ImportRequest) -> str:
        if self.cancel_event.is_set():
            return _CANCELLED
        self.store.create(request)
        if request.gmail_message_id:
            with self._lock:
                self._imported.add(request.gmail_message_id)
        return _CREATED

    def commit(self, staging: StagingSet) -> CommitResult:
        batch = build_import_requests(staging.rows)
        if not batch:
            raise ValidationError(NOTHING_SELECTED)

        result = CommitResult()
        pending: list[ImportRequest] = []
        for req in batch:
            if req.gmail_message_id and req.gmail_message_id in self.imported_ids:
                result.skipped += 1
            else:
                pending.append(req)
        if result.skipped:
            log.info("Skipping %d job(s) already imported in this session", result.skipped)

        log.info("Importing %d job(s)...", len(pending))
        workers = min(self.max_workers, len(pending)) or 1
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {pool.submit(self._create, req): pos for pos, req in enumerate(pending)}
            for future in as_completed(futures):
                pos = futures[future]
                req = pending[pos]
                try:
                    outcome = future.result()
                except Exception as exc:
                    log.error(
                        "Import create failed for %s @ %s (%s): %s",
                        req.position, req.company, req.gmail_message_id or "no message id", exc,
                    )
                    result.attempted += 1
                    result.failed += 1
                    key = req.gmail_message_id or f"{req.company}/{req.position}"
                    if key in result.failures:
                        key = f"{key}#{pos}"
                    result.failures[key] = str(exc)
                    continue
                if outcome == _CANCELLED:
                    result.cancelled += 1
                    continue
                result.attempted += 1
                result.succeeded += 1

        if result.cancelled:
            log.warning("Import cancelled — %d job(s) not attempted", result.cancelled)
        log.info(
            "Import complete — attempted=%d, succeeded=%d, failed=%d",
            result.attempted, result.succeeded, result.failed,
        )
        return result
