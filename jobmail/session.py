"""
Staging session: scan → normalize → dedupe → classify → review → commit.

One session per user; a new scan replaces whatever is currently staged.
"""
from __future__ import annotations

import threading
from datetime import date, timedelta
from typing import Any

from jobmail.committer import ImportCommitter
from jobmail.config import clamp_max_results
from jobmail.dedupe import filter_duplicates
from jobmail.errors import MailboxConnectionError, StoreError
from jobmail.log import get_logger
from jobmail.mailbox.base import MailboxScanner
from jobmail.models import REJECTED, CommitResult, MailboxStatus, ScanOutcome, StoredApplication
from jobmail.normalizer import normalize_events, today_utc
from jobmail.report import commit_message, scan_message
from jobmail.staging import StagingSet
from jobmail.store.base import ApplicationStore

log = get_logger(__name__)


class ImportSession:
    def __init__(
        self,
        mailbox: MailboxScanner,
        store: ApplicationStore,
        settings: dict[str, Any] | None = None,
    ) -> None:
        settings = settings or {}
        self.mailbox = mailbox
        self.store = store
        self.lookback_days: int = settings.get("scan", {}).get("lookback_days", 30)
        self.max_results: int = clamp_max_results(settings.get("scan", {}).get("max_results"))
        self.staging = StagingSet()
        self.applications: list[StoredApplication] = []
        self.aggregate_counts: dict[str, int] = {}
        self._cancel = threading.Event()
        self.committer = ImportCommitter(
            store,
            max_workers=settings.get("commit", {}).get("max_workers", 4),
            cancel_event=self._cancel,
        )

    def connection_status(self) -> MailboxStatus:
        return self.mailbox.connection_status()

    def disconnect(self) -> bool:
        return self.mailbox.disconnect()

    def scan(
        self,
        since: date | None = None,
        until: date | None = None,
        max_results: int | None = None,
    ) -> ScanOutcome:
        status = self.mailbox.connection_status()
        if not status.connected:
            raise MailboxConnectionError()

        today = today_utc()
        until = until or today
        since = since or (until - timedelta(days=self.lookback_days))
        limit = clamp_max_results(max_results) if max_results is not None else self.max_results

        raw = self.mailbox.scan(since, until, limit)
        events = normalize_events(raw, today=today)

        # Fresh snapshot right before dedupe; other clients may have imported since
        self.refresh_applications()
        deduped = filter_duplicates(events, self.applications)

        staged = StagingSet.from_events(deduped.events)
        self.staging.replace(staged.rows)
        self._cancel.clear()

        rejected = sum(1 for r in staged.rows if r.status == REJECTED)
        message = scan_message(len(events), len(deduped.events), deduped.duplicate_count)
        log.info(message)
        return ScanOutcome(
            total=len(events),
            new=len(deduped.events),
            duplicates=deduped.duplicate_count,
            rejected=rejected,
            message=message,
        )

    def refresh_applications(self) -> None:
        listing = self.store.list()
        self.applications = listing.items
        self.aggregate_counts = listing.aggregate_counts

    def commit(self) -> tuple[CommitResult, str]:
        """Import selected rows; ValidationError leaves the staging set intact."""
        result = self.committer.commit(self.staging)
        message = commit_message(result)
        log.info(message)
        try:
            self.refresh_applications()
        except StoreError as exc:
            log.warning("Could not refresh applications after import: %s", exc)
        self.staging.clear()
        return result, message

    def close(self) -> None:
        """Tear down: stop pending creations and discard staged rows."""
        self._cancel.set()
        self.staging.clear()
        log.debug("Staging session closed")
