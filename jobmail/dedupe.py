"""Drop scanned events that were already imported into the store."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from jobmail.log import get_logger
from jobmail.models import CanonicalJobEvent, StoredApplication

log = get_logger(__name__)


@dataclass
class DedupeResult:
    events: list[CanonicalJobEvent]
    duplicate_count: int


def existing_message_ids(applications: Iterable[StoredApplication]) -> set[str]:
    """Dedup keys; applications without a mailbox message id never match."""
    return {a.gmail_message_id for a in applications if a.gmail_message_id}


def filter_duplicates(
    candidates: Iterable[CanonicalJobEvent],
    applications: Iterable[StoredApplication],
) -> DedupeResult:
    candidates = list(candidates)
    known = existing_message_ids(applications)
    fresh = [c for c in candidates if c.message_id not in known]
    duplicates = len(candidates) - len(fresh)
    log.info(
        "Found %d total, %d new, %d already imported",
        len(candidates), len(fresh), duplicates,
    )
    return DedupeResult(events=fresh, duplicate_count=duplicates)
