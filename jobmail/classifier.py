"""Flag obvious rejection emails by phrase matching.

Cheap stand-in for NLP: recall over precision. False positives are fixed by
the user in the staging set before commit.
"""
from __future__ import annotations

from collections.abc import Iterable

from jobmail.log import get_logger
from jobmail.models import REJECTED, CanonicalJobEvent

log = get_logger(__name__)

REJECTION_PHRASES: tuple[str, ...] = (
    "not moving forward",
    "unfortunately",
    "decided to move forward with other",
    "no longer being considered",
    "not selected",
    "pursue other candidates",
    "we regret",
)


def is_rejection(subject: str, snippet: str) -> bool:
    subj = (subject or "").lower()
    snip = (snippet or "").lower()
    return any(p in subj or p in snip for p in REJECTION_PHRASES)


def classify(event: CanonicalJobEvent) -> bool:
    """Set ``status = rejected`` on a match. Returns True if the event matched."""
    if is_rejection(event.subject, event.snippet):
        event.status = REJECTED
        return True
    return False


def classify_all(events: Iterable[CanonicalJobEvent]) -> int:
    matched = sum(1 for e in events if classify(e))
    if matched:
        log.info("Auto-detected %d rejection email(s)", matched)
    return matched
