"""Turn loosely-shaped scan records into CanonicalJobEvent.

Providers spell the same attribute several ways (``messageId``,
``MessageID``, ``message_id`` ...). Each canonical field owns an ordered list
of candidate keys; the first non-empty value wins, otherwise the field
default applies. Normalization never raises.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from jobmail.log import get_logger
from jobmail.models import DEFAULT_STATUS, JOB_STATUSES, CanonicalJobEvent

log = get_logger(__name__)

FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "message_id": ("messageId", "MessageID", "MessageId", "message_id"),
    "company": ("company", "Company"),
    "title": ("title", "Title", "position", "Position"),
    "status": ("status", "Status"),
    "applied_date": ("appliedDate", "AppliedDate", "applied_date"),
    "subject": ("subject", "Subject"),
    "snippet": ("snippet", "Snippet"),
    "link": ("link", "Link"),
}

# Epoch values above this are treated as milliseconds (Gmail internalDate)
_MILLIS_THRESHOLD = 100_000_000_000


def resolve(raw: Mapping[str, Any], keys: Iterable[str]) -> Any:
    """First non-empty value among ``keys``; ``None`` when all are missing."""
    for key in keys:
        value = raw.get(key)
        if value is None or (isinstance(value, str) and value == ""):
            continue
        return value
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def _to_day(value: datetime) -> date | None:
    if value.tzinfo is not None:
        try:
            value = value.astimezone(timezone.utc)
        except OverflowError:
            # shifting to UTC walked past year 1 or 9999
            return None
    return value.date()


def parse_date(value: Any) -> date | None:
    """Best-effort calendar day from a date-like value, or ``None``.

    Accepts ``date``/``datetime`` objects, ISO-8601 strings (``Z`` suffix
    included), RFC 2822 mail dates and epoch seconds/milliseconds.
    Aware datetimes are converted to UTC before truncation.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        day = _to_day(value)
    elif isinstance(value, date):
        day = value
    elif isinstance(value, (int, float)):
        try:
            seconds = value / 1000 if abs(value) >= _MILLIS_THRESHOLD else value
            day = datetime.fromtimestamp(seconds, tz=timezone.utc).date()
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        day = _parse_date_string(value.strip())
    else:
        return None
    # Go's zero time.Time serializes as 0001-01-01; it means "no date"
    if day is None or day.year <= 1:
        return None
    return day


def _parse_date_string(text: str) -> date | None:
    if not text:
        return None
    iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return _to_day(datetime.fromisoformat(iso))
    except (OverflowError, ValueError):
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        parsed = parsedate_to_datetime(text)
    except (OverflowError, TypeError, ValueError, IndexError):
        return None
    return _to_day(parsed) if parsed else None


def normalize_status(value: Any) -> str:
    status = _text(value).strip().lower()
    return status if status in JOB_STATUSES else DEFAULT_STATUS


def normalize_event(raw: Any, today: date | None = None) -> CanonicalJobEvent:
    if isinstance(raw, CanonicalJobEvent):
        raw = raw.to_dict()
    if not isinstance(raw, Mapping):
        log.debug("Skipping malformed scan record of type %s", type(raw).__name__)
        raw = {}

    applied = parse_date(resolve(raw, FIELD_KEYS["applied_date"]))
    if applied is None:
        applied = today or today_utc()

    return CanonicalJobEvent(
        message_id=_text(resolve(raw, FIELD_KEYS["message_id"])),
        company=_text(resolve(raw, FIELD_KEYS["company"])),
        title=_text(resolve(raw, FIELD_KEYS["title"])),
        status=normalize_status(resolve(raw, FIELD_KEYS["status"])),
        applied_date=applied,
        subject=_text(resolve(raw, FIELD_KEYS["subject"])),
        snippet=_text(resolve(raw, FIELD_KEYS["snippet"])),
        link=_text(resolve(raw, FIELD_KEYS["link"])),
    )


def normalize_events(raws: Iterable[Any], today: date | None = None) -> list[CanonicalJobEvent]:
    """Order-preserving; output length always equals input length."""
    day = today or today_utc()
    events = [normalize_event(r, today=day) for r in raws]
    missing = sum(1 for e in events if not e.message_id)
    if missing:
        log.warning("%d scanned event(s) arrived without a message id", missing)
    return events
