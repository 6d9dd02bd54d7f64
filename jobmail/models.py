"""Data models for scanned job events, staging rows and store records."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

JOB_STATUSES: tuple[str, ...] = (
    "wishlist",
    "applied",
    "interviewing",
    "offer",
    "rejected",
    "withdrawn",
)
DEFAULT_STATUS = "applied"
REJECTED = "rejected"
ALL_STATUSES = "all"

UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_POSITION = "Unknown Position"
IMPORT_NOTE_PREFIX = "[Imported from Gmail]"


@dataclass
class CanonicalJobEvent:
    message_id: str = ""
    company: str = ""
    title: str = ""
    status: str = DEFAULT_STATUS
    applied_date: date | None = None
    subject: str = ""
    snippet: str = ""
    link: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Canonical wire names, as the scan endpoint emits them."""
        return {
            "messageId": self.message_id,
            "company": self.company,
            "title": self.title,
            "status": self.status,
            "appliedDate": self.applied_date.isoformat() if self.applied_date else "",
            "subject": self.subject,
            "snippet": self.snippet,
            "link": self.link,
        }


@dataclass
class StagingRow(CanonicalJobEvent):
    """A scanned event under review. ``expanded`` is presentation-only."""

    selected: bool = True
    expanded: bool = False

    @classmethod
    def from_event(cls, event: CanonicalJobEvent) -> StagingRow:
        return cls(
            message_id=event.message_id,
            company=event.company,
            title=event.title,
            status=event.status,
            applied_date=event.applied_date,
            subject=event.subject,
            snippet=event.snippet,
            link=event.link,
        )

    @property
    def eligible(self) -> bool:
        return self.selected and bool(self.company.strip() or self.title.strip())


@dataclass
class StoredApplication:
    id: str
    gmail_message_id: str | None = None
    company: str = ""
    position: str = ""
    status: str = ""
    applied_date: str | None = None
    url: str | None = None
    notes: str = ""
    location: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StoredApplication:
        return cls(
            id=str(data.get("id", "")),
            gmail_message_id=data.get("gmail_message_id") or None,
            company=data.get("company") or "",
            position=data.get("position") or "",
            status=data.get("status") or "",
            applied_date=data.get("applied_date") or None,
            url=data.get("url") or None,
            notes=data.get("notes") or "",
            location=data.get("location") or "",
        )


@dataclass
class ApplicationList:
    items: list[StoredApplication] = field(default_factory=list)
    aggregate_counts: dict[str, int] = field(default_factory=dict)


@dataclass
class ImportRequest:
    company: str
    position: str
    status: str
    notes: str
    gmail_message_id: str
    applied_date: str | None = None
    url: str | None = None
    location: str = ""

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the store's create call; unset optionals are omitted."""
        payload: dict[str, Any] = {
            "company": self.company,
            "position": self.position,
            "status": self.status,
            "notes": self.notes,
            "location": self.location,
            "gmail_message_id": self.gmail_message_id,
        }
        if self.applied_date:
            payload["applied_date"] = self.applied_date
        if self.url:
            payload["url"] = self.url
        return payload


@dataclass
class CommitResult:
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    cancelled: int = 0
    failures: dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> dict[str, int]:
        return {
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed": self.failed,
        }


@dataclass
class ScanOutcome:
    total: int
    new: int
    duplicates: int
    rejected: int
    message: str


@dataclass
class MailboxStatus:
    connected: bool
    account_label: str | None = None
