"""Mock mailbox for demos and fallback when no backend is configured."""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from jobmail.log import get_logger
from jobmail.mailbox.base import MailboxScanner
from jobmail.models import MailboxStatus

log = get_logger(__name__)


def _mock_id(day: date, suffix: str) -> str:
    """Date-based ID so each day's sample looks like new mail."""
    return f"mock-{day.isoformat()}-{suffix}"


class MockMailbox(MailboxScanner):
    """Sample events in the inconsistent casings real providers send."""

    def __init__(self, account_label: str = "demo@example.com") -> None:
        self.account_label = account_label
        self.connected = True

    def connection_status(self) -> MailboxStatus:
        return MailboxStatus(
            connected=self.connected,
            account_label=self.account_label if self.connected else None,
        )

    def disconnect(self) -> bool:
        self.connected = False
        return True

    def scan(self, since: date | None, until: date | None, max_results: int) -> list[dict[str, Any]]:
        day = until or datetime.now(timezone.utc).date()
        log.info("MockMailbox generating sample emails")
        noon = datetime.combine(day, time(12, 0), tzinfo=timezone.utc)
        samples: list[tuple[int, dict[str, Any]]] = [
            (0, {
                "messageId": _mock_id(day, "1"),
                "company": "TechCorp",
                "title": "Software Engineer",
                "status": "applied",
                "appliedDate": noon.isoformat().replace("+00:00", "Z"),
                "subject": "Thanks for applying to TechCorp",
                "snippet": "We received your application for Software Engineer.",
                "link": f"https://mail.google.com/mail/u/0/#all/{_mock_id(day, '1')}",
                "source": "gmail",
            }),
            (3, {
                "MessageID": _mock_id(day, "2"),
                "Company": "CloudScale",
                "Position": "Site Reliability Engineer",
                "Status": "applied",
                "AppliedDate": (noon - timedelta(days=3)).strftime("%a, %d %b %Y %H:%M:%S +0000"),
                "Subject": "Your application to CloudScale",
                "Snippet": "Unfortunately, we have decided to move forward with other candidates.",
                "Link": f"https://mail.google.com/mail/u/0/#all/{_mock_id(day, '2')}",
            }),
            (6, {
                "message_id": _mock_id(day, "3"),
                "company": "Enterprise Platform",
                "position": "Support Engineer",
                "applied_date": (day - timedelta(days=6)).isoformat(),
                "subject": "Interview availability",
                "snippet": "We'd like to schedule a call to discuss your application.",
            }),
        ]
        events = [
            e for offset, e in samples
            if since is None or day - timedelta(days=offset) >= since
        ]
        return events[:max_results]
