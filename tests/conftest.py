"""Pytest configuration and shared fakes for the import pipeline tests."""
import os
import sys
import threading
from datetime import date

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Keep test runs from writing logs/ files
os.environ.setdefault("JOBMAIL_LOG_FILE", "0")

import pytest

from jobmail.errors import StoreError
from jobmail.mailbox.base import MailboxScanner
from jobmail.models import ApplicationList, MailboxStatus, StoredApplication
from jobmail.store.base import ApplicationStore

TODAY = date(2025, 3, 10)


class FakeMailbox(MailboxScanner):
    def __init__(self, events=None, connected=True):
        self.events = list(events or [])
        self.connected = connected
        self.scan_calls = []

    def scan(self, since, until, max_results):
        self.scan_calls.append((since, until, max_results))
        return list(self.events)

    def connection_status(self):
        return MailboxStatus(connected=self.connected, account_label="me@example.com" if self.connected else None)

    def disconnect(self):
        self.connected = False
        return True


class FakeStore(ApplicationStore):
    """In-memory store; creates for ids in ``fail_ids`` raise StoreError."""

    def __init__(self, existing=None, fail_ids=()):
        self.items = list(existing or [])
        self.fail_ids = set(fail_ids)
        self.created = []
        self.list_calls = 0
        self._lock = threading.Lock()

    def list(self, filters=None):
        self.list_calls += 1
        counts = {}
        for a in self.items:
            counts[a.status] = counts.get(a.status, 0) + 1
        return ApplicationList(items=list(self.items), aggregate_counts=counts)

    def create(self, request):
        with self._lock:
            self.created.append(request)
        if request.gmail_message_id in self.fail_ids:
            raise StoreError(f"create failed for {request.gmail_message_id}")
        app = StoredApplication(
            id=str(len(self.items) + 1),
            gmail_message_id=request.gmail_message_id or None,
            company=request.company,
            position=request.position,
            status=request.status,
        )
        with self._lock:
            self.items.append(app)
        return app


def raw_event(message_id, **overrides):
    event = {
        "messageId": message_id,
        "company": "Acme",
        "title": "Engineer",
        "status": "applied",
        "appliedDate": "2025-03-01T09:30:00Z",
        "subject": f"Thanks for applying ({message_id})",
        "snippet": "We received your application.",
        "link": f"https://mail.google.com/mail/u/0/#all/{message_id}",
    }
    event.update(overrides)
    return event


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def fake_mailbox():
    return FakeMailbox()
