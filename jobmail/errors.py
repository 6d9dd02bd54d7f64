"""Error taxonomy for the scan → stage → commit pipeline."""
from __future__ import annotations


class JobMailError(Exception):
    """Base class for all pipeline errors surfaced to the caller."""


class MailboxConnectionError(JobMailError):
    """Mailbox not connected or authorization expired; user must reconnect."""

    reconnect = True

    def __init__(self, message: str = "Gmail not connected. Please reconnect.") -> None:
        super().__init__(message)


class ScanError(JobMailError):
    """The mailbox provider call failed."""


class StoreError(JobMailError):
    """The application store could not be read or written."""


class ValidationError(JobMailError):
    """Rejected input: nothing eligible to import, or an invalid create payload."""
