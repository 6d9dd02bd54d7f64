"""Connected Gmail mailbox, reached through the tracker backend's /google API."""
from __future__ import annotations

from datetime import date
from typing import Any

import requests

from jobmail.api import TRANSIENT_ERRORS, auth_headers, error_message, is_retryable_status
from jobmail.errors import MailboxConnectionError, ScanError
from jobmail.log import get_logger
from jobmail.mailbox.base import MailboxScanner
from jobmail.models import MailboxStatus
from jobmail.retry import retry

log = get_logger(__name__)

AUTH_EXPIRED = "Gmail authorization expired. Please reconnect."


class HttpMailbox(MailboxScanner):
    def __init__(self, base_url: str, token: str = "", timeout: float = 15.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    @retry(max_attempts=3, base_delay=1.0, retryable=TRANSIENT_ERRORS, retry_if=is_retryable_status)
    def _get(self, path: str, params: dict[str, str] | None = None) -> requests.Response:
        return requests.get(
            f"{self.base_url}{path}",
            params=params,
            headers=auth_headers(self.token),
            timeout=self.timeout,
        )

    def connection_status(self) -> MailboxStatus:
        try:
            r = self._get("/google/status")
        except requests.RequestException as exc:
            log.warning("Gmail status check failed: %s", exc)
            return MailboxStatus(connected=False)
        if not r.ok:
            log.warning("Gmail status HTTP %d", r.status_code)
            return MailboxStatus(connected=False)
        try:
            data = r.json()
        except ValueError:
            return MailboxStatus(connected=False)
        if not isinstance(data, dict):
            return MailboxStatus(connected=False)
        return MailboxStatus(
            connected=bool(data.get("connected")),
            account_label=data.get("email") or data.get("accountLabel") or None,
        )

    def scan(self, since: date | None, until: date | None, max_results: int) -> list[dict[str, Any]]:
        params: dict[str, str] = {"limit": str(max_results)}
        if since:
            params["since"] = since.isoformat()
        if until:
            params["until"] = until.isoformat()
        log.info("Scanning emails from %s to %s (max %d)", since or "-", until or "-", max_results)

        try:
            r = self._get("/google/scan", params)
        except requests.RequestException as exc:
            raise ScanError(f"Failed to scan emails: {exc}") from exc
        if r.status_code in (401, 403):
            raise MailboxConnectionError(AUTH_EXPIRED)
        if not r.ok:
            raise ScanError(error_message(r, "Failed to scan emails"))

        try:
            data = r.json()
        except ValueError:
            log.warning("Scan response was not JSON — treating as empty")
            return []
        events = data.get("events") if isinstance(data, dict) else None
        if not isinstance(events, list):
            log.warning("Unexpected scan response format: %r", type(events).__name__)
            return []
        return events

    def disconnect(self) -> bool:
        try:
            r = requests.post(
                f"{self.base_url}/google/disconnect",
                headers=auth_headers(self.token),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log.warning("Gmail disconnect failed: %s", exc)
            return False
        if not r.ok:
            log.warning("Gmail disconnect HTTP %d: %s", r.status_code, error_message(r, ""))
            return False
        log.info("Gmail disconnected")
        return True
