"""Application store behind the tracker backend's REST API (/jobs)."""
from __future__ import annotations

from typing import Any

import requests

from jobmail.api import TRANSIENT_ERRORS, auth_headers, error_message, is_retryable_status
from jobmail.errors import StoreError, ValidationError
from jobmail.log import get_logger
from jobmail.models import ApplicationList, ImportRequest, StoredApplication
from jobmail.retry import retry
from jobmail.store.base import ApplicationStore

log = get_logger(__name__)


class HttpApplicationStore(ApplicationStore):
    def __init__(self, base_url: str, token: str = "", timeout: float = 15.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    @retry(max_attempts=3, base_delay=1.0, retryable=TRANSIENT_ERRORS, retry_if=is_retryable_status)
    def _get_jobs(self, params: dict[str, str]) -> requests.Response:
        return requests.get(
            f"{self.base_url}/jobs",
            params=params,
            headers=auth_headers(self.token),
            timeout=self.timeout,
        )

    def list(self, filters: dict[str, Any] | None = None) -> ApplicationList:
        params = {k: str(v) for k, v in (filters or {}).items() if v}
        try:
            r = self._get_jobs(params)
        except requests.RequestException as exc:
            raise StoreError(f"Failed to load applications: {exc}") from exc
        if not r.ok:
            raise StoreError(error_message(r, f"Failed to load applications (HTTP {r.status_code})"))
        try:
            data = r.json()
        except ValueError as exc:
            raise StoreError("Application list response was not JSON") from exc

        jobs = data.get("jobs") if isinstance(data, dict) else None
        if not isinstance(jobs, list):
            jobs = []
        stats = data.get("stats") if isinstance(data, dict) else None
        counts: dict[str, int] = {}
        if isinstance(stats, dict):
            for key, value in stats.items():
                try:
                    counts[str(key)] = int(value)
                except (TypeError, ValueError):
                    continue
        items = [StoredApplication.from_dict(j) for j in jobs if isinstance(j, dict)]
        log.debug("Loaded %d application(s) from %s", len(items), self.base_url)
        return ApplicationList(items=items, aggregate_counts=counts)

    def create(self, request: ImportRequest) -> StoredApplication:
        try:
            r = requests.post(
                f"{self.base_url}/jobs",
                json=request.to_payload(),
                headers=auth_headers(self.token),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise StoreError(f"Create failed: {exc}") from exc
        if r.status_code in (400, 422):
            raise ValidationError(error_message(r, "Invalid application"))
        if not r.ok:
            raise StoreError(error_message(r, f"Create failed (HTTP {r.status_code})"))
        try:
            data = r.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        merged = {**request.to_payload(), **data}
        return StoredApplication.from_dict(merged)
