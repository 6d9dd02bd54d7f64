"""Helpers shared by the HTTP collaborators (mailbox + application store)."""
from __future__ import annotations

import requests

# Transport-level failures worth retrying on idempotent reads
TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    requests.ConnectionError,
    requests.Timeout,
)

# Gateway hiccups and rate limiting; safe to repeat for GETs
RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 502, 503, 504})


def is_retryable_status(response: requests.Response) -> bool:
    return response.status_code in RETRYABLE_STATUSES


def auth_headers(token: str) -> dict[str, str]:
    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def error_message(response: requests.Response, default: str) -> str:
    """Server-provided ``error``/``message`` field, else the body text, else ``default``."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("error", "message"):
            if data.get(key):
                return str(data[key])
    text = (response.text or "").strip()
    return text[:200] if text else default
