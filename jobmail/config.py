"""Load import settings from .env, YAML and environment overrides."""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobmail.log import get_logger

log = get_logger(__name__)

load_dotenv()

PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = PROJECT_ROOT / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"
DATA_DIR: Path = PROJECT_ROOT / "data"

# Gmail list page cap on the provider side
MAX_SCAN_RESULTS = 500

DEFAULTS: dict[str, Any] = {
    "api_url": "",
    "api_token": "",
    "store": "csv",
    "store_path": str(DATA_DIR / "applications.csv"),
    "request_timeout": 15.0,
    "scan": {
        "max_results": MAX_SCAN_RESULTS,
        "lookback_days": 30,
    },
    "commit": {
        "max_workers": 4,
    },
}

_ENV_OVERRIDES: dict[str, str] = {
    "JOBMAIL_API_URL": "api_url",
    "JOBMAIL_API_TOKEN": "api_token",
    "JOBMAIL_STORE": "store",
    "JOBMAIL_STORE_PATH": "store_path",
}


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _merge(base: dict[str, Any], extra: dict[str, Any]) -> dict[str, Any]:
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_settings(path: Path | None = None) -> dict[str, Any]:
    """Defaults, then YAML file (if present), then JOBMAIL_* env vars."""
    settings = copy.deepcopy(DEFAULTS)
    path = path or SETTINGS_PATH
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            log.warning("Ignoring %s: expected a mapping, got %s", path.name, type(data).__name__)
            data = {}
        _merge(settings, data)
    else:
        log.debug("No settings file at %s — using defaults", path)

    for env_key, setting in _ENV_OVERRIDES.items():
        value = get_env(env_key)
        if value:
            settings[setting] = value

    store_path = Path(settings.get("store_path") or DEFAULTS["store_path"])
    if not store_path.is_absolute():
        store_path = PROJECT_ROOT / store_path
    settings["store_path"] = str(store_path)
    settings["api_url"] = str(settings.get("api_url") or "").rstrip("/")
    settings["request_timeout"] = float(settings.get("request_timeout") or DEFAULTS["request_timeout"])
    scan = settings["scan"]
    scan["max_results"] = clamp_max_results(scan.get("max_results"))
    scan["lookback_days"] = int(scan.get("lookback_days") or DEFAULTS["scan"]["lookback_days"])
    settings["commit"]["max_workers"] = max(1, int(settings["commit"].get("max_workers") or 1))
    return settings


def clamp_max_results(value: Any) -> int:
    """Positive ints up to MAX_SCAN_RESULTS; anything else falls back to the cap."""
    try:
        n = int(value)
    except (TypeError, ValueError):
        return MAX_SCAN_RESULTS
    if n <= 0:
        return MAX_SCAN_RESULTS
    return min(n, MAX_SCAN_RESULTS)


def ensure_dirs() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
