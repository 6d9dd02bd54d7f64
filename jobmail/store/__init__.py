from .base import ApplicationStore
from .csv_store import CsvApplicationStore
from .http import HttpApplicationStore

from jobmail.log import get_logger

log = get_logger(__name__)

__all__ = [
    "ApplicationStore", "CsvApplicationStore", "HttpApplicationStore",
    "get_store",
]


def get_store(settings: dict) -> ApplicationStore:
    backend = str(settings.get("store", "csv")).lower()
    api_url = settings.get("api_url", "")

    if backend == "http":
        if api_url:
            log.info("Application store: %s/jobs", api_url)
            return HttpApplicationStore(
                api_url,
                token=settings.get("api_token", ""),
                timeout=settings.get("request_timeout", 15.0),
            )
        log.warning("store=http but no api_url configured — falling back to CSV store")

    log.info("Application store: %s", settings["store_path"])
    return CsvApplicationStore(settings["store_path"])
