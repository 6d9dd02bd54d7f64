from .base import MailboxScanner
from .http import HttpMailbox
from .mock import MockMailbox

from jobmail.log import get_logger

log = get_logger(__name__)

__all__ = ["MailboxScanner", "HttpMailbox", "MockMailbox", "get_mailbox"]


def get_mailbox(settings: dict) -> MailboxScanner:
    api_url = settings.get("api_url", "")
    if api_url:
        log.info("Mailbox: %s/google", api_url)
        return HttpMailbox(
            api_url,
            token=settings.get("api_token", ""),
            timeout=settings.get("request_timeout", 15.0),
        )
    log.info("No API URL configured — using MockMailbox")
    return MockMailbox()
