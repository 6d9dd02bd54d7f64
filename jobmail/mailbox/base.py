from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from jobmail.models import MailboxStatus


class MailboxScanner(ABC):
    @abstractmethod
    def scan(self, since: date | None, until: date | None, max_results: int) -> list[dict[str, Any]]:
        """Raw job-event records between two inclusive calendar dates."""
        pass

    @abstractmethod
    def connection_status(self) -> MailboxStatus:
        pass

    @abstractmethod
    def disconnect(self) -> bool:
        pass
