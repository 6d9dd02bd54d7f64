from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from jobmail.models import ApplicationList, ImportRequest, StoredApplication


class ApplicationStore(ABC):
    @abstractmethod
    def list(self, filters: dict[str, Any] | None = None) -> ApplicationList:
        pass

    @abstractmethod
    def create(self, request: ImportRequest) -> StoredApplication:
        """Create an application; raises ValidationError for a bad payload."""
        pass
