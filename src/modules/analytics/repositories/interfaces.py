"""Analytics repository interface.

Read-only queries over orders, their status history and the status
registry.  Windows are ``[start, end]`` inclusive on ``created_at``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List

from modules.analytics.engine import HistoryEntry


class IAnalyticsRepository(ABC):
    @abstractmethod
    def order_counts_by_status(self, start: datetime, end: datetime) -> Dict[str, int]:
        """Orders created in the window, grouped by current status."""

    @abstractmethod
    def order_creation_times(self, start: datetime, end: datetime) -> List[datetime]:
        """``created_at`` of every order created in the window."""

    @abstractmethod
    def history_for_window(self, start: datetime, end: datetime) -> List[HistoryEntry]:
        """Full history of every order whose history intersects the window."""

    @abstractmethod
    def status_names(self) -> Dict[str, str]:
        """Registry slug -> display name."""
