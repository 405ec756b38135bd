"""
Clock interface.

Services read the current time through this port so tests can pin it.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class IClock(ABC):
    """Abstract source of the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        pass
