"""
Wall-clock implementation of the clock interface.
"""

from datetime import datetime

from cadence.interfaces.clock import IClock
from cadence.utils.datetime_utils import now_utc


class SystemClock(IClock):
    """Reads the host clock."""

    def now(self) -> datetime:
        return now_utc()
