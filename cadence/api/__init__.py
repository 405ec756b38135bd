"""API routers."""

from cadence.api import realtime, recurring_tasks

__all__ = [
    "realtime",
    "recurring_tasks",
]
