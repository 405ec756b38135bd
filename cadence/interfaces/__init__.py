"""Abstract interfaces for infrastructure abstraction."""

from cadence.interfaces.clock import IClock
from cadence.interfaces.generation_store import IGenerationStore
from cadence.interfaces.recurring_task_repository import IRecurringTaskRepository
from cadence.interfaces.task_repository import ITaskRepository

__all__ = [
    "IClock",
    "IGenerationStore",
    "IRecurringTaskRepository",
    "ITaskRepository",
]
