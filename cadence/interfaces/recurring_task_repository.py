"""
Recurring task repository interface.

Defines contract for recurring task persistence operations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from cadence.models.enums import TaskCategory
from cadence.models.recurring_task import RecurringTaskDefinition


class IRecurringTaskRepository(ABC):
    """Abstract interface for recurring task persistence."""

    @abstractmethod
    async def create(self, definition: RecurringTaskDefinition) -> RecurringTaskDefinition:
        """Store a new recurring task definition."""
        pass

    @abstractmethod
    async def get(self, recurring_task_id: UUID) -> Optional[RecurringTaskDefinition]:
        """Get a recurring task by ID."""
        pass

    @abstractmethod
    async def list(
        self,
        include_inactive: bool = False,
        category: Optional[TaskCategory] = None,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[RecurringTaskDefinition]:
        """List recurring task definitions ordered by next due date."""
        pass

    @abstractmethod
    async def replace(self, definition: RecurringTaskDefinition) -> RecurringTaskDefinition:
        """Replace a stored definition with the given value.

        Raises:
            NotFoundError: If no definition has this ID
        """
        pass

    @abstractmethod
    async def delete(self, recurring_task_id: UUID) -> bool:
        """Delete a recurring task definition."""
        pass
