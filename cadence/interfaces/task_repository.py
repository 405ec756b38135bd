"""
Task repository interface.

Covers the task store operations the recurring task features need.
Implementations: SQLite
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from cadence.models.task import TaskInstance


class ITaskRepository(ABC):
    """Abstract interface for task persistence."""

    @abstractmethod
    async def get(self, task_id: UUID) -> Optional[TaskInstance]:
        """Get a task by ID."""
        pass

    @abstractmethod
    async def list_by_recurring_task(
        self,
        recurring_task_id: UUID,
        limit: int = 100,
        offset: int = 0,
    ) -> list[TaskInstance]:
        """
        List tasks generated from a recurring definition.

        Args:
            recurring_task_id: Definition ID
            limit: Maximum results
            offset: Pagination offset

        Returns:
            Tasks ordered by deadline
        """
        pass

    @abstractmethod
    async def delete_by_recurring_task(self, recurring_task_id: UUID) -> int:
        """Delete every task generated from a recurring definition.

        Returns:
            Number of deleted tasks
        """
        pass
