"""
Generation store interface.

Defines the persistence contract the generation driver depends on.
Implementations: SQLite
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from cadence.models.recurring_task import RecurringTaskDefinition
from cadence.models.task import TaskInstance


class IGenerationStore(ABC):
    """Abstract persistence port for recurring task generation.

    Every method raises PersistenceError when the underlying store fails.
    """

    @abstractmethod
    async def load_recurring_definitions(self) -> list[RecurringTaskDefinition]:
        """Load every recurring task definition, active or not."""
        pass

    @abstractmethod
    async def save_recurring_definitions(
        self, definitions: list[RecurringTaskDefinition]
    ) -> None:
        """Replace the stored state of the given definitions."""
        pass

    @abstractmethod
    async def emit_generated_instances(self, instances: list[TaskInstance]) -> None:
        """Hand newly generated task instances to the task store."""
        pass

    @abstractmethod
    async def commit_generation(
        self,
        definitions: list[RecurringTaskDefinition],
        instances: list[TaskInstance],
    ) -> None:
        """
        Persist advanced definitions and their new instances atomically.

        Either everything is stored or nothing is.

        Args:
            definitions: Definitions whose schedule advanced
            instances: Task instances generated for them
        """
        pass
