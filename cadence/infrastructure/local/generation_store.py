"""
SQLite implementation of the generation store.

Definitions and generated tasks share one database, so a generation batch is
committed in a single transaction.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cadence.core.exceptions import PersistenceError
from cadence.infrastructure.local.database import RecurringTaskORM, TaskORM, get_session_factory
from cadence.infrastructure.local.recurring_task_repository import (
    definition_to_row,
    orm_to_definition,
)
from cadence.infrastructure.local.task_repository import task_to_row
from cadence.interfaces.generation_store import IGenerationStore
from cadence.models.recurring_task import RecurringTaskDefinition
from cadence.models.task import TaskInstance


class SqliteGenerationStore(IGenerationStore):
    """SQLite implementation of the generation store."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    async def load_recurring_definitions(self) -> list[RecurringTaskDefinition]:
        """Load every recurring task definition, active or not."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(RecurringTaskORM).order_by(RecurringTaskORM.next_due_date.asc())
                )
                return [orm_to_definition(orm) for orm in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise PersistenceError(
                "Failed to load recurring task definitions", details=str(exc)
            ) from exc

    async def save_recurring_definitions(
        self, definitions: list[RecurringTaskDefinition]
    ) -> None:
        """Replace the stored state of the given definitions."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await self._write_definitions(session, definitions)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                "Failed to save recurring task definitions", details=str(exc)
            ) from exc

    async def emit_generated_instances(self, instances: list[TaskInstance]) -> None:
        """Insert generated task instances into the task table."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    self._write_instances(session, instances)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                "Failed to store generated tasks", details=str(exc)
            ) from exc

    async def commit_generation(
        self,
        definitions: list[RecurringTaskDefinition],
        instances: list[TaskInstance],
    ) -> None:
        """Persist advanced definitions and their new instances atomically."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await self._write_definitions(session, definitions)
                    self._write_instances(session, instances)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                "Failed to commit generated tasks",
                details={
                    "definitions": len(definitions),
                    "tasks": len(instances),
                    "error": str(exc),
                },
            ) from exc

    @staticmethod
    async def _write_definitions(
        session: AsyncSession, definitions: list[RecurringTaskDefinition]
    ) -> None:
        for definition in definitions:
            await session.merge(RecurringTaskORM(**definition_to_row(definition)))

    @staticmethod
    def _write_instances(session: AsyncSession, instances: list[TaskInstance]) -> None:
        session.add_all([TaskORM(**task_to_row(task)) for task in instances])
