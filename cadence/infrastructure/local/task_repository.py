"""
SQLite implementation of task repository.
"""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, select

from cadence.infrastructure.local.database import TaskORM, get_session_factory
from cadence.infrastructure.local.recurring_task_repository import to_db_datetime
from cadence.interfaces.task_repository import ITaskRepository
from cadence.models.task import TaskInstance


def task_to_row(task: TaskInstance) -> dict[str, Any]:
    """Flatten a task into column values."""
    return {
        "id": str(task.id),
        "title": task.title,
        "description": task.description,
        "category": task.category.value,
        "priority": task.priority.value,
        "estimated_minutes": task.estimated_minutes,
        "deadline": to_db_datetime(task.deadline),
        "is_completed": task.is_completed,
        "tags": list(task.tags),
        "reminder_enabled": task.reminder_enabled,
        "reminder_time": to_db_datetime(task.reminder_time),
        "recurring_task_id": str(task.recurring_task_id) if task.recurring_task_id else None,
        "created_at": to_db_datetime(task.created_at),
    }


def orm_to_task(orm: TaskORM) -> TaskInstance:
    """Convert ORM object to Pydantic model."""
    return TaskInstance.model_validate(orm, from_attributes=True)


class SqliteTaskRepository(ITaskRepository):
    """SQLite implementation of task repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    async def get(self, task_id: UUID) -> Optional[TaskInstance]:
        """Get a task by ID."""
        async with self._session_factory() as session:
            result = await session.execute(select(TaskORM).where(TaskORM.id == str(task_id)))
            orm = result.scalar_one_or_none()
            return orm_to_task(orm) if orm else None

    async def list_by_recurring_task(
        self,
        recurring_task_id: UUID,
        limit: int = 100,
        offset: int = 0,
    ) -> list[TaskInstance]:
        """List tasks generated from a recurring definition."""
        async with self._session_factory() as session:
            query = (
                select(TaskORM)
                .where(TaskORM.recurring_task_id == str(recurring_task_id))
                .order_by(TaskORM.deadline.asc())
                .limit(limit)
                .offset(offset)
            )
            result = await session.execute(query)
            return [orm_to_task(orm) for orm in result.scalars().all()]

    async def delete_by_recurring_task(self, recurring_task_id: UUID) -> int:
        """Delete every task generated from a recurring definition."""
        async with self._session_factory() as session:
            result = await session.execute(
                delete(TaskORM).where(TaskORM.recurring_task_id == str(recurring_task_id))
            )
            await session.commit()
            return result.rowcount or 0
