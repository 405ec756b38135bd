"""
SQLite implementation of recurring task repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import and_, or_, select

from cadence.core.exceptions import NotFoundError
from cadence.infrastructure.local.database import RecurringTaskORM, get_session_factory
from cadence.interfaces.recurring_task_repository import IRecurringTaskRepository
from cadence.models.enums import TaskCategory
from cadence.models.recurring_task import RecurringTaskDefinition
from cadence.utils.datetime_utils import ensure_utc


def to_db_datetime(value: Optional[datetime]) -> Optional[datetime]:
    """Convert to the naive UTC form the SQLite columns hold."""
    value = ensure_utc(value)
    return value.replace(tzinfo=None) if value else None


def definition_to_row(definition: RecurringTaskDefinition) -> dict[str, Any]:
    """Flatten a definition into column values."""
    return {
        "id": str(definition.id),
        "title": definition.title,
        "description": definition.description,
        "category": definition.category.value,
        "priority": definition.priority.value,
        "estimated_minutes": definition.estimated_minutes,
        "tags": list(definition.tags),
        "reminder_enabled": definition.reminder_enabled,
        "reminder_offset_minutes": definition.reminder_offset_minutes,
        "recurrence_rule": definition.recurrence_rule.model_dump(
            mode="json", exclude_none=True
        ),
        "is_active": definition.is_active,
        "next_due_date": to_db_datetime(definition.next_due_date),
        "last_generated_at": to_db_datetime(definition.last_generated_at),
        "last_generated_due": to_db_datetime(definition.last_generated_due),
        "generated_instance_ids": [str(i) for i in definition.generated_instance_ids],
        "end_date": to_db_datetime(definition.end_date),
        "created_at": to_db_datetime(definition.created_at),
        "updated_at": to_db_datetime(definition.updated_at),
    }


def orm_to_definition(orm: RecurringTaskORM) -> RecurringTaskDefinition:
    """Convert ORM object to Pydantic model."""
    return RecurringTaskDefinition.model_validate(orm, from_attributes=True)


class SqliteRecurringTaskRepository(IRecurringTaskRepository):
    """SQLite implementation of recurring task repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    async def create(self, definition: RecurringTaskDefinition) -> RecurringTaskDefinition:
        """Store a new recurring task definition."""
        async with self._session_factory() as session:
            orm = RecurringTaskORM(**definition_to_row(definition))
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return orm_to_definition(orm)

    async def get(self, recurring_task_id: UUID) -> Optional[RecurringTaskDefinition]:
        """Get a recurring task by ID."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(RecurringTaskORM).where(RecurringTaskORM.id == str(recurring_task_id))
            )
            orm = result.scalar_one_or_none()
            return orm_to_definition(orm) if orm else None

    async def list(
        self,
        include_inactive: bool = False,
        category: Optional[TaskCategory] = None,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[RecurringTaskDefinition]:
        """List recurring task definitions ordered by next due date."""
        async with self._session_factory() as session:
            conditions = []
            if not include_inactive:
                conditions.append(RecurringTaskORM.is_active.is_(True))
            if category is not None:
                conditions.append(RecurringTaskORM.category == category.value)
            if search:
                pattern = f"%{search}%"
                conditions.append(
                    or_(
                        RecurringTaskORM.title.ilike(pattern),
                        RecurringTaskORM.description.ilike(pattern),
                    )
                )

            query = select(RecurringTaskORM)
            if conditions:
                query = query.where(and_(*conditions))
            query = query.order_by(RecurringTaskORM.next_due_date.asc()).limit(limit).offset(offset)
            result = await session.execute(query)
            return [orm_to_definition(orm) for orm in result.scalars().all()]

    async def replace(self, definition: RecurringTaskDefinition) -> RecurringTaskDefinition:
        """Replace a stored definition with the given value."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(RecurringTaskORM).where(RecurringTaskORM.id == str(definition.id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                raise NotFoundError(f"RecurringTask {definition.id} not found")

            for field, value in definition_to_row(definition).items():
                setattr(orm, field, value)

            await session.commit()
            await session.refresh(orm)
            return orm_to_definition(orm)

    async def delete(self, recurring_task_id: UUID) -> bool:
        """Delete a recurring task definition."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(RecurringTaskORM).where(RecurringTaskORM.id == str(recurring_task_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                return False

            await session.delete(orm)
            await session.commit()
            return True
