"""
Task model definitions.

Task instances are concrete to-do items. Instances generated from a recurring
definition keep a back-reference to it but are otherwise independent.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from cadence.models.enums import TaskCategory, TaskPriority
from cadence.utils.datetime_utils import ensure_utc

RECURRING_TAG = "recurring"


class TaskInstance(BaseModel):
    """A concrete task, as handed to the task store."""

    id: UUID
    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field("", max_length=2000)
    category: TaskCategory = TaskCategory.PERSONAL
    priority: TaskPriority = TaskPriority.MEDIUM
    estimated_minutes: int = Field(60, ge=1)
    deadline: datetime
    is_completed: bool = False
    tags: list[str] = Field(default_factory=list)
    reminder_enabled: bool = True
    reminder_time: Optional[datetime] = None
    recurring_task_id: Optional[UUID] = Field(
        None, description="Definition this instance was generated from"
    )
    created_at: datetime

    @field_validator("deadline", "reminder_time", "created_at")
    @classmethod
    def _normalize_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)
