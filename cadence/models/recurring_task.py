"""
Recurring task models.

Defines the recurring task definitions used to generate task instances, and
the readiness/generation policy that advances a definition's schedule.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cadence.models.enums import TaskCategory, TaskPriority
from cadence.models.recurrence import RecurrenceRule
from cadence.models.task import RECURRING_TAG, TaskInstance
from cadence.utils.datetime_utils import ensure_utc

DEFAULT_LOOKAHEAD = timedelta(days=1)


class RecurringTaskBase(BaseModel):
    """Template fields copied into every generated instance, plus the rule."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field("", max_length=2000)
    category: TaskCategory = TaskCategory.PERSONAL
    priority: TaskPriority = TaskPriority.MEDIUM
    estimated_minutes: int = Field(60, ge=1)
    tags: list[str] = Field(default_factory=list)
    reminder_enabled: bool = True
    reminder_offset_minutes: int = Field(60, ge=0, description="Reminder lead time")
    recurrence_rule: RecurrenceRule
    is_active: bool = True
    end_date: Optional[datetime] = Field(
        None, description="No occurrence at or after this instant is generated"
    )

    @field_validator("end_date")
    @classmethod
    def _normalize_end_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)


class RecurringTaskCreate(RecurringTaskBase):
    """Create a new recurring task definition."""

    pass


class RecurringTaskUpdate(BaseModel):
    """Update recurring task fields."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = Field(None, max_length=2000)
    category: Optional[TaskCategory] = None
    priority: Optional[TaskPriority] = None
    estimated_minutes: Optional[int] = Field(None, ge=1)
    tags: Optional[list[str]] = None
    reminder_enabled: Optional[bool] = None
    reminder_offset_minutes: Optional[int] = Field(None, ge=0)
    recurrence_rule: Optional[RecurrenceRule] = None
    is_active: Optional[bool] = None
    end_date: Optional[datetime] = None

    @field_validator("end_date")
    @classmethod
    def _normalize_end_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generation: the new instance and the advanced definition."""

    instance: TaskInstance
    definition: RecurringTaskDefinition


class RecurringTaskDefinition(RecurringTaskBase):
    """Recurring task definition with schedule state."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    next_due_date: datetime
    last_generated_at: Optional[datetime] = None
    last_generated_due: Optional[datetime] = Field(
        None, description="Deadline of the most recently generated occurrence"
    )
    generated_instance_ids: list[UUID] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator(
        "next_due_date",
        "last_generated_at",
        "last_generated_due",
        "created_at",
        "updated_at",
    )
    @classmethod
    def _normalize_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    @property
    def has_ended(self) -> bool:
        """True once the schedule has moved to or past ``end_date``."""
        return self.end_date is not None and self.next_due_date >= self.end_date

    def should_generate(
        self, now: datetime, lookahead: timedelta = DEFAULT_LOOKAHEAD
    ) -> bool:
        """
        Decide whether the current occurrence should be materialized.

        Occurrences are generated up to ``lookahead`` before they are due so
        they show up in planning views ahead of their deadline. An occurrence
        that was already generated is never generated again.

        Args:
            now: Current instant
            lookahead: How far ahead of the due time generation may happen

        Returns:
            True if ``generate`` should be called for ``next_due_date``
        """
        if not self.is_active or self.has_ended:
            return False

        if self.last_generated_at is not None:
            # Records written before last_generated_due existed compare against
            # the generation time instead
            generated_up_to = self.last_generated_due or self.last_generated_at
            if self.next_due_date <= generated_up_to:
                return False

        return self.next_due_date <= ensure_utc(now) + lookahead

    def generate(self, now: datetime) -> GenerationResult:
        """
        Materialize the occurrence at ``next_due_date``.

        The caller checks ``should_generate`` first. This definition is left
        untouched; the returned definition has the instance recorded and the
        schedule advanced by exactly one occurrence, computed from the old
        ``next_due_date`` so the cadence does not drift when generation runs
        late.
        """
        now = ensure_utc(now)
        deadline = self.next_due_date
        tags = list(self.tags)
        if RECURRING_TAG not in tags:
            tags.append(RECURRING_TAG)

        instance = TaskInstance(
            id=uuid4(),
            title=self.title,
            description=self.description,
            category=self.category,
            priority=self.priority,
            estimated_minutes=self.estimated_minutes,
            deadline=deadline,
            tags=tags,
            reminder_enabled=self.reminder_enabled,
            reminder_time=(
                deadline - timedelta(minutes=self.reminder_offset_minutes)
                if self.reminder_enabled
                else None
            ),
            recurring_task_id=self.id,
            created_at=now,
        )
        advanced = self.model_copy(
            update={
                "generated_instance_ids": [*self.generated_instance_ids, instance.id],
                "last_generated_at": now,
                "last_generated_due": deadline,
                "next_due_date": self.recurrence_rule.next_occurrence(deadline),
                "updated_at": now,
            }
        )
        return GenerationResult(instance=instance, definition=advanced)


class OccurrencePreview(BaseModel):
    """Upcoming occurrences of a definition."""

    recurring_task_id: UUID
    description: str
    occurrences: list[datetime]
