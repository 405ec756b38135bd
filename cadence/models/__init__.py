"""Pydantic models (schemas) for the application."""

from cadence.models.enums import RecurrenceType, TaskCategory, TaskPriority
from cadence.models.generation import GenerationReport
from cadence.models.recurrence import RecurrenceRule, TimeOfDay
from cadence.models.recurring_task import (
    GenerationResult,
    OccurrencePreview,
    RecurringTaskCreate,
    RecurringTaskDefinition,
    RecurringTaskUpdate,
)
from cadence.models.task import TaskInstance

__all__ = [
    # Enums
    "RecurrenceType",
    "TaskCategory",
    "TaskPriority",
    # Recurrence
    "RecurrenceRule",
    "TimeOfDay",
    # Recurring tasks
    "RecurringTaskCreate",
    "RecurringTaskUpdate",
    "RecurringTaskDefinition",
    "GenerationResult",
    "OccurrencePreview",
    "GenerationReport",
    # Tasks
    "TaskInstance",
]
