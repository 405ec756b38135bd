"""
FastAPI dependency injection.

Provides dependency functions for repositories, the clock and services.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from cadence.core.config import get_settings
from cadence.interfaces.clock import IClock
from cadence.interfaces.generation_store import IGenerationStore
from cadence.interfaces.recurring_task_repository import IRecurringTaskRepository
from cadence.interfaces.task_repository import ITaskRepository
from cadence.services.realtime_service import GenerationNotifier, generation_notifier
from cadence.services.recurring_task_service import RecurringTaskService

# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_recurring_task_repository() -> IRecurringTaskRepository:
    """Get recurring task repository instance."""
    from cadence.infrastructure.local.recurring_task_repository import (
        SqliteRecurringTaskRepository,
    )

    return SqliteRecurringTaskRepository()


@lru_cache()
def get_task_repository() -> ITaskRepository:
    """Get task repository instance."""
    from cadence.infrastructure.local.task_repository import SqliteTaskRepository

    return SqliteTaskRepository()


@lru_cache()
def get_generation_store() -> IGenerationStore:
    """Get generation store instance."""
    from cadence.infrastructure.local.generation_store import SqliteGenerationStore

    return SqliteGenerationStore()


@lru_cache()
def get_clock() -> IClock:
    """Get clock instance."""
    from cadence.infrastructure.local.system_clock import SystemClock

    return SystemClock()


def get_generation_notifier() -> GenerationNotifier:
    """Get the process-wide notifier for generated task batches."""
    return generation_notifier


# ===========================================
# Service Dependencies
# ===========================================


@lru_cache()
def get_recurring_task_service() -> RecurringTaskService:
    """Get the process-wide recurring task service.

    A single instance makes every generation trigger share one lock.
    """
    settings = get_settings()
    return RecurringTaskService(
        store=get_generation_store(),
        recurring_repo=get_recurring_task_repository(),
        clock=get_clock(),
        notifier=get_generation_notifier(),
        lookahead=timedelta(hours=settings.GENERATION_LOOKAHEAD_HOURS),
        max_catch_up=settings.MAX_CATCH_UP_OCCURRENCES,
        default_timezone=settings.TIMEZONE,
    )


# ===========================================
# Type Aliases for Dependency Injection
# ===========================================

RecurringTaskRepo = Annotated[IRecurringTaskRepository, Depends(get_recurring_task_repository)]
TaskRepo = Annotated[ITaskRepository, Depends(get_task_repository)]
RecurringTaskSvc = Annotated[RecurringTaskService, Depends(get_recurring_task_service)]
Notifier = Annotated[GenerationNotifier, Depends(get_generation_notifier)]
