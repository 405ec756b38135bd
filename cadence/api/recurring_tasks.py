"""
Recurring task API endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from cadence.api.deps import RecurringTaskRepo, RecurringTaskSvc, TaskRepo
from cadence.core.exceptions import NotFoundError
from cadence.models.enums import TaskCategory
from cadence.models.generation import GenerationReport
from cadence.models.recurring_task import (
    OccurrencePreview,
    RecurringTaskCreate,
    RecurringTaskDefinition,
    RecurringTaskUpdate,
)
from cadence.models.task import TaskInstance

router = APIRouter()


async def _get_or_404(repo, recurring_task_id: UUID) -> RecurringTaskDefinition:
    definition = await repo.get(recurring_task_id)
    if not definition:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"RecurringTask {recurring_task_id} not found",
        )
    return definition


@router.post("", response_model=RecurringTaskDefinition, status_code=status.HTTP_201_CREATED)
async def create_recurring_task(
    payload: RecurringTaskCreate,
    repo: RecurringTaskRepo,
    service: RecurringTaskSvc,
):
    """Create a new recurring task definition and generate anything already due."""
    created = await service.create_definition(payload)
    await service.run_generation()
    # Generation may already have advanced the schedule
    return await _get_or_404(repo, created.id)


@router.get("", response_model=list[RecurringTaskDefinition])
async def list_recurring_tasks(
    repo: RecurringTaskRepo,
    include_inactive: bool = Query(False, description="Include inactive definitions"),
    category: Optional[TaskCategory] = Query(None, description="Filter by category"),
    search: Optional[str] = Query(None, description="Match title or description"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
) -> list[RecurringTaskDefinition]:
    """List recurring task definitions, soonest due first."""
    return await repo.list(
        include_inactive=include_inactive,
        category=category,
        search=search,
        limit=limit,
        offset=offset,
    )


@router.post("/generate", response_model=GenerationReport)
async def generate_due_tasks(service: RecurringTaskSvc) -> GenerationReport:
    """Run task generation now (e.g. when the app comes to the foreground)."""
    return await service.run_generation()


@router.get("/{recurring_task_id}", response_model=RecurringTaskDefinition)
async def get_recurring_task(
    recurring_task_id: UUID,
    repo: RecurringTaskRepo,
) -> RecurringTaskDefinition:
    """Get a recurring task definition by ID."""
    return await _get_or_404(repo, recurring_task_id)


@router.patch("/{recurring_task_id}", response_model=RecurringTaskDefinition)
async def update_recurring_task(
    recurring_task_id: UUID,
    update: RecurringTaskUpdate,
    service: RecurringTaskSvc,
) -> RecurringTaskDefinition:
    """Update a recurring task definition."""
    try:
        return await service.update_definition(recurring_task_id, update)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc


@router.delete("/{recurring_task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recurring_task(
    recurring_task_id: UUID,
    service: RecurringTaskSvc,
):
    """Delete a recurring task definition."""
    deleted = await service.delete_definition(recurring_task_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"RecurringTask {recurring_task_id} not found",
        )


@router.get("/{recurring_task_id}/occurrences", response_model=OccurrencePreview)
async def preview_occurrences(
    recurring_task_id: UUID,
    repo: RecurringTaskRepo,
    service: RecurringTaskSvc,
    count: int = Query(5, ge=1, le=100, description="Number of occurrences"),
) -> OccurrencePreview:
    """Preview the next occurrences of a recurring task definition."""
    definition = await _get_or_404(repo, recurring_task_id)
    return OccurrencePreview(
        recurring_task_id=definition.id,
        description=definition.recurrence_rule.describe(),
        occurrences=service.upcoming_occurrences(definition, count),
    )


@router.get("/{recurring_task_id}/tasks", response_model=list[TaskInstance])
async def list_generated_tasks(
    recurring_task_id: UUID,
    repo: RecurringTaskRepo,
    task_repo: TaskRepo,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
) -> list[TaskInstance]:
    """List task instances generated from a recurring task definition."""
    await _get_or_404(repo, recurring_task_id)
    return await task_repo.list_by_recurring_task(
        recurring_task_id, limit=limit, offset=offset
    )


@router.delete("/{recurring_task_id}/generated-tasks")
async def delete_generated_tasks(
    recurring_task_id: UUID,
    task_repo: TaskRepo,
):
    """Delete all task instances generated from a recurring task definition."""
    deleted_count = await task_repo.delete_by_recurring_task(recurring_task_id)
    return {"deleted_count": deleted_count}
