"""
Unit tests for recurring task API endpoint functions.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi import HTTPException

from cadence.api.recurring_tasks import (
    create_recurring_task,
    delete_generated_tasks,
    delete_recurring_task,
    generate_due_tasks,
    get_recurring_task,
    list_generated_tasks,
    list_recurring_tasks,
    preview_occurrences,
    update_recurring_task,
)
from cadence.core.exceptions import NotFoundError
from cadence.models.enums import RecurrenceType, TaskCategory
from cadence.models.generation import GenerationReport
from cadence.models.recurrence import RecurrenceRule
from cadence.models.recurring_task import (
    RecurringTaskCreate,
    RecurringTaskDefinition,
    RecurringTaskUpdate,
)
from cadence.services.recurring_task_service import RecurringTaskService

UTC = timezone.utc
NOW = datetime(2025, 1, 1, 15, 0, tzinfo=UTC)


def _make_definition(**overrides) -> RecurringTaskDefinition:
    data = {
        "id": uuid4(),
        "title": "Review budget",
        "recurrence_rule": RecurrenceRule(
            type=RecurrenceType.MONTHLY, day_of_month=31, time_of_day="10:00"
        ),
        "next_due_date": datetime(2025, 1, 31, 10, 0, tzinfo=UTC),
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    return RecurringTaskDefinition(**data)


@pytest.mark.asyncio
async def test_create_runs_generation():
    created = _make_definition()
    advanced = created.generate(NOW).definition
    service = AsyncMock()
    service.create_definition.return_value = created
    repo = AsyncMock()
    repo.get.return_value = advanced
    payload = RecurringTaskCreate(title="Review budget", recurrence_rule=created.recurrence_rule)

    result = await create_recurring_task(payload=payload, repo=repo, service=service)

    assert result == advanced
    service.create_definition.assert_awaited_once_with(payload)
    service.run_generation.assert_awaited_once()
    repo.get.assert_awaited_once_with(created.id)


@pytest.mark.asyncio
async def test_list_passes_filters():
    repo = AsyncMock()
    repo.list.return_value = []

    await list_recurring_tasks(
        repo=repo,
        include_inactive=True,
        category=TaskCategory.FINANCE,
        search="budget",
        limit=10,
        offset=5,
    )

    repo.list.assert_awaited_once_with(
        include_inactive=True,
        category=TaskCategory.FINANCE,
        search="budget",
        limit=10,
        offset=5,
    )


@pytest.mark.asyncio
async def test_generate_returns_report():
    report = GenerationReport(run_at=NOW)
    service = AsyncMock()
    service.run_generation.return_value = report

    assert await generate_due_tasks(service=service) is report


@pytest.mark.asyncio
async def test_get_missing_returns_404():
    repo = AsyncMock()
    repo.get.return_value = None

    with pytest.raises(HTTPException) as exc_info:
        await get_recurring_task(recurring_task_id=uuid4(), repo=repo)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_update_missing_returns_404():
    service = AsyncMock()
    service.update_definition.side_effect = NotFoundError("RecurringTask not found")

    with pytest.raises(HTTPException) as exc_info:
        await update_recurring_task(
            recurring_task_id=uuid4(),
            update=RecurringTaskUpdate(title="New"),
            service=service,
        )

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_delete_missing_returns_404():
    service = AsyncMock()
    service.delete_definition.return_value = False

    with pytest.raises(HTTPException) as exc_info:
        await delete_recurring_task(recurring_task_id=uuid4(), service=service)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_preview_occurrences_clamps_month_end():
    definition = _make_definition()
    repo = AsyncMock()
    repo.get.return_value = definition
    service = RecurringTaskService(
        store=AsyncMock(), recurring_repo=repo, clock=AsyncMock()
    )

    preview = await preview_occurrences(
        recurring_task_id=definition.id, repo=repo, service=service, count=3
    )

    assert preview.recurring_task_id == definition.id
    assert preview.description == "Monthly on day 31"
    assert preview.occurrences == [
        datetime(2025, 1, 31, 10, 0, tzinfo=UTC),
        datetime(2025, 2, 28, 10, 0, tzinfo=UTC),
        datetime(2025, 3, 31, 10, 0, tzinfo=UTC),
    ]


@pytest.mark.asyncio
async def test_list_generated_tasks_requires_definition():
    repo = AsyncMock()
    repo.get.return_value = None
    task_repo = AsyncMock()

    with pytest.raises(HTTPException):
        await list_generated_tasks(
            recurring_task_id=uuid4(), repo=repo, task_repo=task_repo, limit=100, offset=0
        )

    task_repo.list_by_recurring_task.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_generated_tasks_reports_count():
    task_repo = AsyncMock()
    task_repo.delete_by_recurring_task.return_value = 4

    result = await delete_generated_tasks(recurring_task_id=uuid4(), task_repo=task_repo)

    assert result == {"deleted_count": 4}
