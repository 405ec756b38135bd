"""
Integration tests for the recurring task HTTP API.

Drives the FastAPI app over ASGI with repositories backed by an in-memory
SQLite database.
"""

from datetime import timedelta

import httpx
import pytest
import pytest_asyncio

from cadence.api.deps import (
    get_recurring_task_repository,
    get_recurring_task_service,
    get_task_repository,
)
from cadence.infrastructure.local.generation_store import SqliteGenerationStore
from cadence.infrastructure.local.recurring_task_repository import (
    SqliteRecurringTaskRepository,
)
from cadence.infrastructure.local.task_repository import SqliteTaskRepository
from cadence.main import create_app
from cadence.services.recurring_task_service import RecurringTaskService


@pytest_asyncio.fixture
async def client(session_factory, clock):
    recurring_repo = SqliteRecurringTaskRepository(session_factory=session_factory)
    task_repo = SqliteTaskRepository(session_factory=session_factory)
    service = RecurringTaskService(
        store=SqliteGenerationStore(session_factory=session_factory),
        recurring_repo=recurring_repo,
        clock=clock,
    )

    app = create_app()
    app.dependency_overrides[get_recurring_task_repository] = lambda: recurring_repo
    app.dependency_overrides[get_task_repository] = lambda: task_repo
    app.dependency_overrides[get_recurring_task_service] = lambda: service

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_create_generates_first_due_task(client):
    response = await client.post(
        "/api/recurring-tasks",
        json={
            "title": "Water plants",
            "tags": ["home"],
            "recurrence_rule": {"type": "DAILY", "time_of_day": "09:00"},
        },
    )
    assert response.status_code == 201
    created = response.json()
    # The Jan 2 occurrence is inside the lookahead and generated on creation
    assert created["next_due_date"].startswith("2025-01-03T09:00:00")
    assert created["last_generated_due"].startswith("2025-01-02T09:00:00")

    tasks = (await client.get(f"/api/recurring-tasks/{created['id']}/tasks")).json()
    assert len(tasks) == 1
    assert tasks[0]["title"] == "Water plants"
    assert tasks[0]["tags"] == ["home", "recurring"]
    assert created["generated_instance_ids"] == [tasks[0]["id"]]

    fetched = (await client.get(f"/api/recurring-tasks/{created['id']}")).json()
    assert fetched == created


@pytest.mark.asyncio
async def test_generate_endpoint_is_idempotent(client, clock):
    await client.post(
        "/api/recurring-tasks",
        json={
            "title": "Weekly review",
            "recurrence_rule": {"type": "WEEKLY", "days_of_week": [6], "time_of_day": "16:00"},
        },
    )

    first = (await client.post("/api/recurring-tasks/generate")).json()
    assert first["committed"] is True
    assert first["created_count"] == 0

    clock.advance(timedelta(days=1, hours=2))
    second = (await client.post("/api/recurring-tasks/generate")).json()
    third = (await client.post("/api/recurring-tasks/generate")).json()

    assert second["created_count"] == 1
    assert second["tasks"][0]["deadline"].startswith("2025-01-03T16:00:00")
    assert third["created_count"] == 0


@pytest.mark.asyncio
async def test_invalid_rule_rejected(client):
    response = await client.post(
        "/api/recurring-tasks",
        json={"title": "Broken", "recurrence_rule": {"type": "DAILY", "interval": 0}},
    )

    assert response.status_code == 422
    assert response.json()["details"]["field"] == "interval"


@pytest.mark.asyncio
async def test_preview_and_delete(client):
    created = (
        await client.post(
            "/api/recurring-tasks",
            json={
                "title": "Rent",
                "category": "FINANCE",
                "recurrence_rule": {"type": "MONTHLY", "day_of_month": 31},
            },
        )
    ).json()

    preview = (
        await client.get(f"/api/recurring-tasks/{created['id']}/occurrences", params={"count": 2})
    ).json()
    assert preview["description"] == "Monthly on day 31"
    assert [o[:10] for o in preview["occurrences"]] == ["2025-02-28", "2025-03-31"]

    assert (await client.delete(f"/api/recurring-tasks/{created['id']}")).status_code == 204
    assert (await client.get(f"/api/recurring-tasks/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.json()["status"] == "healthy"
