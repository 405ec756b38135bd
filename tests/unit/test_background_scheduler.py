"""
Unit tests for BackgroundScheduler.
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from cadence.core.config import Settings
from cadence.models.generation import GenerationReport
from cadence.services.background_scheduler import GENERATION_JOB_ID, BackgroundScheduler


def _service(**kwargs) -> AsyncMock:
    service = AsyncMock()
    service.run_generation.return_value = GenerationReport(
        run_at=datetime(2025, 1, 1, tzinfo=timezone.utc), **kwargs
    )
    return service


class TestBackgroundScheduler:
    @pytest.mark.asyncio
    async def test_disabled_in_test_environment(self):
        service = _service()
        scheduler = BackgroundScheduler(service, settings=Settings(ENVIRONMENT="test"))

        await scheduler.start()

        assert scheduler.running is False
        service.run_generation.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_start_registers_job_and_runs_once(self):
        service = _service(created_count=2)
        settings = Settings(ENVIRONMENT="local", GENERATION_INTERVAL_MINUTES=5)
        scheduler = BackgroundScheduler(service, settings=settings)

        await scheduler.start()
        try:
            assert scheduler.running is True
            job = scheduler._scheduler.get_job(GENERATION_JOB_ID)
            assert job is not None
            assert job.trigger.interval.total_seconds() == 300
            await asyncio.sleep(0)
            service.run_generation.assert_awaited()
        finally:
            await scheduler.stop()

        assert scheduler.running is False

    @pytest.mark.asyncio
    async def test_job_failure_is_contained(self):
        service = AsyncMock()
        service.run_generation.side_effect = RuntimeError("boom")
        scheduler = BackgroundScheduler(service, settings=Settings(ENVIRONMENT="test"))

        # Must not raise; the scheduler keeps its schedule
        await scheduler._run_generation()

        service.run_generation.assert_awaited_once()
