"""
Recurring task service.

Creates recurring task definitions and generates task instances from them.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from cadence.core.exceptions import NotFoundError, PersistenceError
from cadence.core.logger import setup_logger
from cadence.interfaces.clock import IClock
from cadence.interfaces.generation_store import IGenerationStore
from cadence.interfaces.recurring_task_repository import IRecurringTaskRepository
from cadence.models.generation import GenerationReport
from cadence.models.recurrence import RecurrenceRule
from cadence.models.recurring_task import (
    DEFAULT_LOOKAHEAD,
    RecurringTaskCreate,
    RecurringTaskDefinition,
    RecurringTaskUpdate,
)
from cadence.models.task import TaskInstance
from cadence.services.realtime_service import GenerationNotifier

logger = setup_logger(__name__)

DEFAULT_MAX_CATCH_UP = 30


class RecurringTaskService:
    """Service for managing recurring definitions and generating task instances.

    One generation run executes at a time; definition writes made through this
    service wait for a running generation to finish.
    """

    def __init__(
        self,
        store: IGenerationStore,
        recurring_repo: IRecurringTaskRepository,
        clock: IClock,
        notifier: Optional[GenerationNotifier] = None,
        lookahead: timedelta = DEFAULT_LOOKAHEAD,
        max_catch_up: int = DEFAULT_MAX_CATCH_UP,
        default_timezone: str = "UTC",
    ):
        if max_catch_up < 1:
            raise ValueError("max_catch_up must be at least 1")
        self.store = store
        self.recurring_repo = recurring_repo
        self.clock = clock
        self.notifier = notifier
        self.lookahead = lookahead
        self.max_catch_up = max_catch_up
        self.default_timezone = default_timezone
        self._lock = asyncio.Lock()

    # ===========================================
    # Definitions
    # ===========================================

    async def create_definition(self, payload: RecurringTaskCreate) -> RecurringTaskDefinition:
        """Create a definition whose first occurrence follows the creation time."""
        now = self.clock.now()
        rule = self._with_default_timezone(payload.recurrence_rule)
        definition = RecurringTaskDefinition(
            **payload.model_dump(exclude={"recurrence_rule"}),
            recurrence_rule=rule,
            id=uuid4(),
            next_due_date=rule.next_occurrence(now),
            created_at=now,
            updated_at=now,
        )
        async with self._lock:
            created = await self.recurring_repo.create(definition)
        logger.info(
            f"Created recurring task {created.id} ({rule.describe()}), "
            f"first due {created.next_due_date.isoformat()}"
        )
        return created

    async def update_definition(
        self, recurring_task_id: UUID, update: RecurringTaskUpdate
    ) -> RecurringTaskDefinition:
        """
        Apply a partial update to a definition.

        A new recurrence rule restarts the schedule after the current time, or
        after the last generated occurrence when that lies ahead; the
        generation history is kept.

        Raises:
            NotFoundError: If the definition does not exist
        """
        async with self._lock:
            current = await self.recurring_repo.get(recurring_task_id)
            if not current:
                raise NotFoundError(f"RecurringTask {recurring_task_id} not found")

            now = self.clock.now()
            changes = update.model_dump(exclude_unset=True)
            data = current.model_dump()
            for field, value in changes.items():
                # end_date may be cleared explicitly; other fields ignore nulls
                if value is None and field != "end_date":
                    continue
                data[field] = value

            if update.recurrence_rule is not None:
                rule = self._with_default_timezone(update.recurrence_rule)
                data["recurrence_rule"] = rule
                data["next_due_date"] = rule.next_occurrence(
                    self._restart_reference(current, now)
                )
            data["updated_at"] = now

            return await self.recurring_repo.replace(
                RecurringTaskDefinition.model_validate(data)
            )

    async def delete_definition(self, recurring_task_id: UUID) -> bool:
        """Delete a definition. Generated tasks are kept."""
        async with self._lock:
            return await self.recurring_repo.delete(recurring_task_id)

    def upcoming_occurrences(
        self, definition: RecurringTaskDefinition, count: int
    ) -> list[datetime]:
        """Preview the next ``count`` occurrences, starting at ``next_due_date``."""
        if count < 1:
            return []
        occurrences = [definition.next_due_date]
        occurrences.extend(
            definition.recurrence_rule.upcoming(definition.next_due_date, count - 1)
        )
        if definition.end_date is not None:
            occurrences = [o for o in occurrences if o < definition.end_date]
        return occurrences

    @staticmethod
    def _restart_reference(
        definition: RecurringTaskDefinition, now: datetime
    ) -> datetime:
        """Instant a new rule starts after.

        Occurrences up to the last generated one were already materialized,
        possibly ahead of time, so the new schedule begins after both.
        """
        generated_up_to = definition.last_generated_due or definition.last_generated_at
        if generated_up_to is None:
            return now
        return max(now, generated_up_to)

    def _with_default_timezone(self, rule: RecurrenceRule) -> RecurrenceRule:
        if "timezone" in rule.model_fields_set:
            return rule
        return RecurrenceRule.model_validate(
            {**rule.model_dump(exclude_none=True), "timezone": self.default_timezone}
        )

    # ===========================================
    # Generation
    # ===========================================

    async def run_generation(self) -> GenerationReport:
        """
        Generate every due task instance and commit the batch.

        Generations are computed speculatively from the stored definitions.
        Advanced definitions and their instances are committed in one call;
        if that fails nothing is applied and the next run retries the same
        occurrences. Each definition yields at most ``max_catch_up`` instances
        per run.

        Returns:
            Report of the run; ``committed`` is False when persistence failed
        """
        async with self._lock:
            now = self.clock.now()
            try:
                definitions = await self.store.load_recurring_definitions()
            except PersistenceError as exc:
                logger.error(f"Recurring task generation skipped, load failed: {exc.message}")
                return GenerationReport(run_at=now, committed=False, error=exc.message)

            advanced: dict[UUID, RecurringTaskDefinition] = {}
            instances: list[TaskInstance] = []
            truncated: list[UUID] = []

            for definition in definitions:
                if not definition.is_active:
                    continue
                current, generated = self._catch_up(definition, now)
                if not generated:
                    continue
                advanced[current.id] = current
                instances.extend(generated)
                if current.should_generate(now, self.lookahead):
                    truncated.append(current.id)
                    logger.warning(
                        f"Recurring task {current.id} still has due occurrences after "
                        f"{self.max_catch_up} generations; continuing on next run"
                    )

            if not instances:
                return GenerationReport(run_at=now)

            try:
                await self.store.commit_generation(list(advanced.values()), instances)
            except PersistenceError as exc:
                logger.error(
                    f"Failed to commit {len(instances)} generated tasks, "
                    f"will retry on next run: {exc.message}"
                )
                return GenerationReport(
                    run_at=now,
                    committed=False,
                    truncated_definition_ids=truncated,
                    error=exc.message,
                )

            logger.info(
                f"Generated {len(instances)} recurring task instances "
                f"for {len(advanced)} definitions"
            )

        if self.notifier:
            await self.notifier.publish_generated(instances)

        return GenerationReport(
            run_at=now,
            created_count=len(instances),
            tasks=instances,
            updated_definition_ids=list(advanced),
            truncated_definition_ids=truncated,
        )

    def _catch_up(
        self, definition: RecurringTaskDefinition, now: datetime
    ) -> tuple[RecurringTaskDefinition, list[TaskInstance]]:
        """Generate due occurrences of one definition, up to the catch-up bound."""
        current = definition
        generated: list[TaskInstance] = []
        while len(generated) < self.max_catch_up and current.should_generate(
            now, self.lookahead
        ):
            result = current.generate(now)
            generated.append(result.instance)
            current = result.definition
        return current, generated
