"""
Fan-out of generation events to connected listeners.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Optional
from uuid import UUID

from cadence.models.task import TaskInstance

GENERATED_EVENT = "recurring_tasks_generated"
CONNECTED_EVENT = "connected"


@dataclass(frozen=True)
class GenerationEvent:
    """A named event with a JSON payload, framed for server-sent events."""

    type: str
    payload: dict[str, Any]

    @classmethod
    def generated(cls, tasks: list[TaskInstance]) -> GenerationEvent:
        return cls(
            GENERATED_EVENT,
            {
                "count": len(tasks),
                "tasks": [task.model_dump(mode="json") for task in tasks],
            },
        )

    def for_definition(self, recurring_task_id: UUID) -> Optional[GenerationEvent]:
        """Narrow a generated batch to one definition; None when nothing is left."""
        if self.type != GENERATED_EVENT:
            return self
        tasks = [
            task
            for task in self.payload["tasks"]
            if task.get("recurring_task_id") == str(recurring_task_id)
        ]
        if not tasks:
            return None
        return GenerationEvent(self.type, {"count": len(tasks), "tasks": tasks})

    def to_sse(self) -> str:
        data = json.dumps(self.payload, separators=(",", ":"))
        return f"event: {self.type}\ndata: {data}\n\n"


class GenerationNotifier:
    def __init__(self) -> None:
        self._connections: set[asyncio.Queue[GenerationEvent]] = set()
        self._lock = asyncio.Lock()

    async def connect(self) -> asyncio.Queue[GenerationEvent]:
        queue: asyncio.Queue[GenerationEvent] = asyncio.Queue()
        async with self._lock:
            self._connections.add(queue)
        return queue

    async def disconnect(self, queue: asyncio.Queue[GenerationEvent]) -> None:
        async with self._lock:
            self._connections.discard(queue)

    async def publish(self, event: GenerationEvent) -> None:
        async with self._lock:
            queues = list(self._connections)
        for queue in queues:
            queue.put_nowait(event)

    async def publish_generated(self, tasks: list[TaskInstance]) -> None:
        if not tasks:
            return
        await self.publish(GenerationEvent.generated(tasks))


generation_notifier = GenerationNotifier()
