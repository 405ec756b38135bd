"""
Server-sent event stream of generated recurring tasks.
"""

import asyncio
from typing import AsyncGenerator, Optional
from uuid import UUID

from fastapi import APIRouter, Query, Request
from fastapi.responses import StreamingResponse

from cadence.api.deps import Notifier
from cadence.services.realtime_service import (
    CONNECTED_EVENT,
    GenerationEvent,
    GenerationNotifier,
)

router = APIRouter()

KEEP_ALIVE_SECONDS = 15


async def generation_events(
    request: Request,
    notifier: GenerationNotifier,
    queue: asyncio.Queue[GenerationEvent],
    recurring_task_id: Optional[UUID] = None,
    keep_alive: float = KEEP_ALIVE_SECONDS,
) -> AsyncGenerator[str, None]:
    """Yield SSE frames until the client goes away."""
    try:
        yield GenerationEvent(CONNECTED_EVENT, {}).to_sse()
        while not await request.is_disconnected():
            try:
                event = await asyncio.wait_for(queue.get(), timeout=keep_alive)
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue
            if recurring_task_id is not None:
                event = event.for_definition(recurring_task_id)
                if event is None:
                    continue
            yield event.to_sse()
    finally:
        await notifier.disconnect(queue)


@router.get("/stream")
async def stream_generated_tasks(
    request: Request,
    notifier: Notifier,
    recurring_task_id: Optional[UUID] = Query(
        None, description="Only forward tasks generated from this definition"
    ),
) -> StreamingResponse:
    """Stream ``recurring_tasks_generated`` events as they are committed."""
    queue = await notifier.connect()
    return StreamingResponse(
        generation_events(request, notifier, queue, recurring_task_id),
        media_type="text/event-stream",
    )
