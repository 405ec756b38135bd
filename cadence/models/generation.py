"""
Generation run report.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from cadence.models.task import TaskInstance


class GenerationReport(BaseModel):
    """Summary of one generation driver run."""

    run_at: datetime
    committed: bool = True
    created_count: int = 0
    tasks: list[TaskInstance] = Field(default_factory=list)
    updated_definition_ids: list[UUID] = Field(default_factory=list)
    truncated_definition_ids: list[UUID] = Field(
        default_factory=list,
        description="Definitions whose backlog exceeded the catch-up bound",
    )
    error: Optional[str] = None
