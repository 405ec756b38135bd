"""
SQLite database configuration and ORM models.

This module defines the SQLAlchemy ORM models and database initialization.
"""

from datetime import datetime
from functools import lru_cache
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
)
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from cadence.core.config import get_settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# ===========================================
# ORM Models
# ===========================================


class RecurringTaskORM(Base):
    """Recurring task definition ORM model.

    Datetimes are stored as naive UTC.
    """

    __tablename__ = "recurring_tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(20), default="PERSONAL", index=True)
    priority = Column(String(10), default="MEDIUM")
    estimated_minutes = Column(Integer, nullable=False, default=60)
    tags = Column(JSON, nullable=False, default=list)
    reminder_enabled = Column(Boolean, default=True)
    reminder_offset_minutes = Column(Integer, nullable=False, default=60)
    recurrence_rule = Column(JSON, nullable=False)
    is_active = Column(Boolean, default=True, index=True)
    next_due_date = Column(DateTime, nullable=False, index=True)
    last_generated_at = Column(DateTime, nullable=True)
    last_generated_due = Column(DateTime, nullable=True)
    generated_instance_ids = Column(JSON, nullable=False, default=list)
    end_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)


class TaskORM(Base):
    """Task ORM model."""

    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(20), default="PERSONAL")
    priority = Column(String(10), default="MEDIUM")
    estimated_minutes = Column(Integer, nullable=False, default=60)
    deadline = Column(DateTime, nullable=False, index=True)
    is_completed = Column(Boolean, default=False)
    tags = Column(JSON, nullable=False, default=list)
    reminder_enabled = Column(Boolean, default=True)
    reminder_time = Column(DateTime, nullable=True)
    recurring_task_id = Column(String(36), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)


@lru_cache()
def get_engine() -> AsyncEngine:
    """Get async engine instance."""
    settings = get_settings()
    return create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG and not settings.is_test)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get async session factory."""
    engine = get_engine()
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Initialize database tables."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
