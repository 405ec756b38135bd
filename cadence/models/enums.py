"""
Enum definitions for the application.

These enums are used across models and provide type-safe values.
"""

from enum import Enum


class RecurrenceType(str, Enum):
    """Unit a recurrence rule repeats in."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class TaskPriority(str, Enum):
    """Priority of a task."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class TaskCategory(str, Enum):
    """Life area a task belongs to."""

    PERSONAL = "PERSONAL"
    WORK = "WORK"
    HEALTH = "HEALTH"
    EDUCATION = "EDUCATION"
    FINANCE = "FINANCE"
    OTHER = "OTHER"
