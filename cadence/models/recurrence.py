"""
Recurrence rule models.

A RecurrenceRule describes how often a task repeats and at what time of day.
Rules are immutable values; an invalid rule cannot be constructed.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from cadence.core.exceptions import InvalidRuleError
from cadence.models.enums import RecurrenceType
from cadence.utils.datetime_utils import (
    SATURDAY,
    SUNDAY,
    WEEKDAY_ABBREVIATIONS,
    add_months,
    add_years,
    combine_local,
    sunday_based_weekday,
    to_local_date,
    with_day_of_month,
)


class TimeOfDay(BaseModel):
    """Wall-clock hour and minute, independent of any date."""

    model_config = ConfigDict(frozen=True)

    hour: int = 0
    minute: int = 0

    @model_validator(mode="before")
    @classmethod
    def _coerce_input(cls, data: Any) -> Any:
        if isinstance(data, time):
            return {"hour": data.hour, "minute": data.minute}
        if isinstance(data, str):
            try:
                parsed = datetime.strptime(data, "%H:%M").time()
            except ValueError as exc:
                raise InvalidRuleError("time_of_day", data, "expected HH:MM") from exc
            return {"hour": parsed.hour, "minute": parsed.minute}
        return data

    @field_validator("hour")
    @classmethod
    def _check_hour(cls, value: int) -> int:
        if not 0 <= value <= 23:
            raise InvalidRuleError("time_of_day.hour", value, "must be between 0 and 23")
        return value

    @field_validator("minute")
    @classmethod
    def _check_minute(cls, value: int) -> int:
        if not 0 <= value <= 59:
            raise InvalidRuleError("time_of_day.minute", value, "must be between 0 and 59")
        return value

    def as_time(self) -> time:
        return time(self.hour, self.minute)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


class RecurrenceRule(BaseModel):
    """
    Declarative description of when a task repeats.

    Weekdays are numbered 1=Sunday ... 7=Saturday. ``days_of_week`` only applies
    to WEEKLY rules and ``day_of_month`` only to MONTHLY rules; values given for
    other types are dropped so the serialized rule carries only what it uses.
    """

    model_config = ConfigDict(frozen=True)

    type: RecurrenceType
    interval: int = Field(1, description="Every N days/weeks/months/years")
    days_of_week: Optional[tuple[int, ...]] = Field(
        None, description="1=Sunday ... 7=Saturday, for WEEKLY"
    )
    day_of_month: Optional[int] = Field(None, description="1-31, for MONTHLY")
    time_of_day: TimeOfDay = Field(default_factory=TimeOfDay)
    timezone: str = Field("UTC", description="IANA zone driving calendar arithmetic")

    @model_validator(mode="before")
    @classmethod
    def _drop_irrelevant_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        try:
            rule_type = RecurrenceType(data.get("type"))
        except ValueError:
            # Let field validation report the bad type
            return data
        data = dict(data)
        if rule_type != RecurrenceType.WEEKLY:
            data.pop("days_of_week", None)
        if rule_type != RecurrenceType.MONTHLY:
            data.pop("day_of_month", None)
        return data

    @field_validator("interval")
    @classmethod
    def _check_interval(cls, value: int) -> int:
        if value < 1:
            raise InvalidRuleError("interval", value, "must be at least 1")
        return value

    @field_validator("days_of_week")
    @classmethod
    def _check_days_of_week(
        cls, value: Optional[tuple[int, ...]]
    ) -> Optional[tuple[int, ...]]:
        if not value:
            return None
        for day in value:
            if not SUNDAY <= day <= SATURDAY:
                raise InvalidRuleError(
                    "days_of_week", day, "weekdays are numbered 1 (Sunday) to 7 (Saturday)"
                )
        return tuple(sorted(set(value)))

    @field_validator("day_of_month")
    @classmethod
    def _check_day_of_month(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and not 1 <= value <= 31:
            raise InvalidRuleError("day_of_month", value, "must be between 1 and 31")
        return value

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise InvalidRuleError("timezone", value, "unknown time zone") from exc
        return value

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def next_occurrence(self, after: datetime) -> datetime:
        """
        Calculate the first occurrence strictly after the given instant.

        The reference is read as a calendar date in the rule's zone. The date is
        advanced according to the rule type and combined with ``time_of_day``.
        Month and year steps clamp to the last day of a shorter month.

        Args:
            after: Reference instant (naive values are read as UTC)

        Returns:
            Timezone-aware UTC datetime of the next occurrence
        """
        tz = self.zone
        reference = to_local_date(after, tz)

        if self.type == RecurrenceType.DAILY:
            target = reference + timedelta(days=self.interval)
        elif self.type == RecurrenceType.WEEKLY:
            target = self._next_weekly(reference)
        elif self.type == RecurrenceType.MONTHLY:
            target = add_months(reference, self.interval)
            if self.day_of_month is not None:
                target = with_day_of_month(target, self.day_of_month)
        else:
            target = add_years(reference, self.interval)

        return combine_local(target, self.time_of_day.as_time(), tz)

    def _next_weekly(self, reference: date) -> date:
        if not self.days_of_week:
            return reference + timedelta(weeks=self.interval)

        current = sunday_based_weekday(reference)
        later_this_week = [day for day in self.days_of_week if day > current]
        if later_this_week:
            return reference + timedelta(days=later_this_week[0] - current)
        # Wrap to the first listed weekday of the following week
        return reference + timedelta(days=(7 - current) + self.days_of_week[0])

    def upcoming(self, after: datetime, count: int) -> list[datetime]:
        """Chain ``count`` occurrences starting from the given instant."""
        occurrences: list[datetime] = []
        current = after
        for _ in range(count):
            current = self.next_occurrence(current)
            occurrences.append(current)
        return occurrences

    def describe(self) -> str:
        """Human-readable summary, e.g. "Weekly on Mon, Wed"."""
        if self.type == RecurrenceType.DAILY:
            return "Daily" if self.interval == 1 else f"Every {self.interval} days"
        if self.type == RecurrenceType.WEEKLY:
            if self.days_of_week:
                names = ", ".join(WEEKDAY_ABBREVIATIONS[day - 1] for day in self.days_of_week)
                return f"Weekly on {names}"
            return "Weekly" if self.interval == 1 else f"Every {self.interval} weeks"
        if self.type == RecurrenceType.MONTHLY:
            if self.day_of_month is not None:
                if self.interval == 1:
                    return f"Monthly on day {self.day_of_month}"
                return f"Every {self.interval} months on day {self.day_of_month}"
            return "Monthly" if self.interval == 1 else f"Every {self.interval} months"
        return "Yearly" if self.interval == 1 else f"Every {self.interval} years"
