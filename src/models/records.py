"""
Scheduling records consumed by the calendar.

Records arrive from the backend API in PascalCase (`AllocationDate`,
`StartTime`, ...); snake_case names are accepted as well. Fields that feed
time arithmetic are kept loosely typed so a malformed value degrades at
assembly time instead of rejecting the whole payload.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal

from core.config import (
    DEFAULT_LUNCH_DURATION_MINUTES,
    DEFAULT_LUNCH_TIME,
    DEFAULT_WORK_START,
    WEEKDAY_NAMES,
)
from core.timeutils import parse_hhmm, parse_minutes, weekday_index

RecordId = int | str
DateField = datetime | date | str | None


class Record(BaseModel):
    """Base for backend records (PascalCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
    )


class TaskAllocation(Record):
    """Planned block of hours for a task on one day."""

    id: RecordId
    task_id: RecordId | None = None
    task_name: str | None = None
    project_id: RecordId | None = None
    project_name: str | None = None
    allocation_date: DateField = None
    allocated_hours: float | str | None = None
    start_time: str | None = None
    end_time: str | None = None


class RecurringOccurrence(Record):
    """One expanded instance of a recurring allocation rule."""

    id: RecordId
    recurring_allocation_id: RecordId | None = None
    user_id: RecordId | None = None
    title: str | None = None
    description: str | None = None
    occurrence_date: DateField = None
    start_time: str | None = None
    end_time: str | None = None
    allocated_hours: float | str | None = None


class TimeEntry(Record):
    """Manually logged work; start/end are optional."""

    id: RecordId
    task_id: RecordId | None = None
    task_name: str | None = None
    work_date: DateField = None
    hours: float | str | None = None
    start_time: str | None = None
    end_time: str | None = None
    description: str | None = None


class CallRecord(Record):
    """Logged call with a fixed start time."""

    id: RecordId
    call_date: DateField = None
    start_time: str | None = None
    duration_minutes: int | float | str | None = None
    call_type: str | None = None
    participants: str | None = None
    subject: str | None = None


class LunchConfig(Record):
    """Daily lunch block; a duration of 0 disables it."""

    lunch_time: str | None = DEFAULT_LUNCH_TIME
    lunch_duration_minutes: int | float | str | None = DEFAULT_LUNCH_DURATION_MINUTES

    @classmethod
    def from_user(cls, user: dict) -> "LunchConfig":
        """Build from a user profile row (`LunchTime`, `LunchDuration`)."""
        duration = user.get("LunchDuration")
        return cls(
            lunch_time=user.get("LunchTime") or DEFAULT_LUNCH_TIME,
            lunch_duration_minutes=DEFAULT_LUNCH_DURATION_MINUTES if duration in (None, "") else duration,
        )

    @property
    def start_minutes(self) -> int:
        minutes = parse_hhmm(self.lunch_time)
        if minutes is None:
            minutes = parse_hhmm(DEFAULT_LUNCH_TIME)
        return minutes

    @property
    def length_minutes(self) -> int:
        """Lunch length; unparseable durations fall back to 60, an explicit 0 stays 0."""
        return parse_minutes(self.lunch_duration_minutes, DEFAULT_LUNCH_DURATION_MINUTES)


class WorkStartTimes(BaseModel):
    """Configured work start per weekday."""

    model_config = ConfigDict(extra="ignore")

    sunday: str | None = DEFAULT_WORK_START
    monday: str | None = DEFAULT_WORK_START
    tuesday: str | None = DEFAULT_WORK_START
    wednesday: str | None = DEFAULT_WORK_START
    thursday: str | None = DEFAULT_WORK_START
    friday: str | None = DEFAULT_WORK_START
    saturday: str | None = DEFAULT_WORK_START

    @classmethod
    def from_user(cls, user: dict) -> "WorkStartTimes":
        """Build from a user profile row (`WorkStartMonday` ... `WorkStartSunday`)."""
        return cls(**{
            name: user.get(f"WorkStart{name.capitalize()}") or DEFAULT_WORK_START
            for name in WEEKDAY_NAMES
        })

    def start_minutes(self, day: date) -> int:
        """Work start for `day` in minutes since midnight, 09:00 when unset or malformed."""
        minutes = parse_hhmm(getattr(self, WEEKDAY_NAMES[weekday_index(day)]))
        if minutes is None:
            minutes = parse_hhmm(DEFAULT_WORK_START)
        return minutes
