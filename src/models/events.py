"""
Calendar events produced by the assembler.

Each event carries a category-specific resource; `resource.type` is the
discriminator. Events serialize in camelCase for the calendar grid.
"""

from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.records import RecordId


class ViewModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LunchResource(ViewModel):
    type: Literal["lunch"] = "lunch"


class CallResource(ViewModel):
    type: Literal["call"] = "call"
    call_id: RecordId
    call_type: str | None = None
    duration_minutes: int


class TaskResource(ViewModel):
    type: Literal["task"] = "task"
    allocation_id: RecordId
    project_id: RecordId | None = None
    task_id: RecordId | None = None


class RecurringResource(ViewModel):
    type: Literal["recurring"] = "recurring"
    occurrence_id: RecordId
    recurring_allocation_id: RecordId | None = None


class TimeEntryResource(ViewModel):
    type: Literal["timeEntry"] = "timeEntry"
    entry_id: RecordId
    task_id: RecordId | None = None
    hours: float | str | None = None
    description: str = ""
    work_date: date
    packed: bool = False  # placed by sequential packing rather than its own times
    spills_past_midnight: bool = False


EventResource = Annotated[
    LunchResource | CallResource | TaskResource | RecurringResource | TimeEntryResource,
    Field(discriminator="type"),
]


class CalendarEvent(ViewModel):
    """Renderable block on the week/month grid."""

    id: str
    title: str
    start: datetime
    end: datetime
    resource: EventResource

    @property
    def category(self) -> str:
        return self.resource.type

    @property
    def day(self) -> date:
        return self.start.date()

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60


class SlotSelection(ViewModel):
    """Empty range picked on the grid, with the defaults derived for the entry forms."""

    start: datetime
    end: datetime
    work_date: date
    start_time: str
    end_time: str
    hours: float
    duration_minutes: int
