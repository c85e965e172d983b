"""Pydantic request models for API endpoints."""

from datetime import date, datetime

from models.events import ViewModel
from models.records import (
    CallRecord,
    LunchConfig,
    RecurringOccurrence,
    TaskAllocation,
    TimeEntry,
    WorkStartTimes,
)


class CalendarEventsRequest(ViewModel):
    """Dashboard data to lay out; `today` defaults to the server date."""

    today: date | None = None
    task_allocations: list[TaskAllocation] = []
    recurring_occurrences: list[RecurringOccurrence] = []
    time_entries: list[TimeEntry] = []
    call_records: list[CallRecord] = []
    lunch: LunchConfig | None = None
    work_start_times: WorkStartTimes | None = None

    @property
    def record_count(self) -> int:
        return (
            len(self.task_allocations)
            + len(self.recurring_occurrences)
            + len(self.time_entries)
            + len(self.call_records)
        )


class SlotRequest(ViewModel):
    """Empty range picked on the grid."""

    start: datetime
    end: datetime
