"""
Slot selection, event clicks and the requests they lead to.

Nothing here talks to the backend: the functions return `ApiRequest`
descriptors that the API client sends.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from core.config import DEFAULT_CALL_TYPE, DEFAULT_ENTRY_HOURS
from core.timeutils import end_from_start_and_hours, hours_between, parse_hours, to_day
from models.events import CalendarEvent, SlotSelection, TaskResource, TimeEntryResource
from models.records import RecordId, TimeEntry

# Hours typed into the form that do not parse fall back to half an hour
FORM_FALLBACK_HOURS = 0.5


@dataclass
class ApiRequest:
    """Backend request triggered from the calendar."""

    method: str
    path: str
    body: dict | None = None


def describe_slot(start: datetime, end: datetime) -> SlotSelection:
    """
    Derive form defaults for an empty slot picked on the grid.

    Raises:
        ValueError: if the slot does not end after it starts
    """
    if end <= start:
        raise ValueError(f"Slot must end after it starts (got {start} to {end})")
    seconds = (end - start).total_seconds()
    return SlotSelection(
        start=start,
        end=end,
        work_date=start.date(),
        start_time=start.strftime("%H:%M"),
        end_time=end.strftime("%H:%M"),
        hours=seconds / 3600,
        duration_minutes=round(seconds / 60),
    )


# =============================================================================
# TIME ENTRY FORM
# =============================================================================


@dataclass
class TimeEntryForm:
    """Quick-entry / edit-entry form state; hours and times are kept consistent."""

    work_date: str
    hours: float
    start_time: str
    end_time: str
    description: str = ""
    task_id: RecordId | None = None
    task_name: str = ""
    id: RecordId | None = None

    def set_hours(self, value) -> None:
        """Hours edited: recompute the end time."""
        self.hours = parse_hours(value, default=FORM_FALLBACK_HOURS)
        self.end_time = end_from_start_and_hours(self.start_time, self.hours)

    def set_start_time(self, value: str) -> None:
        """Start edited: recompute hours against the current end."""
        self.hours = hours_between(value, self.end_time)
        self.start_time = value

    def set_end_time(self, value: str) -> None:
        """End edited: recompute hours from the current start."""
        self.hours = hours_between(self.start_time, value)
        self.end_time = value


def time_entry_form_for_slot(slot: SlotSelection, task_id: RecordId | None = None) -> TimeEntryForm:
    return TimeEntryForm(
        work_date=slot.work_date.isoformat(),
        hours=slot.hours,
        start_time=slot.start_time,
        end_time=slot.end_time,
        task_id=task_id,
    )


def build_time_entry_request(form: TimeEntryForm) -> ApiRequest:
    """
    POST /api/time-entries for a new entry.

    Raises:
        ValueError: if no task was picked
    """
    if form.task_id in (None, ""):
        raise ValueError("A task must be selected before logging time")
    return ApiRequest(
        method="POST",
        path="/api/time-entries",
        body={
            "taskId": form.task_id,
            "workDate": form.work_date,
            "hours": form.hours,
            "description": form.description,
            "startTime": form.start_time,
            "endTime": form.end_time,
        },
    )


def build_time_entry_update_request(form: TimeEntryForm) -> ApiRequest:
    if form.id is None:
        raise ValueError("Only an existing time entry can be updated")
    return ApiRequest(
        method="PUT",
        path=f"/api/time-entries/{form.id}",
        body={
            "workDate": form.work_date,
            "hours": form.hours,
            "description": form.description,
            "startTime": form.start_time,
            "endTime": form.end_time,
        },
    )


def build_time_entry_delete_request(form: TimeEntryForm) -> ApiRequest:
    if form.id is None:
        raise ValueError("Only an existing time entry can be deleted")
    return ApiRequest(method="DELETE", path=f"/api/time-entries/{form.id}")


# =============================================================================
# CALL RECORD FORM
# =============================================================================


@dataclass
class CallForm:
    """Call record form state; duration and end time are kept consistent."""

    call_date: str
    start_time: str
    end_time: str
    duration_minutes: int
    call_type: str = DEFAULT_CALL_TYPE
    participants: str = ""
    subject: str = ""
    notes: str = ""
    project_id: RecordId | None = None
    task_id: RecordId | None = None

    def set_start_time(self, value: str) -> None:
        self.duration_minutes = round(hours_between(value, self.end_time) * 60)
        self.start_time = value

    def set_end_time(self, value: str) -> None:
        self.duration_minutes = round(hours_between(self.start_time, value) * 60)
        self.end_time = value

    def set_duration(self, minutes: int) -> None:
        self.duration_minutes = minutes
        self.end_time = end_from_start_and_hours(self.start_time, minutes / 60)


def call_form_for_slot(slot: SlotSelection) -> CallForm:
    return CallForm(
        call_date=slot.work_date.isoformat(),
        start_time=slot.start_time,
        end_time=slot.end_time,
        duration_minutes=slot.duration_minutes,
    )


def build_call_record_request(form: CallForm) -> ApiRequest:
    """POST /api/call-records for a new call."""
    return ApiRequest(
        method="POST",
        path="/api/call-records",
        body={
            "callDate": form.call_date,
            "startTime": form.start_time,
            "durationMinutes": form.duration_minutes,
            "callType": form.call_type,
            "participants": form.participants,
            "subject": form.subject,
            "notes": form.notes,
            "projectId": form.project_id or None,
            "taskId": form.task_id or None,
        },
    )


# =============================================================================
# EVENT CLICKS
# =============================================================================


@dataclass
class OpenProject:
    path: str


@dataclass
class EditTimeEntry:
    form: TimeEntryForm
    entry: TimeEntry = field(repr=False)


def edit_form_for_entry(entry: TimeEntry, event: CalendarEvent) -> TimeEntryForm:
    """Edit form for `entry`; missing times are taken from where the calendar drew it."""
    day = to_day(entry.work_date) or event.start.date()
    return TimeEntryForm(
        id=entry.id,
        task_id=entry.task_id,
        task_name=entry.task_name or "",
        work_date=day.isoformat(),
        hours=parse_hours(entry.hours, default=DEFAULT_ENTRY_HOURS),
        start_time=entry.start_time or event.start.strftime("%H:%M"),
        end_time=entry.end_time or event.end.strftime("%H:%M"),
        description=entry.description or "",
    )


def dispatch_event_click(
    event: CalendarEvent, time_entries: Iterable[TimeEntry]
) -> OpenProject | EditTimeEntry | None:
    """
    Decide what a click on an existing event opens.

    Allocations open their project, time entries open the edit form for the
    original record. Other categories (and entries that have since been
    deleted) do nothing.
    """
    resource = event.resource
    if isinstance(resource, TaskResource) and resource.project_id is not None:
        return OpenProject(path=f"/projects/{resource.project_id}")
    if isinstance(resource, TimeEntryResource):
        for entry in time_entries:
            if entry.id == resource.entry_id:
                return EditTimeEntry(form=edit_form_for_entry(entry, event), entry=entry)
    return None
