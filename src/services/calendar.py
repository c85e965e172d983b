"""
Calendar event assembly.

Turns task allocations, recurring occurrences, time entries and call records
into the flat list of blocks rendered on the week/month grid, adding a lunch
block to every processed day.
"""

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from core.config import (
    CALL_ICONS,
    DEFAULT_CALL_DURATION_MINUTES,
    DEFAULT_CALL_ICON,
    DEFAULT_CALL_START,
    DEFAULT_ENTRY_HOURS,
    LUNCH_TITLE,
    VISIBLE_WINDOW_DAYS,
)
from core.timeutils import at_minutes, parse_hhmm, parse_hours, parse_minutes, to_day, week_start
from models.events import (
    CalendarEvent,
    CallResource,
    LunchResource,
    RecurringResource,
    TaskResource,
    TimeEntryResource,
)
from models.records import (
    CallRecord,
    LunchConfig,
    RecurringOccurrence,
    TaskAllocation,
    TimeEntry,
    WorkStartTimes,
)
from services.packing import SequentialPacker

logger = logging.getLogger(__name__)


# =============================================================================
# DAY BUCKETING
# =============================================================================


def bucket_by_day(records: Iterable, get_date: Callable) -> dict[date, list]:
    """Group records by calendar day, keeping input order. Undated records are dropped."""
    buckets: dict[date, list] = defaultdict(list)
    for record in records:
        day = to_day(get_date(record))
        if day is None:
            logger.debug("Skipping %s %s: no usable date", type(record).__name__, record.id)
            continue
        buckets[day].append(record)
    return buckets


def visible_window(today: date, days: int = VISIBLE_WINDOW_DAYS) -> list[date]:
    """Days from the Sunday on/before `today`, `days` long."""
    first = week_start(today)
    return [first + timedelta(days=offset) for offset in range(days)]


# =============================================================================
# EVENT BUILDERS
# =============================================================================


def format_hours_label(value) -> str:
    """Hours as shown in titles: '2', '1.5'."""
    return f"{parse_hours(value, default=0.0):g}"


def fixed_block(day: date, start_time: str | None, end_time: str | None) -> tuple[datetime, datetime] | None:
    """
    Absolute (start, end) for a block with its own times, or None.

    An end earlier than the start is read as running past midnight; equal
    times give no block.
    """
    start_minutes = parse_hhmm(start_time)
    end_minutes = parse_hhmm(end_time)
    if start_minutes is None or end_minutes is None or start_minutes == end_minutes:
        return None
    start = at_minutes(day, start_minutes)
    end = at_minutes(day, end_minutes)
    if end < start:
        end += timedelta(days=1)
    return start, end


def lunch_event(day: date, lunch: LunchConfig) -> CalendarEvent:
    start = at_minutes(day, lunch.start_minutes)
    return CalendarEvent(
        id=f"lunch-{day.isoformat()}",
        title=LUNCH_TITLE,
        start=start,
        end=start + timedelta(minutes=lunch.length_minutes),
        resource=LunchResource(),
    )


def call_event(day: date, call: CallRecord) -> CalendarEvent:
    start_minutes = parse_hhmm(call.start_time)
    if start_minutes is None:
        start_minutes = parse_hhmm(DEFAULT_CALL_START)
    duration = parse_minutes(call.duration_minutes, DEFAULT_CALL_DURATION_MINUTES)
    if duration == 0:
        duration = DEFAULT_CALL_DURATION_MINUTES

    icon = CALL_ICONS.get(call.call_type, DEFAULT_CALL_ICON)
    label = call.subject or f"{call.call_type or ''} Call".strip()
    start = at_minutes(day, start_minutes)
    return CalendarEvent(
        id=f"call-{call.id}",
        title=f"{icon} {label} ({duration}min)",
        start=start,
        end=start + timedelta(minutes=duration),
        resource=CallResource(call_id=call.id, call_type=call.call_type, duration_minutes=duration),
    )


def allocation_event(day: date, allocation: TaskAllocation) -> CalendarEvent | None:
    block = fixed_block(day, allocation.start_time, allocation.end_time)
    if block is None:
        logger.debug("Allocation %s on %s has no usable start/end, not shown", allocation.id, day)
        return None
    start, end = block
    return CalendarEvent(
        id=f"allocation-{allocation.id}",
        title=f"📋 {allocation.task_name or ''} ({format_hours_label(allocation.allocated_hours)}h)",
        start=start,
        end=end,
        resource=TaskResource(
            allocation_id=allocation.id,
            project_id=allocation.project_id,
            task_id=allocation.task_id,
        ),
    )


def recurring_event(day: date, occurrence: RecurringOccurrence) -> CalendarEvent | None:
    block = fixed_block(day, occurrence.start_time, occurrence.end_time)
    if block is None:
        logger.debug("Recurring occurrence %s on %s has no usable start/end, not shown", occurrence.id, day)
        return None
    start, end = block
    return CalendarEvent(
        id=f"recurring-{occurrence.id}",
        title=f"🔄 {occurrence.title or ''} ({format_hours_label(occurrence.allocated_hours)}h)",
        start=start,
        end=end,
        resource=RecurringResource(
            occurrence_id=occurrence.id,
            recurring_allocation_id=occurrence.recurring_allocation_id,
        ),
    )


def time_entry_event(day: date, entry: TimeEntry, packer: SequentialPacker) -> CalendarEvent:
    """Place an entry at its own times, or at the packer's cursor when it has none."""
    hours = parse_hours(entry.hours, default=DEFAULT_ENTRY_HOURS)
    block = fixed_block(day, entry.start_time, entry.end_time)
    packed = block is None
    if packed:
        block = packer.place(hours)
    start, end = block

    return CalendarEvent(
        id=f"entry-{entry.id}",
        title=f"⏱️ {hours:.1f}h - {entry.task_name or ''}",
        start=start,
        end=end,
        resource=TimeEntryResource(
            entry_id=entry.id,
            task_id=entry.task_id,
            hours=entry.hours,
            description=entry.description or "",
            work_date=day,
            packed=packed,
            spills_past_midnight=packed and packer.spills_past_midnight(end),
        ),
    )


# =============================================================================
# ASSEMBLY
# =============================================================================


@dataclass
class CalendarLayout:
    """Events for every processed day, with the days themselves."""

    days: list[date] = field(default_factory=list)
    events: list[CalendarEvent] = field(default_factory=list)

    @property
    def packed_entries(self) -> int:
        return sum(1 for event in self.events if getattr(event.resource, "packed", False))


def layout_calendar(
    today: date,
    task_allocations: Iterable[TaskAllocation] = (),
    recurring_occurrences: Iterable[RecurringOccurrence] = (),
    time_entries: Iterable[TimeEntry] = (),
    call_records: Iterable[CallRecord] = (),
    lunch: LunchConfig | None = None,
    work_start_times: WorkStartTimes | None = None,
) -> CalendarLayout:
    """
    Build every calendar event for the visible window.

    The window is the 35 days from the Sunday on/before `today`, plus every
    day that carries at least one record. For each day the order is: lunch,
    calls, allocations, recurring occurrences, then time entries. Entries
    without their own times are packed from the day's work start, pushed
    past the latest placed allocation.

    Events are returned grouped by day in ascending date order.
    """
    lunch = lunch or LunchConfig()
    work_start_times = work_start_times or WorkStartTimes()

    allocations_by_day = bucket_by_day(task_allocations, lambda a: a.allocation_date)
    recurring_by_day = bucket_by_day(recurring_occurrences, lambda r: r.occurrence_date)
    entries_by_day = bucket_by_day(time_entries, lambda e: e.work_date)
    calls_by_day = bucket_by_day(call_records, lambda c: c.call_date)

    days = set(visible_window(today))
    for buckets in (allocations_by_day, recurring_by_day, entries_by_day, calls_by_day):
        days.update(buckets.keys())

    layout = CalendarLayout(days=sorted(days))
    events = layout.events
    for day in layout.days:
        if lunch.length_minutes > 0:
            events.append(lunch_event(day, lunch))

        for call in calls_by_day.get(day, []):
            events.append(call_event(day, call))

        packer = SequentialPacker(day, work_start_times.start_minutes(day))
        for allocation in allocations_by_day.get(day, []):
            event = allocation_event(day, allocation)
            if event is not None:
                events.append(event)
                packer.advance_to(event.end)

        for occurrence in recurring_by_day.get(day, []):
            event = recurring_event(day, occurrence)
            if event is not None:
                events.append(event)

        for entry in entries_by_day.get(day, []):
            events.append(time_entry_event(day, entry, packer))

    logger.debug("Assembled %d events over %d days", len(events), len(layout.days))
    return layout


def assemble_calendar_events(today: date, **records) -> list[CalendarEvent]:
    """Calendar events only; see `layout_calendar` for the arguments."""
    return layout_calendar(today, **records).events


def events_in_range(events: Iterable[CalendarEvent], start: datetime, end: datetime) -> list[CalendarEvent]:
    """Events overlapping [start, end), ordered by start then end."""
    selected = [event for event in events if event.start < end and event.end > start]
    return sorted(selected, key=lambda event: (event.start, event.end))
