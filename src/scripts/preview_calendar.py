#!/usr/bin/env python3
"""
Preview the calendar layout for a dashboard payload.

Reads a JSON file shaped like the POST /v1/calendar/events body, assembles
the events, prints a per-day agenda and optionally writes an Excel workbook.

Usage:
    uv run python src/scripts/preview_calendar.py --input payload.json --today 2024-06-03
    uv run python src/scripts/preview_calendar.py --input payload.json --xlsx output/agenda.xlsx
"""

import argparse
import json
import sys
from collections import defaultdict
from datetime import date, datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.models.requests import CalendarEventsRequest
from core.config import OUTPUT_DIR
from services.calendar import assemble_calendar_events
from services.reports import create_agenda_workbook, format_date_short


def load_payload(path: Path) -> CalendarEventsRequest:
    """Load and validate a dashboard payload file."""
    with open(path, encoding="utf-8") as f:
        return CalendarEventsRequest.model_validate(json.load(f))


def print_agenda(events, only_booked: bool = False):
    """Print events grouped by day in start order."""
    by_day = defaultdict(list)
    for event in events:
        by_day[event.day].append(event)

    for day in sorted(by_day):
        day_events = sorted(by_day[day], key=lambda e: (e.start, e.end))
        if only_booked and all(e.category == "lunch" for e in day_events):
            continue
        print(f"\n{format_date_short(day)} ({day.isoformat()})")
        for event in day_events:
            marker = " *" if getattr(event.resource, "packed", False) else ""
            print(f"  {event.start:%H:%M}-{event.end:%H:%M}  {event.title}{marker}")


def main(input_path: Path, today_str: str | None, xlsx: str | None, only_booked: bool):
    """Main entry point."""
    payload = load_payload(input_path)
    if today_str:
        today = datetime.strptime(today_str, "%Y-%m-%d").date()
    else:
        today = payload.today or date.today()
    print(f"Laying out {payload.record_count} records around {today}")

    events = assemble_calendar_events(
        today,
        task_allocations=payload.task_allocations,
        recurring_occurrences=payload.recurring_occurrences,
        time_entries=payload.time_entries,
        call_records=payload.call_records,
        lunch=payload.lunch,
        work_start_times=payload.work_start_times,
    )
    print(f"Total events: {len(events)}")
    print_agenda(events, only_booked=only_booked)

    if xlsx:
        output_path = Path(xlsx)
        if not output_path.is_absolute() and output_path.parent == Path("."):
            output_path = OUTPUT_DIR / "agenda" / output_path
        create_agenda_workbook(events, output_path)

    print("\nDone! (* = placed after the previous entry, no recorded times)")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Preview calendar events for a dashboard payload")
    parser.add_argument("--input", required=True, type=Path, help="JSON payload file")
    parser.add_argument(
        "--today",
        help="Reference date (YYYY-MM-DD). Defaults to the payload's 'today', then to today.",
    )
    parser.add_argument("--xlsx", help="Also write an agenda workbook to this path")
    parser.add_argument(
        "--only-booked",
        action="store_true",
        help="Skip days that only have the lunch block",
    )
    args = parser.parse_args()

    main(args.input, args.today, args.xlsx, args.only_booked)
