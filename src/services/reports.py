"""
Agenda export for assembled calendar events (Excel).
"""

from collections import defaultdict
from datetime import date
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from core.config import AGENDA_HEADERS, TOTALS_CATEGORIES
from models.events import CalendarEvent


def format_date_display(d: date) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{d.month}/{d.day}/{d.year}"


def format_date_short(d: date) -> str:
    """Format date as 'Day Mon D' (platform-safe, e.g., 'Fri Nov 7')."""
    return f"{d.strftime('%a')} {d.strftime('%b')} {d.day}"


def daily_totals(events: list[CalendarEvent]) -> dict[date, dict[str, float]]:
    """Hours per day per category. Lunch is not booked time and is left out."""
    totals: dict[date, dict[str, float]] = defaultdict(lambda: defaultdict(float))
    for event in events:
        if event.category in TOTALS_CATEGORIES:
            totals[event.day][event.category] += event.duration_minutes / 60
    return totals


def write_agenda_sheet(ws, events: list[CalendarEvent]):
    """
    Write the Agenda sheet: one row per event, in start order.

    Headers: Date, Start, End, Category, Title
    """
    for col_idx, header in enumerate(AGENDA_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    ordered = sorted(events, key=lambda e: (e.start, e.end))
    for row_idx, event in enumerate(ordered, start=2):
        row_data = [
            format_date_display(event.day),
            event.start.strftime("%H:%M"),
            event.end.strftime("%H:%M"),
            event.category,
            event.title,
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def write_daily_totals_sheet(ws, events: list[CalendarEvent]):
    """
    Write the Daily Totals sheet.

    Row 1: Date | task | recurring | timeEntry | call | Total
    One row per day with booked time, then a SUM row.
    """
    totals = daily_totals(events)
    headers = ["Date"] + TOTALS_CATEGORIES + ["Total"]
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    days = sorted(totals)
    first_cat_col = get_column_letter(2)
    last_cat_col = get_column_letter(len(TOTALS_CATEGORIES) + 1)
    total_col = len(TOTALS_CATEGORIES) + 2

    for row_idx, day in enumerate(days, start=2):
        ws.cell(row=row_idx, column=1, value=format_date_display(day))
        for cat_idx, category in enumerate(TOTALS_CATEGORIES, start=2):
            hours = totals[day].get(category, 0.0)
            if hours > 0:
                ws.cell(row=row_idx, column=cat_idx, value=round(hours, 2))
        ws.cell(row=row_idx, column=total_col, value=f"=SUM({first_cat_col}{row_idx}:{last_cat_col}{row_idx})")

    if not days:
        return

    # Totals row
    sum_row = len(days) + 2
    ws.cell(row=sum_row, column=1, value="Total").font = Font(bold=True)
    for col in range(2, total_col + 1):
        letter = get_column_letter(col)
        ws.cell(row=sum_row, column=col, value=f"=SUM({letter}2:{letter}{sum_row - 1})")


def create_agenda_workbook(events: list[CalendarEvent], output_path: Path):
    """
    Create the agenda workbook.

    Sheet 1: "Agenda" - every event
    Sheet 2: "Daily Totals" - booked hours per day and category
    """
    wb = Workbook()

    ws_agenda = wb.active
    ws_agenda.title = "Agenda"
    write_agenda_sheet(ws_agenda, events)

    ws_totals = wb.create_sheet(title="Daily Totals")
    write_daily_totals_sheet(ws_totals, events)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    print(f"Saved agenda workbook to: {output_path}")
