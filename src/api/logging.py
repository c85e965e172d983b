"""SQLite request logging for API."""

import sqlite3
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone

from core import config
from services.calendar import CalendarLayout


@dataclass
class RequestLog:
    """One API call: what came in, which days were laid out, what went back."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    reference_date: str | None = None
    first_day: str | None = None
    last_day: str | None = None
    records_received: int | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    events_returned: int | None = None
    days_processed: int | None = None
    entries_packed: int | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (type, message)

    def record_layout(self, layout: CalendarLayout) -> None:
        """Copy the outcome of a calendar layout onto the log."""
        self.events_returned = len(layout.events)
        self.days_processed = len(layout.days)
        self.entries_packed = layout.packed_entries
        if layout.days:
            self.first_day = layout.days[0].isoformat()
            self.last_day = layout.days[-1].isoformat()


def log_request(log: RequestLog) -> None:
    """Write request log to SQLite database."""
    row = asdict(log)
    details = row.pop("details")
    columns = ", ".join(row)
    placeholders = ", ".join(f":{name}" for name in row)

    conn = sqlite3.connect(config.DB_PATH)
    try:
        with conn:
            conn.execute(f"INSERT INTO api_requests ({columns}) VALUES ({placeholders})", row)
            conn.executemany(
                "INSERT INTO api_request_details (request_id, detail_type, message) VALUES (?, ?, ?)",
                [(log.request_id, detail_type, message) for detail_type, message in details],
            )
    finally:
        conn.close()
