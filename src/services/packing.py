"""
Sequential placement of time entries that have no recorded start/end.
"""

from datetime import date, datetime, timedelta

from core.timeutils import at_minutes


class SequentialPacker:
    """
    Per-day cursor that hands out back-to-back slots.

    The cursor starts at the day's work start and only moves forward, either
    past fixed blocks (`advance_to`) or past each placed entry (`place`).
    Entries are placed in the order they are given.
    """

    def __init__(self, day: date, start_minutes: int):
        self.day = day
        self.pointer: datetime = at_minutes(day, start_minutes)

    def advance_to(self, moment: datetime) -> None:
        """Move the cursor to `moment` if it is later than the cursor."""
        if moment > self.pointer:
            self.pointer = moment

    def place(self, hours: float) -> tuple[datetime, datetime]:
        """Reserve `hours` at the cursor and return the (start, end) slot."""
        start = self.pointer
        end = start + timedelta(hours=hours)
        self.pointer = end
        return start, end

    def spills_past_midnight(self, end: datetime) -> bool:
        # An end of exactly 00:00 the next day still belongs to this day
        return end > at_minutes(self.day, 24 * 60)
