"""API Pydantic models."""

from .requests import CalendarEventsRequest, SlotRequest
from .responses import CalendarEventsResponse, ErrorCodes, ErrorResponse, HealthResponse

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "CalendarEventsRequest",
    "CalendarEventsResponse",
    "SlotRequest",
]
