"""Pydantic response models for API endpoints."""

from datetime import date

from pydantic import BaseModel

from models.events import CalendarEvent, ViewModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    request_log_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class CalendarEventsResponse(ViewModel):
    """Assembled events plus the window they were computed for."""

    reference_date: date
    window_start: date
    window_end: date
    events: list[CalendarEvent]


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
