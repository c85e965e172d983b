"""Calendar layout endpoints."""

import time
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.dependencies import verify_api_key
from api.logging import RequestLog, log_request
from api.models.requests import CalendarEventsRequest, SlotRequest
from api.models.responses import CalendarEventsResponse, ErrorCodes
from models.events import SlotSelection
from services.calendar import layout_calendar, visible_window
from services.slots import describe_slot

router = APIRouter(prefix="/v1/calendar")


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)


@router.post("/events", response_model=CalendarEventsResponse)
def calendar_events_endpoint(
    request: Request,
    payload: CalendarEventsRequest,
    _api_key: str = Depends(verify_api_key),
):
    """
    Lay out the dashboard's scheduling data as calendar events.

    Covers the five weeks from the Sunday on/before `today`, plus any day
    that carries a record.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/calendar/events",
        method="POST",
        client_ip=get_client_ip(request),
        records_received=payload.record_count,
    )

    try:
        today = payload.today
        if today is None:
            today = date.today()
            request_log.details.append(("warning", "No reference date given, used server date"))
        request_log.reference_date = today.isoformat()

        layout = layout_calendar(
            today,
            task_allocations=payload.task_allocations,
            recurring_occurrences=payload.recurring_occurrences,
            time_entries=payload.time_entries,
            call_records=payload.call_records,
            lunch=payload.lunch,
            work_start_times=payload.work_start_times,
        )
        window = visible_window(today)

        request_log.status_code = 200
        request_log.record_layout(layout)
        request_log.processing_time_ms = elapsed_ms(start_time)

        return CalendarEventsResponse(
            reference_date=today,
            window_start=window[0],
            window_end=window[-1],
            events=layout.events,
        )

    except Exception as e:
        # Unexpected errors
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        request_log.processing_time_ms = elapsed_ms(start_time)

        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        # Always log the request
        try:
            log_request(request_log)
        except Exception:
            # Don't fail the request if logging fails
            pass


@router.post("/slots", response_model=SlotSelection)
def slot_selection_endpoint(
    request: Request,
    slot: SlotRequest,
    _api_key: str = Depends(verify_api_key),
):
    """Derive the quick-entry defaults (hours, start, end) for an empty slot."""
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/calendar/slots",
        method="POST",
        client_ip=get_client_ip(request),
        reference_date=slot.start.date().isoformat(),
    )

    try:
        selection = describe_slot(slot.start, slot.end)
        request_log.status_code = 200
        request_log.processing_time_ms = elapsed_ms(start_time)
        return selection

    except ValueError as e:
        error_msg = str(e)
        request_log.status_code = 422
        request_log.error_code = ErrorCodes.VALIDATION_ERROR
        request_log.error_message = error_msg
        request_log.details.append(("validation_error", error_msg))
        request_log.processing_time_ms = elapsed_ms(start_time)

        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Invalid slot",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": [error_msg],
            },
        )

    finally:
        try:
            log_request(request_log)
        except Exception:
            pass
