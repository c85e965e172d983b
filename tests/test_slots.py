from datetime import date, datetime

import pytest

from models.records import TimeEntry
from services.calendar import assemble_calendar_events
from services.slots import (
    EditTimeEntry,
    OpenProject,
    TimeEntryForm,
    build_call_record_request,
    build_time_entry_delete_request,
    build_time_entry_request,
    build_time_entry_update_request,
    call_form_for_slot,
    describe_slot,
    dispatch_event_click,
    time_entry_form_for_slot,
)


@pytest.fixture
def slot():
    return describe_slot(datetime(2024, 6, 3, 10, 0), datetime(2024, 6, 3, 11, 30))


# =============================================================================
# SLOT SELECTION
# =============================================================================


def test_describe_slot_derives_form_defaults(slot):
    assert slot.work_date == date(2024, 6, 3)
    assert slot.start_time == "10:00"
    assert slot.end_time == "11:30"
    assert slot.hours == 1.5
    assert slot.duration_minutes == 90


@pytest.mark.parametrize(
    "start, end",
    [
        (datetime(2024, 6, 3, 10, 0), datetime(2024, 6, 3, 10, 0)),
        (datetime(2024, 6, 3, 11, 0), datetime(2024, 6, 3, 10, 0)),
    ],
)
def test_describe_slot_rejects_empty_or_reversed(start, end):
    with pytest.raises(ValueError):
        describe_slot(start, end)


def test_time_entry_request_from_slot(slot):
    form = time_entry_form_for_slot(slot, task_id=5)
    form.description = "Wireframes"
    request = build_time_entry_request(form)
    assert request.method == "POST"
    assert request.path == "/api/time-entries"
    assert request.body == {
        "taskId": 5,
        "workDate": "2024-06-03",
        "hours": 1.5,
        "description": "Wireframes",
        "startTime": "10:00",
        "endTime": "11:30",
    }


def test_time_entry_request_requires_task(slot):
    with pytest.raises(ValueError):
        build_time_entry_request(time_entry_form_for_slot(slot))


def test_call_record_request_from_slot(slot):
    form = call_form_for_slot(slot)
    form.subject = "Kickoff"
    request = build_call_record_request(form)
    assert request.method == "POST"
    assert request.path == "/api/call-records"
    assert request.body["callDate"] == "2024-06-03"
    assert request.body["startTime"] == "10:00"
    assert request.body["durationMinutes"] == 90
    assert request.body["callType"] == "Teams"
    assert request.body["projectId"] is None
    assert request.body["taskId"] is None


# =============================================================================
# FORM RE-DERIVATION
# =============================================================================


def test_changing_hours_moves_end_time(slot):
    form = time_entry_form_for_slot(slot, task_id=5)
    form.set_hours("2.25")
    assert form.hours == 2.25
    assert form.end_time == "12:15"


def test_unparseable_hours_fall_back_to_half_hour(slot):
    form = time_entry_form_for_slot(slot, task_id=5)
    form.set_hours("")
    assert form.hours == 0.5
    assert form.end_time == "10:30"


def test_changing_times_recomputes_hours(slot):
    form = time_entry_form_for_slot(slot, task_id=5)
    form.set_start_time("09:00")
    assert form.hours == 2.5
    form.set_end_time("09:45")
    assert form.hours == 0.75
    form.set_end_time("08:00")
    assert form.hours == 0.0


def test_call_form_keeps_duration_and_end_in_step(slot):
    form = call_form_for_slot(slot)
    form.set_duration(45)
    assert form.end_time == "10:45"
    form.set_start_time("10:15")
    assert form.duration_minutes == 30
    form.set_end_time("11:15")
    assert form.duration_minutes == 60


# =============================================================================
# EVENT CLICKS
# =============================================================================


@pytest.fixture
def entries(monday):
    return [
        TimeEntry(id=21, task_id=5, task_name="Design review", work_date="2024-06-03T00:00:00.000Z", hours="1.5",
                  description="Mockups"),
        TimeEntry(id=22, task_id=6, task_name="QA", work_date=monday.isoformat(), hours=1,
                  start_time="15:00", end_time="16:00"),
    ]


def test_click_on_allocation_opens_project(today, sample_payload):
    from models.records import TaskAllocation

    allocations = [TaskAllocation.model_validate(a) for a in sample_payload["taskAllocations"]]
    events = assemble_calendar_events(today, task_allocations=allocations)
    event = next(e for e in events if e.category == "task")
    assert dispatch_event_click(event, []) == OpenProject(path="/projects/7")


def test_click_on_packed_entry_opens_edit_form_with_drawn_times(today, entries):
    events = assemble_calendar_events(today, time_entries=entries)
    event = next(e for e in events if e.id == "entry-21")
    action = dispatch_event_click(event, entries)
    assert isinstance(action, EditTimeEntry)
    assert action.entry is entries[0]
    assert action.form == TimeEntryForm(
        id=21,
        task_id=5,
        task_name="Design review",
        work_date="2024-06-03",
        hours=1.5,
        start_time="09:00",
        end_time="10:30",
        description="Mockups",
    )


def test_click_on_timed_entry_keeps_its_own_times(today, entries):
    events = assemble_calendar_events(today, time_entries=entries)
    event = next(e for e in events if e.id == "entry-22")
    action = dispatch_event_click(event, entries)
    assert (action.form.start_time, action.form.end_time) == ("15:00", "16:00")


def test_click_on_deleted_entry_does_nothing(today, entries):
    events = assemble_calendar_events(today, time_entries=entries)
    event = next(e for e in events if e.id == "entry-21")
    assert dispatch_event_click(event, entries[1:]) is None


def test_click_on_lunch_does_nothing(today):
    event = assemble_calendar_events(today)[0]
    assert dispatch_event_click(event, []) is None


def test_update_and_delete_requests(today, entries):
    events = assemble_calendar_events(today, time_entries=entries)
    form = dispatch_event_click(next(e for e in events if e.id == "entry-22"), entries).form
    form.set_hours(2)

    update = build_time_entry_update_request(form)
    assert update.method == "PUT"
    assert update.path == "/api/time-entries/22"
    assert update.body == {
        "workDate": "2024-06-03",
        "hours": 2.0,
        "description": "",
        "startTime": "15:00",
        "endTime": "17:00",
    }

    delete = build_time_entry_delete_request(form)
    assert delete.method == "DELETE"
    assert delete.path == "/api/time-entries/22"
    assert delete.body is None


def test_update_requires_existing_entry(slot):
    with pytest.raises(ValueError):
        build_time_entry_update_request(time_entry_form_for_slot(slot, task_id=5))
