"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.records import LunchConfig, WorkStartTimes


@pytest.fixture
def monday():
    """A Monday inside the default window of `today`."""
    return date(2024, 6, 3)


@pytest.fixture
def today():
    """Reference date; its week starts on Sunday 2024-06-02."""
    return date(2024, 6, 5)


@pytest.fixture
def lunch():
    return LunchConfig(lunch_time="12:00", lunch_duration_minutes=60)


@pytest.fixture
def no_lunch():
    return LunchConfig(lunch_time="12:00", lunch_duration_minutes=0)


@pytest.fixture
def work_start():
    return WorkStartTimes(monday="09:00")


@pytest.fixture
def sample_payload():
    """Dashboard payload in the backend's PascalCase record shape."""
    return {
        "today": "2024-06-05",
        "taskAllocations": [
            {
                "Id": 11,
                "TaskId": 5,
                "TaskName": "Design review",
                "ProjectId": 7,
                "ProjectName": "Website Relaunch",
                "AllocationDate": "2024-06-03T00:00:00.000Z",
                "AllocatedHours": 2,
                "StartTime": "09:00",
                "EndTime": "11:00",
            }
        ],
        "recurringOccurrences": [],
        "timeEntries": [
            {
                "Id": 21,
                "TaskId": 5,
                "TaskName": "Design review",
                "WorkDate": "2024-06-03",
                "Hours": "1.5",
            }
        ],
        "callRecords": [
            {
                "Id": 31,
                "CallDate": "2024-06-03",
                "StartTime": "10:00",
                "DurationMinutes": 45,
                "CallType": "Phone",
                "Participants": "Ana, Bo",
                "Subject": "Kickoff",
            }
        ],
        "lunch": {"LunchTime": "12:00", "LunchDurationMinutes": 60},
        "workStartTimes": {"monday": "09:00"},
    }
