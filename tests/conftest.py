"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import httpx
import pytest

# Add src (and tests, for fixtures/) to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from core.bubble_client import BubbleClient  # noqa: E402

BASE_URL = "https://store.test/api/1.1"


@pytest.fixture
def sample_project_dto():
    """The dashboard example: legacy status, numeric date, object references."""
    return {
        "_id": "p1",
        "projectName": "Roof",
        "status": "Pending",
        "startDate": 1700000000,
        "client": {"unique_id": "c9", "text": "Acme"},
        "company": "co1",
        "tasks": ["t1", {"unique_id": "t2", "text": "Gutters"}],
        "address": {"address": "1 Main St", "lat": 49.28, "lng": -123.12},
        "completion": "45",
    }


@pytest.fixture
def sample_calendar_event_dto():
    return {
        "_id": "e1",
        "companyId": "co1",
        "projectId": "p1",
        "title": "Install",
        "color": "59779F",
        "startDate": "2025-11-18T09:00:00.000Z",
        "endDate": "2025-11-20T17:00:00.000Z",
        "duration": 3,
        "teamMembers": ["u1", {"unique_id": "u2", "text": "Sam"}],
    }


@pytest.fixture
def sample_user_dto():
    return {
        "_id": "u1",
        "nameFirst": "Sam",
        "nameLast": "Rivera",
        "employeeType": "Field Crew",
        "userType": "Employee",
        "company": "co1",
        "email": "profile@example.com",
        "phone": 6045550100,
        "authentication": {"email": {"email": "login@example.com", "email_confirmed": True}},
    }


@pytest.fixture
def sample_company_dto():
    return {
        "_id": "co1",
        "companyName": "Rivera Roofing",
        "companyId": "OPS-0001",
        "location": {"address": "2 Harbour Rd", "lat": 49.3, "lng": -123.1},
        "logo": {"url": "https://cdn.example.com/logo.png"},
        "admin": ["u9"],
        "seatedEmployees": ["u1", "u9"],
        "taskTypes": ["tt1"],
        "subscriptionStatus": "Active",
        "subscriptionPlan": "TEAM",
        "subscriptionPeriod": "Monthly",
        "maxSeats": 10,
        "trialEndDate": 1700000000000,
    }


@pytest.fixture
def make_client():
    """
    Build a BubbleClient backed by httpx.MockTransport.

    Rate limiting and retry delays default to zero so tests run instantly.
    """

    def _make(handler, **kwargs) -> BubbleClient:
        options = {
            "base_url": BASE_URL,
            "token": "test-token",
            "min_request_interval_ms": 0,
            "max_retries": 3,
            "retry_delay_ms": 0,
        }
        options.update(kwargs)
        return BubbleClient(transport=httpx.MockTransport(handler), **options)

    return _make
