"""
Generate store-shaped (camelCase) records for tests and local experiments.

Every generator returns a plain dict exactly as the Data API would emit it;
keyword overrides replace or add fields.
"""

import random
from datetime import datetime, timedelta, timezone

from faker import Faker

fake = Faker()

PROJECT_STATUSES = ["RFQ", "Estimated", "Accepted", "In Progress", "Completed", "Closed", "Archived"]
TASK_STATUSES = ["Booked", "In Progress", "Completed", "Cancelled"]
EMPLOYEE_TYPES = ["Admin", "Office Crew", "Field Crew"]


def seed(value: int = 1234) -> None:
    """Make generated data repeatable."""
    Faker.seed(value)
    random.seed(value)


def bubble_id() -> str:
    """Ids look like '1700000000000x123456789012345678'."""
    return f"{fake.random_int(1_600_000_000_000, 1_800_000_000_000)}x{fake.random_number(digits=18, fix_len=True)}"


def iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def make_address() -> dict:
    return {
        "address": fake.address().replace("\n", ", "),
        "lat": float(fake.latitude()),
        "lng": float(fake.longitude()),
    }


def make_project_dto(company_id: str | None = None, **overrides) -> dict:
    record = {
        "_id": bubble_id(),
        "projectName": fake.catch_phrase(),
        "address": make_address(),
        "client": bubble_id(),
        "company": company_id or bubble_id(),
        "status": random.choice(PROJECT_STATUSES),
        "startDate": iso(fake.date_time_between("-30d", "+30d", tzinfo=timezone.utc)),
        "allDay": True,
        "tasks": [bubble_id() for _ in range(random.randint(0, 3))],
        "teamNotes": fake.sentence(),
        "Created Date": iso(fake.date_time_between("-1y", "-30d", tzinfo=timezone.utc)),
    }
    record.update(overrides)
    return record


def make_task_dto(company_id: str | None = None, project_id: str | None = None, **overrides) -> dict:
    record = {
        "_id": bubble_id(),
        "companyId": company_id or bubble_id(),
        "projectId": project_id or bubble_id(),
        "status": random.choice(TASK_STATUSES),
        "taskColor": fake.hex_color(),
        "taskIndex": random.randint(0, 10),
        "teamMembers": [bubble_id() for _ in range(random.randint(0, 3))],
        "type": bubble_id(),
    }
    record.update(overrides)
    return record


def make_calendar_event_dto(company_id: str | None = None, **overrides) -> dict:
    start = fake.date_time_between("-7d", "+14d", tzinfo=timezone.utc).replace(microsecond=0)
    days = random.randint(1, 4)
    record = {
        "_id": bubble_id(),
        "companyId": company_id or bubble_id(),
        "projectId": bubble_id(),
        "title": fake.bs().title(),
        "color": fake.hex_color(),
        "startDate": iso(start),
        "endDate": iso(start + timedelta(days=days - 1, hours=8)),
        "duration": days,
        "teamMembers": [bubble_id()],
    }
    record.update(overrides)
    return record


def make_client_dto(company_id: str | None = None, **overrides) -> dict:
    record = {
        "_id": bubble_id(),
        "name": fake.company(),
        "emailAddress": fake.company_email(),
        "phoneNumber": fake.msisdn(),
        "address": make_address(),
        "parentCompany": company_id or bubble_id(),
        "subClients": [],
    }
    record.update(overrides)
    return record


def make_user_dto(company_id: str | None = None, **overrides) -> dict:
    email = fake.email()
    record = {
        "_id": bubble_id(),
        "nameFirst": fake.first_name(),
        "nameLast": fake.last_name(),
        "employeeType": random.choice(EMPLOYEE_TYPES),
        "userType": "Employee",
        "company": company_id or bubble_id(),
        "email": email,
        "phone": int(fake.msisdn()),
        "authentication": {"email": {"email": email, "email_confirmed": True}},
    }
    record.update(overrides)
    return record


def make_company_dto(**overrides) -> dict:
    record = {
        "_id": bubble_id(),
        "companyName": fake.company(),
        "companyId": fake.bothify("OPS-####"),
        "location": make_address(),
        "admin": [],
        "seatedEmployees": [],
        "taskTypes": [],
        "subscriptionStatus": "active",
        "subscriptionPlan": "team",
        "maxSeats": 10,
    }
    record.update(overrides)
    return record


def list_response(results: list[dict], cursor: int = 0, remaining: int = 0) -> dict:
    """Wrap records in the Data API list envelope."""
    return {
        "response": {
            "cursor": cursor,
            "results": results,
            "count": len(results),
            "remaining": remaining,
        }
    }


if __name__ == "__main__":
    seed()
    company = make_company_dto()
    print(company)
    print(make_project_dto(company_id=company["_id"]))
    print(make_calendar_event_dto(company_id=company["_id"]))
