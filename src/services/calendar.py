"""
Calendar event fetching and writes.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta, timezone
from typing import Any

from core.bubble_client import BubbleClient, get_bubble_client
from core.config import BUBBLE_TYPES
from core.dates import get_spanned_dates, to_iso
from core.validation import validate_form
from models.entities import CalendarEvent
from models.forms import CreateCalendarEventForm, UpdateCalendarEventForm
from services.conversion import calendar_event_dto_to_model, calendar_event_model_to_dto
from services.queries import (
    CONTAINS,
    EQUALS,
    GREATER_THAN,
    LESS_THAN,
    Constraint,
    Page,
    company_constraint,
    create_object,
    fetch_all,
    fetch_object,
    not_deleted_constraint,
    soft_delete_object,
    update_object,
)

CALENDAR_EVENT_TYPE = BUBBLE_TYPES["calendar_event"]


async def fetch_calendar_events(
    company_id: str,
    project_id: str | None = None,
    task_id: str | None = None,
    start_from: datetime | None = None,
    start_to: datetime | None = None,
    end_from: datetime | None = None,
    team_member_id: str | None = None,
    client: BubbleClient | None = None,
) -> Page:
    """
    Fetch all live calendar events of a company, sorted by start date.

    Events without usable dates are skipped and counted in Page.skipped.
    """
    constraints = [company_constraint(company_id), not_deleted_constraint()]
    if project_id:
        constraints.append(Constraint("projectId", EQUALS, project_id))
    if task_id:
        constraints.append(Constraint("taskId", EQUALS, task_id))
    if start_from is not None:
        constraints.append(Constraint("startDate", GREATER_THAN, to_iso(start_from)))
    if start_to is not None:
        constraints.append(Constraint("startDate", LESS_THAN, to_iso(start_to)))
    if end_from is not None:
        constraints.append(Constraint("endDate", GREATER_THAN, to_iso(end_from)))
    if team_member_id:
        constraints.append(Constraint("teamMembers", CONTAINS, team_member_id))

    return await fetch_all(
        client or get_bubble_client(),
        CALENDAR_EVENT_TYPE,
        calendar_event_dto_to_model,
        constraints=constraints,
        sort_field="startDate",
    )


async def fetch_events_for_date_range(
    company_id: str,
    start_date: date,
    end_date: date,
    team_member_id: str | None = None,
    client: BubbleClient | None = None,
) -> Page:
    """
    Fetch events starting within [start_date, end_date] (whole days, UTC).
    """
    start_dt = datetime.combine(start_date, datetime.min.time()).replace(tzinfo=timezone.utc)
    # End date should include the full day
    end_dt = datetime.combine(end_date + timedelta(days=1), datetime.min.time()).replace(
        tzinfo=timezone.utc
    )

    return await fetch_calendar_events(
        company_id,
        start_from=start_dt,
        start_to=end_dt,
        team_member_id=team_member_id,
        client=client,
    )


async def fetch_calendar_event(event_id: str, client: BubbleClient | None = None) -> CalendarEvent | None:
    return await fetch_object(
        client or get_bubble_client(), CALENDAR_EVENT_TYPE, event_id, calendar_event_dto_to_model
    )


async def create_calendar_event(data: Mapping[str, Any], client: BubbleClient | None = None) -> str:
    form = validate_form(CreateCalendarEventForm, data)
    fields = form.model_dump(exclude_none=True)
    fields.setdefault("end_date", form.start_date)
    return await create_object(
        client or get_bubble_client(), CALENDAR_EVENT_TYPE, calendar_event_model_to_dto(fields)
    )


async def update_calendar_event(data: Mapping[str, Any], client: BubbleClient | None = None) -> None:
    form = validate_form(UpdateCalendarEventForm, data)
    fields = form.model_dump(exclude_unset=True, exclude={"id"})
    await update_object(
        client or get_bubble_client(), CALENDAR_EVENT_TYPE, form.id, calendar_event_model_to_dto(fields)
    )


async def delete_calendar_event(event_id: str, client: BubbleClient | None = None) -> None:
    await soft_delete_object(client or get_bubble_client(), CALENDAR_EVENT_TYPE, event_id)


def group_events_by_day(events: Iterable[CalendarEvent]) -> dict[date, list[CalendarEvent]]:
    """Index events under every day they span (multi-day events appear on each)."""
    by_day: dict[date, list[CalendarEvent]] = defaultdict(list)
    for event in events:
        for day in get_spanned_dates(event.start_date, event.end_date):
            by_day[day].append(event)
    return dict(by_day)
