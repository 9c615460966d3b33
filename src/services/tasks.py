"""
Task reads and writes.

A task may own a calendar event. Creating a task with schedule data creates
the event first and links both ways; deleting a task retires its event too.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from core.bubble_client import BubbleClient, get_bubble_client
from core.config import BUBBLE_TYPES
from core.validation import validate_form
from models.entities import Task
from models.enums import TaskStatus
from models.forms import CreateCalendarEventForm, CreateTaskForm, UpdateTaskForm
from services.conversion import (
    calendar_event_model_to_dto,
    task_dto_to_model,
    task_model_to_dto,
)
from services.queries import (
    CONTAINS,
    EQUALS,
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

logger = logging.getLogger(__name__)

TASK_TYPE = BUBBLE_TYPES["task"]
CALENDAR_EVENT_TYPE = BUBBLE_TYPES["calendar_event"]


async def fetch_tasks(
    company_id: str,
    project_id: str | None = None,
    status: TaskStatus | None = None,
    team_member_id: str | None = None,
    client: BubbleClient | None = None,
) -> Page:
    constraints = [company_constraint(company_id), not_deleted_constraint()]
    if project_id:
        constraints.append(Constraint("projectId", EQUALS, project_id))
    if status is not None:
        constraints.append(Constraint("status", EQUALS, TaskStatus(status).value))
    if team_member_id:
        constraints.append(Constraint("teamMembers", CONTAINS, team_member_id))

    return await fetch_all(
        client or get_bubble_client(),
        TASK_TYPE,
        task_dto_to_model,
        constraints=constraints,
        sort_field="taskIndex",
    )


async def fetch_project_tasks(project_id: str, client: BubbleClient | None = None) -> Page:
    constraints = [Constraint("projectId", EQUALS, project_id), not_deleted_constraint()]
    return await fetch_all(
        client or get_bubble_client(),
        TASK_TYPE,
        task_dto_to_model,
        constraints=constraints,
        sort_field="taskIndex",
    )


async def fetch_task(task_id: str, client: BubbleClient | None = None) -> Task | None:
    return await fetch_object(client or get_bubble_client(), TASK_TYPE, task_id, task_dto_to_model)


async def create_task(
    data: Mapping[str, Any],
    calendar_event: Mapping[str, Any] | None = None,
    client: BubbleClient | None = None,
) -> str:
    """
    Create a task, and its calendar event when schedule data is given.

    Returns the new task id. Both payloads are validated before anything is
    written.
    """
    client = client or get_bubble_client()
    form = validate_form(CreateTaskForm, data)

    event_form = None
    if calendar_event is not None:
        event_data = {
            "project_id": form.project_id,
            "company_id": form.company_id,
            "color": form.color,
            "team_member_ids": form.team_member_ids,
            **calendar_event,
        }
        event_form = validate_form(CreateCalendarEventForm, event_data)

    fields = form.model_dump(exclude_none=True)
    event_id = None
    if event_form is not None:
        event_fields = event_form.model_dump(exclude_none=True)
        event_fields.setdefault("end_date", event_form.start_date)
        event_body = calendar_event_model_to_dto(event_fields)
        event_id = await create_object(client, CALENDAR_EVENT_TYPE, event_body)
        fields["calendar_event_id"] = event_id

    task_id = await create_object(client, TASK_TYPE, task_model_to_dto(fields))

    if event_id is not None:
        await update_object(client, CALENDAR_EVENT_TYPE, event_id, {"taskId": task_id})
    return task_id


async def update_task(data: Mapping[str, Any], client: BubbleClient | None = None) -> None:
    form = validate_form(UpdateTaskForm, data)
    fields = form.model_dump(exclude_unset=True, exclude={"id"})
    await update_object(client or get_bubble_client(), TASK_TYPE, form.id, task_model_to_dto(fields))


async def update_task_status(
    task_id: str, status: TaskStatus | str, client: BubbleClient | None = None
) -> None:
    await update_object(
        client or get_bubble_client(), TASK_TYPE, task_id, {"status": TaskStatus(status).value}
    )


async def delete_task(
    task_id: str, calendar_event_id: str | None = None, client: BubbleClient | None = None
) -> None:
    """Soft delete a task and, when given, its calendar event."""
    client = client or get_bubble_client()
    await soft_delete_object(client, TASK_TYPE, task_id)
    if calendar_event_id:
        await soft_delete_object(client, CALENDAR_EVENT_TYPE, calendar_event_id)


async def reorder_tasks(task_ids: Iterable[str], client: BubbleClient | None = None) -> None:
    """Persist a new task order; taskIndex follows the given sequence."""
    client = client or get_bubble_client()
    task_ids = list(task_ids)
    for index, task_id in enumerate(task_ids):
        await update_object(client, TASK_TYPE, task_id, {"taskIndex": index})
    logger.info("Reordered %d tasks", len(task_ids))
