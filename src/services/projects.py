"""
Project reads and writes.

Status changes and deletion run through backend workflows so the store can
cascade them to tasks and calendar events.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from core.bubble_client import BubbleClient, get_bubble_client
from core.config import BUBBLE_TYPES
from core.dates import to_iso
from core.validation import validate_form
from models.entities import Project
from models.enums import ProjectStatus
from models.forms import CreateProjectForm, UpdateProjectForm
from services.conversion import project_dto_to_model, project_model_to_dto
from services.queries import (
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
    run_workflow,
    update_object,
)

PROJECT_TYPE = BUBBLE_TYPES["project"]


async def fetch_projects(
    company_id: str,
    status: ProjectStatus | None = None,
    client_id: str | None = None,
    start_after: datetime | None = None,
    start_before: datetime | None = None,
    client: BubbleClient | None = None,
) -> Page:
    """All live projects of a company, optionally filtered."""
    constraints = [company_constraint(company_id, key="company"), not_deleted_constraint()]
    if status is not None:
        constraints.append(Constraint("status", EQUALS, ProjectStatus(status).value))
    if client_id:
        constraints.append(Constraint("client", EQUALS, client_id))
    if start_after is not None:
        constraints.append(Constraint("startDate", GREATER_THAN, to_iso(start_after)))
    if start_before is not None:
        constraints.append(Constraint("startDate", LESS_THAN, to_iso(start_before)))

    return await fetch_all(
        client or get_bubble_client(),
        PROJECT_TYPE,
        project_dto_to_model,
        constraints=constraints,
        sort_field="startDate",
    )


async def fetch_project(project_id: str, client: BubbleClient | None = None) -> Project | None:
    return await fetch_object(client or get_bubble_client(), PROJECT_TYPE, project_id, project_dto_to_model)


async def create_project(data: Mapping[str, Any], client: BubbleClient | None = None) -> str:
    """Validate and create a project; returns the new id."""
    form = validate_form(CreateProjectForm, data)
    body = project_model_to_dto(form.model_dump(exclude_none=True))
    return await create_object(client or get_bubble_client(), PROJECT_TYPE, body)


async def update_project(data: Mapping[str, Any], client: BubbleClient | None = None) -> None:
    """
    Write the fields present in data.

    A status change is routed through update_project_status after the other
    fields are written.
    """
    client = client or get_bubble_client()
    form = validate_form(UpdateProjectForm, data)
    fields = form.model_dump(exclude_unset=True, exclude={"id"})
    status = fields.pop("status", None)

    await update_object(client, PROJECT_TYPE, form.id, project_model_to_dto(fields))
    if status is not None:
        await update_project_status(form.id, status, client=client)


async def update_project_status(
    project_id: str, status: ProjectStatus | str, client: BubbleClient | None = None
) -> None:
    await run_workflow(
        client or get_bubble_client(),
        "update_project_status",
        {"project_id": project_id, "status": ProjectStatus(status).value},
    )


async def delete_project(project_id: str, client: BubbleClient | None = None) -> None:
    """Soft delete; the workflow also retires the project's tasks and events."""
    await run_workflow(client or get_bubble_client(), "delete_project", {"project_id": project_id})
