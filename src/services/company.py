"""
Company reads, seat management and task types.

Task types belong to a company through the company's taskTypes list, so new
task types are appended there after creation.
"""

import logging
from collections.abc import Mapping
from typing import Any

from core.bubble_client import BubbleClient, get_bubble_client
from core.config import BUBBLE_TYPES, DEFAULT_TASK_TYPES
from core.validation import validate_form
from models.entities import Company, TaskType
from models.forms import CreateTaskTypeForm, UpdateTaskTypeForm
from services.conversion import (
    company_dto_to_model,
    task_type_dto_to_model,
    task_type_model_to_dto,
)
from services.queries import (
    IN,
    Constraint,
    Page,
    create_object,
    fetch_all,
    fetch_object,
    not_deleted_constraint,
    soft_delete_object,
    update_object,
)

logger = logging.getLogger(__name__)

COMPANY_TYPE = BUBBLE_TYPES["company"]
TASK_TYPE_TYPE = BUBBLE_TYPES["task_type"]


class CompanyNotFound(LookupError):
    pass


async def fetch_company(company_id: str, client: BubbleClient | None = None) -> Company | None:
    return await fetch_object(client or get_bubble_client(), COMPANY_TYPE, company_id, company_dto_to_model)


async def _require_company(company_id: str, client: BubbleClient) -> Company:
    company = await fetch_company(company_id, client=client)
    if company is None:
        raise CompanyNotFound(company_id)
    return company


# =============================================================================
# SEATS
# =============================================================================


async def add_seated_employee(company_id: str, user_id: str, client: BubbleClient | None = None) -> None:
    client = client or get_bubble_client()
    company = await _require_company(company_id, client)
    if user_id in company.seated_employee_ids:
        return
    seated = [*company.seated_employee_ids, user_id]
    await update_object(client, COMPANY_TYPE, company_id, {"seatedEmployees": seated})


async def remove_seated_employee(company_id: str, user_id: str, client: BubbleClient | None = None) -> None:
    client = client or get_bubble_client()
    company = await _require_company(company_id, client)
    if user_id not in company.seated_employee_ids:
        return
    seated = [seat for seat in company.seated_employee_ids if seat != user_id]
    await update_object(client, COMPANY_TYPE, company_id, {"seatedEmployees": seated})


# =============================================================================
# TASK TYPES
# =============================================================================


async def fetch_task_types(company: Company, client: BubbleClient | None = None) -> Page:
    """Live task types listed on the company."""
    if not company.task_type_ids:
        return Page()
    constraints = [Constraint("_id", IN, company.task_type_ids), not_deleted_constraint()]
    return await fetch_all(
        client or get_bubble_client(),
        TASK_TYPE_TYPE,
        task_type_dto_to_model,
        constraints=constraints,
    )


async def fetch_task_type(task_type_id: str, client: BubbleClient | None = None) -> TaskType | None:
    return await fetch_object(
        client or get_bubble_client(), TASK_TYPE_TYPE, task_type_id, task_type_dto_to_model
    )


async def create_task_type(data: Mapping[str, Any], client: BubbleClient | None = None) -> str:
    """Create a task type and attach it to its company."""
    client = client or get_bubble_client()
    form = validate_form(CreateTaskTypeForm, data)
    company = await _require_company(form.company_id, client)

    task_type_id = await create_object(
        client, TASK_TYPE_TYPE, task_type_model_to_dto(form.model_dump(exclude={"company_id"}))
    )
    await update_object(
        client, COMPANY_TYPE, company.id, {"taskTypes": [*company.task_type_ids, task_type_id]}
    )
    return task_type_id


async def update_task_type(data: Mapping[str, Any], client: BubbleClient | None = None) -> None:
    form = validate_form(UpdateTaskTypeForm, data)
    fields = form.model_dump(exclude_unset=True, exclude={"id"})
    await update_object(client or get_bubble_client(), TASK_TYPE_TYPE, form.id, task_type_model_to_dto(fields))


async def delete_task_type(task_type_id: str, client: BubbleClient | None = None) -> None:
    await soft_delete_object(client or get_bubble_client(), TASK_TYPE_TYPE, task_type_id)


async def create_default_task_types(company_id: str, client: BubbleClient | None = None) -> list[str]:
    """Seed the standard task types for a new company; returns the new ids."""
    client = client or get_bubble_client()
    company = await _require_company(company_id, client)

    created = []
    for display, color in DEFAULT_TASK_TYPES:
        form = validate_form(
            CreateTaskTypeForm,
            {"display": display, "color": color, "company_id": company_id, "is_default": True},
        )
        body = task_type_model_to_dto(form.model_dump(exclude={"company_id"}))
        created.append(await create_object(client, TASK_TYPE_TYPE, body))

    await update_object(client, COMPANY_TYPE, company_id, {"taskTypes": [*company.task_type_ids, *created]})
    logger.info("Created %d default task types for company %s", len(created), company_id)
    return created
