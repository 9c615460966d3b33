"""
User reads.

Roles are derived locally: the company's admin list wins over the employee
type stored on the user, so callers pass the company admin ids when known.
"""

from collections.abc import Iterable

from core.bubble_client import BubbleClient, get_bubble_client
from core.config import BUBBLE_TYPES
from models.entities import User
from services.conversion import user_dto_to_model
from services.queries import (
    EQUALS,
    Constraint,
    Page,
    company_constraint,
    fetch_all,
    fetch_object,
    not_deleted_constraint,
    update_object,
)

USER_TYPE = BUBBLE_TYPES["user"]


async def fetch_users(
    company_id: str,
    company_admin_ids: Iterable[str] | None = None,
    employee_type: str | None = None,
    client: BubbleClient | None = None,
) -> Page:
    constraints = [company_constraint(company_id, key="company"), not_deleted_constraint()]
    if employee_type:
        constraints.append(Constraint("employeeType", EQUALS, employee_type))

    return await fetch_all(
        client or get_bubble_client(),
        USER_TYPE,
        user_dto_to_model,
        constraints=constraints,
        sort_field="nameFirst",
        company_admin_ids=list(company_admin_ids) if company_admin_ids is not None else None,
    )


async def fetch_user(
    user_id: str,
    company_admin_ids: Iterable[str] | None = None,
    client: BubbleClient | None = None,
) -> User | None:
    return await fetch_object(
        client or get_bubble_client(),
        USER_TYPE,
        user_id,
        user_dto_to_model,
        company_admin_ids=company_admin_ids,
    )


async def update_user_employee_type(
    user_id: str, employee_type: str, client: BubbleClient | None = None
) -> None:
    await update_object(client or get_bubble_client(), USER_TYPE, user_id, {"employeeType": employee_type})
