"""
Client and sub-client reads and writes.
"""

from collections.abc import Mapping
from typing import Any

from core.bubble_client import BubbleClient, get_bubble_client
from core.config import BUBBLE_TYPES
from core.validation import validate_form
from models.entities import Client, SubClient
from models.forms import (
    CreateClientForm,
    CreateSubClientForm,
    UpdateClientForm,
    UpdateSubClientForm,
)
from services.conversion import (
    client_dto_to_model,
    client_model_to_dto,
    sub_client_dto_to_model,
    sub_client_model_to_dto,
)
from services.queries import (
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

CLIENT_TYPE = BUBBLE_TYPES["client"]
SUB_CLIENT_TYPE = BUBBLE_TYPES["sub_client"]


def _blank_email_to_none(fields: dict[str, Any]) -> dict[str, Any]:
    if fields.get("email") == "":
        fields["email"] = None
    return fields


# =============================================================================
# CLIENTS
# =============================================================================


async def fetch_clients(company_id: str, client: BubbleClient | None = None) -> Page:
    constraints = [company_constraint(company_id, key="parentCompany"), not_deleted_constraint()]
    return await fetch_all(
        client or get_bubble_client(),
        CLIENT_TYPE,
        client_dto_to_model,
        constraints=constraints,
        sort_field="name",
    )


async def fetch_client(client_id: str, client: BubbleClient | None = None) -> Client | None:
    return await fetch_object(client or get_bubble_client(), CLIENT_TYPE, client_id, client_dto_to_model)


async def create_client(data: Mapping[str, Any], client: BubbleClient | None = None) -> str:
    form = validate_form(CreateClientForm, data)
    fields = _blank_email_to_none(form.model_dump(exclude_none=True))
    return await create_object(client or get_bubble_client(), CLIENT_TYPE, client_model_to_dto(fields))


async def update_client(data: Mapping[str, Any], client: BubbleClient | None = None) -> None:
    form = validate_form(UpdateClientForm, data)
    fields = _blank_email_to_none(form.model_dump(exclude_unset=True, exclude={"id"}))
    await update_object(client or get_bubble_client(), CLIENT_TYPE, form.id, client_model_to_dto(fields))


async def delete_client(client_id: str, client: BubbleClient | None = None) -> None:
    await soft_delete_object(client or get_bubble_client(), CLIENT_TYPE, client_id)


# =============================================================================
# SUB CLIENTS
# =============================================================================


async def fetch_sub_clients(parent_client_id: str, client: BubbleClient | None = None) -> Page:
    constraints = [Constraint("parentClient", EQUALS, parent_client_id), not_deleted_constraint()]
    return await fetch_all(
        client or get_bubble_client(),
        SUB_CLIENT_TYPE,
        sub_client_dto_to_model,
        constraints=constraints,
    )


async def fetch_sub_client(sub_client_id: str, client: BubbleClient | None = None) -> SubClient | None:
    return await fetch_object(
        client or get_bubble_client(), SUB_CLIENT_TYPE, sub_client_id, sub_client_dto_to_model
    )


async def create_sub_client(data: Mapping[str, Any], client: BubbleClient | None = None) -> str:
    form = validate_form(CreateSubClientForm, data)
    fields = _blank_email_to_none(form.model_dump(exclude_none=True))
    return await create_object(
        client or get_bubble_client(), SUB_CLIENT_TYPE, sub_client_model_to_dto(fields)
    )


async def update_sub_client(data: Mapping[str, Any], client: BubbleClient | None = None) -> None:
    form = validate_form(UpdateSubClientForm, data)
    fields = _blank_email_to_none(form.model_dump(exclude_unset=True, exclude={"id"}))
    await update_object(
        client or get_bubble_client(), SUB_CLIENT_TYPE, form.id, sub_client_model_to_dto(fields)
    )


async def delete_sub_client(sub_client_id: str, client: BubbleClient | None = None) -> None:
    await soft_delete_object(client or get_bubble_client(), SUB_CLIENT_TYPE, sub_client_id)
