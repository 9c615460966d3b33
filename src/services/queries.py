"""
List queries against the Data API: search constraints, paging, conversion.
"""

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass, field
from typing import Any

from core.bubble_client import BubbleClient
from core.config import BUBBLE_PAGE_LIMIT
from core.dates import to_iso, utc_now
from core.validation import parse_dto
from models.dto import CreationResponse, ListPayload
from services.conversion import convert_many

logger = logging.getLogger(__name__)

# Constraint types understood by the Data API search endpoint
EQUALS = "equals"
NOT_EQUAL = "not equal"
IS_EMPTY = "is_empty"
IS_NOT_EMPTY = "is_not_empty"
TEXT_CONTAINS = "text contains"
GREATER_THAN = "greater than"
LESS_THAN = "less than"
IN = "in"
NOT_IN = "not in"
CONTAINS = "contains"
NOT_CONTAINS = "not contains"


@dataclass
class Constraint:
    key: str
    constraint_type: str
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.constraint_type in (IS_EMPTY, IS_NOT_EMPTY):
            data.pop("value")
        return data


@dataclass
class Page:
    """One converted page of a list response."""

    items: list = field(default_factory=list)
    skipped: int = 0
    count: int = 0
    remaining: int = 0
    cursor: int = 0

    @property
    def has_more(self) -> bool:
        return self.remaining > 0

    @property
    def next_cursor(self) -> int:
        return self.cursor + self.count


def company_constraint(company_id: str, key: str = "companyId") -> Constraint:
    return Constraint(key, EQUALS, company_id)


def not_deleted_constraint() -> Constraint:
    return Constraint("deletedAt", IS_EMPTY)


def object_path(type_name: str, object_id: str | None = None) -> str:
    """Data API path for a type: "Sub Client" -> "/obj/sub client"."""
    path = f"/obj/{type_name.lower()}"
    if object_id:
        path = f"{path}/{object_id}"
    return path


def build_list_params(
    constraints: Iterable[Constraint] | None = None,
    limit: int = BUBBLE_PAGE_LIMIT,
    cursor: int = 0,
    sort_field: str | None = None,
    descending: bool = False,
) -> dict[str, Any]:
    """Query string for a list request; limit is capped at the API maximum."""
    params: dict[str, Any] = {
        "limit": max(1, min(limit, BUBBLE_PAGE_LIMIT)),
        "cursor": max(0, cursor),
    }
    constraint_list = [c.to_dict() for c in constraints or []]
    if constraint_list:
        params["constraints"] = json.dumps(constraint_list)
    if sort_field:
        params["sort_field"] = sort_field
        params["descending"] = "true" if descending else "false"
    return params


async def fetch_page(
    client: BubbleClient,
    type_name: str,
    converter: Callable[..., Any],
    constraints: Iterable[Constraint] | None = None,
    limit: int = BUBBLE_PAGE_LIMIT,
    cursor: int = 0,
    sort_field: str | None = None,
    descending: bool = False,
    **converter_kwargs: Any,
) -> Page:
    """
    Fetch and convert one page of objects.

    Records that fail their structural invariants are dropped and counted in
    Page.skipped; a malformed envelope raises ValidationError.
    """
    params = build_list_params(constraints, limit, cursor, sort_field, descending)
    payload = await client.get(object_path(type_name), params=params)
    listing = parse_dto(ListPayload[dict[str, Any]], payload)

    batch = convert_many(converter, listing.results, **converter_kwargs)
    return Page(
        items=batch.items,
        skipped=batch.skipped,
        count=listing.count or len(listing.results),
        remaining=listing.remaining,
        cursor=listing.cursor,
    )


async def fetch_all(
    client: BubbleClient,
    type_name: str,
    converter: Callable[..., Any],
    constraints: Iterable[Constraint] | None = None,
    sort_field: str | None = None,
    descending: bool = False,
    **converter_kwargs: Any,
) -> Page:
    """
    Follow the cursor until the store reports nothing remaining.

    Returns a single Page holding every converted item and the total skipped.
    """
    constraints = list(constraints or [])
    result = Page()
    cursor = 0

    while True:
        page = await fetch_page(
            client,
            type_name,
            converter,
            constraints=constraints,
            cursor=cursor,
            sort_field=sort_field,
            descending=descending,
            **converter_kwargs,
        )
        result.items.extend(page.items)
        result.skipped += page.skipped
        result.count += page.count
        if not page.has_more or page.count == 0:
            break
        cursor = page.next_cursor

    logger.debug("Fetched %d %s records (%d skipped)", len(result.items), type_name, result.skipped)
    return result


async def fetch_object(
    client: BubbleClient,
    type_name: str,
    object_id: str,
    converter: Callable[..., Any],
    **converter_kwargs: Any,
) -> Any:
    """Fetch one object by id; None when it fails conversion."""
    payload = await client.get(object_path(type_name, object_id))
    return converter(payload, **converter_kwargs)


async def create_object(client: BubbleClient, type_name: str, body: dict[str, Any]) -> str:
    """Create an object and return its new id."""
    payload = await client.post(object_path(type_name), body)
    created = parse_dto(CreationResponse, payload)
    logger.info("Created %s %s", type_name, created.id)
    return created.id


async def update_object(
    client: BubbleClient, type_name: str, object_id: str, body: dict[str, Any]
) -> None:
    """PATCH the given fields only."""
    if not body:
        return
    await client.patch(object_path(type_name, object_id), body)
    logger.info("Updated %s %s: %s", type_name, object_id, ", ".join(sorted(body)))


async def soft_delete_object(client: BubbleClient, type_name: str, object_id: str) -> None:
    """Mark an object deleted by stamping deletedAt."""
    await client.patch(object_path(type_name, object_id), {"deletedAt": to_iso(utc_now())})
    logger.info("Soft-deleted %s %s", type_name, object_id)


async def run_workflow(client: BubbleClient, name: str, body: dict[str, Any]) -> Any:
    """Trigger a backend workflow (/wf/<name>)."""
    logger.info("Running workflow %s", name)
    return await client.post(f"/wf/{name}", body)
