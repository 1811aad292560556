from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import aliased
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.exceptions import InvalidRequestError
from campaign_codex.core.messages import LocationMessages
from campaign_codex.db.query import apply_filters, apply_ordering, search_across
from campaign_codex.models.campaign import ParticipantRole
from campaign_codex.models.location import Location
from campaign_codex.schemas.location import LocationCreate, LocationUpdate
from campaign_codex.schemas.query import FilterCondition, FilterOp, SortDir
from campaign_codex.services import records
from campaign_codex.services.visibility import visibility_clause

logger = logging.getLogger(__name__)

ENTITY_TYPE = "location"


def parse_parent_filter(raw: Optional[str]) -> Optional[FilterCondition]:
    """Turn the ``parent_id`` query value into a filter; ``null`` selects root locations."""
    if raw is None or raw == "":
        return None
    if raw.lower() == "null":
        return FilterCondition(field="parent_id", op=FilterOp.is_null, value=True)
    try:
        return FilterCondition(field="parent_id", value=int(raw))
    except ValueError as exc:
        raise InvalidRequestError(LocationMessages.INVALID_PARENT) from exc


async def list_locations(
    session: AsyncSession,
    *,
    campaign_id: int,
    role: Optional[ParticipantRole],
    parent_id: Optional[str] = None,
    search: Optional[str] = None,
) -> list[tuple[Location, Optional[str]]]:
    """Visible locations with the name of their parent, ordered by name."""
    parent = aliased(Location)
    stmt = (
        select(Location, parent.name)
        .join(parent, parent.id == Location.parent_location_id, isouter=True)
        .where(Location.campaign_id == campaign_id, visibility_clause(Location, role))
    )
    conditions = [FilterCondition(field="search", value=search)]
    parent_condition = parse_parent_filter(parent_id)
    if parent_condition is not None:
        conditions.append(parent_condition)
    stmt = apply_filters(
        stmt,
        conditions,
        {
            "parent_id": Location.parent_location_id,
            "search": search_across(Location.name, Location.description),
        },
    )
    stmt = apply_ordering(stmt, [(Location.name, SortDir.asc)])
    result = await session.exec(stmt)
    return list(result.all())


async def parent_name(session: AsyncSession, location: Location) -> Optional[str]:
    if location.parent_location_id is None:
        return None
    result = await session.exec(select(Location.name).where(Location.id == location.parent_location_id))
    return result.one_or_none()


async def _check_parent(
    session: AsyncSession,
    *,
    campaign_id: int,
    parent_id: Optional[int],
    location_id: Optional[int] = None,
) -> None:
    """Validate a prospective parent: same campaign, not itself, not a descendant."""
    if parent_id is None:
        return
    if location_id is not None and parent_id == location_id:
        raise InvalidRequestError(LocationMessages.SELF_PARENT)

    result = await session.exec(
        select(Location.id).where(Location.id == parent_id, Location.campaign_id == campaign_id)
    )
    if result.one_or_none() is None:
        raise InvalidRequestError(LocationMessages.INVALID_PARENT)

    if location_id is None:
        return
    # Walk up from the new parent; meeting the location means it would become its own ancestor
    seen: set[int] = set()
    current: Optional[int] = parent_id
    while current is not None and current not in seen:
        if current == location_id:
            raise InvalidRequestError(LocationMessages.PARENT_CYCLE)
        seen.add(current)
        result = await session.exec(select(Location.parent_location_id).where(Location.id == current))
        current = result.one_or_none()


async def create_location(
    session: AsyncSession,
    *,
    campaign_id: int,
    user_id: int,
    payload: LocationCreate,
) -> Location:
    await _check_parent(session, campaign_id=campaign_id, parent_id=payload.parent_location_id)
    location = records.new_record(Location, payload.model_dump(), campaign_id=campaign_id)
    records.stamp_new(location, user_id=user_id)
    location = await records.save(session, location)
    logger.info("Location %s created in campaign %s", location.id, campaign_id)
    return location


async def update_location(
    session: AsyncSession,
    location: Location,
    *,
    user_id: int,
    payload: LocationUpdate,
) -> Location:
    changes = payload.model_dump(exclude_unset=True)
    for field in ("name", "visibility"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    if "parent_location_id" in changes:
        await _check_parent(
            session,
            campaign_id=location.campaign_id,
            parent_id=changes["parent_location_id"],
            location_id=location.id,
        )
    records.apply_changes(location, changes, user_id=user_id)
    return await records.save(session, location)


async def delete_location(session: AsyncSession, location: Location) -> None:
    result = await session.exec(select(func.count(Location.id)).where(Location.parent_location_id == location.id))
    if result.one() > 0:
        raise InvalidRequestError(LocationMessages.HAS_CHILDREN)
    await records.delete_record(session, location, entity_type=ENTITY_TYPE)
    logger.info("Location %s deleted from campaign %s", location.id, location.campaign_id)


async def present_locations(
    session: AsyncSession,
    rows: list[tuple[Location, Optional[str]]],
    *,
    campaign_id: int,
) -> list[dict[str, Any]]:
    payloads = await records.with_tags(
        session,
        [location for location, _ in rows],
        entity_type=ENTITY_TYPE,
        campaign_id=campaign_id,
    )
    return [{**payload, "parent_location_name": name} for payload, (_, name) in zip(payloads, rows)]


async def present_location(session: AsyncSession, location: Location) -> dict[str, Any]:
    name = await parent_name(session, location)
    payloads = await present_locations(session, [(location, name)], campaign_id=location.campaign_id)
    return payloads[0]
