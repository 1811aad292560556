"""Write and read helpers shared by the campaign record services."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.exceptions import NotFoundError
from campaign_codex.models.campaign import ParticipantRole
from campaign_codex.models.user import User
from campaign_codex.services import tags as tags_service
from campaign_codex.services.entities import delete_entity_tags
from campaign_codex.services.visibility import visibility_clause


def _column_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def stamp_new(record: SQLModel, *, user_id: int) -> SQLModel:
    record.created_by_user_id = user_id
    record.last_updated_by_user_id = user_id
    return record


def apply_changes(record: SQLModel, changes: Mapping[str, Any], *, user_id: Optional[int] = None) -> SQLModel:
    """Copy supplied values onto a record and bump its audit columns."""
    for field, value in changes.items():
        setattr(record, field, _column_value(value))
    if user_id is not None and hasattr(record, "last_updated_by_user_id"):
        record.last_updated_by_user_id = user_id
    record.updated_at = datetime.now(timezone.utc)
    return record


def new_record(model: type[SQLModel], values: Mapping[str, Any], **extra: Any) -> SQLModel:
    return model(**{key: _column_value(value) for key, value in {**values, **extra}.items()})


async def save(session: AsyncSession, record: SQLModel) -> SQLModel:
    session.add(record)
    await session.commit()
    await session.refresh(record)
    return record


async def delete_record(session: AsyncSession, record: SQLModel, *, entity_type: str) -> None:
    """Delete a record together with its tag associations."""
    await delete_entity_tags(session, entity_type=entity_type, entity_id=record.id)
    await session.delete(record)
    await session.commit()


async def _author_usernames(session: AsyncSession, records: Sequence[SQLModel]) -> dict[int, str]:
    user_ids = {
        user_id
        for record in records
        for user_id in (record.created_by_user_id, record.last_updated_by_user_id)
        if user_id is not None
    }
    if not user_ids:
        return {}
    result = await session.exec(select(User.id, User.username).where(User.id.in_(user_ids)))
    return {user_id: username for user_id, username in result.all()}


async def with_tags(
    session: AsyncSession,
    records: Sequence[SQLModel],
    *,
    entity_type: str,
    campaign_id: int,
) -> list[dict[str, Any]]:
    """Serialize records to dicts carrying their ``tags`` and author usernames."""
    tags_by_id = await tags_service.get_tags_for_entities(
        session,
        entity_type=entity_type,
        entity_ids=[record.id for record in records],
        campaign_id=campaign_id,
    )
    usernames = await _author_usernames(session, records)
    return [
        {
            **record.model_dump(),
            "created_by_username": usernames.get(record.created_by_user_id),
            "last_updated_by_username": usernames.get(record.last_updated_by_user_id),
            "tags": tags_by_id.get(record.id, []),
        }
        for record in records
    ]


async def one_with_tags(session: AsyncSession, record: SQLModel, *, entity_type: str, campaign_id: int) -> dict[str, Any]:
    payloads = await with_tags(session, [record], entity_type=entity_type, campaign_id=campaign_id)
    return payloads[0]


async def get_in_campaign(
    session: AsyncSession,
    model: type[SQLModel],
    *,
    campaign_id: int,
    record_id: int,
    not_found: str,
) -> Any:
    """Load a record by id within a campaign, whatever its visibility."""
    result = await session.exec(select(model).where(model.id == record_id, model.campaign_id == campaign_id))
    record = result.one_or_none()
    if record is None:
        raise NotFoundError(not_found)
    return record


async def get_visible_in_campaign(
    session: AsyncSession,
    model: type[SQLModel],
    *,
    campaign_id: int,
    record_id: int,
    role: Optional[ParticipantRole],
    not_found: str,
) -> Any:
    """Like :func:`get_in_campaign`, but records hidden from ``role`` read as missing."""
    result = await session.exec(
        select(model).where(
            model.id == record_id,
            model.campaign_id == campaign_id,
            visibility_clause(model, role),
        )
    )
    record = result.one_or_none()
    if record is None:
        raise NotFoundError(not_found)
    return record
