from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.exceptions import InvalidRequestError, NotFoundError, PermissionDeniedError
from campaign_codex.core.messages import SessionMessages
from campaign_codex.db.query import apply_filters, apply_ordering, search_across
from campaign_codex.models.campaign import ParticipantRole
from campaign_codex.models.game_session import GameSession, PlayerSessionNote, SessionNote
from campaign_codex.models.user import User
from campaign_codex.models.visibility import Visibility
from campaign_codex.schemas.query import FilterCondition, SortDir
from campaign_codex.schemas.session import (
    PlayerNoteCreate,
    PlayerNoteUpdate,
    PostNoteRequest,
    SessionCreate,
    SessionNoteCreate,
    SessionUpdate,
)
from campaign_codex.services import entities as entities_service
from campaign_codex.services import records
from campaign_codex.services.visibility import visibility_clause

logger = logging.getLogger(__name__)

ENTITY_TYPE = "session"

# Record types a session note can be posted to, and the text column that receives it
POST_NOTE_TARGETS: dict[str, str] = {
    "character": "description",
    "location": "description",
    "faction": "description",
    "world_info": "content",
    "quest": "description",
}


async def list_sessions(
    session: AsyncSession,
    *,
    campaign_id: int,
    role: Optional[ParticipantRole],
    search: Optional[str] = None,
) -> list[GameSession]:
    stmt = select(GameSession).where(GameSession.campaign_id == campaign_id, visibility_clause(GameSession, role))
    stmt = apply_filters(
        stmt,
        [FilterCondition(field="search", value=search)],
        {"search": search_across(GameSession.title, GameSession.summary)},
    )
    stmt = apply_ordering(
        stmt,
        [
            (GameSession.date_played, SortDir.desc),
            (GameSession.session_number, SortDir.desc),
            (GameSession.created_at, SortDir.desc),
        ],
        nulls_last=True,
    )
    result = await session.exec(stmt)
    return list(result.all())


async def next_session_number(session: AsyncSession, *, campaign_id: int) -> int:
    result = await session.exec(
        select(func.max(GameSession.session_number)).where(GameSession.campaign_id == campaign_id)
    )
    current = result.one_or_none()
    return (current or 0) + 1


def _ensure_author(game_session: GameSession, *, role: ParticipantRole, user_id: int, message: str) -> None:
    if role == ParticipantRole.player and game_session.created_by_user_id != user_id:
        raise PermissionDeniedError(message)


async def create_session(
    session: AsyncSession,
    *,
    campaign_id: int,
    role: ParticipantRole,
    user_id: int,
    payload: SessionCreate,
) -> GameSession:
    values = payload.model_dump()
    if values.get("session_number") is None:
        values["session_number"] = await next_session_number(session, campaign_id=campaign_id)
    if values.get("visibility") is None:
        values["visibility"] = Visibility.player_visible if role == ParticipantRole.player else Visibility.dm_only
    game_session = records.new_record(GameSession, values, campaign_id=campaign_id)
    records.stamp_new(game_session, user_id=user_id)
    game_session = await records.save(session, game_session)
    logger.info("Session %s created in campaign %s by user %s", game_session.id, campaign_id, user_id)
    return game_session


async def update_session(
    session: AsyncSession,
    game_session: GameSession,
    *,
    role: ParticipantRole,
    user_id: int,
    payload: SessionUpdate,
) -> GameSession:
    _ensure_author(game_session, role=role, user_id=user_id, message=SessionMessages.EDIT_FORBIDDEN)
    changes = payload.model_dump(exclude_unset=True)
    for field in ("session_number", "visibility"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    records.apply_changes(game_session, changes, user_id=user_id)
    return await records.save(session, game_session)


async def delete_session(
    session: AsyncSession,
    game_session: GameSession,
    *,
    role: ParticipantRole,
    user_id: int,
) -> None:
    _ensure_author(game_session, role=role, user_id=user_id, message=SessionMessages.DELETE_FORBIDDEN)
    await records.delete_record(session, game_session, entity_type=ENTITY_TYPE)
    logger.info("Session %s deleted from campaign %s", game_session.id, game_session.campaign_id)


async def list_session_notes(session: AsyncSession, game_session: GameSession) -> list[SessionNote]:
    result = await session.exec(
        select(SessionNote).where(SessionNote.session_id == game_session.id).order_by(SessionNote.created_at)
    )
    return list(result.all())


async def add_session_note(session: AsyncSession, game_session: GameSession, payload: SessionNoteCreate) -> SessionNote:
    if payload.entity_type not in entities_service.ENTITY_MODELS:
        raise InvalidRequestError(SessionMessages.INVALID_ENTITY_TYPE)
    note = SessionNote(session_id=game_session.id, **payload.model_dump())
    return await records.save(session, note)


async def post_note_to_entity(
    session: AsyncSession,
    game_session: GameSession,
    *,
    role: ParticipantRole,
    user_id: int,
    payload: PostNoteRequest,
) -> None:
    """Append a session note to the text of another campaign record."""
    _ensure_author(game_session, role=role, user_id=user_id, message=SessionMessages.POST_FORBIDDEN)
    column = POST_NOTE_TARGETS.get(payload.entity_type)
    if column is None:
        raise InvalidRequestError(SessionMessages.INVALID_ENTITY_TYPE)

    if role == ParticipantRole.dm:
        target = await entities_service.get_entity(
            session,
            entity_type=payload.entity_type,
            entity_id=payload.entity_id,
            campaign_id=game_session.campaign_id,
        )
        if target is None:
            raise NotFoundError(SessionMessages.ENTITY_NOT_FOUND)
    else:
        target = await entities_service.get_visible_entity(
            session,
            entity_type=payload.entity_type,
            entity_id=payload.entity_id,
            campaign_id=game_session.campaign_id,
            role=role,
            user_id=user_id,
        )

    appended = f"\n\n{payload.note_content}\n\n[From Session {game_session.session_number}]"
    records.apply_changes(target, {column: (getattr(target, column) or "") + appended}, user_id=user_id)
    await records.save(session, target)
    logger.info(
        "Session %s note posted to %s %s", game_session.id, payload.entity_type, payload.entity_id
    )


async def list_player_notes(
    session: AsyncSession,
    game_session: GameSession,
    *,
    role: Optional[ParticipantRole],
) -> list[dict[str, Any]]:
    stmt = (
        select(PlayerSessionNote, User.username)
        .join(User, User.id == PlayerSessionNote.user_id)
        .where(PlayerSessionNote.session_id == game_session.id)
        .order_by(PlayerSessionNote.created_at, PlayerSessionNote.id)
    )
    if role != ParticipantRole.dm:
        stmt = stmt.where(PlayerSessionNote.visibility == Visibility.player_visible.value)
    result = await session.exec(stmt)
    return [{**note.model_dump(), "username": username} for note, username in result.all()]


async def get_player_note(session: AsyncSession, game_session: GameSession, note_id: int) -> PlayerSessionNote:
    result = await session.exec(
        select(PlayerSessionNote).where(
            PlayerSessionNote.id == note_id,
            PlayerSessionNote.session_id == game_session.id,
        )
    )
    note = result.one_or_none()
    if note is None:
        raise NotFoundError(SessionMessages.NOTE_NOT_FOUND)
    return note


async def add_player_note(
    session: AsyncSession,
    game_session: GameSession,
    *,
    user: User,
    payload: PlayerNoteCreate,
) -> dict[str, Any]:
    note = PlayerSessionNote(
        session_id=game_session.id,
        user_id=user.id,
        note_content=payload.note_content,
        visibility=payload.visibility,
    )
    note = await records.save(session, note)
    return {**note.model_dump(), "username": user.username}


async def update_player_note(
    session: AsyncSession,
    note: PlayerSessionNote,
    *,
    role: ParticipantRole,
    user_id: int,
    payload: PlayerNoteUpdate,
) -> dict[str, Any]:
    if role == ParticipantRole.player and note.user_id != user_id:
        raise PermissionDeniedError(SessionMessages.NOTE_EDIT_FORBIDDEN)
    changes = {field: value for field, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    records.apply_changes(note, changes)
    note = await records.save(session, note)
    author = await session.get(User, note.user_id)
    return {**note.model_dump(), "username": author.username if author else None}


async def delete_player_note(
    session: AsyncSession,
    note: PlayerSessionNote,
    *,
    role: ParticipantRole,
    user_id: int,
) -> None:
    if role == ParticipantRole.player and note.user_id != user_id:
        raise PermissionDeniedError(SessionMessages.NOTE_DELETE_FORBIDDEN)
    await session.delete(note)
    await session.commit()
