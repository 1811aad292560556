from typing import Any, List, Optional

from fastapi import APIRouter, status

from campaign_codex.api.deps import CampaignAccess, CampaignContext, CampaignDM, SessionDep
from campaign_codex.core.messages import SessionMessages
from campaign_codex.models.game_session import GameSession, SessionNote
from campaign_codex.schemas.auth import MessageResponse
from campaign_codex.schemas.session import (
    PlayerNoteCreate,
    PlayerNoteRead,
    PlayerNoteUpdate,
    PostNoteRequest,
    SessionCreate,
    SessionDetail,
    SessionNoteCreate,
    SessionNoteRead,
    SessionRead,
    SessionUpdate,
)
from campaign_codex.services import game_sessions as sessions_service
from campaign_codex.services import records

router = APIRouter()

ENTITY_TYPE = sessions_service.ENTITY_TYPE


async def _load(session, context: CampaignContext, session_id: int) -> GameSession:
    return await records.get_in_campaign(
        session,
        GameSession,
        campaign_id=context.campaign_id,
        record_id=session_id,
        not_found=SessionMessages.NOT_FOUND,
    )


async def _load_visible(session, context: CampaignContext, session_id: int) -> GameSession:
    return await records.get_visible_in_campaign(
        session,
        GameSession,
        campaign_id=context.campaign_id,
        record_id=session_id,
        role=context.role,
        not_found=SessionMessages.NOT_FOUND,
    )


@router.get("/{campaign_id}/sessions", response_model=List[SessionRead])
async def list_sessions(
    session: SessionDep,
    context: CampaignAccess,
    search: Optional[str] = None,
) -> List[dict[str, Any]]:
    sessions = await sessions_service.list_sessions(
        session,
        campaign_id=context.campaign_id,
        role=context.role,
        search=search,
    )
    return await records.with_tags(session, sessions, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.get("/{campaign_id}/sessions/{session_id}", response_model=SessionDetail)
async def read_session(session_id: int, session: SessionDep, context: CampaignAccess) -> dict[str, Any]:
    """Session with its notes; DM entity notes are left out for players."""
    game_session = await _load_visible(session, context, session_id)
    payload = await records.one_with_tags(
        session, game_session, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id
    )
    payload["session_notes"] = (
        await sessions_service.list_session_notes(session, game_session) if context.is_dm else []
    )
    payload["player_notes"] = await sessions_service.list_player_notes(session, game_session, role=context.role)
    return payload


@router.post("/{campaign_id}/sessions", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
async def create_session(session_in: SessionCreate, session: SessionDep, context: CampaignAccess) -> dict[str, Any]:
    game_session = await sessions_service.create_session(
        session,
        campaign_id=context.campaign_id,
        role=context.role,
        user_id=context.user_id,
        payload=session_in,
    )
    return await records.one_with_tags(
        session, game_session, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id
    )


@router.put("/{campaign_id}/sessions/{session_id}", response_model=SessionRead)
async def update_session(
    session_id: int,
    session_in: SessionUpdate,
    session: SessionDep,
    context: CampaignAccess,
) -> dict[str, Any]:
    game_session = await _load(session, context, session_id)
    game_session = await sessions_service.update_session(
        session,
        game_session,
        role=context.role,
        user_id=context.user_id,
        payload=session_in,
    )
    return await records.one_with_tags(
        session, game_session, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id
    )


@router.delete("/{campaign_id}/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: int, session: SessionDep, context: CampaignAccess) -> None:
    game_session = await _load(session, context, session_id)
    await sessions_service.delete_session(session, game_session, role=context.role, user_id=context.user_id)


@router.post(
    "/{campaign_id}/sessions/{session_id}/notes",
    response_model=SessionNoteRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_session_note(
    session_id: int,
    note_in: SessionNoteCreate,
    session: SessionDep,
    context: CampaignDM,
) -> SessionNote:
    game_session = await _load(session, context, session_id)
    return await sessions_service.add_session_note(session, game_session, note_in)


@router.post("/{campaign_id}/sessions/{session_id}/post-notes", response_model=MessageResponse)
async def post_session_note(
    session_id: int,
    note_in: PostNoteRequest,
    session: SessionDep,
    context: CampaignAccess,
) -> MessageResponse:
    """Append a note from this session to a character, location, faction, quest or world info entry."""
    game_session = await _load_visible(session, context, session_id)
    await sessions_service.post_note_to_entity(
        session,
        game_session,
        role=context.role,
        user_id=context.user_id,
        payload=note_in,
    )
    return MessageResponse(message=SessionMessages.NOTE_POSTED)


@router.get("/{campaign_id}/sessions/{session_id}/player-notes", response_model=List[PlayerNoteRead])
async def list_player_notes(session_id: int, session: SessionDep, context: CampaignAccess) -> List[dict[str, Any]]:
    game_session = await _load_visible(session, context, session_id)
    return await sessions_service.list_player_notes(session, game_session, role=context.role)


@router.post(
    "/{campaign_id}/sessions/{session_id}/player-notes",
    response_model=PlayerNoteRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_player_note(
    session_id: int,
    note_in: PlayerNoteCreate,
    session: SessionDep,
    context: CampaignAccess,
) -> dict[str, Any]:
    game_session = await _load_visible(session, context, session_id)
    return await sessions_service.add_player_note(session, game_session, user=context.user, payload=note_in)


@router.put("/{campaign_id}/sessions/{session_id}/player-notes/{note_id}", response_model=PlayerNoteRead)
async def update_player_note(
    session_id: int,
    note_id: int,
    note_in: PlayerNoteUpdate,
    session: SessionDep,
    context: CampaignAccess,
) -> dict[str, Any]:
    game_session = await _load_visible(session, context, session_id)
    note = await sessions_service.get_player_note(session, game_session, note_id)
    return await sessions_service.update_player_note(
        session,
        note,
        role=context.role,
        user_id=context.user_id,
        payload=note_in,
    )


@router.delete(
    "/{campaign_id}/sessions/{session_id}/player-notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_player_note(session_id: int, note_id: int, session: SessionDep, context: CampaignAccess) -> None:
    game_session = await _load_visible(session, context, session_id)
    note = await sessions_service.get_player_note(session, game_session, note_id)
    await sessions_service.delete_player_note(session, note, role=context.role, user_id=context.user_id)
