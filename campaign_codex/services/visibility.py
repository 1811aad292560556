"""Role-based visibility rules shared by every campaign record.

The same policy is expressed twice: as a SQL predicate pushed into list and
detail queries, and as a pure function for records that are already loaded.
Both must agree:

- ``dm`` sees every record that is not ``hidden``.
- ``player`` sees ``player-visible`` records, plus any player-type character
  assigned to them, whatever its visibility.
- no role sees nothing.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import and_, false, or_

from campaign_codex.models.campaign import ParticipantRole
from campaign_codex.models.character import Character, CharacterType
from campaign_codex.models.visibility import Visibility


def is_visible(
    visibility: str,
    role: Optional[ParticipantRole],
    *,
    owned_player_character: bool = False,
) -> bool:
    if role == ParticipantRole.dm:
        return visibility != Visibility.hidden.value
    if role == ParticipantRole.player:
        return visibility == Visibility.player_visible.value or owned_player_character
    return False


def can_view_character(character: Character, role: Optional[ParticipantRole], user_id: int) -> bool:
    owned = _character_type(character) == CharacterType.player.value and character.player_user_id == user_id
    return is_visible(character.visibility, role, owned_player_character=owned)


def visibility_clause(model: Any, role: Optional[ParticipantRole]):
    """SQL form of :func:`is_visible` for any model with a ``visibility`` column."""
    if role == ParticipantRole.dm:
        return model.visibility != Visibility.hidden.value
    if role == ParticipantRole.player:
        return model.visibility == Visibility.player_visible.value
    return false()


def character_visibility_clause(role: Optional[ParticipantRole], user_id: int):
    if role == ParticipantRole.player:
        return or_(
            Character.visibility == Visibility.player_visible.value,
            and_(
                Character.type == CharacterType.player,
                Character.player_user_id == user_id,
            ),
        )
    return visibility_clause(Character, role)


def sanitize_character(payload: dict[str, Any], role: Optional[ParticipantRole]) -> dict[str, Any]:
    """Strip the stat block from NPCs and antagonists shown to players.

    Returns a new dict; DMs get the payload back untouched.
    """
    if role == ParticipantRole.dm:
        return payload
    if _character_type(payload) == CharacterType.player.value:
        return payload
    return {**payload, "character_sheet": None}


def _character_type(source: Any) -> str:
    value = source.get("type") if isinstance(source, dict) else getattr(source, "type", None)
    return value.value if isinstance(value, CharacterType) else str(value)
