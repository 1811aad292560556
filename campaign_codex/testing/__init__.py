"""
Shared test utilities and factories.

Re-exports all factory functions for convenient imports:
    from campaign_codex.testing import create_user, create_campaign, get_auth_headers
"""

from campaign_codex.testing.factories import (
    DEFAULT_PASSWORD,
    add_participant,
    create_campaign,
    create_character,
    create_game_session,
    create_location,
    create_user,
    get_auth_headers,
    get_auth_token,
)

__all__ = [
    "DEFAULT_PASSWORD",
    "add_participant",
    "create_campaign",
    "create_character",
    "create_game_session",
    "create_location",
    "create_user",
    "get_auth_headers",
    "get_auth_token",
]
