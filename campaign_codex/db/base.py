"""Import all models for Alembic or metadata creation."""

from campaign_codex.models.user import User
from campaign_codex.models.user_token import UserToken
from campaign_codex.models.campaign import Campaign, CampaignParticipant
from campaign_codex.models.character import Character
from campaign_codex.models.location import Location
from campaign_codex.models.faction import Faction
from campaign_codex.models.world_info import WorldInfo
from campaign_codex.models.game_session import GameSession, PlayerSessionNote, SessionNote
from campaign_codex.models.quest import Quest, QuestLink, QuestMilestone, QuestObjective, QuestSession
from campaign_codex.models.creature import Creature
from campaign_codex.models.content import ContentItem
from campaign_codex.models.tag import EntityTag, Tag
from campaign_codex.models.image import Image

__all__ = [
    "User",
    "UserToken",
    "Campaign",
    "CampaignParticipant",
    "Character",
    "Location",
    "Faction",
    "WorldInfo",
    "GameSession",
    "SessionNote",
    "PlayerSessionNote",
    "Quest",
    "QuestLink",
    "QuestObjective",
    "QuestMilestone",
    "QuestSession",
    "Creature",
    "ContentItem",
    "Tag",
    "EntityTag",
    "Image",
]
