from fastapi import APIRouter

from campaign_codex.api.v1.endpoints import (
    auth,
    campaigns,
    characters,
    content,
    creatures,
    factions,
    health,
    images,
    locations,
    participants,
    quests,
    sessions,
    tags,
    world_info,
)

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(campaigns.router, prefix="/campaigns", tags=["campaigns"])
api_router.include_router(participants.router, prefix="/campaigns", tags=["participants"])
api_router.include_router(characters.router, prefix="/campaigns", tags=["characters"])
api_router.include_router(locations.router, prefix="/campaigns", tags=["locations"])
api_router.include_router(factions.router, prefix="/campaigns", tags=["factions"])
api_router.include_router(world_info.router, prefix="/campaigns", tags=["world-info"])
api_router.include_router(quests.router, prefix="/campaigns", tags=["quests"])
api_router.include_router(sessions.router, prefix="/campaigns", tags=["sessions"])
api_router.include_router(creatures.router, prefix="/campaigns", tags=["creatures"])
api_router.include_router(content.router, prefix="/campaigns", tags=["content"])
api_router.include_router(tags.router, prefix="/campaigns", tags=["tags"])
api_router.include_router(images.router, prefix="/campaigns", tags=["images"])
