from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Path, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import ValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.messages import AuthMessages, CampaignMessages
from campaign_codex.core.security import decode_access_token
from campaign_codex.db.session import get_session
from campaign_codex.models.campaign import Campaign, ParticipantRole
from campaign_codex.models.user import User
from campaign_codex.schemas.token import TokenPayload
from campaign_codex.services import campaigns as campaigns_service
from campaign_codex.services import users as users_service

SessionDep = Annotated[AsyncSession, Depends(get_session)]

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    session: SessionDep,
) -> User:
    if credentials is None or not credentials.credentials:
        raise _unauthorized(AuthMessages.NOT_AUTHENTICATED)

    try:
        token_data = TokenPayload(**decode_access_token(credentials.credentials))
        user_id = int(token_data.sub)
    except (JWTError, ValidationError, TypeError, ValueError) as exc:
        raise _unauthorized(AuthMessages.INVALID_TOKEN) from exc

    user = await users_service.get_user(session, user_id)
    if user is None:
        raise _unauthorized(AuthMessages.USER_NOT_FOUND)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


@dataclass(frozen=True)
class CampaignContext:
    """Per-request view of the caller's standing in the campaign named by the path."""

    campaign: Campaign
    role: ParticipantRole
    user: User

    @property
    def campaign_id(self) -> int:
        return self.campaign.id  # type: ignore[return-value]

    @property
    def user_id(self) -> int:
        return self.user.id  # type: ignore[return-value]

    @property
    def is_dm(self) -> bool:
        return self.role == ParticipantRole.dm

    @property
    def is_owner(self) -> bool:
        return self.campaign.user_id == self.user.id


async def get_campaign_context(
    session: SessionDep,
    current_user: CurrentUser,
    campaign_id: Annotated[int, Path(description="Campaign id")],
) -> CampaignContext:
    campaign = await campaigns_service.get_campaign(session, campaign_id)
    if campaign is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CampaignMessages.NOT_FOUND)
    role = await campaigns_service.resolve_role(session, campaign_id=campaign.id, user_id=current_user.id)
    if role is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=CampaignMessages.NO_ACCESS)
    return CampaignContext(campaign=campaign, role=role, user=current_user)


def require_campaign_roles(*roles: ParticipantRole) -> Callable:
    async def dependency(context: Annotated[CampaignContext, Depends(get_campaign_context)]) -> CampaignContext:
        if roles and context.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=CampaignMessages.DM_REQUIRED)
        return context

    return dependency


async def require_campaign_owner(
    context: Annotated[CampaignContext, Depends(get_campaign_context)],
) -> CampaignContext:
    if not context.is_owner:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=CampaignMessages.OWNER_REQUIRED)
    return context


CampaignAccess = Annotated[CampaignContext, Depends(get_campaign_context)]
CampaignDM = Annotated[CampaignContext, Depends(require_campaign_roles(ParticipantRole.dm))]
CampaignOwner = Annotated[CampaignContext, Depends(require_campaign_owner)]
