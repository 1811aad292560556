"""Single-use password reset tokens handed out by e-mail."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlmodel import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.config import settings
from campaign_codex.core.exceptions import InvalidRequestError
from campaign_codex.core.messages import AuthMessages
from campaign_codex.models.user import User
from campaign_codex.models.user_token import UserToken, UserTokenPurpose
from campaign_codex.services import users as users_service

logger = logging.getLogger(__name__)

RESET = UserTokenPurpose.password_reset


def _is_live(record: UserToken, now: datetime) -> bool:
    expires_at = record.expires_at
    # SQLite hands timestamps back without tzinfo
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return record.consumed_at is None and expires_at > now


async def issue_password_reset(session: AsyncSession, *, user_id: int) -> str:
    """Replace any outstanding reset token for ``user_id`` with a fresh one."""
    await session.exec(delete(UserToken).where(UserToken.user_id == user_id, UserToken.purpose == RESET))
    value = secrets.token_urlsafe(48)
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
    session.add(UserToken(user_id=user_id, token=value, purpose=RESET, expires_at=expires_at))
    await session.commit()
    logger.info("Password reset token issued for user %s", user_id)
    return value


async def find_reset_token(session: AsyncSession, token: str) -> Optional[UserToken]:
    result = await session.exec(select(UserToken).where(UserToken.token == token, UserToken.purpose == RESET))
    record = result.one_or_none()
    if record is None or not _is_live(record, datetime.now(timezone.utc)):
        return None
    return record


async def redeem_password_reset(session: AsyncSession, *, token: str, password: str) -> User:
    """Consume ``token`` and set the new password in the same commit."""
    record = await find_reset_token(session, token)
    user = await users_service.get_user(session, record.user_id) if record is not None else None
    if record is None or user is None:
        raise InvalidRequestError(AuthMessages.RESET_TOKEN_INVALID)

    record.consumed_at = datetime.now(timezone.utc)
    users_service.set_password(user, password)
    session.add(record)
    session.add(user)
    await session.commit()
    logger.info("Password reset for user %s", user.id)
    return user
