from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.exceptions import InvalidRequestError
from campaign_codex.core.messages import AuthMessages
from campaign_codex.core.security import get_password_hash, verify_password
from campaign_codex.models.user import User


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user(session: AsyncSession, user_id: int) -> Optional[User]:
    result = await session.exec(select(User).where(User.id == user_id))
    return result.one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.exec(select(User).where(func.lower(User.email) == normalize_email(email)))
    return result.one_or_none()


async def get_user_by_login(session: AsyncSession, login: str) -> Optional[User]:
    """Look a user up by username or e-mail address."""
    login = login.strip()
    stmt = select(User).where(or_(User.username == login, func.lower(User.email) == login.lower()))
    result = await session.exec(stmt)
    return result.first()


async def create_user(session: AsyncSession, *, username: str, email: str, password: str) -> User:
    email = normalize_email(email)
    existing = await session.exec(
        select(User.id).where(or_(User.username == username, func.lower(User.email) == email))
    )
    if existing.first() is not None:
        raise InvalidRequestError(AuthMessages.USER_EXISTS)

    user = User(username=username, email=email, password_hash=get_password_hash(password))
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise InvalidRequestError(AuthMessages.USER_EXISTS) from exc
    await session.refresh(user)
    return user


async def authenticate(session: AsyncSession, *, login: str, password: str) -> Optional[User]:
    user = await get_user_by_login(session, login)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def set_password(user: User, password: str) -> None:
    user.password_hash = get_password_hash(password)
    user.updated_at = datetime.now(timezone.utc)
