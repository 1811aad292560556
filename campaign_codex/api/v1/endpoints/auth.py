import logging

from fastapi import APIRouter, HTTPException, Request, status

from campaign_codex.api.deps import CurrentUser, SessionDep
from campaign_codex.core.config import settings
from campaign_codex.core.messages import AuthMessages
from campaign_codex.core.rate_limit import limiter
from campaign_codex.core.security import create_access_token
from campaign_codex.models.user import User
from campaign_codex.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    PasswordResetRequest,
    PasswordResetSubmit,
    RegisterRequest,
)
from campaign_codex.schemas.user import UserRead, UserSummary
from campaign_codex.services import email as email_service
from campaign_codex.services import user_tokens
from campaign_codex.services import users as users_service

router = APIRouter()
logger = logging.getLogger(__name__)


def _auth_response(user: User) -> AuthResponse:
    token = create_access_token(subject=user.id, username=user.username)
    return AuthResponse(token=token, user=UserSummary.model_validate(user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def register(request: Request, payload: RegisterRequest, session: SessionDep) -> AuthResponse:
    user = await users_service.create_user(
        session,
        username=payload.username,
        email=payload.email,
        password=payload.password,
    )
    logger.info("Registered user %s", user.id)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def login(request: Request, payload: LoginRequest, session: SessionDep) -> AuthResponse:
    user = await users_service.authenticate(session, login=payload.username, password=payload.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=AuthMessages.INVALID_CREDENTIALS)
    return _auth_response(user)


@router.get("/me", response_model=UserRead)
async def read_me(current_user: CurrentUser) -> User:
    return current_user


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def forgot_password(request: Request, payload: PasswordResetRequest, session: SessionDep) -> MessageResponse:
    """Issue a reset token; the answer is identical whether or not the account exists."""
    user = await users_service.get_user_by_email(session, payload.email)
    if user is None:
        return MessageResponse(message=AuthMessages.RESET_REQUESTED)

    token = await user_tokens.issue_password_reset(session, user_id=user.id)
    try:
        await email_service.send_password_reset_email(user, token)
    except email_service.EmailNotConfiguredError:
        logger.warning("SMTP not configured; skipping password reset email for user %s", user.id)
    except RuntimeError as exc:
        logger.error("Failed to send password reset email: %s", exc)
    return MessageResponse(message=AuthMessages.RESET_REQUESTED)


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def reset_password(request: Request, payload: PasswordResetSubmit, session: SessionDep) -> MessageResponse:
    await user_tokens.redeem_password_reset(session, token=payload.token, password=payload.password)
    return MessageResponse(message=AuthMessages.RESET_COMPLETE)
