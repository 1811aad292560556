from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Sequence

from campaign_codex.core.config import settings as app_config
from campaign_codex.models.user import User

logger = logging.getLogger(__name__)


class EmailNotConfiguredError(RuntimeError):
    pass


@dataclass
class SMTPConfig:
    host: str
    port: int
    secure: bool
    username: str | None
    password: str | None
    from_address: str


def _build_smtp_config() -> SMTPConfig:
    host = app_config.SMTP_HOST
    from_address = app_config.SMTP_FROM_ADDRESS
    if not host or not from_address:
        raise EmailNotConfiguredError("SMTP host or from address missing")
    port = app_config.SMTP_PORT or (465 if app_config.SMTP_SECURE else 587)
    return SMTPConfig(
        host=host,
        port=port,
        secure=app_config.SMTP_SECURE,
        username=app_config.SMTP_USERNAME,
        password=app_config.SMTP_PASSWORD,
        from_address=from_address,
    )


def _deliver(config: SMTPConfig, message: EmailMessage) -> None:
    context = ssl.create_default_context()
    if config.secure:
        with smtplib.SMTP_SSL(config.host, config.port, context=context) as client:
            _send_via_client(client, config, message)
    else:
        with smtplib.SMTP(config.host, config.port) as client:
            client.ehlo()
            try:
                client.starttls(context=context)
                client.ehlo()
            except smtplib.SMTPException:
                logger.debug("STARTTLS not available for SMTP host %s:%s", config.host, config.port)
            _send_via_client(client, config, message)


def _send_via_client(client: smtplib.SMTP, config: SMTPConfig, message: EmailMessage) -> None:
    if config.username and config.password:
        client.login(config.username, config.password)
    client.send_message(message)


async def send_email(
    *,
    recipients: Sequence[str],
    subject: str,
    text_body: str,
    html_body: str | None = None,
) -> None:
    if not recipients:
        raise ValueError("At least one recipient email is required")
    config = _build_smtp_config()
    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = config.from_address
    message["To"] = ", ".join(recipients)
    message.set_content(text_body)
    if html_body:
        message.add_alternative(html_body, subtype="html")
    try:
        await asyncio.to_thread(_deliver, config, message)
    except (smtplib.SMTPException, OSError) as exc:
        logger.exception("Failed to send email: %s", exc)
        raise RuntimeError("Failed to send email") from exc


def _frontend_url(path: str) -> str:
    base = app_config.APP_URL.rstrip("/")
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base}{path}"


async def send_password_reset_email(user: User, token: str) -> None:
    link = _frontend_url(f"/reset-password?token={token}")
    html_body = f"""
    <p>Hello {user.username},</p>
    <p>We received a request to reset your Campaign Codex password.</p>
    <p><a href="{link}">Reset password</a></p>
    <p>This link expires in one hour. If you didn't request this, you can ignore this email.</p>
    """
    text_body = f"Reset your Campaign Codex password by visiting {link}\n\nThis link expires in one hour."
    await send_email(
        recipients=[user.email],
        subject="Reset your Campaign Codex password",
        text_body=text_body,
        html_body=html_body,
    )
