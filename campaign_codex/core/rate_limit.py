"""Request throttling shared by the API routers.

Every route gets ``RATE_LIMIT_DEFAULT`` through the middleware installed in
``campaign_codex.main``; the auth routes tighten that with ``AUTH_RATE_LIMIT``.
"""

from typing import Optional

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from campaign_codex.core.config import settings

PROXY_HEADERS = ("X-Forwarded-For", "X-Real-IP")


def _forwarded_ip(request: Request) -> Optional[str]:
    for header in PROXY_HEADERS:
        value = request.headers.get(header)
        if value:
            # X-Forwarded-For lists the client first, then each proxy
            return value.split(",")[0].strip()
    return None


def client_key(request: Request) -> str:
    """Throttle key for a request.

    Proxy headers are only trusted with ``BEHIND_PROXY`` set, otherwise any
    client could pick its own bucket.
    """
    if settings.BEHIND_PROXY:
        forwarded = _forwarded_ip(request)
        if forwarded:
            return forwarded
    return get_remote_address(request)


limiter = Limiter(key_func=client_key, default_limits=[settings.RATE_LIMIT_DEFAULT])
