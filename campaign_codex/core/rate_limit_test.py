import pytest
from starlette.requests import Request

from campaign_codex.core.config import settings
from campaign_codex.core.rate_limit import client_key


def _request(headers: dict[str, str]) -> Request:
    return Request(
        {
            "type": "http",
            "headers": [(name.lower().encode(), value.encode()) for name, value in headers.items()],
            "client": ("10.0.0.1", 4242),
        }
    )


@pytest.mark.unit
def test_proxy_headers_ignored_without_proxy(monkeypatch):
    monkeypatch.setattr(settings, "BEHIND_PROXY", False)

    assert client_key(_request({"X-Forwarded-For": "203.0.113.7"})) == "10.0.0.1"


@pytest.mark.unit
def test_forwarded_for_uses_first_hop(monkeypatch):
    monkeypatch.setattr(settings, "BEHIND_PROXY", True)

    assert client_key(_request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})) == "203.0.113.7"


@pytest.mark.unit
def test_real_ip_used_when_forwarded_for_missing(monkeypatch):
    monkeypatch.setattr(settings, "BEHIND_PROXY", True)

    assert client_key(_request({"X-Real-IP": " 198.51.100.2 "})) == "198.51.100.2"
