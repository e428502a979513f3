import time

import httpx
import pytest

from booking.errors import TokenRefreshFailed
from booking.services.token_service import ensure_valid_access_token


def _now_ms():
    return int(time.time() * 1000)


def _http(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_valid_token_is_returned_without_refresh():
    def handler(request):
        raise AssertionError("token endpoint must not be called")

    expiry = _now_ms() + 3600 * 1000
    token = ensure_valid_access_token("access", "refresh", expiry, http_client=_http(handler))

    assert token.token == "access"
    assert token.expiry_date == expiry
    assert token.refreshed is False


def test_expired_token_is_refreshed():
    seen = {}

    def handler(request):
        seen["body"] = request.content.decode()
        return httpx.Response(200, json={"access_token": "fresh", "expires_in": 3599})

    token = ensure_valid_access_token(
        "stale", "refresh-abc", _now_ms() - 1000, http_client=_http(handler)
    )

    assert token.token == "fresh"
    assert token.refreshed is True
    assert token.expiry_date > _now_ms()
    assert "grant_type=refresh_token" in seen["body"]
    assert "refresh_token=refresh-abc" in seen["body"]


def test_token_about_to_expire_is_refreshed():
    def handler(request):
        return httpx.Response(200, json={"access_token": "fresh"})

    token = ensure_valid_access_token(
        "stale", "refresh", _now_ms() + 30 * 1000, http_client=_http(handler)
    )

    assert token.refreshed is True


def test_expired_token_without_refresh_token_fails():
    with pytest.raises(TokenRefreshFailed):
        ensure_valid_access_token("stale", None, _now_ms() - 1000)


def test_refresh_rejected_by_google_fails():
    def handler(request):
        return httpx.Response(400, json={"error": "invalid_grant"})

    with pytest.raises(TokenRefreshFailed):
        ensure_valid_access_token("stale", "revoked", _now_ms() - 1000, http_client=_http(handler))


def test_refresh_network_error_fails():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(TokenRefreshFailed):
        ensure_valid_access_token("stale", "refresh", _now_ms() - 1000, http_client=_http(handler))
