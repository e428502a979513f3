# booking/services/token_service.py
import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from booking.config import get_settings
from booking.errors import TokenRefreshFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessToken:
    token: str
    expiry_date: Optional[int]  # epoch milliseconds
    refreshed: bool = False


def _now_ms() -> int:
    return int(time.time() * 1000)


def is_token_expired(expiry_date: Optional[int], skew_seconds: int = 0) -> bool:
    """
    `None` means no known expiry; such tokens are used as-is and the remote
    call surfaces a 401 if they turn out to be stale.
    """
    if expiry_date is None:
        return False
    return expiry_date <= _now_ms() + skew_seconds * 1000


def ensure_valid_access_token(
    access_token: str,
    refresh_token: Optional[str],
    expiry_date: Optional[int],
    *,
    http_client: Optional[httpx.Client] = None,
) -> AccessToken:
    """
    Return a currently valid Google access token, refreshing it if it expired
    or is about to (within TOKEN_EXPIRY_SKEW_SECONDS).

    Raises:
        TokenRefreshFailed: no refresh token, non-200 from the token endpoint,
            network error or timeout.
    """
    settings = get_settings()

    if not is_token_expired(expiry_date, settings.TOKEN_EXPIRY_SKEW_SECONDS):
        return AccessToken(token=access_token, expiry_date=expiry_date)

    if not refresh_token:
        raise TokenRefreshFailed("Access token expired and no refresh token is stored")

    logger.info("Google access token expired, refreshing")

    data = {
        "client_id": settings.GOOGLE_CLIENT_ID or "",
        "client_secret": settings.GOOGLE_CLIENT_SECRET or "",
        "refresh_token": refresh_token,
        "grant_type": "refresh_token",
    }

    client = http_client or httpx.Client(timeout=settings.CALENDAR_HTTP_TIMEOUT_SECONDS)
    try:
        response = client.post(settings.GOOGLE_TOKEN_URL, data=data)
    except httpx.HTTPError as exc:
        logger.error(f"Token refresh request failed: {exc}")
        raise TokenRefreshFailed(f"Token refresh request failed: {exc}") from exc
    finally:
        if http_client is None:
            client.close()

    if response.status_code != 200:
        logger.error(f"Token refresh failed: {response.status_code} {response.text}")
        raise TokenRefreshFailed(f"Token refresh failed with status {response.status_code}")

    tokens = response.json()
    new_access_token = tokens.get("access_token")
    if not new_access_token:
        raise TokenRefreshFailed("No access token in refresh response")

    expires_in = int(tokens.get("expires_in", 3600))
    logger.info("Google access token refreshed")
    return AccessToken(
        token=new_access_token,
        expiry_date=_now_ms() + expires_in * 1000,
        refreshed=True,
    )
