# booking/services/calendar_provider.py
"""
Remote calendar adapters.

Supported providers form a closed set: `get_calendar_client` has one explicit
arm per implemented IntegrationAppType and rejects everything else with
UnsupportedProvider. Clients are built per call from the resolved token and
never share credentials between requests.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional
from urllib.parse import quote

import httpx

from booking.config import get_settings
from booking.errors import CalendarProviderError, UnsupportedProvider
from booking.models.integration import IntegrationAppType
from booking.services.token_service import AccessToken, ensure_valid_access_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarEventPayload:
    summary: str
    description: Optional[str]
    # Naive wall-clock times in `time_zone`
    start: datetime
    end: datetime
    time_zone: str
    attendees: List[str] = field(default_factory=list)
    # Set to ask the provider for a conference room; the provider
    # deduplicates retried inserts by this id
    conference_request_id: Optional[str] = None


@dataclass(frozen=True)
class InsertedCalendarEvent:
    remote_event_id: str
    conference_link: str


class GoogleCalendarClient:
    """
    Thin wrapper around the Google Calendar v3 REST API, bound to one access
    token. Tests replace it with a fake exposing insert_event / delete_event.
    """

    def __init__(
        self,
        access_token: str,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        settings = get_settings()
        self._access_token = access_token
        self._base_url = (base_url or settings.GOOGLE_CALENDAR_API_BASE).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.CALENDAR_HTTP_TIMEOUT_SECONDS
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._access_token}"},
            timeout=self._timeout,
            transport=self._transport,
        )

    @staticmethod
    def _events_path(calendar_id: str) -> str:
        return f"/calendars/{quote(calendar_id, safe='')}/events"

    @staticmethod
    def build_event_body(payload: CalendarEventPayload) -> dict:
        body = {
            "summary": payload.summary,
            "description": payload.description or "",
            "start": {
                "dateTime": payload.start.isoformat(),
                "timeZone": payload.time_zone,
            },
            "end": {
                "dateTime": payload.end.isoformat(),
                "timeZone": payload.time_zone,
            },
            "attendees": [{"email": email} for email in payload.attendees],
        }
        if payload.conference_request_id:
            body["conferenceData"] = {
                "createRequest": {
                    "requestId": payload.conference_request_id,
                    "conferenceSolutionKey": {"type": "hangoutsMeet"},
                }
            }
        return body

    @staticmethod
    def _conference_link(event: dict) -> str:
        if event.get("hangoutLink"):
            return event["hangoutLink"]
        entry_points = (event.get("conferenceData") or {}).get("entryPoints") or []
        for entry in entry_points:
            if entry.get("entryPointType") == "video" and entry.get("uri"):
                return entry["uri"]
        return ""

    def insert_event(self, calendar_id: str, payload: CalendarEventPayload) -> InsertedCalendarEvent:
        params = {"sendUpdates": "all"}
        if payload.conference_request_id:
            params["conferenceDataVersion"] = 1

        try:
            with self._client() as client:
                response = client.post(
                    self._events_path(calendar_id),
                    params=params,
                    json=self.build_event_body(payload),
                )
        except httpx.HTTPError as exc:
            logger.error(f"Google Calendar insert failed on {calendar_id}: {exc}")
            raise CalendarProviderError(f"Google Calendar request failed: {exc}") from exc

        if response.status_code not in (200, 201):
            logger.error(f"Failed to create calendar event: {response.status_code} {response.text}")
            raise CalendarProviderError(
                f"Google Calendar insert failed with status {response.status_code}"
            )

        event = response.json()
        inserted = InsertedCalendarEvent(
            remote_event_id=event.get("id", ""),
            conference_link=self._conference_link(event),
        )
        logger.info(f"Google Calendar event created: {inserted.remote_event_id}")
        return inserted

    def delete_event(self, calendar_id: str, remote_event_id: str) -> bool:
        """
        Returns True when deleted, False when the event no longer exists
        remotely (404 / 410). Any other failure raises CalendarProviderError.
        """
        try:
            with self._client() as client:
                response = client.delete(
                    f"{self._events_path(calendar_id)}/{quote(remote_event_id, safe='')}",
                    params={"sendUpdates": "all"},
                )
        except httpx.HTTPError as exc:
            logger.error(f"Google Calendar delete failed on {calendar_id}: {exc}")
            raise CalendarProviderError(f"Google Calendar request failed: {exc}") from exc

        if response.status_code in (404, 410):
            logger.info(f"Google Calendar event already gone: {remote_event_id}")
            return False

        if response.status_code not in (200, 204):
            logger.error(f"Failed to delete calendar event: {response.status_code} {response.text}")
            raise CalendarProviderError(
                f"Google Calendar delete failed with status {response.status_code}"
            )

        logger.info(f"Google Calendar event deleted: {remote_event_id}")
        return True


@dataclass(frozen=True)
class CalendarClientHandle:
    client: GoogleCalendarClient
    app_type: IntegrationAppType
    # Present when the factory validated the token; `.refreshed` tells the
    # caller to persist it back onto the Integration
    access_token: Optional[AccessToken] = None


CalendarClientFactory = Callable[[str, str, Optional[str], Optional[int]], CalendarClientHandle]


def get_calendar_client(
    app_type: str,
    access_token: str,
    refresh_token: Optional[str],
    expiry_date: Optional[int],
) -> CalendarClientHandle:
    """
    Build an authenticated client for the integration's app type.

    Raises:
        UnsupportedProvider: for any app type without an implementation
        TokenRefreshFailed: if the stored token is stale and cannot be refreshed
    """
    if app_type == IntegrationAppType.GOOGLE_MEET_AND_CALENDAR.value:
        token = ensure_valid_access_token(access_token, refresh_token, expiry_date)
        return CalendarClientHandle(
            client=GoogleCalendarClient(token.token),
            app_type=IntegrationAppType.GOOGLE_MEET_AND_CALENDAR,
            access_token=token,
        )

    raise UnsupportedProvider(f"Unsupported calendar provider: {app_type}")


def get_calendar_client_factory() -> CalendarClientFactory:
    """
    FastAPI dependency returning the factory the orchestrators use.
    Tests override it with a fake factory.
    """
    return get_calendar_client
