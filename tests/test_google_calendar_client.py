import json
from datetime import datetime

import httpx
import pytest

from booking.errors import CalendarProviderError, UnsupportedProvider
from booking.services.calendar_provider import (
    CalendarEventPayload,
    GoogleCalendarClient,
    get_calendar_client,
)

BASE_URL = "https://calendar.test/calendar/v3"


def _payload(**overrides):
    kwargs = dict(
        summary="Ana - Intro call",
        description="Pricing questions",
        start=datetime(2025, 1, 1, 10, 0),
        end=datetime(2025, 1, 1, 10, 30),
        time_zone="America/Bogota",
        attendees=["a@x.com", "organizer@example.com"],
        conference_request_id="7-1735725600000",
    )
    kwargs.update(overrides)
    return CalendarEventPayload(**kwargs)


def _client(handler):
    return GoogleCalendarClient(
        "token-123",
        base_url=BASE_URL,
        timeout=2.0,
        transport=httpx.MockTransport(handler),
    )


def test_insert_event_requests_meet_link():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"id": "evt-42", "hangoutLink": "https://meet.google.com/xyz"},
        )

    inserted = _client(handler).insert_event("primary", _payload())

    assert inserted.remote_event_id == "evt-42"
    assert inserted.conference_link == "https://meet.google.com/xyz"

    assert seen["method"] == "POST"
    assert seen["path"] == "/calendar/v3/calendars/primary/events"
    assert seen["params"]["conferenceDataVersion"] == "1"
    assert seen["auth"] == "Bearer token-123"

    body = seen["body"]
    assert body["summary"] == "Ana - Intro call"
    assert body["start"] == {"dateTime": "2025-01-01T10:00:00", "timeZone": "America/Bogota"}
    assert body["end"] == {"dateTime": "2025-01-01T10:30:00", "timeZone": "America/Bogota"}
    assert body["attendees"] == [{"email": "a@x.com"}, {"email": "organizer@example.com"}]
    assert body["conferenceData"]["createRequest"]["requestId"] == "7-1735725600000"


def test_insert_event_falls_back_to_video_entry_point():
    def handler(request):
        return httpx.Response(
            200,
            json={
                "id": "evt-43",
                "conferenceData": {
                    "entryPoints": [
                        {"entryPointType": "phone", "uri": "tel:+1-555"},
                        {"entryPointType": "video", "uri": "https://meet.google.com/fallback"},
                    ]
                },
            },
        )

    inserted = _client(handler).insert_event("primary", _payload())

    assert inserted.conference_link == "https://meet.google.com/fallback"


def test_insert_event_error_status_raises():
    def handler(request):
        return httpx.Response(403, json={"error": {"message": "forbidden"}})

    with pytest.raises(CalendarProviderError):
        _client(handler).insert_event("primary", _payload())


def test_timeout_is_a_provider_error():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(CalendarProviderError):
        _client(handler).insert_event("primary", _payload())


def test_delete_event_targets_calendar_and_event():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        return httpx.Response(204)

    assert _client(handler).delete_event("team@group.calendar.google.com", "evt-42") is True
    assert seen["method"] == "DELETE"
    assert seen["path"] == "/calendar/v3/calendars/team@group.calendar.google.com/events/evt-42"


@pytest.mark.parametrize("status_code", [404, 410])
def test_delete_event_already_gone_returns_false(status_code):
    def handler(request):
        return httpx.Response(status_code)

    assert _client(handler).delete_event("primary", "evt-42") is False


def test_delete_event_server_error_raises():
    def handler(request):
        return httpx.Response(500, text="backend error")

    with pytest.raises(CalendarProviderError):
        _client(handler).delete_event("primary", "evt-42")


def test_get_calendar_client_builds_google_client():
    handle = get_calendar_client("GOOGLE_MEET_AND_CALENDAR", "still-valid", "refresh", None)

    assert isinstance(handle.client, GoogleCalendarClient)
    assert handle.app_type.value == "GOOGLE_MEET_AND_CALENDAR"
    assert handle.access_token.token == "still-valid"
    assert handle.access_token.refreshed is False


@pytest.mark.parametrize("app_type", ["ZOOM_MEETING", "OUTLOOK_CALENDAR", "SOMETHING_ELSE"])
def test_get_calendar_client_rejects_other_providers(app_type):
    with pytest.raises(UnsupportedProvider):
        get_calendar_client(app_type, "token", "refresh", None)
