# booking/services/booking_service.py
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from booking.config import get_settings
from booking.errors import (
    BookingPersistenceFailed,
    EventCalendarNotConfigured,
    EventNotBookable,
    IntegrationNotFound,
    InvalidBookingWindow,
    InvalidLocationType,
    NoVideoConferencingIntegration,
    SlotUnavailable,
)
from booking.models.event import Event, EventLocationType
from booking.models.meeting import Meeting, MeetingStatus
from booking.services.calendar_provider import (
    CalendarClientFactory,
    CalendarClientHandle,
    CalendarEventPayload,
    get_calendar_client,
)
from booking.services.integration_service import (
    required_app_type_for_location,
    resolve_integration,
    store_refreshed_token,
)
from booking.utils.datetime_utils import (
    canonical_zone_name,
    to_local_wall_clock,
    to_utc_naive,
)

logger = logging.getLogger(__name__)

LOCATION_TYPES = {location.value for location in EventLocationType}


@dataclass
class BookingResult:
    meet_link: str
    meeting: Meeting


def _load_bookable_event(db: Session, event_id: int) -> Event:
    event = (
        db.query(Event)
        .options(joinedload(Event.user))
        .filter(Event.id == event_id, Event.is_private.is_(False))
        .first()
    )
    if event is None:
        logger.info(f"Event not bookable (missing or private): {event_id}")
        raise EventNotBookable("Event not found")
    if not event.calendar_id:
        logger.info(f"Event {event_id} has no target calendar")
        raise EventCalendarNotConfigured()
    return event


def _ensure_slot_free(db: Session, event: Event, start_utc: datetime, end_utc: datetime) -> None:
    overlapping = (
        db.query(Meeting.id)
        .filter(
            Meeting.event_id == event.id,
            Meeting.status == MeetingStatus.SCHEDULED.value,
            Meeting.start_time < end_utc,
            Meeting.end_time > start_utc,
        )
        .first()
    )
    if overlapping is not None:
        raise SlotUnavailable()


def _compensate_remote_event(handle: CalendarClientHandle, calendar_id: str, remote_event_id: str) -> None:
    try:
        handle.client.delete_event(calendar_id, remote_event_id)
        logger.info(f"Rolled back remote calendar event {remote_event_id}")
    except Exception:
        # Orphaned remote entry; needs manual cleanup
        logger.exception(f"Could not roll back remote calendar event {remote_event_id} on {calendar_id}")


def create_meet_booking_for_guest(
    db: Session,
    *,
    event_id: int,
    guest_name: str,
    guest_email: str,
    start_time: datetime,
    end_time: datetime,
    timezone: str,
    additional_info: Optional[str] = None,
    calendar_client_factory: CalendarClientFactory = get_calendar_client,
) -> BookingResult:
    """
    Book `event_id` for a guest:

      1. the event must exist, be public and target a calendar
      2. its location type must be a known one
      3. the organizer must have the integration that location type needs
      4. for Google Meet events, create the remote calendar event + Meet link
      5. persist the Meeting (remote event is deleted again if this fails)

    `start_time` / `end_time` are wall-clock times in the guest's `timezone`
    (aware values are converted into it). Naive times that fall in a DST gap
    or fold are rejected. Ordering is checked on the UTC instants and the
    Meeting stores UTC.
    """
    event = _load_bookable_event(db, event_id)

    timezone = canonical_zone_name(timezone)
    start_utc = to_utc_naive(start_time, timezone)
    end_utc = to_utc_naive(end_time, timezone)
    if start_utc >= end_utc:
        raise InvalidBookingWindow()
    local_start = to_local_wall_clock(start_time, timezone)
    local_end = to_local_wall_clock(end_time, timezone)

    location_type = event.location_type
    if location_type not in LOCATION_TYPES:
        logger.info(f"Invalid location type on event {event.id}: {location_type}")
        raise InvalidLocationType()

    organizer = event.user

    integration = None
    required_app_type = required_app_type_for_location(location_type)
    if required_app_type is not None:
        try:
            integration = resolve_integration(db, user_id=organizer.id, app_type=required_app_type)
        except IntegrationNotFound as exc:
            logger.info(f"No video conferencing integration for user {organizer.id}")
            raise NoVideoConferencingIntegration() from exc

    if get_settings().PREVENT_DOUBLE_BOOKING:
        _ensure_slot_free(db, event, start_utc, end_utc)

    meet_link = ""
    calendar_event_id = ""
    calendar_app_type = ""
    handle: Optional[CalendarClientHandle] = None

    if location_type == EventLocationType.GOOGLE_MEET_AND_CALENDAR.value:
        handle = calendar_client_factory(
            integration.app_type,
            integration.access_token,
            integration.refresh_token,
            integration.expiry_date,
        )
        store_refreshed_token(db, integration, handle.access_token)

        payload = CalendarEventPayload(
            summary=f"{guest_name} - {event.title}",
            description=additional_info,
            start=local_start,
            end=local_end,
            time_zone=timezone,
            attendees=[guest_email, organizer.email],
            conference_request_id=f"{event.id}-{int(time.time() * 1000)}",
        )
        inserted = handle.client.insert_event(event.calendar_id, payload)

        meet_link = inserted.conference_link
        calendar_event_id = inserted.remote_event_id
        calendar_app_type = handle.app_type.value

    meeting = Meeting(
        event_id=event.id,
        user_id=organizer.id,
        guest_name=guest_name,
        guest_email=guest_email,
        additional_info=additional_info,
        start_time=start_utc,
        end_time=end_utc,
        timezone=timezone,
        status=MeetingStatus.SCHEDULED.value,
        meet_link=meet_link,
        calendar_event_id=calendar_event_id,
        calendar_app_type=calendar_app_type,
    )

    try:
        db.add(meeting)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Failed to save meeting for event {event.id}: {exc}")
        if handle is not None and calendar_event_id:
            _compensate_remote_event(handle, event.calendar_id, calendar_event_id)
        raise BookingPersistenceFailed() from exc

    db.refresh(meeting)
    logger.info(f"Meeting {meeting.id} booked on event {event.id}")

    return BookingResult(meet_link=meet_link, meeting=meeting)
