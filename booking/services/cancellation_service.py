# booking/services/cancellation_service.py
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session, joinedload

from booking.errors import CalendarDeletionFailed, MeetingNotFound
from booking.models.event import Event
from booking.models.meeting import Meeting, MeetingStatus
from booking.services.calendar_provider import CalendarClientFactory, get_calendar_client
from booking.services.integration_service import find_integration, store_refreshed_token
from booking.utils.datetime_utils import utc_now_naive

logger = logging.getLogger(__name__)


def _delete_remote_event(
    db: Session,
    meeting: Meeting,
    calendar_client_factory: CalendarClientFactory,
) -> None:
    if not meeting.calendar_event_id or not meeting.calendar_app_type:
        logger.info(f"Meeting {meeting.id} has no remote calendar event, skipping deletion")
        return

    event = meeting.event
    integration = find_integration(
        db,
        user_id=event.user_id,
        app_type=meeting.calendar_app_type,
    )
    if integration is None:
        logger.warning(
            f"No {meeting.calendar_app_type} integration for user {event.user_id}; "
            f"remote event {meeting.calendar_event_id} left in place"
        )
        return

    handle = calendar_client_factory(
        integration.app_type,
        integration.access_token,
        integration.refresh_token,
        integration.expiry_date,
    )
    store_refreshed_token(db, integration, handle.access_token)
    handle.client.delete_event(event.calendar_id, meeting.calendar_event_id)


def cancel_meeting(
    db: Session,
    meeting_id: int,
    calendar_client_factory: CalendarClientFactory = get_calendar_client,
) -> Dict[str, Any]:
    """
    Cancel a meeting:
      - delete its remote calendar event through the organizer's integration
        (skipped when there is none; an already-deleted remote event is fine)
      - mark it CANCELLED

    Any failure while deleting remotely aborts with CalendarDeletionFailed
    and leaves the meeting's status untouched. Cancelling twice is harmless.
    """
    meeting = (
        db.query(Meeting)
        .options(joinedload(Meeting.event).joinedload(Event.user))
        .filter(Meeting.id == meeting_id)
        .first()
    )
    if meeting is None:
        raise MeetingNotFound()

    try:
        _delete_remote_event(db, meeting, calendar_client_factory)
    except Exception as exc:
        logger.exception(f"Remote calendar deletion failed for meeting {meeting.id}")
        db.rollback()
        raise CalendarDeletionFailed() from exc

    if meeting.status != MeetingStatus.CANCELLED.value:
        meeting.status = MeetingStatus.CANCELLED.value
        meeting.cancelled_at = utc_now_naive()
        db.add(meeting)
        db.commit()
        logger.info(f"Meeting {meeting.id} cancelled")
    else:
        logger.info(f"Meeting {meeting.id} was already cancelled")

    return {"success": True}
