# booking/routers/meetings.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from booking.db.session import get_db
from booking.errors import BookingError
from booking.schemas.meetings import BookMeetingPayload, serialize_meeting
from booking.services.booking_service import create_meet_booking_for_guest
from booking.services.calendar_provider import CalendarClientFactory, get_calendar_client_factory
from booking.services.cancellation_service import cancel_meeting
from booking.services.meeting_query_service import MeetingFilter, list_user_meetings

router = APIRouter(prefix="/meetings", tags=["meetings"])


@router.post("/public/book")
def book_meeting(
    payload: BookMeetingPayload,
    db: Session = Depends(get_db),
    calendar_client_factory: CalendarClientFactory = Depends(get_calendar_client_factory),
) -> Dict[str, Any]:
    """
    Guest books a public event. For Google Meet events this also creates the
    organizer's calendar entry and returns the Meet link.
    """
    try:
        result = create_meet_booking_for_guest(
            db,
            event_id=payload.event_id,
            guest_name=payload.guest_name,
            guest_email=payload.guest_email,
            additional_info=payload.additional_info,
            start_time=payload.start_time,
            end_time=payload.end_time,
            timezone=payload.timezone,
            calendar_client_factory=calendar_client_factory,
        )
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return {
        "message": "Meeting scheduled successfully",
        "meet_link": result.meet_link,
        "meeting": serialize_meeting(result.meeting),
    }


@router.put("/cancel/{meeting_id}")
def cancel_meeting_endpoint(
    meeting_id: int,
    db: Session = Depends(get_db),
    calendar_client_factory: CalendarClientFactory = Depends(get_calendar_client_factory),
) -> Dict[str, Any]:
    try:
        return cancel_meeting(
            db,
            meeting_id=meeting_id,
            calendar_client_factory=calendar_client_factory,
        )
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/user/{user_id}")
def get_user_meetings(
    user_id: int,
    filter: Optional[MeetingFilter] = None,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    meetings = list_user_meetings(db, user_id=user_id, filter=filter)
    return {"meetings": [serialize_meeting(m) for m in meetings]}
