# booking/routers/events.py
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from booking.db.session import get_db
from booking.errors import BookingError
from booking.schemas.events import EventCreatePayload, serialize_event
from booking.services.event_service import (
    create_event,
    delete_event,
    get_public_event_by_username_and_slug,
    toggle_event_privacy,
)

router = APIRouter(prefix="/events", tags=["events"])

# Owner comes in as `user_id`; session auth lives outside this service.


@router.post("")
def create_event_endpoint(
    user_id: int,
    payload: EventCreatePayload,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    try:
        event = create_event(
            db,
            user_id=user_id,
            title=payload.title,
            description=payload.description,
            duration=payload.duration,
            location_type=payload.location_type,
            calendar_id=payload.calendar_id,
            calendar_name=payload.calendar_name,
        )
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return {"event": serialize_event(event)}


@router.put("/{event_id}/toggle-privacy")
def toggle_privacy_endpoint(
    event_id: int,
    user_id: int,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    try:
        event = toggle_event_privacy(db, user_id=user_id, event_id=event_id)
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return {"event": serialize_event(event)}


@router.delete("/{event_id}")
def delete_event_endpoint(
    event_id: int,
    user_id: int,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    try:
        return delete_event(db, user_id=user_id, event_id=event_id)
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/public/{username}/{slug}")
def get_public_event(
    username: str,
    slug: str,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """
    Public booking page data: event details plus the organizer's public profile.
    """
    try:
        event = get_public_event_by_username_and_slug(db, username=username, slug=slug)
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return {
        "event": serialize_event(event),
        "user": {
            "name": event.user.name,
            "username": event.user.username,
            "image_url": event.user.image_url,
        },
    }
