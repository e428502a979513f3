# booking/services/event_service.py
import logging
from typing import Any, Dict, Optional

from slugify import slugify
from sqlalchemy.orm import Session, joinedload

from booking.errors import BadRequestError, EventNotFound, InvalidLocationType, UserNotFound
from booking.models.event import DEFAULT_CALENDAR_ID, Event, EventLocationType
from booking.models.meeting import Meeting
from booking.models.user import User

logger = logging.getLogger(__name__)


def _unique_slug(db: Session, user_id: int, title: str) -> str:
    base = slugify(title) or "event"
    taken = {
        slug
        for (slug,) in db.query(Event.slug)
        .filter(Event.user_id == user_id, Event.slug.like(f"{base}%"))
        .all()
    }
    if base not in taken:
        return base

    suffix = 2
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"


def create_event(
    db: Session,
    *,
    user_id: int,
    title: str,
    location_type: str,
    duration: int = 30,
    description: Optional[str] = None,
    calendar_id: Optional[str] = None,
    calendar_name: Optional[str] = None,
) -> Event:
    """
    Create a bookable event for `user_id` with a slug unique among that
    user's events. Events target the organizer's primary calendar unless
    `calendar_id` says otherwise.
    """
    location_value = getattr(location_type, "value", location_type)
    if location_value not in {location.value for location in EventLocationType}:
        raise InvalidLocationType()

    if db.query(User.id).filter(User.id == user_id).first() is None:
        raise UserNotFound()

    event = Event(
        user_id=user_id,
        title=title,
        description=description,
        duration=duration,
        slug=_unique_slug(db, user_id, title),
        location_type=location_value,
        calendar_id=calendar_id or DEFAULT_CALENDAR_ID,
        calendar_name=calendar_name,
    )
    db.add(event)
    db.commit()
    db.refresh(event)

    logger.info(f"Event created: {event.id} ({event.slug}) for user {user_id}")
    return event


def _get_owned_event(db: Session, user_id: int, event_id: int) -> Event:
    event = db.query(Event).filter(Event.id == event_id, Event.user_id == user_id).first()
    if event is None:
        raise EventNotFound()
    return event


def toggle_event_privacy(db: Session, *, user_id: int, event_id: int) -> Event:
    event = _get_owned_event(db, user_id, event_id)
    event.is_private = not event.is_private
    db.add(event)
    db.commit()
    db.refresh(event)

    logger.info(f"Event privacy toggled: {event.id} private={event.is_private}")
    return event


def delete_event(db: Session, *, user_id: int, event_id: int) -> Dict[str, Any]:
    """
    Delete an owned event. Events with booked meetings (of any status) are
    kept so every meeting still resolves its event; make them private instead.
    """
    event = _get_owned_event(db, user_id, event_id)

    if db.query(Meeting.id).filter(Meeting.event_id == event.id).first() is not None:
        raise BadRequestError("Event has meetings and cannot be deleted")

    db.delete(event)
    db.commit()

    logger.info(f"Event deleted: {event_id} by user {user_id}")
    return {"success": True}


def get_public_event_by_username_and_slug(db: Session, *, username: str, slug: str) -> Event:
    event = (
        db.query(Event)
        .join(User, Event.user_id == User.id)
        .options(joinedload(Event.user))
        .filter(
            User.username == username,
            Event.slug == slug,
            Event.is_private.is_(False),
        )
        .first()
    )
    if event is None:
        raise EventNotFound()
    return event
