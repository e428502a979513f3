# booking/models/event.py
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from booking.models.base import Base

DEFAULT_CALENDAR_ID = "primary"


class EventLocationType(str, Enum):
    GOOGLE_MEET_AND_CALENDAR = "GOOGLE_MEET_AND_CALENDAR"
    ZOOM_MEETING = "ZOOM_MEETING"
    IN_PERSON = "IN_PERSON"
    PHONE = "PHONE"


class Event(Base):
    """
    A bookable offering ("30 min intro call"), not a calendar entry.

    Guests book Meetings against it; the owner controls privacy and the
    remote calendar new bookings are written to.
    """

    __tablename__ = "events"
    __table_args__ = (UniqueConstraint("user_id", "slug", name="uq_events_user_slug"),)

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Duration in minutes
    duration = Column(Integer, nullable=False, default=30)

    slug = Column(String(255), nullable=False)
    is_private = Column(Boolean, nullable=False, default=False)

    # Stored as the plain enum value; EventLocationType is still used in Python
    location_type = Column(String(64), nullable=False)

    # Target remote calendar for bookings of this event
    calendar_id = Column(String(512), nullable=False, default=DEFAULT_CALENDAR_ID)
    calendar_name = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    user = relationship("User", backref="events")
