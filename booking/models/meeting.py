# booking/models/meeting.py
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from booking.models.base import Base


class MeetingStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    CANCELLED = "CANCELLED"


class Meeting(Base):
    __tablename__ = "meetings"

    id = Column(Integer, primary_key=True, index=True)

    event_id = Column(
        Integer,
        ForeignKey("events.id"),
        nullable=False,
        index=True,
    )

    # Organizer, copied from event.user at booking time
    user_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    guest_name = Column(String(255), nullable=False)
    guest_email = Column(String(255), nullable=False)
    additional_info = Column(Text, nullable=True)

    # UTC, naive
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)

    # IANA zone the guest booked in
    timezone = Column(String(64), nullable=False, default="UTC")

    status = Column(
        String(32),
        nullable=False,
        default=MeetingStatus.SCHEDULED.value,
        index=True,
    )

    meet_link = Column(String(1024), nullable=False, default="")

    # Only link back to the remote calendar entry; set once at creation
    calendar_event_id = Column(String(1024), nullable=False, default="")
    calendar_app_type = Column(String(64), nullable=False, default="")

    cancelled_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    event = relationship("Event", backref="meetings")
    user = relationship("User", backref="meetings")
