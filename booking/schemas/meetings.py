# booking/schemas/meetings.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator, model_validator

from booking.models.meeting import Meeting


class BookMeetingPayload(BaseModel):
    event_id: int
    guest_name: str
    guest_email: EmailStr
    additional_info: Optional[str] = None
    start_time: datetime
    end_time: datetime
    # IANA zone the guest picked the slot in, e.g. "America/Bogota"
    timezone: str

    @field_validator("guest_name", "timezone")
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @model_validator(mode="after")
    def check_end_after_start(self) -> "BookMeetingPayload":
        same_kind = (self.start_time.tzinfo is None) == (self.end_time.tzinfo is None)
        if same_kind and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


def serialize_meeting(meeting: Meeting) -> dict:
    event = meeting.event
    return {
        "id": meeting.id,
        "event_id": meeting.event_id,
        "user_id": meeting.user_id,
        "guest_name": meeting.guest_name,
        "guest_email": meeting.guest_email,
        "additional_info": meeting.additional_info,
        "start_time": meeting.start_time.isoformat(),
        "end_time": meeting.end_time.isoformat(),
        "timezone": meeting.timezone,
        "status": meeting.status,
        "meet_link": meeting.meet_link,
        "calendar_event_id": meeting.calendar_event_id,
        "calendar_app_type": meeting.calendar_app_type,
        "event": {
            "id": event.id,
            "title": event.title,
            "duration": event.duration,
            "location_type": event.location_type,
        }
        if event is not None
        else None,
    }
