# booking/schemas/events.py
from typing import Optional

from pydantic import BaseModel, field_validator

from booking.models.event import Event, EventLocationType


class EventCreatePayload(BaseModel):
    title: str
    description: Optional[str] = None
    duration: int = 30
    location_type: EventLocationType
    calendar_id: Optional[str] = None
    calendar_name: Optional[str] = None

    @field_validator("title")
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v.strip()

    @field_validator("duration")
    def validate_duration(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("duration must be positive")
        return v


def serialize_event(event: Event) -> dict:
    return {
        "id": event.id,
        "user_id": event.user_id,
        "title": event.title,
        "description": event.description,
        "duration": event.duration,
        "slug": event.slug,
        "is_private": event.is_private,
        "location_type": event.location_type,
        "calendar_id": event.calendar_id,
        "calendar_name": event.calendar_name,
    }
