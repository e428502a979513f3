# booking/services/meeting_query_service.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from booking.models.meeting import Meeting, MeetingStatus
from booking.utils.datetime_utils import utc_now_naive


class MeetingFilter(str, Enum):
    UPCOMING = "UPCOMING"
    PAST = "PAST"
    CANCELLED = "CANCELLED"


def list_user_meetings(
    db: Session,
    user_id: int,
    filter: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[Meeting]:
    """
    Meetings organized by `user_id`, ascending by start time, with their
    Event loaded.

      UPCOMING (also the default): scheduled, starting after now
      PAST: scheduled, started before now
      CANCELLED: cancelled, any time
    """
    now = now or utc_now_naive()

    query = (
        db.query(Meeting)
        .options(joinedload(Meeting.event))
        .filter(Meeting.user_id == user_id)
    )

    if filter == MeetingFilter.CANCELLED:
        query = query.filter(Meeting.status == MeetingStatus.CANCELLED.value)
    elif filter == MeetingFilter.PAST:
        query = query.filter(
            Meeting.status == MeetingStatus.SCHEDULED.value,
            Meeting.start_time < now,
        )
    else:
        query = query.filter(
            Meeting.status == MeetingStatus.SCHEDULED.value,
            Meeting.start_time > now,
        )

    return query.order_by(Meeting.start_time.asc()).all()
