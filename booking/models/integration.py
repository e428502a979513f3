# booking/models/integration.py
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from booking.models.base import Base


class IntegrationProvider(str, Enum):
    GOOGLE = "GOOGLE"
    ZOOM = "ZOOM"
    MICROSOFT = "MICROSOFT"


class IntegrationCategory(str, Enum):
    CALENDAR_AND_VIDEO_CONFERENCING = "CALENDAR_AND_VIDEO_CONFERENCING"
    VIDEO_CONFERENCING = "VIDEO_CONFERENCING"
    CALENDAR = "CALENDAR"


class IntegrationAppType(str, Enum):
    GOOGLE_MEET_AND_CALENDAR = "GOOGLE_MEET_AND_CALENDAR"
    ZOOM_MEETING = "ZOOM_MEETING"
    OUTLOOK_CALENDAR = "OUTLOOK_CALENDAR"


class Integration(Base):
    """
    OAuth credentials plus target calendar for one (user, app_type) pair.

    Created by the connect flow; the booking and cancellation flows only read
    it, except for writing back refreshed tokens.
    """

    __tablename__ = "integrations"
    __table_args__ = (
        UniqueConstraint("user_id", "app_type", name="uq_integrations_user_app_type"),
    )

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    provider = Column(String(32), nullable=False)
    category = Column(String(64), nullable=False)
    app_type = Column(String(64), nullable=False, index=True)

    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=True)

    # Epoch milliseconds, as issued by Google's OAuth client
    expiry_date = Column(BigInteger, nullable=True)

    # Provider scope / token_type; `metadata` is reserved on declarative models
    provider_metadata = Column("metadata", JSON, nullable=False, default=dict)

    is_connected = Column(Boolean, nullable=False, default=True)

    calendar_id = Column(String(512), nullable=True, default="primary")
    calendar_name = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    user = relationship("User", backref="integrations")
