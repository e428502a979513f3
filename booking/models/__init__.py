from booking.models.base import Base  # noqa: F401

from booking.models.user import User  # noqa: F401
from booking.models.event import Event  # noqa: F401
from booking.models.integration import Integration  # noqa: F401
from booking.models.meeting import Meeting  # noqa: F401
