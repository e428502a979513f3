"""
Domain errors raised by the booking, cancellation and event services.

Each error carries the HTTP status the routers translate it to, so a router
only needs `except BookingError as exc: raise HTTPException(exc.status_code, str(exc))`.
"""


class BookingError(Exception):
    status_code = 400
    default_message = "Booking request failed"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class NotFoundError(BookingError):
    status_code = 404
    default_message = "Not found"


class BadRequestError(BookingError):
    status_code = 400
    default_message = "Bad request"


# --- booking -----------------------------------------------------------------

class EventNotBookable(NotFoundError):
    default_message = "Event not found"


class EventCalendarNotConfigured(EventNotBookable):
    status_code = 400
    default_message = "Event has no target calendar configured"


class InvalidLocationType(BadRequestError):
    default_message = "Invalid location type"


class InvalidBookingWindow(BadRequestError):
    default_message = "start_time must be before end_time"


class InvalidTimeZone(BadRequestError):
    default_message = "Unknown time zone"


class NoVideoConferencingIntegration(BadRequestError):
    default_message = "No video conferencing integration found"


class SlotUnavailable(BookingError):
    status_code = 409
    default_message = "Requested time overlaps an existing meeting"


class BookingPersistenceFailed(BookingError):
    status_code = 500
    default_message = "Failed to save meeting"


# --- integrations / calendar providers ---------------------------------------

class IntegrationNotFound(NotFoundError):
    default_message = "Integration not found"


class UnsupportedProvider(BadRequestError):
    default_message = "Unsupported calendar provider"


class CalendarProviderError(BookingError):
    """Remote calendar failure: HTTP error status, network error or timeout."""

    status_code = 502
    default_message = "Calendar provider request failed"


class TokenRefreshFailed(CalendarProviderError):
    default_message = "Failed to refresh calendar access token"


# --- cancellation ------------------------------------------------------------

class MeetingNotFound(NotFoundError):
    default_message = "Meeting not found"


class CalendarDeletionFailed(BadRequestError):
    default_message = "Failed to delete event from calendar"


# --- events ------------------------------------------------------------------

class EventNotFound(NotFoundError):
    default_message = "Event not found"


class UserNotFound(NotFoundError):
    default_message = "User not found"
