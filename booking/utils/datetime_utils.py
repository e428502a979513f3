"""
Booking datetime utilities

Guests book in their own IANA zone. The remote calendar receives the naive
wall-clock time plus the zone name; the database stores naive UTC instants.
- get_timezone: resolve an IANA zone name
- canonical_zone_name: the zone's canonical spelling ("america/bogota" -> "America/Bogota")
- to_local_wall_clock: express a datetime as naive wall-clock time in a zone
- to_utc_naive: the UTC instant of a naive wall-clock time in a zone, or of an aware datetime
"""

from datetime import datetime

import pytz

from booking.errors import InvalidBookingWindow, InvalidTimeZone


def get_timezone(tz_name: str):
    """
    Resolve an IANA zone name such as "America/Bogota".

    Raises:
        InvalidTimeZone: if the name is empty or unknown
    """
    if not tz_name:
        raise InvalidTimeZone("A time zone is required")
    try:
        return pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        raise InvalidTimeZone(f"Unknown time zone: {tz_name}")


def canonical_zone_name(tz_name: str) -> str:
    return get_timezone(tz_name).zone


def to_local_wall_clock(value: datetime, tz_name: str) -> datetime:
    """
    Naive datetimes are already wall-clock time in `tz_name` and are returned
    unchanged; aware datetimes are converted into the zone first.
    """
    tz = get_timezone(tz_name)
    if value.tzinfo is None:
        return value
    return value.astimezone(tz).replace(tzinfo=None)


def to_utc_naive(value: datetime, tz_name: str) -> datetime:
    """
    Aware datetimes already name an instant. Naive ones are wall-clock time in
    `tz_name` and must map to exactly one instant there.

    Raises:
        InvalidBookingWindow: the wall-clock time is skipped (clocks jump
            forward) or repeated (clocks fall back) in `tz_name`
    """
    tz = get_timezone(tz_name)
    if value.tzinfo is not None:
        return value.astimezone(pytz.utc).replace(tzinfo=None)

    try:
        aware = tz.localize(value, is_dst=None)
    except pytz.NonExistentTimeError:
        raise InvalidBookingWindow(f"{value.isoformat()} does not exist in {tz.zone}")
    except pytz.AmbiguousTimeError:
        raise InvalidBookingWindow(
            f"{value.isoformat()} is ambiguous in {tz.zone}; send the time with a UTC offset"
        )
    return aware.astimezone(pytz.utc).replace(tzinfo=None)


def utc_now_naive() -> datetime:
    return datetime.now(pytz.utc).replace(tzinfo=None)
