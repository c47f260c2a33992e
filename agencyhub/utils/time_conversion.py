"""
Conversion between local wall-clock strings and stored UTC instants.

Dates travel as ``YYYY-MM-DD`` and times as 24-hour ``HH:MM``; both are
anchored by an IANA zone name. Offsets are always resolved from the zone's
rules on the date in question, never from a cached offset, so the same
instant renders consistently for any caller that sends its zone name.
"""

import re
from datetime import date, datetime, time, timezone
from typing import Annotated, NamedTuple, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AfterValidator

from ..errors import InvalidDateTimeError, InvalidTimeZoneError

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")

DAY_START = time(0, 0, 0)
DAY_END = time(23, 59, 59)


class LocalDateTime(NamedTuple):
    date: str
    time: str


def resolve_timezone(time_zone: str) -> ZoneInfo:
    """Look up an IANA zone, raising InvalidTimeZoneError when unknown"""
    if not time_zone or not isinstance(time_zone, str):
        raise InvalidTimeZoneError("Time zone is required")
    try:
        return ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise InvalidTimeZoneError(f"Unknown time zone: {time_zone}") from e


def parse_local_date(value: str) -> date:
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        raise InvalidDateTimeError(f"Invalid date '{value}', expected YYYY-MM-DD")
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidDateTimeError(f"Invalid date '{value}'") from e


def parse_local_time(value: str) -> time:
    if not isinstance(value, str) or not _TIME_PATTERN.match(value):
        raise InvalidDateTimeError(f"Invalid time '{value}', expected HH:MM")
    try:
        return datetime.strptime(value, TIME_FORMAT).time()
    except ValueError as e:
        raise InvalidDateTimeError(f"Invalid time '{value}'") from e


def localize(local_date: date, local_time: time, time_zone: str) -> datetime:
    """Anchor a civil date and time in a zone and return the aware UTC instant"""
    zone = resolve_timezone(time_zone)
    try:
        return datetime.combine(local_date, local_time, tzinfo=zone).astimezone(timezone.utc)
    except OverflowError as e:
        raise InvalidDateTimeError(
            f"{local_date.isoformat()} {local_time.strftime(TIME_FORMAT)} in {time_zone} is out of range"
        ) from e


def to_instant(local_date: str, local_time: str, time_zone: str) -> datetime:
    """
    Convert local ``YYYY-MM-DD`` + ``HH:MM`` in ``time_zone`` to an aware UTC datetime.

    Raises:
        InvalidTimeZoneError: the zone name is not recognized
        InvalidDateTimeError: the date or time string is malformed, or the
            instant falls outside the representable range
    """
    resolve_timezone(time_zone)
    return localize(parse_local_date(local_date), parse_local_time(local_time), time_zone)


def from_instant(instant: datetime, time_zone: str) -> LocalDateTime:
    """Project a stored instant into the zone's local date and 24-hour time strings"""
    zone = resolve_timezone(time_zone)
    try:
        local = ensure_utc(instant).astimezone(zone)
    except OverflowError as e:
        raise InvalidDateTimeError(f"{instant.isoformat()} cannot be shown in {time_zone}") from e
    return LocalDateTime(local.strftime(DATE_FORMAT), local.strftime(TIME_FORMAT))


def ensure_utc(value: datetime) -> datetime:
    """Naive values read back from the database are UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_storage(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to the naive UTC form kept in DateTime columns"""
    if value is None:
        return None
    return ensure_utc(value).replace(tzinfo=None)


def utcnow() -> datetime:
    """Current time as a naive UTC datetime"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return ensure_utc(value).isoformat().replace("+00:00", "Z")


# Response field type: stored naive values are emitted as UTC with an explicit offset
UtcDateTime = Annotated[datetime, AfterValidator(ensure_utc)]
