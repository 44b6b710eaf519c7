"""Utility functions for the pool hours service."""

import logging
import re
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

date_regex = re.compile(r"^\d{4}-\d{2}-\d{2}$")
time_range_regex = re.compile(
    r"(\d{1,2}):(\d{2})(am|pm)\s*-\s*(\d{1,2}):(\d{2})(am|pm)", re.IGNORECASE
)

WEEKDAY_NAMES = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]


def validate_date(date_str: str) -> bool:
    """Validate date format (YYYY-MM-DD).

    Args:
        date_str: Date string to validate

    Returns:
        True if valid, False otherwise
    """
    return parse_date(date_str) is not None


def parse_date(date_str: str) -> date | None:
    """Parse a YYYY-MM-DD string into a date, None when invalid."""
    try:
        if not re.match(date_regex, date_str):
            return None
        return date.fromisoformat(date_str)
    except (ValueError, TypeError):
        return None


def get_zone(timezone_name: str) -> ZoneInfo:
    """Return a ZoneInfo instance for an IANA timezone name.

    Raises:
        ValueError: If the name is not a known timezone
    """
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {timezone_name}") from e


def today_in_timezone(now: datetime, timezone_name: str) -> date:
    """Calendar date of the instant `now` as seen in the given timezone."""
    return now.astimezone(get_zone(timezone_name)).date()


def weekday_name(day: date) -> str:
    """Full English weekday name for a date."""
    return WEEKDAY_NAMES[day.weekday()]


def week_start(today: date, week_offset: int = 0) -> date:
    """Monday of the week containing `today`, shifted by whole weeks."""
    return today - timedelta(days=today.weekday()) + timedelta(weeks=week_offset)


def to_24_hour(hour: int, minute: int, meridiem: str) -> tuple[int, int] | None:
    """Convert a 12-hour clock reading to (hour, minute) on a 24-hour clock.

    12 AM is midnight (00) and 12 PM is noon (12); any other PM hour adds 12.
    Returns None for readings that are not valid 12-hour times.
    """
    if not (1 <= hour <= 12) or not (0 <= minute <= 59):
        return None

    meridiem = meridiem.lower()
    if meridiem == "am":
        return (0 if hour == 12 else hour, minute)
    return (12 if hour == 12 else hour + 12, minute)


def parse_time_range(text: str) -> tuple[str, str] | None:
    """Parse a time range string like "7:30am - 11:00am".

    Args:
        text: Free text containing a time range

    Returns:
        Tuple of start and end in 24-hour "HH:MM" format, or None if the
        text does not contain a valid range
    """
    match = time_range_regex.search(text or "")
    if not match:
        return None

    start = to_24_hour(int(match.group(1)), int(match.group(2)), match.group(3))
    end = to_24_hour(int(match.group(4)), int(match.group(5)), match.group(6))
    if start is None or end is None:
        return None

    return f"{start[0]:02d}:{start[1]:02d}", f"{end[0]:02d}:{end[1]:02d}"


def normalize_time_range(
    text: str, target_date: date, timezone_name: str
) -> tuple[datetime, datetime] | None:
    """Anchor a time range string to a date and convert it to UTC.

    The wall-clock times are read in `timezone_name`, so the UTC offset
    follows that zone's daylight saving rules on `target_date`. An end time
    earlier than the start stays on the same date.

    Args:
        text: Time range text, e.g. "7:30am - 11:00am"
        target_date: Calendar date the session takes place on
        timezone_name: IANA timezone the site publishes times in

    Returns:
        (start, end) as UTC datetimes, or None if the text is unparseable
    """
    parsed = parse_time_range(text)
    if parsed is None:
        logger.debug(f"Unparseable time range: {text!r}")
        return None

    zone = get_zone(timezone_name)
    instants = []
    for hhmm in parsed:
        hour, minute = map(int, hhmm.split(":"))
        local = datetime.combine(target_date, time(hour, minute), tzinfo=zone)
        instants.append(local.astimezone(timezone.utc))

    return instants[0], instants[1]


def to_iso_utc(moment: datetime) -> str:
    """Format an aware datetime as an ISO-8601 UTC string with a Z suffix."""
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="seconds")
        .replace("+00:00", "Z")
    )


def format_time_for_display(moment: datetime, timezone_name: str) -> str:
    """Format an instant as a compact 12-hour wall-clock time, e.g. "7:30am"."""
    local = moment.astimezone(get_zone(timezone_name))
    hour = local.hour % 12 or 12
    meridiem = "am" if local.hour < 12 else "pm"
    return f"{hour}:{local.minute:02d}{meridiem}"


def format_time_range(start: datetime, end: datetime, timezone_name: str) -> str:
    """Format a session as "7:30am-11:00am" in the given timezone."""
    return (
        f"{format_time_for_display(start, timezone_name)}"
        f"-{format_time_for_display(end, timezone_name)}"
    )
