from datetime import date, datetime
from typing import Optional, Union
import pytz

CALENDAR_DAY_FORMAT = "%Y-%m-%d"

# Latest civil timezone in use (UTC+14). A calendar day later than "today"
# there has not started anywhere yet.
LATEST_TIMEZONE = "Pacific/Kiritimati"


def get_utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(pytz.UTC)


def convert_to_timezone(dt: datetime, timezone: str = "UTC") -> datetime:
    """Convert datetime to specified timezone."""
    target_tz = pytz.timezone(timezone)
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return dt.astimezone(target_tz)


def today_in(timezone: Optional[str] = None) -> date:
    """Calendar day right now in the given timezone (local time when omitted)."""
    if timezone is None:
        return date.today()
    return convert_to_timezone(get_utc_now(), timezone).date()


def latest_calendar_day() -> str:
    """The most advanced calendar day currently in effect anywhere."""
    return format_calendar_day(today_in(LATEST_TIMEZONE))


def format_calendar_day(day: Union[date, datetime]) -> str:
    return day.strftime(CALENDAR_DAY_FORMAT)


def parse_calendar_day(value: Union[str, date, datetime]) -> date:
    """Parse a YYYY-MM-DD calendar day. Raises ValueError for anything else."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Calendar day must be a string, got {type(value).__name__}")
    return datetime.strptime(value.strip(), CALENDAR_DAY_FORMAT).date()


def normalize_calendar_day(value) -> Optional[str]:
    """
    Reduce a stored date value to its calendar day string.

    Values carrying a time suffix ("2024-06-01T08:00:00Z") keep their date
    part as written; no timezone conversion is applied. Returns None when
    the value is missing or not a calendar day.
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return format_calendar_day(value)
    if not isinstance(value, str):
        return None
    day = value.strip().split("T")[0].split(" ")[0]
    if not day:
        return None
    try:
        return format_calendar_day(parse_calendar_day(day))
    except ValueError:
        return None


def add_months(day: date, months: int) -> date:
    """First day of the month `months` away from the month of `day`."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def parse_clock_time(value: str) -> Optional[tuple]:
    """Parse an "HH:MM" clock string into (hour, minute)."""
    try:
        hour_str, minute_str = value.strip().split(":")[:2]
        hour, minute = int(hour_str), int(minute_str)
    except (AttributeError, ValueError):
        return None
    if not (0 <= hour < 24 and 0 <= minute < 60):
        return None
    return hour, minute
