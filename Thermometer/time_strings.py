"""Human readable renderings of times and ages."""
from datetime import datetime, timezone

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = MINUTES_PER_HOUR * 24
MINUTES_PER_WEEK = MINUTES_PER_DAY * 7
MINUTES_PER_MONTH = MINUTES_PER_DAY * (365.25 / 12)
MINUTES_PER_YEAR = MINUTES_PER_DAY * 365.25


def ms_to_time_string(ms: int) -> str:
    """
    Convert a number of milliseconds to a string like "3s" or "12 days".

    Each unit is used until the value reaches two of the next unit up.
    """
    if ms < 10000:
        return f"{ms}ms"

    if ms < 120 * 1000:
        return f"{ms // 1000}s"

    minutes = ms // (60 * 1000)

    if minutes < MINUTES_PER_HOUR * 2:
        return f"{minutes} minutes"
    if minutes < MINUTES_PER_DAY * 2:
        return f"{minutes // MINUTES_PER_HOUR} hours"
    if minutes < MINUTES_PER_WEEK * 2:
        return f"{minutes // MINUTES_PER_DAY} days"
    if minutes < MINUTES_PER_MONTH * 2:
        return f"{minutes // MINUTES_PER_WEEK} weeks"
    if minutes < MINUTES_PER_YEAR * 2:
        return f"{int(minutes / MINUTES_PER_MONTH)} months"
    return f"{int(minutes / MINUTES_PER_YEAR)} years"


def minutes_to_time_old_string(age_minutes: int) -> str:
    """Convert an age in minutes to a string like "2 hours old"."""
    if age_minutes < -1:
        return f"{-age_minutes} minutes future"

    if age_minutes <= 1:
        return "current"

    return ms_to_time_string(age_minutes * 60 * 1000) + " old"


def to_hours_string(time: datetime, use_24_hour_clock: bool) -> str:
    """
    Render a time of day.

    Args:
        time: Time to render, in the time zone it should be shown in
        use_24_hour_clock: True for "15:42", False for "3:42PM"
    """
    if use_24_hour_clock:
        return f"{time.hour:02d}:{time.minute:02d}"

    hour = time.hour % 12 or 12
    suffix = "AM" if time.hour < 12 else "PM"
    return f"{hour}:{time.minute:02d}{suffix}"


def to_local(timestamp: int) -> datetime:
    """Convert a UNIX timestamp to an aware datetime in the local time zone."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).astimezone()


def is_fahrenheit(unit_name: str) -> bool:
    # "Farenheit" is an old misspelling still found in saved settings
    return unit_name in ("Fahrenheit", "Farenheit")
