"""Conversion of UI date strings into canonical timestamps.

The staff UI submits dates as ``DD/MM/YYYY`` and optional times as
``HH:MM AM/PM``. Day, month and year are read at fixed offsets.
"""

from datetime import datetime, time, timezone, tzinfo

from events.domain.errors import InvalidDateFormatError

DATE_LENGTH = 10
MIDNIGHT_DISPLAY = "12:00 AM"
_TIME_FORMATS = ("%I:%M %p", "%H:%M")


def _parse_time(time_part: str) -> time:
    value = " ".join(time_part.split()).upper()
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    raise InvalidDateFormatError(time_part)


def normalize_date(date_part: str, time_part: str | None = None, tz: tzinfo = timezone.utc) -> datetime:
    """Return the timestamp for ``date_part`` at ``time_part`` (midnight if absent).

    Raises:
        InvalidDateFormatError: If either part cannot be parsed or the date
            does not exist on the calendar.
    """
    if not isinstance(date_part, str) or len(date_part) != DATE_LENGTH:
        raise InvalidDateFormatError(str(date_part))

    day, month, year = date_part[0:2], date_part[3:5], date_part[6:10]
    if not (day.isdigit() and month.isdigit() and year.isdigit()):
        raise InvalidDateFormatError(date_part)

    try:
        date_value = datetime(int(year), int(month), int(day))
    except ValueError as exc:
        raise InvalidDateFormatError(date_part) from exc

    time_value = _parse_time(time_part) if time_part and time_part.strip() else time()
    return datetime.combine(date_value.date(), time_value, tzinfo=tz)


def format_date(value: datetime) -> str:
    """Render a timestamp back into the UI's ``DD/MM/YYYY`` layout."""
    return value.strftime("%d/%m/%Y")


def format_time(value: datetime) -> str:
    """Render a timestamp's time of day as ``HH:MM AM/PM``."""
    return value.strftime("%I:%M %p")
