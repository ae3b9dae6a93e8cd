import re
from datetime import date, datetime

from card_catalog.errors import FormatError
from card_catalog.utils.timezone import get_today

# Wire literal for "no end date yet"; sorts after every real date.
ONGOING_SENTINEL = "9999-12-31"
ONGOING_DATE = date(9999, 12, 31)

_DATE_PREFIX = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})(?:[T ].*)?", re.DOTALL)

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def parse_local_date(text: str) -> date:
    """Parse the ``YYYY-MM-DD`` prefix of ``text`` as a calendar day.

    Any time component after ``T`` or a space is dropped without being
    interpreted, so the result never depends on the caller's timezone.
    """
    if not isinstance(text, str):
        raise FormatError(f"Expected a YYYY-MM-DD string, got {type(text).__name__}", text)
    match = _DATE_PREFIX.fullmatch(text)
    if not match:
        raise FormatError(f"Invalid date {text!r}: expected YYYY-MM-DD", text)
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise FormatError(f"Invalid date {text!r}: {exc}", text) from exc


def coerce_date(value: date | datetime | str | None) -> date | None:
    """Turn a model's date input into a calendar day.

    Strings go through ``parse_local_date``; numbers and other types are
    rejected rather than read as timestamps.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_local_date(value)


def today() -> date:
    return get_today()


def current_iso_date() -> str:
    """Today's date as ``YYYY-MM-DD``."""
    return to_iso_date(today())


def to_iso_date(value: date | datetime | str) -> str:
    if isinstance(value, datetime):
        value = value.date()
    elif isinstance(value, str):
        value = parse_local_date(value)
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def format_display(value: date | str | None) -> str:
    """Render a day as ``Jan 5, 2025``; the ongoing sentinel renders ``Ongoing``."""
    if value is None or value == "":
        return "N/A"
    if isinstance(value, str):
        if value == ONGOING_SENTINEL:
            return "Ongoing"
        value = parse_local_date(value)
    elif isinstance(value, datetime):
        value = value.date()
    if value == ONGOING_DATE:
        return "Ongoing"
    return f"{_MONTH_ABBR[value.month - 1]} {value.day}, {value.year}"


def format_date_range(start: date | str, end: date | str | None) -> str:
    start_label = format_display(start)
    if end is None or end == "" or format_display(end) == "Ongoing":
        return f"{start_label} - Present"
    return f"{start_label} - {format_display(end)}"
