"""Calendar-date normalization for booking check-in and check-out values.

Booking dates are calendar days, not instants. Inputs arrive as
``YYYY-MM-DD`` strings, full timestamp strings (``2025-03-10T00:00:00Z``) or
native ``date`` / ``datetime`` objects, and must all land on the day written
in their date portion regardless of the server's timezone. A timestamp is
therefore never converted between zones: the time part is discarded and the
day is built from its year, month and day components.
"""

from datetime import date, datetime

# Tried in order when the input is not ``YYYY-MM-DD[T...]``.
_FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%a, %d %b %Y %H:%M:%S %Z",
)


def normalize_local_date(value: str | date | datetime) -> date:
    """Return the calendar day represented by ``value``.

    Raises:
        ValueError: If ``value`` cannot be read as a date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unsupported date value: {value!r}")

    text = value.strip()
    date_part = text.split("T", 1)[0]
    parts = date_part.split("-")
    if len(parts) == 3:
        try:
            return date(int(parts[0]), int(parts[1]), int(parts[2]))
        except ValueError:
            pass

    return _parse_fallback(text)


def _parse_fallback(text: str) -> date:
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"Unrecognized date: {text!r}")


def format_calendar_date(value: date) -> str:
    """Render a calendar day as zero-padded ``YYYY-MM-DD``.

    Lexical order of these strings is chronological order, which is how
    check-in and check-out are compared.
    """
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def count_nights(check_in: date, check_out: date) -> int:
    """Number of nights between two calendar days (0 if not increasing)."""
    return max((check_out - check_in).days, 0)
