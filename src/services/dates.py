"""
Date-only helpers.

Wash jobs and expenses store their day as a "YYYY-MM-DD" string. These
helpers turn that string into a calendar date without ever going through
a timestamp, so "2024-03-10" is March 10th no matter the server's UTC offset.
"""

from datetime import date, datetime

from src.services.errors import ParseError


def parse_date_only(value: str) -> date:
    """Parse "YYYY-MM-DD" into a date.

    Raises:
        ParseError: wrong number of segments, non-numeric parts, or a day
            that does not exist on the calendar.
    """
    if not isinstance(value, str):
        raise ParseError(f"Expected a YYYY-MM-DD string, got {value!r}")

    parts = value.strip().split("-")
    if len(parts) != 3 or not all(p.isascii() and p.isdigit() for p in parts):
        raise ParseError(f"Invalid date {value!r}; expected YYYY-MM-DD")

    year, month, day = (int(p) for p in parts)
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise ParseError(f"Invalid date {value!r}: {exc}") from exc


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date_only(value)


def format_local(value) -> str:
    """Render a date (or YYYY-MM-DD string) the pt-BR way: DD/MM/YYYY."""
    return _as_date(value).strftime("%d/%m/%Y")


def format_day_month(value) -> str:
    """DD/MM — used for the week navigation labels."""
    return _as_date(value).strftime("%d/%m")


def normalize_date_only(value: str) -> str:
    """Validate user input and return it zero-padded ("2024-3-5" -> "2024-03-05")."""
    return parse_date_only(value).isoformat()


def weekday_index(value) -> int:
    """Day of week with Sunday=0 .. Saturday=6."""
    return (_as_date(value).weekday() + 1) % 7
