"""
Date normalization for SOLAPI query and body parameters.

The API expects ISO-8601 date-times with an explicit offset and second
precision, e.g. ``2024-01-01T00:00:00+09:00``.
"""
from datetime import date, datetime, time
from typing import Union

from solapi.exceptions import ValidationError

DateLike = Union[str, datetime, date]


def parse_datetime(value: str, field: str = "date") -> datetime:
    """
    Parse an ISO-like string into a datetime.

    A trailing ``Z`` is accepted as UTC.

    Raises:
        ValidationError: If the string cannot be parsed
    """
    if not value or not isinstance(value, str):
        raise ValidationError(field, "Date string is required", value)

    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(field, "Invalid date format. Expected ISO-8601", value)


def format_date(value: DateLike, field: str = "date") -> str:
    """
    Convert a date, datetime or ISO string into the API date-time format.

    Aware datetimes keep their offset; naive values are read as local time
    and get the local offset. Fractional seconds are dropped.

    Args:
        value: Date value supplied by the caller
        field: Field name for error messages

    Returns:
        Date-time string such as ``2024-01-01T00:00:00+09:00``

    Raises:
        ValidationError: If the value is not a supported date type
    """
    if isinstance(value, str):
        value = parse_datetime(value, field)
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    elif not isinstance(value, datetime):
        raise ValidationError(field, "Must be a date, datetime or ISO string", value)

    if value.tzinfo is None or value.utcoffset() is None:
        value = value.astimezone()

    return value.replace(microsecond=0).isoformat(timespec="seconds")
