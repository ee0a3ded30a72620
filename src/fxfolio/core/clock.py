"""Clock and date utilities.

Rate dates follow the rate source, which publishes UTC calendar dates.
"""

from datetime import date, datetime
from typing import Union

import pytz
from dateutil import parser as date_parser

UTC = pytz.utc


def now_utc() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(UTC)


def today_iso() -> str:
    """Return today's UTC date as YYYY-MM-DD."""
    return now_utc().date().isoformat()


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC, assuming naive values are already UTC."""
    if dt.tzinfo is None:
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def parse_iso_date(value: Union[str, date, datetime]) -> date:
    """
    Normalize a date-like value to a calendar date.

    Accepts date, datetime or any string dateutil understands.
    Raises ValueError for unparseable strings.
    """
    if isinstance(value, datetime):
        return to_utc(value).date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(value).date()
    except (ValueError, OverflowError):
        try:
            return date_parser.parse(value).date()
        except (ValueError, OverflowError) as exc:
            raise ValueError(f"Invalid date: {value!r}") from exc
