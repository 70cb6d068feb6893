from __future__ import annotations

import re
from datetime import datetime, time, tzinfo
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser


MYSQL_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_DATE_ONLY = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}$")


def format_mysql_datetime(value: datetime) -> str:
    return value.strftime(MYSQL_DATETIME_FORMAT)


def is_date_only(value: str) -> bool:
    return bool(_DATE_ONLY.match(value.strip()))


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time(23, 59, 59))


def parse_datetime(value: str, *, timezone: tzinfo | None = None) -> datetime:
    """Parse a free-form date or datetime into a naive site-local datetime.

    Aware inputs are converted to ``timezone`` (when given) before the offset
    is dropped, so every value compares against the naive timestamps stored
    by WordPress. Raises ``ValueError`` when the string is not a date.
    """
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Unparseable datetime: {value!r}") from exc
    if parsed.tzinfo is not None:
        if timezone is not None:
            parsed = parsed.astimezone(timezone)
        parsed = parsed.replace(tzinfo=None)
    return parsed.replace(microsecond=0)


def site_now(timezone_name: str) -> datetime:
    return datetime.now(ZoneInfo(timezone_name)).replace(tzinfo=None, microsecond=0)
