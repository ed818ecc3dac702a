from datetime import datetime, timezone, date
from typing import Optional, Union

import dateparser


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_datetime(value: Union[str, date, datetime, None]) -> Optional[datetime]:
    """Lenient parse of user supplied dates ("2025-03-01", "March 1 2025", ...)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    parsed = dateparser.parse(str(value), settings={"DATE_ORDER": "YMD"})
    return to_naive_utc(parsed)
