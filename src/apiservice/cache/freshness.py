"""Day-granularity freshness policy for cached payloads.

A cached payload carries the calendar date it was fetched on. It stays usable
while its age in whole calendar days is below ``max_age_in_days``; the time
of day never matters. With the default of one day, data fetched today is
fresh and data fetched yesterday is not.
"""

from __future__ import annotations

import datetime
import math
from typing import Any, Optional

_ONE_DAY = datetime.timedelta(days=1)


def parse_fetch_date(value: Any) -> Optional[datetime.date]:
    """Parse a stored fetch date, returning ``None`` for anything unusable.

    Accepts ISO dates (``2024-05-01``) and ISO datetimes
    (``2024-05-01T13:45:00``); a datetime is reduced to its date.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    try:
        return datetime.date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.datetime.fromisoformat(text).date()
    except ValueError:
        return None


def age_in_days(fetch_date: datetime.date, today: Optional[datetime.date] = None) -> int:
    """Whole calendar days between *fetch_date* and *today* (negative if in the future)."""
    today = today or datetime.date.today()
    return math.ceil((today - fetch_date) / _ONE_DAY)


def is_valid(
    fetch_date_str: Any,
    max_age_in_days: int,
    today: Optional[datetime.date] = None,
) -> bool:
    """Decide whether data fetched on *fetch_date_str* may still be served.

    Fails closed: an absent, non-string, or malformed date is never valid,
    and no exception escapes.

    Args:
        fetch_date_str: The stored fetch date.
        max_age_in_days: Exclusive upper bound on the age in days.
        today: Reference date; defaults to the local calendar date.

    Returns:
        ``True`` iff the age in whole days is strictly below
        ``max_age_in_days``.
    """
    fetch_date = parse_fetch_date(fetch_date_str)
    if fetch_date is None:
        return False
    return age_in_days(fetch_date, today) < max_age_in_days
