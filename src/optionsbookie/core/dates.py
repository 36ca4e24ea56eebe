"""Calendar-day arithmetic for trade dates.

Every helper here works on local calendar dates: timestamps are reduced to the
date written in the value before any differencing, so a trade closed at
``2025-10-03T23:59:59.999Z`` still counts as closing on October 3rd no matter
which zone the process runs in.  Helpers never raise on malformed input; they
fall back to ``0`` days or ``not expired`` instead.

Callers supply "today" (``as_of``) or "now" explicitly when they need
reproducible output. When omitted, the system clock is used.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timezone
from typing import Optional, Union

DateLike = Union[date, datetime, str, None]

MARKET_CLOSE_UTC = time(20, 0)
DAYS_PER_MONTH_BUCKET = 30

_ISO_DATE_PREFIX = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})")

logger = logging.getLogger(__name__)


def today() -> date:
    """Return the current local calendar date."""
    return date.today()


def utc_now() -> datetime:
    """Return the current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_local_date(value: DateLike) -> Optional[date]:
    """
    Reduce ``value`` to the calendar date it names.

    Accepts ``date``/``datetime`` objects, ``YYYY-MM-DD`` strings and ISO
    timestamps. Returns ``None`` for anything that does not name a real day.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    match = _ISO_DATE_PREFIX.match(value)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def calendar_days_between(start: DateLike, end: DateLike) -> Optional[int]:
    """Signed number of calendar days from ``start`` to ``end`` (``None`` if either is invalid)."""
    start_day = parse_local_date(start)
    end_day = parse_local_date(end)
    if start_day is None or end_day is None:
        return None
    return (end_day - start_day).days


def days_held(
    open_date: DateLike,
    close_date: DateLike = None,
    *,
    as_of: Optional[date] = None,
) -> int:
    """Whole days a position was held, measured to ``close_date`` or ``as_of``."""
    end = close_date if close_date else (as_of or today())
    delta = calendar_days_between(open_date, end)
    if delta is None:
        logger.debug("Unable to compute days held for %r -> %r", open_date, end)
        return 0
    return max(delta, 0)


def days_to_expiry(expiry_date: DateLike, *, as_of: Optional[date] = None) -> int:
    """Whole days remaining until expiration; expired or invalid dates yield ``0``."""
    delta = calendar_days_between(as_of or today(), expiry_date)
    if delta is None:
        return 0
    return max(delta, 0)


def is_expired(expiry_date: DateLike, now: Optional[datetime] = None) -> bool:
    """
    Return ``True`` once the market has closed on the expiration date.

    The cutoff is 20:00 UTC on the expiry day (about 4:00 PM US Eastern). The
    cutoff instant itself still counts as not expired. Naive ``now`` values are
    treated as UTC.
    """
    expiry_day = parse_local_date(expiry_date)
    if expiry_day is None:
        return False
    moment = now or utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    cutoff = datetime.combine(expiry_day, MARKET_CLOSE_UTC, tzinfo=timezone.utc)
    return moment > cutoff


def months_between(start: date, end: date) -> int:
    """Calendar-month distance between two dates, ignoring the day of month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def month_key(value: date) -> str:
    """Sortable monthly bucket key, e.g. ``2025-01``."""
    return value.strftime("%Y-%m")


def month_label(value: date) -> str:
    """Short human label for a month bucket, e.g. ``Jan 2025``."""
    return value.strftime("%b %Y")


def parse_month_key(key: str) -> date:
    """Return the first day of the month named by a ``YYYY-MM`` key."""
    return datetime.strptime(key, "%Y-%m").date()


__all__ = [
    "DAYS_PER_MONTH_BUCKET",
    "DateLike",
    "MARKET_CLOSE_UTC",
    "calendar_days_between",
    "days_held",
    "days_to_expiry",
    "is_expired",
    "month_key",
    "month_label",
    "months_between",
    "parse_local_date",
    "parse_month_key",
    "today",
    "utc_now",
]
