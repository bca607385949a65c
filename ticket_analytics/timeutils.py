"""Date parsing, range membership and duration helpers.

All comparisons happen on naive datetimes in the local time of the running
process. Timezone-aware inputs are converted to local time first, so a
``...Z`` timestamp and a naive local timestamp for the same instant compare
equal.
"""

import math
import re
from datetime import date, datetime, time, timedelta
from typing import Any

from .constants import (
    DAYS_PER_WEEK,
    MINUTES_PER_HOUR,
    NO_DATA,
    SECONDS_PER_MINUTE,
    WEEKS_PER_MONTH,
)
from .models import DateRange

END_OF_DAY: time = time(23, 59, 59, 999000)
ONE_SECOND: timedelta = timedelta(seconds=1)
# Shorter digit strings are years or partial dates, never epoch milliseconds
EPOCH_MILLIS_PATTERN: re.Pattern[str] = re.compile(r"-?\d{10,}(\.\d+)?")


def to_local_naive(value: datetime) -> datetime:
    """Return ``value`` as a naive datetime in local time.

    Raises:
        OverflowError: If the local-time conversion leaves the supported
            calendar range, e.g. ``9999-12-31T23:59:59-05:00``.
    """
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def parse_safe(value: Any) -> datetime | None:
    """Parse a timestamp without ever raising.

    Accepts ISO-8601 strings (a trailing ``Z`` is understood), epoch
    milliseconds given as a number or a string of at least ten digits, and
    ``date`` / ``datetime`` objects. Shorter digit strings such as ``"2024"``
    are not treated as epoch values.

    Args:
        value: Raw timestamp value from an activity record.

    Returns:
        datetime | None: Local naive datetime, or None when the value is
        missing, cannot be parsed, or falls outside the calendar range.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _localize(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, (int, float)):
        return _from_epoch_millis(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        # Try parsing ISO format timestamp
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
    if parsed is not None:
        return _localize(parsed)

    # Try parsing as milliseconds since epoch
    if EPOCH_MILLIS_PATTERN.fullmatch(text) is None:
        return None
    return _from_epoch_millis(float(text))


def _localize(value: datetime) -> datetime | None:
    try:
        return to_local_naive(value)
    except (ValueError, OverflowError):
        return None


def _from_epoch_millis(millis: float) -> datetime | None:
    try:
        return datetime.fromtimestamp(millis / 1000)
    except (ValueError, OverflowError, OSError):
        return None


def in_range(value: Any, date_range: DateRange | None) -> bool:
    """Check whether a timestamp falls inside an inclusive calendar range.

    ``from`` is widened to 00:00:00.000 of its day and ``to`` to
    23:59:59.999 of its day. A missing bound is unbounded on that side.

    Args:
        value: Raw timestamp to test.
        date_range: Range to test against. None means no filtering.

    Returns:
        bool: True if there is no range, or the timestamp parses and lies
        within it. False for missing or unparseable timestamps.
    """
    if date_range is None:
        return True

    moment = parse_safe(value)
    if moment is None:
        return False

    if date_range.from_ is not None:
        if moment < datetime.combine(date_range.from_, time.min):
            return False
    if date_range.to is not None:
        if moment > datetime.combine(date_range.to, END_OF_DAY):
            return False

    return True


def elapsed_seconds(start: Any, end: Any) -> int | None:
    """Whole seconds from ``start`` to ``end``.

    Returns None if either side is missing or unparseable, or if ``end``
    precedes ``start``. Negative durations are never produced.
    """
    started = parse_safe(start)
    ended = parse_safe(end)
    if started is None or ended is None or ended < started:
        return None
    return (ended - started) // ONE_SECOND


def format_duration(total_seconds: float | None) -> str:
    """Render a duration as ``HH:MM:SS`` at minute granularity.

    The value is rounded to the nearest minute (halves round up), so the
    seconds field is always ``00``. None renders as ``-``.

    Args:
        total_seconds: Duration in seconds, or None for "no data".

    Returns:
        str: Formatted duration such as ``01:01:00``.
    """
    if total_seconds is None or not math.isfinite(total_seconds):
        return NO_DATA

    minutes_total = math.floor(max(total_seconds, 0) / SECONDS_PER_MINUTE + 0.5)
    hours, minutes = divmod(minutes_total, MINUTES_PER_HOUR)
    return f"{hours:02d}:{minutes:02d}:00"


def week_of_month(moment: datetime) -> int:
    """Week bucket 1-4 of the month; days 22 onward all fall in week 4."""
    return min((moment.day - 1) // DAYS_PER_WEEK + 1, WEEKS_PER_MONTH)
