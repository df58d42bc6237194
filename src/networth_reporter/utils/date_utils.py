"""Date parsing, time-range resolution and month bucketing utilities.

All instants are handled as naive datetimes in UTC. Offsets and the
trailing ``Z`` of ISO-8601 strings are converted to UTC and dropped so
that comparisons never mix aware and naive values.
"""

import calendar
from collections.abc import Iterable
from datetime import date, datetime, time, timezone
from enum import Enum

# Fallback formats tried after ISO-8601.
# Slash-separated dates are read as US (MM/DD/YYYY), period-separated as European.
FALLBACK_FORMATS = [
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%d.%m.%Y",
    "%Y%m%d",
]


class TimeRange(Enum):
    """Trailing window selecting where a report series starts."""

    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    TWELVE_MONTHS = "12m"
    ALL = "all"

    @property
    def months(self) -> int | None:
        """Number of months looked back, or None for all-time."""
        return _RANGE_MONTHS.get(self)

    @property
    def label(self) -> str:
        """Human-readable label."""
        if self is TimeRange.ALL:
            return "All time"
        return f"Last {self.months} months"

    @classmethod
    def parse(cls, value: "str | TimeRange") -> "TimeRange":
        """Convert a string such as ``"6m"`` to a TimeRange.

        Raises:
            ValueError: If the value is not a known range.
        """
        if isinstance(value, TimeRange):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(r.value for r in cls)
            raise ValueError(f"Unknown time range '{value}' (expected one of: {choices})") from None


_RANGE_MONTHS = {
    TimeRange.THREE_MONTHS: 3,
    TimeRange.SIX_MONTHS: 6,
    TimeRange.TWELVE_MONTHS: 12,
}


def utc_now() -> datetime:
    """Current instant as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_datetime(value: object) -> datetime:
    """Parse a timestamp from an API record into a naive UTC datetime.

    Handles:
    - datetime and date objects
    - ISO-8601 strings: 2024-01-15, 2024-01-15T10:30:00Z, 2024-01-15T10:30:00+02:00
    - Serialized Firestore timestamps: {"_seconds": 1705314600, "_nanoseconds": 0}
    - US and European date strings: 01/15/2024, 15.01.2024

    Args:
        value: The raw value to parse.

    Returns:
        Parsed datetime.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    if isinstance(value, datetime):
        return _to_naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)

    if isinstance(value, dict):
        seconds = value.get("_seconds", value.get("seconds"))
        if seconds is None:
            raise ValueError(f"Cannot parse timestamp: {value!r}")
        nanos = value.get("_nanoseconds", value.get("nanoseconds", 0)) or 0
        try:
            stamp = float(seconds) + float(nanos) / 1_000_000_000  # type: ignore[arg-type]
        except (TypeError, ValueError):
            raise ValueError(f"Cannot parse timestamp: {value!r}") from None
        return datetime.fromtimestamp(stamp, tz=timezone.utc).replace(tzinfo=None)

    if not isinstance(value, str):
        raise ValueError(f"Cannot parse date: {value!r}")

    date_str = value.strip()
    if not date_str:
        raise ValueError("Empty date string")

    iso_str = date_str[:-1] + "+00:00" if date_str.endswith(("Z", "z")) else date_str
    try:
        return _to_naive_utc(datetime.fromisoformat(iso_str))
    except ValueError:
        pass

    for fmt in FALLBACK_FORMATS:
        try:
            return datetime.strptime(date_str, fmt)
        except ValueError:
            continue

    raise ValueError(f"Cannot parse date: '{value}'")


def first_of_month(d: date) -> date:
    """Return the first day of the month containing ``d``."""
    return date(d.year, d.month, 1)


def add_months(d: date, months: int) -> date:
    """Return the first day of the month ``months`` away from ``d``'s month.

    Args:
        d: Reference date.
        months: Offset in months (negative to go back).

    Returns:
        First day of the target month.
    """
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_end(year: int, month: int) -> datetime:
    """Return the last instant of a calendar month.

    Args:
        year: Calendar year.
        month: Calendar month (1-12).

    Returns:
        Datetime of the last day of the month at 23:59:59.999999.
    """
    last_day = calendar.monthrange(year, month)[1]
    return datetime.combine(date(year, month, last_day), time.max)


def month_label(year: int, month: int) -> str:
    """Short chart label for a month, e.g. ``"Mar 25"``."""
    return date(year, month, 1).strftime("%b %y")


def get_range_start(
    time_range: TimeRange,
    transaction_dates: Iterable[datetime],
    today: date,
) -> date:
    """Compute the first month of a report window.

    Fixed ranges count back from the first day of the current month.
    ``ALL`` starts at the month of the earliest transaction, or on
    January 1 of the previous year when there are no transactions.

    Args:
        time_range: Selected window.
        transaction_dates: Dates of all transactions (only used for ALL).
        today: Reference date for the current month.

    Returns:
        First day of the window's first month.
    """
    if time_range.months is not None:
        return add_months(today, -time_range.months)

    earliest = min(transaction_dates, default=None)
    if earliest is None:
        return date(today.year - 1, 1, 1)
    return first_of_month(earliest)


def generate_month_range(start: date, end: date) -> list[tuple[int, int]]:
    """Generate (year, month) tuples covering a date range inclusively.

    Args:
        start: Start date.
        end: End date.

    Returns:
        List of (year, month) tuples in chronological order.
    """
    months = []
    current_year = start.year
    current_month = start.month

    while (current_year, current_month) <= (end.year, end.month):
        months.append((current_year, current_month))
        current_month += 1
        if current_month > 12:
            current_month = 1
            current_year += 1

    return months
