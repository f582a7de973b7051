from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

from ..core.constants import SECONDS_PER_DAY
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: Optional[str], field_name: str) -> Optional[date]:
    """Parse a query-string date; empty means "no constraint"."""
    v = (value or "").strip()
    if not v:
        return None
    try:
        return parse_iso_date(v)
    except ValueError:
        raise ValidationError(f"Invalid {field_name} format. Use YYYY-MM-DD")


def parse_hhmm(value: str) -> time:
    """Parse HH:MM into a time of day. Raises ValueError on bad input."""
    return datetime.strptime((value or "").strip(), "%H:%M").time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def seconds_since_midnight(moment: datetime | time) -> int:
    return moment.hour * 3600 + moment.minute * 60 + moment.second


def average_time_of_day(values: Sequence[datetime | time]) -> Optional[int]:
    """Mean time of day in seconds since midnight, or None for no values.

    The clock is cut at the widest gap between the sorted values, so times
    on both sides of midnight (23:30 and 00:30) average to 00:00 rather
    than noon. Integer seconds keep the result reproducible across runs.
    """
    if not values:
        return None
    seconds = sorted(seconds_since_midnight(v) for v in values)
    count = len(seconds)

    # Gap after each value, the last one wrapping to the first on the next day.
    gaps = [seconds[i + 1] - seconds[i] for i in range(count - 1)]
    gaps.append(seconds[0] + SECONDS_PER_DAY - seconds[-1])
    start = (gaps.index(max(gaps)) + 1) % count

    unwrapped = seconds[start:] + [s + SECONDS_PER_DAY for s in seconds[:start]]
    return (sum(unwrapped) // count) % SECONDS_PER_DAY


def format_hms(total_seconds: Optional[int]) -> Optional[str]:
    """Render a seconds count as HH:MM:SS (hours may exceed 24)."""
    if total_seconds is None:
        return None
    total_seconds = int(total_seconds)
    sign = "-" if total_seconds < 0 else ""
    total_seconds = abs(total_seconds)
    return f"{sign}{total_seconds // 3600:02d}:{(total_seconds % 3600) // 60:02d}:{total_seconds % 60:02d}"


def parse_month(value: date | str, field_name: str = "month") -> date:
    """Parse YYYY-MM (or a date) into the first day of that month."""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.replace(day=1)
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m").date()
    except ValueError:
        raise ValidationError(f"Invalid {field_name} format. Use YYYY-MM")


def month_bounds(first_day: date) -> tuple[date, date]:
    """First and last day of the month starting at ``first_day``."""
    if first_day.month == 12:
        next_month = first_day.replace(year=first_day.year + 1, month=1, day=1)
    else:
        next_month = first_day.replace(month=first_day.month + 1, day=1)
    return first_day, next_month - timedelta(days=1)
