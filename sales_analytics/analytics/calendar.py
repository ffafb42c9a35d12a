"""
Calendar Windows

Resolves month names into half-open UTC intervals one calendar month wide.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sales_analytics.analytics.errors import InvalidMonthError

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)


@dataclass(frozen=True)
class TimeWindow:
    """Half-open interval [start, end) in UTC"""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(f"Window start {self.start} must precede end {self.end}")


def month_index(month: str) -> int:
    """
    Map a month name to 1..12, ignoring case. Padded text is not a month name.

    Raises:
        InvalidMonthError: If the name is not an English month name
    """
    try:
        return MONTH_NAMES.index(month.lower()) + 1
    except ValueError:
        raise InvalidMonthError(month) from None


def month_window(year: int, month: int) -> TimeWindow:
    """Window covering one calendar month of one year."""
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return TimeWindow(start=start, end=end)


def resolve_month_window(month: Optional[str], reference_year: int) -> Optional[TimeWindow]:
    """
    Resolve a month name to its window in the reference year.

    An absent or blank month means "no window" and returns None.

    Args:
        month: English month name, any case
        reference_year: Year every month name is anchored to

    Returns:
        The month's window, or None when no month was given

    Raises:
        InvalidMonthError: If a month was given but is not recognized
    """
    if month is None or not month.strip():
        return None
    return month_window(reference_year, month_index(month))
