"""
Month-key utilities.

All monthly series are keyed by "YYYY-MM" strings. These helpers keep
the arithmetic in one place so forecasts, injects and exports agree on
the calendar.
"""

import re
from datetime import date
from typing import Iterable, Optional

from exceptions import InvalidMonthKeyError

MONTH_KEY_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"
_MONTH_KEY_RE = re.compile(MONTH_KEY_PATTERN)


def parse_month_key(month_key: str) -> tuple[int, int]:
    """
    Split a month key into (year, month).

    Raises:
        InvalidMonthKeyError: If the key is not YYYY-MM
    """
    if not isinstance(month_key, str) or not _MONTH_KEY_RE.match(month_key):
        raise InvalidMonthKeyError(str(month_key))
    year, month = month_key.split("-")
    return int(year), int(month)


def format_month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def month_key_for_date(value: date) -> str:
    return format_month_key(value.year, value.month)


def add_months(month_key: str, offset: int) -> str:
    """
    Shift a month key by offset months (negative offsets go back).

    '2025-11' + 3 -> '2026-02'
    """
    year, month = parse_month_key(month_key)
    index = year * 12 + (month - 1) + offset
    return format_month_key(index // 12, index % 12 + 1)


def month_index(month_key: str) -> int:
    """Absolute month ordinal, used for contiguity and window checks."""
    year, month = parse_month_key(month_key)
    return year * 12 + (month - 1)


def months_between(start: str, end: str) -> int:
    """Number of months from start to end (end - start)."""
    return month_index(end) - month_index(start)


def month_range(start: str, count: int) -> list[str]:
    """Return count consecutive month keys beginning at start."""
    return [add_months(start, i) for i in range(max(0, count))]


def quarter_of(month_key: str) -> str:
    """Calendar quarter label ('Q1'..'Q4') for a month key."""
    _, month = parse_month_key(month_key)
    return f"Q{(month - 1) // 3 + 1}"


def month_number(month_key: str) -> str:
    """Two-digit month number ('01'..'12')."""
    return month_key[5:7]


def is_contiguous(month_keys: Iterable[str]) -> bool:
    """True if the sorted keys have no missing months between them."""
    ordered = sorted(month_keys)
    for previous, current in zip(ordered, ordered[1:]):
        if months_between(previous, current) != 1:
            return False
    return True


def missing_months(month_keys: Iterable[str]) -> list[str]:
    """Months absent between the first and last key."""
    ordered = sorted(month_keys)
    if len(ordered) < 2:
        return []
    present = set(ordered)
    span = months_between(ordered[0], ordered[-1]) + 1
    return [m for m in month_range(ordered[0], span) if m not in present]


def in_window(month_key: str, start: str, end: str) -> bool:
    """Inclusive window membership."""
    return month_index(start) <= month_index(month_key) <= month_index(end)


def latest_month(month_keys: Iterable[str]) -> Optional[str]:
    keys = list(month_keys)
    return max(keys) if keys else None
