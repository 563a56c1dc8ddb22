"""
Month Calendar Helpers

- Normalizes month names ("March", "march") to their 1-12 number
- Renders display labels and the billing-cycle due date
"""

import re
from typing import Optional


MONTH_NAMES = [
    "",
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

MONTH_NUMBERS = {name.lower(): i for i, name in enumerate(MONTH_NAMES) if name}

# Bills for month M are due on this day of month M+1
DUE_DAY = 10

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value) -> Optional[int]:
    """Read the leading integer of a value ("03" -> 3, "2024 " -> 2024)."""
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value else None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def month_from_name(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    return MONTH_NUMBERS.get(str(value).strip().lower())


def normalize_month(value: Optional[str]) -> Optional[str]:
    """Month name -> "1".."12"; anything else passes through unchanged."""
    number = month_from_name(value)
    return str(number) if number is not None else value


def resolve_month_number(value) -> Optional[int]:
    number = month_from_name(value) if isinstance(value, str) else None
    return number if number is not None else parse_int(value)


def month_label(number: Optional[int], fallback=None) -> str:
    if number is not None and 1 <= number <= 12:
        return MONTH_NAMES[number]
    return "" if fallback is None else str(fallback)


def due_date(month_number: Optional[int], year) -> Optional[str]:
    """
    The 10th of the month after the billed one, rolling into January of
    the following year after December. None when month or year is unknown.
    """
    year_number = parse_int(year)
    if month_number is None or year_number is None:
        return None
    if not 1 <= month_number <= 12:
        return None

    next_month = month_number + 1
    if next_month > 12:
        next_month = 1
        year_number += 1
    return f"{MONTH_NAMES[next_month]} {DUE_DAY}, {year_number}"
