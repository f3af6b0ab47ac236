"""
Centralized number and percentage formatting.

Every percentage that leaves the engine goes through ``clamp_percent`` so the
progress table, detail rows and radial views agree on rounding and bounds.
"""
from __future__ import annotations

import math
import typing as t


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3, not banker's 2)."""
    return int(math.floor(value + 0.5))


def clamp_percent(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def percent_of(part: float, whole: float) -> t.Optional[int]:
    """Integer percentage of ``part`` in ``whole``, or None when ``whole`` is not positive."""
    if not whole or whole <= 0:
        return None
    return clamp_percent(100 * part / whole)


def format_percentage(earned: float, possible: float) -> str:
    pct = percent_of(earned, possible)
    return f"{pct if pct is not None else 0}%"


def format_number(value: t.Optional[float]) -> str:
    """Format a point value the way it is typed: 5 -> "5", 5.0 -> "5", 2.5 -> "2.5"."""
    if value is None:
        return "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_points(value: t.Optional[float]) -> str:
    """Point totals with thousands separators, e.g. 1234 -> "1,234"."""
    number = value or 0
    if isinstance(number, float) and number.is_integer():
        number = int(number)
    return f"{number:,}"
