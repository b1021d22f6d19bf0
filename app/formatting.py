"""
Display formatting for KPI cards and chart labels.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

# (threshold, divisor, suffix, decimals); checked largest first.
Units = tuple[tuple[int, int, str, int], ...]

INDIAN_UNITS: Units = (
    (10_000_000, 10_000_000, "Cr", 1),
    (1_000_000, 1_000_000, "M", 1),
    (100_000, 100_000, "L", 1),
    (1_000, 1_000, "K", 0),
)

# Enrolment analysis charts use million/thousand only.
METRIC_UNITS: Units = (
    (1_000_000, 1_000_000, "M", 1),
    (1_000, 1_000, "K", 0),
)


def _fixed(value: float, decimals: int) -> str:
    quantum = Decimal(1).scaleb(-decimals)
    return str(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: int | float, units: Units = INDIAN_UNITS) -> str:
    """
    Abbreviate *value* with crore/million/lakh/thousand suffixes.

    >>> format_number(12_500_000)
    '1.3Cr'
    >>> format_number(-54_400)
    '-54K'
    >>> format_number(21_950_000, METRIC_UNITS)
    '22.0M'
    """

    magnitude = abs(value)
    sign = "-" if value < 0 else ""
    for threshold, divisor, suffix, decimals in units:
        if magnitude >= threshold:
            return f"{sign}{_fixed(magnitude / divisor, decimals)}{suffix}"
    if isinstance(value, float) and not value.is_integer():
        return str(value)
    return str(int(value))


def format_percent(value: float, decimals: int = 1) -> str:
    return f"{_fixed(value, decimals)}%"
