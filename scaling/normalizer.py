"""
scaling/normalizer.py

Deterministic bounding and rounding utilities for scaled dashboard signals.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


class SignalNormalizer:
    """Provides stateless clamping and rounding for scaled signal values.

    All methods are deterministic. No external dependencies, state, or
    side effects.
    """

    def clamp(
        self,
        value: float,
        min_value: float | None = None,
        max_value: float | None = None,
    ) -> float:
        """Clamp a value into the optional [min_value, max_value] range.

        Args:
            value: The float to clamp.
            min_value: Lower bound, or None for no lower bound.
            max_value: Upper bound, or None for no upper bound.

        Returns:
            value if within bounds, otherwise the violated bound.
        """
        if min_value is not None and value < min_value:
            return min_value
        if max_value is not None and value > max_value:
            return max_value
        return value

    def round_half_up(self, value: float, digits: int = 0) -> float:
        """Round half away from zero at *digits* decimal places.

        Python's built-in round() uses banker's rounding, which would turn
        2.5 into 2. Dashboard figures round halves up.

        Args:
            value: The float to round.
            digits: Number of decimal places to keep.

        Returns:
            The rounded value as a float.
        """
        quantum = Decimal(1).scaleb(-digits)
        return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))

    def round_count(self, value: float) -> int:
        """Round a volume to the nearest whole count, halves up."""
        return int(self.round_half_up(value, 0))


_DEFAULT = SignalNormalizer()

clamp = _DEFAULT.clamp
round_half_up = _DEFAULT.round_half_up
round_count = _DEFAULT.round_count
