"""
scaling/scaler.py

Three-factor scaling of dashboard signals by region, update category and
time window.

Every derived section figure (anomaly counts, UFI trend, radar scores,
seasonal volumes, ...) follows the same recipe: look up a region factor,
a category factor and a time factor in per-signal tables, combine them with
a base value, then clamp into the signal's valid range. The recipe lives
here once; the per-signal tables are configuration data in
:mod:`scaling.profiles`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from app.domain.filters import ALL_CATEGORIES, FilterSelection
from app.domain.regions import ALL_REGIONS
from scaling.normalizer import SignalNormalizer

DAYS_PER_YEAR = 365


class ScalingMode(str, Enum):
    """How region/category factors combine with the base value."""

    MULTIPLICATIVE = "multiplicative"
    """Volume counts: ``base * region * category * time``."""

    ADDITIVE = "additive"
    """Bounded scores: ``(base + region + category) * time``."""


@dataclass(frozen=True)
class ScalingProfile:
    """Tuning constants for one scaled signal.

    Attributes:
        name: Signal identifier used in logs and tests.
        mode: How factors combine with the base value.
        region_table: Region code -> factor (multiplier or offset).
        category_table: Update category -> factor (multiplier or offset).
        time_table: Time-window preset -> multiplier, or None when the
            signal ignores the time filter.
        custom_from_range: Derive the ``custom`` time multiplier from the
            selected date range instead of the table.
        lower: Lower clamp bound, or None.
        upper: Upper clamp bound, or None.
        digits: Decimal places to round to; 0 yields whole counts, None
            leaves the value unrounded.
    """

    name: str
    mode: ScalingMode = ScalingMode.MULTIPLICATIVE
    region_table: Mapping[str, float] = field(default_factory=dict)
    category_table: Mapping[str, float] = field(default_factory=dict)
    time_table: Mapping[str, float] | None = None
    custom_from_range: bool = False
    lower: float | None = None
    upper: float | None = None
    digits: int | None = None

    @property
    def identity(self) -> float:
        """Factor that leaves the base value unchanged in this mode."""
        return 1.0 if self.mode is ScalingMode.MULTIPLICATIVE else 0.0


def custom_range_multiplier(selection: FilterSelection) -> float:
    """Fraction of a year covered by the selection's custom date range.

    Returns 1.0 when no range is set. The result is clamped to [0.0, 1.0]:
    multi-year ranges never scale above the annual baseline.
    """
    if selection.date_range is None:
        return 1.0
    start, end = selection.date_range
    days = math.ceil((end - start).total_seconds() / 86_400)
    return max(0.0, min(days / DAYS_PER_YEAR, 1.0))


def resolve_time_multiplier(
    selection: FilterSelection,
    table: Mapping[str, float],
    *,
    custom_from_range: bool = True,
) -> float:
    """Look up the time-window multiplier; unknown presets are unscaled."""
    if selection.is_custom and custom_from_range:
        return custom_range_multiplier(selection)
    return table.get(selection.time_window, 1.0)


def resolve_region_factor(
    selection: FilterSelection,
    table: Mapping[str, float],
    identity: float = 1.0,
) -> float:
    """Region factor; the ALL sentinel and unknown codes yield *identity*."""
    if selection.region == ALL_REGIONS:
        return identity
    return table.get(selection.region, identity)


def resolve_category_factor(
    selection: FilterSelection,
    table: Mapping[str, float],
    identity: float = 1.0,
) -> float:
    """Category factor; the all sentinel and unknown types yield *identity*."""
    if selection.category == ALL_CATEGORIES:
        return identity
    return table.get(selection.category, identity)


class SignalScaler:
    """Applies a :class:`ScalingProfile` to base values.

    Stateless and deterministic: the same base value, profile and selection
    always give the same result.
    """

    def __init__(self, normalizer: SignalNormalizer | None = None) -> None:
        self._normalizer = normalizer or SignalNormalizer()

    def time_factor(self, profile: ScalingProfile, selection: FilterSelection) -> float:
        if profile.time_table is None:
            return 1.0
        return resolve_time_multiplier(
            selection,
            profile.time_table,
            custom_from_range=profile.custom_from_range,
        )

    def scale(
        self,
        base_value: float,
        profile: ScalingProfile,
        selection: FilterSelection,
    ) -> float:
        """Scale *base_value* for *selection* according to *profile*.

        Args:
            base_value: Unfiltered baseline (all regions, all categories,
                full year).
            profile: Signal-specific tables and bounds.
            selection: Current filter selection.

        Returns:
            The adjusted value, clamped into the profile's bounds and
            rounded to ``profile.digits`` when set.
        """
        region = resolve_region_factor(selection, profile.region_table, profile.identity)
        category = resolve_category_factor(selection, profile.category_table, profile.identity)
        time = self.time_factor(profile, selection)

        if profile.mode is ScalingMode.MULTIPLICATIVE:
            value = base_value * region * category * time
        else:
            value = (base_value + region + category) * time

        n = self._normalizer
        if profile.digits is not None:
            value = n.round_half_up(value, profile.digits)
        return n.clamp(value, profile.lower, profile.upper)

    def scale_count(
        self,
        base_value: float,
        profile: ScalingProfile,
        selection: FilterSelection,
    ) -> int:
        """Scale a volume and return it as a whole count."""
        return self._normalizer.round_count(self.scale(base_value, profile, selection))
