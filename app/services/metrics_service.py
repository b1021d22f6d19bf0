"""
app/services/metrics_service.py

Deterministic headline metrics for a filter selection.

The calculator combines the static region statistics table with
time-window and update-category scaling factors. It performs no I/O:
the same selection always yields the same result.

Formulas
--------
total_enrolments = round(Σ enrolments × time_multiplier)
total_updates    = round(Σ updates × time_multiplier × category_multiplier)
friction_index   = round(mean(friction_ratio), 2)
gap              = total_updates − total_enrolments

Category scaling applies only to updates: enrolment counts are
category-agnostic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Sequence

from app.domain.filters import FilterSelection
from app.domain.regions import REGION_STATS, RegionStat, select_regions
from scaling.normalizer import SignalNormalizer
from scaling.profiles import CATEGORY_UPDATE_SHARES, FRICTION_FALLBACK, TIME_WINDOW_SHARES
from scaling.scaler import resolve_category_factor, resolve_time_multiplier

logger = logging.getLogger(__name__)

# Period-over-period comparisons are not modelled; cards show fixed labels.
ENROLMENT_TREND = "+8.2%"
UPDATES_TREND = "+12.4%"
CATEGORY_UPDATES_TREND = "+15.3%"
FRICTION_TREND = "-0.08"
GAP_TREND = "Stable"


# ---------------------------------------------------------------------------
# Output dataclass
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FilteredMetrics:
    """
    Headline numbers for one filter selection.

    Has no identity of its own: it is a projection of the region table and
    the selection, recomputed on every filter change.
    """

    total_enrolments: int
    total_updates: int
    friction_index: float
    gap: int
    """``total_updates - total_enrolments``; negative in a maintenance phase."""

    enrolment_trend: str = ENROLMENT_TREND
    updates_trend: str = UPDATES_TREND
    friction_trend: str = FRICTION_TREND
    gap_trend: str = GAP_TREND


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class FilteredMetricsService:
    """
    Stateless calculator for :class:`FilteredMetrics`.

    The function is total over its input domain. An unknown region code
    selects nothing (zero totals, fallback friction); an unknown time
    window or category scales by 1.0 instead of failing.

    Usage::

        service = FilteredMetricsService()
        metrics = service.calculate(FilterSelection(region="KL"))
        print(metrics.total_enrolments)  # 680000
    """

    def __init__(
        self,
        *,
        table: Sequence[RegionStat] = REGION_STATS,
        time_shares: Mapping[str, float] = TIME_WINDOW_SHARES,
        category_shares: Mapping[str, float] = CATEGORY_UPDATE_SHARES,
        friction_fallback: float = FRICTION_FALLBACK,
        normalizer: SignalNormalizer | None = None,
    ) -> None:
        self._table = tuple(table)
        self._time_shares = time_shares
        self._category_shares = category_shares
        self._friction_fallback = friction_fallback
        self._normalizer = normalizer or SignalNormalizer()

    def time_multiplier(self, selection: FilterSelection) -> float:
        """
        Fraction of the annual baseline covered by the selected window.

        ``custom`` derives the fraction from the date range, capped at 1.0.
        """

        return resolve_time_multiplier(selection, self._time_shares, custom_from_range=True)

    def category_multiplier(self, selection: FilterSelection) -> float:
        """
        Share of update volume belonging to the selected category.
        """

        return resolve_category_factor(selection, self._category_shares)

    def calculate(self, selection: FilterSelection) -> FilteredMetrics:
        """
        Compute headline metrics for *selection*.

        Returns
        -------
        FilteredMetrics
            Totals are non-negative whole counts; ``friction_index`` has two
            decimal places.
        """

        working_set = select_regions(selection.region, self._table)
        base_enrolments = sum(row.enrolments for row in working_set)
        base_updates = sum(row.updates for row in working_set)

        if working_set:
            avg_friction = sum(row.friction_ratio for row in working_set) / len(working_set)
        else:
            logger.debug(
                "No region matches '%s'; using fallback friction %.2f",
                selection.region,
                self._friction_fallback,
            )
            avg_friction = self._friction_fallback

        time_multiplier = self.time_multiplier(selection)
        category_multiplier = self.category_multiplier(selection)

        n = self._normalizer
        total_enrolments = n.round_count(base_enrolments * time_multiplier)
        total_updates = n.round_count(base_updates * time_multiplier * category_multiplier)
        friction_index = n.round_half_up(avg_friction, 2)

        logger.debug(
            "Filtered metrics: region=%s window=%s category=%s time=%.4f category_share=%.2f",
            selection.region,
            selection.time_window,
            selection.category,
            time_multiplier,
            category_multiplier,
        )
        return FilteredMetrics(
            total_enrolments=total_enrolments,
            total_updates=total_updates,
            friction_index=friction_index,
            gap=total_updates - total_enrolments,
            updates_trend=CATEGORY_UPDATES_TREND if selection.has_category else UPDATES_TREND,
        )


_DEFAULT_SERVICE = FilteredMetricsService()


@lru_cache(maxsize=256)
def get_filtered_metrics(selection: FilterSelection) -> FilteredMetrics:
    """
    Memoised :meth:`FilteredMetricsService.calculate` on the default table.

    Caching only avoids recomputation on unrelated re-renders; results are
    identical with or without it.
    """

    return _DEFAULT_SERVICE.calculate(selection)
