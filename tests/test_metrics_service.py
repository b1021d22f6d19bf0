"""
tests/test_metrics_service.py

Pytest unit tests for FilteredMetricsService.

All tests are pure Python: no I/O, static region table only. Expected
values are derived by hand from the region table:

    Σ enrolments = 21,950,000
    Σ updates    = 31,084,400
    Σ friction   = 20.41 over 15 regions (mean 1.3607)

Coverage
--------
- Worked examples (Kerala full year, all regions 30 days mobile)
- Time window presets and custom date ranges
- Category scaling applies to updates only
- Unknown enumerants fall back to identity scaling
- Empty working set
- Gap, friction bounds, idempotence, monotonicity
- Memoised entry point
"""

from __future__ import annotations

from datetime import date

import pytest

from app.domain.filters import (
    CATEGORY_LABELS,
    TIME_WINDOW_LABELS,
    FilterSelection,
    TimeWindow,
    UpdateCategory,
)
from app.domain.regions import REGION_CHOICES, REGION_STATS, RegionStat, build_region_table
from app.services.metrics_service import (
    CATEGORY_UPDATES_TREND,
    UPDATES_TREND,
    FilteredMetrics,
    FilteredMetricsService,
    get_filtered_metrics,
)

TOTAL_ENROLMENTS = 21_950_000
TOTAL_UPDATES = 31_084_400


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def svc() -> FilteredMetricsService:
    """Fresh calculator over the packaged region table."""
    return FilteredMetricsService()


def _all_selections() -> list[FilterSelection]:
    return [
        FilterSelection(region=region, time_window=window, category=category)
        for region in REGION_CHOICES
        for window in TIME_WINDOW_LABELS
        for category in CATEGORY_LABELS
    ]


# ---------------------------------------------------------------------------
# Worked examples
# ---------------------------------------------------------------------------


class TestWorkedExamples:
    def test_kerala_full_year(self, svc: FilteredMetricsService) -> None:
        result = svc.calculate(FilterSelection(region="KL", time_window="1y", category="all"))
        assert result.total_enrolments == 680_000
        assert result.total_updates == 734_400
        assert result.friction_index == pytest.approx(1.08)
        assert result.gap == 54_400

    def test_all_regions_last_30_days_mobile(self, svc: FilteredMetricsService) -> None:
        result = svc.calculate(FilterSelection(region="ALL", time_window="30d", category="mobile"))
        assert result.total_enrolments == 1_799_900
        assert result.total_updates == 713_698
        assert result.gap == 713_698 - 1_799_900

    def test_all_regions_default_selection(self, svc: FilteredMetricsService) -> None:
        result = svc.calculate(FilterSelection())
        assert result.total_enrolments == TOTAL_ENROLMENTS
        assert result.total_updates == TOTAL_UPDATES
        assert result.friction_index == pytest.approx(1.36)
        assert result.gap == TOTAL_UPDATES - TOTAL_ENROLMENTS

    def test_kerala_last_week_rounds_half_up(self, svc: FilteredMetricsService) -> None:
        result = svc.calculate(FilterSelection(region="KL", time_window="7d"))
        assert result.total_enrolments == 12_920
        assert result.total_updates == 13_954  # 13,953.6


# ---------------------------------------------------------------------------
# Time window
# ---------------------------------------------------------------------------


class TestTimeMultiplier:
    @pytest.mark.parametrize(
        ("window", "expected"),
        [("7d", 0.019), ("30d", 0.082), ("90d", 0.247), ("1y", 1.0)],
    )
    def test_presets(self, svc: FilteredMetricsService, window: str, expected: float) -> None:
        assert svc.time_multiplier(FilterSelection(time_window=window)) == pytest.approx(expected)

    def test_enum_member_is_accepted(self, svc: FilteredMetricsService) -> None:
        selection = FilterSelection(time_window=TimeWindow.LAST_QUARTER)
        assert selection.time_window == "90d"
        assert svc.time_multiplier(selection) == pytest.approx(0.247)

    def test_custom_default_range_covers_364_days(self, svc: FilteredMetricsService) -> None:
        selection = FilterSelection(time_window="custom")
        assert svc.time_multiplier(selection) == pytest.approx(364 / 365)
        assert svc.calculate(selection).total_enrolments == 21_889_863

    def test_custom_range_is_capped_at_one_year(self, svc: FilteredMetricsService) -> None:
        selection = FilterSelection(
            time_window="custom",
            date_range=(date(2022, 1, 1), date(2025, 1, 1)),
        )
        assert svc.time_multiplier(selection) == 1.0

    def test_custom_without_range_is_unscaled(self, svc: FilteredMetricsService) -> None:
        selection = FilterSelection(time_window="custom", date_range=None)
        assert svc.time_multiplier(selection) == 1.0

    def test_custom_zero_length_range_gives_zero_totals(self, svc: FilteredMetricsService) -> None:
        selection = FilterSelection(
            time_window="custom",
            date_range=(date(2025, 1, 1), date(2025, 1, 1)),
        )
        result = svc.calculate(selection)
        assert result.total_enrolments == 0
        assert result.total_updates == 0

    def test_custom_reversed_range_never_goes_negative(self, svc: FilteredMetricsService) -> None:
        selection = FilterSelection(
            time_window="custom",
            date_range=(date(2025, 3, 31), date(2024, 4, 1)),
        )
        assert svc.time_multiplier(selection) == 0.0
        assert svc.calculate(selection).total_enrolments == 0

    def test_date_range_ignored_for_presets(self, svc: FilteredMetricsService) -> None:
        selection = FilterSelection(
            time_window="30d",
            date_range=(date(2025, 1, 1), date(2025, 1, 2)),
        )
        assert svc.time_multiplier(selection) == pytest.approx(0.082)


# ---------------------------------------------------------------------------
# Category
# ---------------------------------------------------------------------------


class TestCategoryMultiplier:
    @pytest.mark.parametrize(
        ("category", "expected"),
        [
            ("all", 1.0),
            ("demographic", 0.35),
            ("biometric", 0.18),
            ("address", 0.35),
            ("mobile", 0.28),
            ("email", 0.12),
        ],
    )
    def test_shares(self, svc: FilteredMetricsService, category: str, expected: float) -> None:
        assert svc.category_multiplier(FilterSelection(category=category)) == pytest.approx(expected)

    def test_shares_overlap_above_one(self, svc: FilteredMetricsService) -> None:
        total = sum(
            svc.category_multiplier(FilterSelection(category=member.value)) for member in UpdateCategory
        )
        assert total == pytest.approx(1.28)

    def test_category_does_not_touch_enrolments(self, svc: FilteredMetricsService) -> None:
        for member in UpdateCategory:
            result = svc.calculate(FilterSelection(region="MH", category=member))
            assert result.total_enrolments == 2_850_000

    def test_updates_trend_label_follows_category(self, svc: FilteredMetricsService) -> None:
        assert svc.calculate(FilterSelection()).updates_trend == UPDATES_TREND
        assert svc.calculate(FilterSelection(category="email")).updates_trend == CATEGORY_UPDATES_TREND


# ---------------------------------------------------------------------------
# Unknown inputs and empty working sets
# ---------------------------------------------------------------------------


class TestTotality:
    def test_unknown_time_window_is_identity(self, svc: FilteredMetricsService) -> None:
        unknown = svc.calculate(FilterSelection(region="KL", time_window="fortnight"))
        full_year = svc.calculate(FilterSelection(region="KL", time_window="1y"))
        assert unknown == full_year

    def test_unknown_category_is_identity(self, svc: FilteredMetricsService) -> None:
        unknown = svc.calculate(FilterSelection(region="KL", category="photo"))
        assert unknown.total_updates == 734_400

    def test_region_without_statistics_yields_zero_totals(self, svc: FilteredMetricsService) -> None:
        result = svc.calculate(FilterSelection(region="AS"))
        assert result == FilteredMetrics(
            total_enrolments=0,
            total_updates=0,
            friction_index=1.35,
            gap=0,
        )

    def test_unknown_region_code(self, svc: FilteredMetricsService) -> None:
        result = svc.calculate(FilterSelection(region="ZZ"))
        assert result.total_enrolments == 0
        assert result.friction_index == pytest.approx(1.35)

    def test_custom_fallback_friction(self) -> None:
        svc = FilteredMetricsService(friction_fallback=1.5)
        assert svc.calculate(FilterSelection(region="ZZ")).friction_index == pytest.approx(1.5)

    def test_custom_table(self) -> None:
        table = build_region_table(
            [
                RegionStat("AA", "Alpha", 100, 150, 1.1),
                RegionStat("BB", "Beta", 300, 450, 1.3),
            ]
        )
        result = FilteredMetricsService(table=table).calculate(FilterSelection())
        assert result.total_enrolments == 400
        assert result.total_updates == 600
        assert result.friction_index == pytest.approx(1.2)


# ---------------------------------------------------------------------------
# Properties over every selectable combination
# ---------------------------------------------------------------------------


class TestInvariants:
    def test_gap_is_updates_minus_enrolments(self, svc: FilteredMetricsService) -> None:
        for selection in _all_selections():
            result = svc.calculate(selection)
            assert result.gap == result.total_updates - result.total_enrolments

    def test_totals_are_non_negative_and_friction_at_least_one(
        self, svc: FilteredMetricsService
    ) -> None:
        for selection in _all_selections():
            result = svc.calculate(selection)
            assert result.total_enrolments >= 0
            assert result.total_updates >= 0
            assert result.friction_index >= 1.0

    def test_single_region_never_exceeds_all(self, svc: FilteredMetricsService) -> None:
        everything = svc.calculate(FilterSelection())
        for row in REGION_STATS:
            single = svc.calculate(FilterSelection(region=row.code))
            assert single.total_enrolments <= everything.total_enrolments
            assert single.total_updates <= everything.total_updates

    def test_longer_windows_never_shrink_totals(self, svc: FilteredMetricsService) -> None:
        windows = ["7d", "30d", "90d", "1y"]
        for region in ("ALL", "KL", "UP"):
            for category in ("all", "biometric", "mobile"):
                results = [
                    svc.calculate(FilterSelection(region=region, time_window=w, category=category))
                    for w in windows
                ]
                enrolments = [r.total_enrolments for r in results]
                updates = [r.total_updates for r in results]
                assert enrolments == sorted(enrolments)
                assert updates == sorted(updates)

    def test_calculation_is_idempotent(self, svc: FilteredMetricsService) -> None:
        selection = FilterSelection(region="BR", time_window="90d", category="biometric")
        assert svc.calculate(selection) == svc.calculate(selection)
        assert FilteredMetricsService().calculate(selection) == svc.calculate(selection)


class TestMemoisedEntryPoint:
    def test_matches_service(self, svc: FilteredMetricsService) -> None:
        selection = FilterSelection(region="TN", time_window="30d", category="address")
        assert get_filtered_metrics(selection) == svc.calculate(selection)

    def test_equal_selections_share_cache_entry(self) -> None:
        first = get_filtered_metrics(FilterSelection(region="GJ", time_window=TimeWindow.LAST_30_DAYS))
        second = get_filtered_metrics(FilterSelection(region="GJ", time_window="30d"))
        assert first is second

    def test_list_date_range_is_hashable(self) -> None:
        bounds = [date(2025, 1, 1), date(2025, 1, 31)]
        selection = FilterSelection(time_window="custom", date_range=bounds)  # type: ignore[arg-type]
        assert selection.date_range == (date(2025, 1, 1), date(2025, 1, 31))
        assert get_filtered_metrics(selection) == get_filtered_metrics(
            FilterSelection(time_window="custom", date_range=tuple(bounds))  # type: ignore[arg-type]
        )

    def test_result_is_frozen(self) -> None:
        result = get_filtered_metrics(FilterSelection())
        with pytest.raises((AttributeError, TypeError)):
            result.gap = 0  # type: ignore[misc]
