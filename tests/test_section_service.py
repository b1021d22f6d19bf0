"""
tests/test_section_service.py

Section calculators over the packaged fixture file.
"""

from __future__ import annotations

from datetime import date

import pytest

from app.config import get_dashboard_settings
from app.domain.filters import FilterSelection
from app.providers.static_provider import StaticFixtureProvider
from app.services.section_service import SectionService, rows_to_records


@pytest.fixture(scope="module")
def provider() -> StaticFixtureProvider:
    return StaticFixtureProvider.from_path(get_dashboard_settings().fixture_path)


@pytest.fixture()
def sections(provider: StaticFixtureProvider) -> SectionService:
    return SectionService(provider)


# ---------------------------------------------------------------------------
# Anomaly detection
# ---------------------------------------------------------------------------


class TestAnomalyMetrics:
    def test_unfiltered_baseline(self, sections: SectionService) -> None:
        result = sections.anomaly_metrics(FilterSelection())
        assert result.active_anomalies == 7
        assert result.high_severity == 2
        assert result.resolution_label == "3.2d"
        assert result.accuracy_label == "96.4%"
        assert result.trend_value == "+0"

    def test_low_rate_region(self, sections: SectionService) -> None:
        result = sections.anomaly_metrics(FilterSelection(region="KL"))
        assert result.active_anomalies == 3  # 7 × 0.4 = 2.8
        assert result.high_severity == 1  # 2 × 0.4 = 0.8
        assert result.resolution_label == "2.7d"
        assert result.accuracy_label == "97.9%"
        assert result.trend_value == "-4"

    def test_high_rate_region_and_category(self, sections: SectionService) -> None:
        result = sections.anomaly_metrics(FilterSelection(region="BR", category="biometric"))
        assert result.active_anomalies == 19  # 7 × 1.8 × 1.5 = 18.9
        assert result.high_severity == 5  # 2 × 2.7 = 5.4
        assert result.resolution_label == "4.0d"
        assert result.accuracy_label == "95.2%"
        assert result.trend_value == "+12"

    def test_short_window_keeps_one_active_anomaly(self, sections: SectionService) -> None:
        result = sections.anomaly_metrics(FilterSelection(time_window="7d"))
        assert result.active_anomalies == 1
        assert result.high_severity == 0

    def test_custom_window_is_not_range_scaled(self, sections: SectionService) -> None:
        selection = FilterSelection(
            time_window="custom",
            date_range=(date(2025, 1, 1), date(2025, 1, 8)),
        )
        assert sections.anomaly_metrics(selection).active_anomalies == 7


# ---------------------------------------------------------------------------
# Update behaviour
# ---------------------------------------------------------------------------


class TestUpdateBehaviour:
    @pytest.mark.parametrize(
        ("region", "completion"),
        [("ALL", 74), ("KL", 93), ("BR", 60), ("ZZ", 74)],
    )
    def test_completion_from_friction(
        self, sections: SectionService, region: str, completion: int
    ) -> None:
        kpis = sections.update_behaviour_kpis(FilterSelection(region=region))
        assert kpis.completion_rate == completion
        assert kpis.repeat_rate == 100 - completion

    def test_ufi_trend_unfiltered_keeps_friction(
        self, sections: SectionService, provider: StaticFixtureProvider
    ) -> None:
        trend = sections.ufi_trend(FilterSelection())
        assert [m.ufi for m in trend] == [m.ufi for m in provider.monthly_friction()]
        assert trend[0].completion_rate == 70  # 100 / 1.42

    def test_ufi_trend_offsets(self, sections: SectionService) -> None:
        trend = sections.ufi_trend(FilterSelection(region="KL", category="biometric"))
        april = trend[0]
        assert april.month == "Apr"
        assert april.ufi == pytest.approx(1.35)  # 1.42 − 0.27 + 0.20
        assert april.completion_rate == 74

    def test_ufi_trend_clamped(self, sections: SectionService) -> None:
        easy = sections.ufi_trend(FilterSelection(region="KL", category="mobile"))
        hard = sections.ufi_trend(FilterSelection(region="BR", category="biometric"))
        assert all(1.0 <= m.ufi <= 2.0 for m in easy + hard)
        assert all(50 <= m.completion_rate <= 95 for m in easy + hard)
        assert min(m.ufi for m in easy) == 1.0
        assert max(m.ufi for m in hard) == 2.0

    def test_ufi_trend_does_not_mutate_provider(
        self, sections: SectionService, provider: StaticFixtureProvider
    ) -> None:
        before = [m.ufi for m in provider.monthly_friction()]
        sections.ufi_trend(FilterSelection(region="BR", category="biometric"))
        assert [m.ufi for m in provider.monthly_friction()] == before

    def test_update_type_breakdown(self, sections: SectionService) -> None:
        assert len(sections.update_type_breakdown(FilterSelection())) == 5
        mobile = sections.update_type_breakdown(FilterSelection(category="mobile"))
        assert [s.name for s in mobile] == ["Mobile"]

    def test_update_type_breakdown_without_matching_slice(self, sections: SectionService) -> None:
        assert len(sections.update_type_breakdown(FilterSelection(category="demographic"))) == 5


# ---------------------------------------------------------------------------
# Societal signals
# ---------------------------------------------------------------------------


class TestSocietalSignals:
    def test_all_corridors_without_region(self, sections: SectionService) -> None:
        assert len(sections.migration_corridors(FilterSelection())) == 8

    def test_corridors_match_origin_or_destination(self, sections: SectionService) -> None:
        kerala = sections.migration_corridors(FilterSelection(region="KL"))
        assert [(c.origin, c.destination) for c in kerala] == [("WB", "Kerala")]

        maharashtra = sections.migration_corridors(FilterSelection(region="MH"))
        assert len(maharashtra) == 2
        assert all(c.destination == "Maharashtra" for c in maharashtra)

    def test_unmapped_region_shows_all_corridors(self, sections: SectionService) -> None:
        assert len(sections.migration_corridors(FilterSelection(region="AS"))) == 8

    def test_kpis_unfiltered(self, sections: SectionService) -> None:
        kpis = sections.societal_kpis(FilterSelection())
        assert kpis.signal_clusters == 24
        assert kpis.migration_corridors == 8
        assert kpis.pattern_match == "94.2%"
        assert kpis.new_signals == 3

    def test_kpis_single_region(self, sections: SectionService) -> None:
        kpis = sections.societal_kpis(FilterSelection(region="KL"))
        assert kpis.signal_clusters == 7  # 24 × 0.3 = 7.2
        assert kpis.migration_corridors == 1
        assert kpis.pattern_match == "96.8%"

    def test_kpis_floor_at_one(self, sections: SectionService) -> None:
        kpis = sections.societal_kpis(FilterSelection(time_window="7d"))
        assert kpis.signal_clusters == 1
        assert kpis.new_signals == 1

    def test_kpis_quarter_for_region(self, sections: SectionService) -> None:
        kpis = sections.societal_kpis(FilterSelection(region="KL", time_window="90d"))
        assert kpis.signal_clusters == 2  # 7 × 0.247 = 1.729

    def test_seasonal_patterns_scale_with_time(self, sections: SectionService) -> None:
        quarter = sections.seasonal_patterns(FilterSelection(time_window="90d"))
        assert quarter[0].month == "Apr"
        assert quarter[0].migration == 20_995  # 85,000 × 0.247
        assert all(isinstance(m.marriage, int) for m in quarter)

    def test_seasonal_patterns_full_year_unchanged(
        self, sections: SectionService, provider: StaticFixtureProvider
    ) -> None:
        assert sections.seasonal_patterns(FilterSelection()) == list(provider.seasonal_patterns())


# ---------------------------------------------------------------------------
# Visual insights
# ---------------------------------------------------------------------------


class TestVisualInsights:
    def test_radar_scores_offset_and_clamped(self, sections: SectionService) -> None:
        kerala = {r.metric: r.value for r in sections.radar_scores(FilterSelection(region="KL"))}
        bihar = {r.metric: r.value for r in sections.radar_scores(FilterSelection(region="BR"))}
        assert kerala["Coverage"] == 100
        assert kerala["Speed"] == 84
        assert bihar["Speed"] == 66
        assert all(50 <= value <= 100 for value in list(kerala.values()) + list(bihar.values()))

    def test_radar_scores_unknown_region(
        self, sections: SectionService, provider: StaticFixtureProvider
    ) -> None:
        scores = sections.radar_scores(FilterSelection(region="AS"))
        assert [r.value for r in scores] == [r.value for r in provider.radar_scores()]

    def test_quarterly_trends(self, sections: SectionService) -> None:
        quarters = sections.quarterly_trends(FilterSelection(time_window="30d", category="mobile"))
        assert quarters[0].enrolments == 639_600  # 7.8M × 0.082
        assert quarters[0].updates == 234_192  # 10.2M × 0.28 × 0.082

    def test_state_performance(self, sections: SectionService) -> None:
        assert [row.code for row in sections.state_performance(FilterSelection())] == [
            "KL",
            "TN",
            "KA",
            "MH",
            "GJ",
        ]
        assert [row.code for row in sections.state_performance(FilterSelection(region="BR"))] == ["BR"]

    def test_state_performance_unlisted_region(self, sections: SectionService) -> None:
        assert len(sections.state_performance(FilterSelection(region="AS"))) == 5

    def test_visual_kpis(self, sections: SectionService) -> None:
        national = sections.visual_kpis(FilterSelection())
        assert national.daily_transactions == "1.5L"  # 53,034,400 / 365
        assert national.coverage == "99.2%"
        assert national.active_centres == "52,847"
        assert national.data_quality == "94.6%"

        kerala = sections.visual_kpis(FilterSelection(region="KL"))
        assert kerala.daily_transactions == "4K"  # 1,414,400 / 365
        assert kerala.coverage == "98.5%"
        assert kerala.active_centres == "3,200"


# ---------------------------------------------------------------------------
# Enrolment analysis
# ---------------------------------------------------------------------------


class TestEnrolmentKPIs:
    def test_national(self, sections: SectionService) -> None:
        kpis = sections.enrolment_kpis(FilterSelection())
        assert kpis.total_enrolments == "22.0M"
        assert kpis.infant_enrolments == "7.9M"
        assert kpis.daily_average == "60K"

    def test_kerala(self, sections: SectionService) -> None:
        kpis = sections.enrolment_kpis(FilterSelection(region="KL"))
        assert kpis.total_enrolments == "680K"  # no lakh unit in this section
        assert kpis.infant_enrolments == "245K"
        assert kpis.daily_average == "2K"

    def test_region_without_statistics(self, sections: SectionService) -> None:
        kpis = sections.enrolment_kpis(FilterSelection(region="AS"))
        assert kpis.total_enrolments == "0"
        assert kpis.daily_average == "0"


def test_rows_to_records_handles_models_and_dataclasses(sections: SectionService) -> None:
    records = rows_to_records(sections.quarterly_trends(FilterSelection())[:1])
    assert records == [{"quarter": "Q1 FY24", "enrolments": 7_800_000, "updates": 10_200_000}]

    kpis = rows_to_records([sections.update_behaviour_kpis(FilterSelection())])
    assert kpis == [{"completion_rate": 74, "repeat_rate": 26}]
