"""
app/providers/static_provider.py

Fixture provider backed by the packaged JSON file.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from app.config import get_dashboard_settings
from app.providers.base import BaseFixtureProvider, FixtureLoadError
from app.schemas.fixtures import (
    AnomalyAlert,
    AnomalyTimelinePoint,
    DashboardFixtures,
    DemographicShift,
    DetailedAnomaly,
    FrictionTrendPoint,
    GapPoint,
    LifeEventSignal,
    MigrationCorridor,
    MonthlyEnrolment,
    MonthlyFriction,
    QuarterlyTrend,
    RadarScore,
    RegionalVolume,
    RepeatUpdateBucket,
    SeasonalPattern,
    ShareSlice,
    StatePerformance,
    WeeklyAnomalyStat,
)

logger = logging.getLogger(__name__)


class StaticFixtureProvider(BaseFixtureProvider):
    """
    Serves validated fixtures from memory.
    """

    def __init__(self, fixtures: DashboardFixtures) -> None:
        self._fixtures = fixtures

    @classmethod
    def from_payload(cls, payload: Any) -> "StaticFixtureProvider":
        """
        Validate a decoded JSON payload and wrap it in a provider.
        """

        try:
            fixtures = DashboardFixtures.model_validate(payload)
        except ValidationError as exc:
            raise FixtureLoadError(
                f"Fixture data failed validation with {exc.error_count()} error(s): {exc}"
            ) from exc
        return cls(fixtures)

    @classmethod
    def from_path(cls, path: Path) -> "StaticFixtureProvider":
        """
        Read and validate the fixture file at *path*.
        """

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise FixtureLoadError(f"Fixture file '{path}' could not be read.") from exc
        except json.JSONDecodeError as exc:
            raise FixtureLoadError(f"Fixture file '{path}' is not valid JSON: {exc}") from exc

        provider = cls.from_payload(payload)
        logger.info("Loaded dashboard fixtures from %s", path)
        return provider

    def anomaly_alerts(self) -> Sequence[AnomalyAlert]:
        return self._fixtures.anomaly_alerts

    def detailed_anomalies(self) -> Sequence[DetailedAnomaly]:
        return self._fixtures.detailed_anomalies

    def anomaly_timeline(self) -> Sequence[AnomalyTimelinePoint]:
        return self._fixtures.anomaly_timeline

    def weekly_anomaly_stats(self) -> Sequence[WeeklyAnomalyStat]:
        return self._fixtures.weekly_anomaly_stats

    def life_event_signals(self) -> Sequence[LifeEventSignal]:
        return self._fixtures.life_event_signals

    def migration_corridors(self) -> Sequence[MigrationCorridor]:
        return self._fixtures.migration_corridors

    def corridor_labels(self) -> Mapping[str, str]:
        return MappingProxyType(self._fixtures.corridor_labels)

    def seasonal_patterns(self) -> Sequence[SeasonalPattern]:
        return self._fixtures.seasonal_patterns

    def demographic_shifts(self) -> Sequence[DemographicShift]:
        return self._fixtures.demographic_shifts

    def monthly_friction(self) -> Sequence[MonthlyFriction]:
        return self._fixtures.monthly_ufi

    def national_friction_trend(self) -> Sequence[FrictionTrendPoint]:
        return self._fixtures.national_ufi_trend

    def gap_analysis(self) -> Sequence[GapPoint]:
        return self._fixtures.gap_analysis

    def update_type_distribution(self) -> Sequence[ShareSlice]:
        return self._fixtures.update_type_distribution

    def repeat_updates(self) -> Sequence[RepeatUpdateBucket]:
        return self._fixtures.repeat_updates

    def state_performance(self) -> Sequence[StatePerformance]:
        return self._fixtures.state_performance

    def quarterly_trends(self) -> Sequence[QuarterlyTrend]:
        return self._fixtures.quarterly_trends

    def radar_scores(self) -> Sequence[RadarScore]:
        return self._fixtures.radar_scores

    def regional_distribution(self) -> Sequence[RegionalVolume]:
        return self._fixtures.regional_distribution

    def monthly_enrolments(self) -> Sequence[MonthlyEnrolment]:
        return self._fixtures.monthly_enrolments

    def age_distribution(self) -> Sequence[ShareSlice]:
        return self._fixtures.age_distribution

    def gender_distribution(self) -> Sequence[ShareSlice]:
        return self._fixtures.gender_distribution

    def urban_rural_split(self) -> Sequence[ShareSlice]:
        return self._fixtures.urban_rural_split


@lru_cache(maxsize=1)
def get_fixture_provider() -> StaticFixtureProvider:
    """
    Return the process-wide provider for the configured fixture file.
    """

    return StaticFixtureProvider.from_path(get_dashboard_settings().fixture_path)
