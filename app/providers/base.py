"""
app/providers/base.py

Data-provider interface behind the dashboard's analytics fixtures.

The dashboard has no analytics backend: anomalies, life-event signals and
migration corridors are curated fixtures. Sections query them through this
interface so a real detection service can replace the static provider
without touching the calculators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping, Sequence

from app.schemas.fixtures import (
    AnomalyAlert,
    AnomalyTimelinePoint,
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


class FixtureLoadError(RuntimeError):
    """
    Raised when fixture data cannot be read or fails validation.
    """


class BaseFixtureProvider(ABC):
    """
    Read-only source of analytics data for the dashboard sections.

    Implementations return immutable sequences; callers never mutate them.
    """

    # -- anomaly detection -------------------------------------------------

    @abstractmethod
    def anomaly_alerts(self) -> Sequence[AnomalyAlert]:
        """Alert cards for the overview."""

    @abstractmethod
    def detailed_anomalies(self) -> Sequence[DetailedAnomaly]:
        """Investigation log entries."""

    @abstractmethod
    def anomaly_timeline(self) -> Sequence[AnomalyTimelinePoint]:
        """Weekly actual-vs-expected volumes with detection thresholds."""

    @abstractmethod
    def weekly_anomaly_stats(self) -> Sequence[WeeklyAnomalyStat]:
        """Detected/resolved/pending counts per week."""

    # -- societal signals --------------------------------------------------

    @abstractmethod
    def life_event_signals(self) -> Sequence[LifeEventSignal]:
        """Hypothesised life-event clusters."""

    @abstractmethod
    def migration_corridors(self) -> Sequence[MigrationCorridor]:
        """Major origin/destination corridors."""

    @abstractmethod
    def corridor_labels(self) -> Mapping[str, str]:
        """Region code -> label used in corridor endpoints."""

    @abstractmethod
    def seasonal_patterns(self) -> Sequence[SeasonalPattern]:
        """Monthly annual volumes by life-event type."""

    @abstractmethod
    def demographic_shifts(self) -> Sequence[DemographicShift]:
        """Qualitative demographic shift indicators."""

    # -- update behaviour --------------------------------------------------

    @abstractmethod
    def monthly_friction(self) -> Sequence[MonthlyFriction]:
        """National monthly friction index with completion rates."""

    @abstractmethod
    def national_friction_trend(self) -> Sequence[FrictionTrendPoint]:
        """Overview friction trend against the ideal baseline."""

    @abstractmethod
    def gap_analysis(self) -> Sequence[GapPoint]:
        """Monthly enrolment/update gap in millions."""

    @abstractmethod
    def update_type_distribution(self) -> Sequence[ShareSlice]:
        """Share of updates by type."""

    @abstractmethod
    def repeat_updates(self) -> Sequence[RepeatUpdateBucket]:
        """Residents bucketed by number of updates."""

    # -- visual insights ---------------------------------------------------

    @abstractmethod
    def state_performance(self) -> Sequence[StatePerformance]:
        """Per-state performance scores, best first."""

    @abstractmethod
    def quarterly_trends(self) -> Sequence[QuarterlyTrend]:
        """Quarterly enrolment and update volumes."""

    @abstractmethod
    def radar_scores(self) -> Sequence[RadarScore]:
        """National system-performance scores."""

    @abstractmethod
    def regional_distribution(self) -> Sequence[RegionalVolume]:
        """Activity volume per zone."""

    # -- enrolment analysis ------------------------------------------------

    @abstractmethod
    def monthly_enrolments(self) -> Sequence[MonthlyEnrolment]:
        """Monthly enrolments split into newborns and adults."""

    @abstractmethod
    def age_distribution(self) -> Sequence[ShareSlice]:
        """Enrolment share by age band."""

    @abstractmethod
    def gender_distribution(self) -> Sequence[ShareSlice]:
        """Enrolment share by gender."""

    @abstractmethod
    def urban_rural_split(self) -> Sequence[ShareSlice]:
        """Enrolment share by settlement type."""
