"""
app/services/section_service.py

Filter-aware figures for each dashboard section.

Every method combines a fixture from the data provider with one of the
scaling profiles in :mod:`scaling.profiles`. No method performs I/O beyond
querying the provider, and none mutates provider data: scaled rows are
returned as copies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from app.domain.filters import FilterSelection
from app.formatting import METRIC_UNITS, format_number
from app.providers.base import BaseFixtureProvider
from app.schemas.fixtures import (
    MigrationCorridor,
    MonthlyFriction,
    QuarterlyTrend,
    RadarScore,
    SeasonalPattern,
    ShareSlice,
    StatePerformance,
)
from app.services.metrics_service import FilteredMetricsService
from scaling import profiles
from scaling.normalizer import SignalNormalizer
from scaling.scaler import SignalScaler

logger = logging.getLogger(__name__)

# Unfiltered baselines (all regions, all categories, full year).
BASE_ACTIVE_ANOMALIES = 7
BASE_HIGH_SEVERITY = 2
BASE_RESOLUTION_DAYS = 3.2
BASE_DETECTION_ACCURACY = 96.4
BASE_SIGNAL_CLUSTERS = 24
BASE_NEW_SIGNALS = 3

INFANT_ENROLMENT_SHARE = 0.36
DAYS_PER_YEAR = 365
TOP_STATES = 5


# ---------------------------------------------------------------------------
# Output dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnomalyMetrics:
    active_anomalies: int
    high_severity: int
    resolution_days: float
    accuracy_pct: float

    @property
    def resolution_label(self) -> str:
        return f"{self.resolution_days:.1f}d"

    @property
    def accuracy_label(self) -> str:
        return f"{self.accuracy_pct:.1f}%"

    @property
    def trend_value(self) -> str:
        """Change in active anomalies against the unfiltered baseline."""
        delta = self.active_anomalies - BASE_ACTIVE_ANOMALIES
        return f"{delta:+d}"


@dataclass(frozen=True)
class UpdateBehaviourKPIs:
    completion_rate: int
    """Percentage of updates completed at the first attempt: ``100 / friction``."""

    repeat_rate: int


@dataclass(frozen=True)
class SocietalKPIs:
    signal_clusters: int
    migration_corridors: int
    pattern_match: str
    new_signals: int


@dataclass(frozen=True)
class VisualKPIs:
    coverage: str
    active_centres: str
    daily_transactions: str
    data_quality: str


@dataclass(frozen=True)
class EnrolmentKPIs:
    total_enrolments: str
    infant_enrolments: str
    daily_average: str


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class SectionService:
    """
    Derives section-level figures for a filter selection.

    Parameters
    ----------
    provider:
        Source of fixture series.
    metrics_service:
        Headline metrics calculator; shared so sections agree with the
        overview cards.
    scaler:
        Three-factor scaling utility.
    """

    def __init__(
        self,
        provider: BaseFixtureProvider,
        *,
        metrics_service: FilteredMetricsService | None = None,
        scaler: SignalScaler | None = None,
    ) -> None:
        self._provider = provider
        self._metrics = metrics_service or FilteredMetricsService()
        self._scaler = scaler or SignalScaler()
        self._normalizer = SignalNormalizer()

    # ------------------------------------------------------------------
    # Anomaly detection
    # ------------------------------------------------------------------

    def anomaly_metrics(self, selection: FilterSelection) -> AnomalyMetrics:
        s = self._scaler
        return AnomalyMetrics(
            active_anomalies=s.scale_count(BASE_ACTIVE_ANOMALIES, profiles.ACTIVE_ANOMALIES, selection),
            high_severity=s.scale_count(BASE_HIGH_SEVERITY, profiles.HIGH_SEVERITY_ANOMALIES, selection),
            resolution_days=s.scale(BASE_RESOLUTION_DAYS, profiles.RESOLUTION_DAYS, selection),
            accuracy_pct=s.scale(BASE_DETECTION_ACCURACY, profiles.DETECTION_ACCURACY, selection),
        )

    # ------------------------------------------------------------------
    # Update behaviour
    # ------------------------------------------------------------------

    def update_behaviour_kpis(self, selection: FilterSelection) -> UpdateBehaviourKPIs:
        friction = self._metrics.calculate(selection).friction_index
        completion = self._normalizer.round_count(100 / friction)
        return UpdateBehaviourKPIs(completion_rate=completion, repeat_rate=100 - completion)

    def ufi_trend(self, selection: FilterSelection) -> list[MonthlyFriction]:
        """
        Monthly friction series shifted by region and update-type offsets.

        Completion rates are re-derived from the adjusted friction.
        """

        s = self._scaler
        adjusted: list[MonthlyFriction] = []
        for month in self._provider.monthly_friction():
            ufi = s.scale(month.ufi, profiles.MONTHLY_FRICTION, selection)
            completion = s.scale(100 / ufi, profiles.COMPLETION_RATE, selection)
            adjusted.append(month.model_copy(update={"ufi": ufi, "completion_rate": completion}))
        return adjusted

    # ------------------------------------------------------------------
    # Societal signals
    # ------------------------------------------------------------------

    def migration_corridors(self, selection: FilterSelection) -> list[MigrationCorridor]:
        """
        Corridors touching the selected region, as origin or destination.

        Regions without a corridor label show every corridor.
        """

        corridors = list(self._provider.migration_corridors())
        if not selection.has_region:
            return corridors

        label = self._provider.corridor_labels().get(selection.region)
        if label is None:
            logger.debug("No corridor label for region '%s'; showing all corridors", selection.region)
            return corridors
        return [c for c in corridors if label in (c.origin, c.destination)]

    def seasonal_patterns(self, selection: FilterSelection) -> list[SeasonalPattern]:
        s = self._scaler
        return [
            month.model_copy(
                update={
                    field: s.scale_count(getattr(month, field), profiles.SEASONAL_VOLUME, selection)
                    for field in ("migration", "marriage", "education")
                }
            )
            for month in self._provider.seasonal_patterns()
        ]

    def societal_kpis(self, selection: FilterSelection) -> SocietalKPIs:
        s = self._scaler
        clusters = BASE_SIGNAL_CLUSTERS
        corridor_count = len(self._provider.migration_corridors())
        if selection.has_region:
            # A single region shows fewer, more focused signals.
            clusters = self._normalizer.round_count(clusters * profiles.REGION_FOCUS_SHARE)
            corridor_count = len(self.migration_corridors(selection))

        return SocietalKPIs(
            signal_clusters=s.scale_count(clusters, profiles.SIGNAL_CLUSTERS, selection),
            migration_corridors=corridor_count,
            pattern_match="96.8%" if selection.has_region else "94.2%",
            new_signals=s.scale_count(BASE_NEW_SIGNALS, profiles.NEW_SIGNALS, selection),
        )

    # ------------------------------------------------------------------
    # Visual insights
    # ------------------------------------------------------------------

    def radar_scores(self, selection: FilterSelection) -> list[RadarScore]:
        return [
            item.model_copy(
                update={"value": self._scaler.scale(item.value, profiles.RADAR_SCORE, selection)}
            )
            for item in self._provider.radar_scores()
        ]

    def quarterly_trends(self, selection: FilterSelection) -> list[QuarterlyTrend]:
        s = self._scaler
        return [
            quarter.model_copy(
                update={
                    "enrolments": s.scale_count(
                        quarter.enrolments, profiles.QUARTERLY_ENROLMENTS, selection
                    ),
                    "updates": s.scale_count(quarter.updates, profiles.QUARTERLY_UPDATES, selection),
                }
            )
            for quarter in self._provider.quarterly_trends()
        ]

    def state_performance(self, selection: FilterSelection) -> list[StatePerformance]:
        """
        The selected state's row, or the first five rows when no state (or an
        unlisted one) is selected.
        """

        rows = list(self._provider.state_performance())
        if selection.has_region:
            selected = [row for row in rows if row.code == selection.region]
            if selected:
                return selected[:1]
        return rows[:TOP_STATES]

    def update_type_breakdown(self, selection: FilterSelection) -> list[ShareSlice]:
        slices = list(self._provider.update_type_distribution())
        if not selection.has_category:
            return slices
        selected = [item for item in slices if item.name.lower() == selection.category]
        return selected or slices

    def visual_kpis(self, selection: FilterSelection) -> VisualKPIs:
        metrics = self._metrics.calculate(selection)
        daily = self._normalizer.round_count(
            (metrics.total_enrolments + metrics.total_updates) / DAYS_PER_YEAR
        )
        single_region = selection.has_region
        return VisualKPIs(
            coverage="98.5%" if single_region else "99.2%",
            active_centres="3,200" if single_region else "52,847",
            daily_transactions=format_number(daily),
            data_quality="96.2%" if single_region else "94.6%",
        )

    # ------------------------------------------------------------------
    # Enrolment analysis
    # ------------------------------------------------------------------

    def enrolment_kpis(self, selection: FilterSelection) -> EnrolmentKPIs:
        total = self._metrics.calculate(selection).total_enrolments
        n = self._normalizer
        return EnrolmentKPIs(
            total_enrolments=format_number(total, METRIC_UNITS),
            infant_enrolments=format_number(
                n.round_count(total * INFANT_ENROLMENT_SHARE), METRIC_UNITS
            ),
            daily_average=format_number(n.round_count(total / DAYS_PER_YEAR), METRIC_UNITS),
        )


def rows_to_records(rows: Sequence[object]) -> list[dict[str, object]]:
    """
    Flatten fixture models or dataclasses into plain dicts for tables and charts.
    """

    records: list[dict[str, object]] = []
    for row in rows:
        dump = getattr(row, "model_dump", None)
        records.append(dump() if callable(dump) else dict(vars(row)))
    return records
