"""
app/schemas/fixtures.py

Validated shapes for the static dashboard fixture file.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _FixtureModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
    )


# ---------------------------------------------------------------------------
# Anomaly detection
# ---------------------------------------------------------------------------


class AnomalyAlert(_FixtureModel):
    """Summary alert card shown on the overview."""

    id: str = Field(min_length=1)
    type: Literal["surge", "drop"]
    title: str = Field(min_length=1)
    location: str
    time_window: str
    severity: Literal["low", "medium", "high"]
    description: str


class DetailedAnomaly(_FixtureModel):
    """Case record in the anomaly investigation log."""

    id: str = Field(min_length=1)
    type: Literal["surge", "drop", "pattern"]
    severity: Literal["low", "medium", "high"]
    location: str
    time_window: str
    metric: str
    deviation: str
    baseline_value: int = Field(ge=0)
    actual_value: int = Field(ge=0)
    status: Literal["investigating", "monitoring", "resolved", "closed"]
    hypothesis: str
    assigned_to: str
    created_at: str
    resolved_at: str | None = None


class AnomalyTimelinePoint(_FixtureModel):
    label: str
    normal: int = Field(ge=0)
    actual: int = Field(ge=0)
    threshold: int = Field(ge=0)
    anomaly: bool = False


class WeeklyAnomalyStat(_FixtureModel):
    week: str
    detected: int = Field(ge=0)
    resolved: int = Field(ge=0)
    pending: int = Field(ge=0)


# ---------------------------------------------------------------------------
# Societal signals
# ---------------------------------------------------------------------------


class LifeEventSignal(_FixtureModel):
    """Activity cluster hypothesised to reflect a life event."""

    id: str = Field(min_length=1)
    type: str
    region: str
    period: str
    intensity: Literal["low", "moderate", "high"]
    hypothesis: str


class MigrationCorridor(_FixtureModel):
    """Origin/destination pair inferred from address updates."""

    origin: str = Field(min_length=1)
    destination: str = Field(min_length=1)
    volume: int = Field(ge=0)
    change_pct: float


class SeasonalPattern(_FixtureModel):
    month: str
    migration: int = Field(ge=0)
    marriage: int = Field(ge=0)
    education: int = Field(ge=0)


class DemographicShift(_FixtureModel):
    signal: str
    indicator: str
    intensity: Literal["High", "Moderate", "Seasonal", "Low"]
    implication: str
    status: Literal["increasing", "stable", "seasonal", "decreasing"]


# ---------------------------------------------------------------------------
# Update behaviour and visual insights
# ---------------------------------------------------------------------------


class MonthlyFriction(_FixtureModel):
    month: str
    ufi: float = Field(ge=1.0)
    updates: int = Field(ge=0)
    completion_rate: float = Field(ge=0.0, le=100.0)


class FrictionTrendPoint(_FixtureModel):
    month: str
    ufi: float = Field(ge=1.0)
    baseline: float


class GapPoint(_FixtureModel):
    """Monthly enrolment/update volumes in millions."""

    month: str
    enrolments: float
    updates: float
    gap: float


class ShareSlice(_FixtureModel):
    """One slice of a percentage breakdown."""

    name: str = Field(min_length=1)
    share: float = Field(ge=0.0, le=100.0)


class RepeatUpdateBucket(_FixtureModel):
    frequency: str
    count: int = Field(ge=0)
    percentage: float = Field(ge=0.0, le=100.0)


class StatePerformance(_FixtureModel):
    state: str
    code: str = Field(min_length=2)
    enrolment: float = Field(ge=0.0, le=100.0)
    updates: float = Field(ge=0.0, le=100.0)
    friction: float = Field(ge=0.0, le=100.0)
    coverage: float = Field(ge=0.0, le=100.0)


class QuarterlyTrend(_FixtureModel):
    quarter: str
    enrolments: int = Field(ge=0)
    updates: int = Field(ge=0)


class RadarScore(_FixtureModel):
    metric: str
    value: float = Field(ge=0.0)
    full_mark: float = Field(gt=0.0)


class RegionalVolume(_FixtureModel):
    name: str
    size: int = Field(ge=0)


class MonthlyEnrolment(_FixtureModel):
    month: str
    enrolments: int = Field(ge=0)
    newborns: int = Field(ge=0)
    adults: int = Field(ge=0)


# ---------------------------------------------------------------------------
# Whole file
# ---------------------------------------------------------------------------


class DashboardFixtures(_FixtureModel):
    """Every fixture section of the dashboard, validated together."""

    anomaly_alerts: tuple[AnomalyAlert, ...]
    detailed_anomalies: tuple[DetailedAnomaly, ...]
    anomaly_timeline: tuple[AnomalyTimelinePoint, ...]
    weekly_anomaly_stats: tuple[WeeklyAnomalyStat, ...]
    life_event_signals: tuple[LifeEventSignal, ...]
    migration_corridors: tuple[MigrationCorridor, ...]
    corridor_labels: dict[str, str]
    seasonal_patterns: tuple[SeasonalPattern, ...]
    demographic_shifts: tuple[DemographicShift, ...]
    monthly_ufi: tuple[MonthlyFriction, ...]
    national_ufi_trend: tuple[FrictionTrendPoint, ...]
    gap_analysis: tuple[GapPoint, ...]
    update_type_distribution: tuple[ShareSlice, ...]
    repeat_updates: tuple[RepeatUpdateBucket, ...]
    state_performance: tuple[StatePerformance, ...]
    quarterly_trends: tuple[QuarterlyTrend, ...]
    radar_scores: tuple[RadarScore, ...]
    regional_distribution: tuple[RegionalVolume, ...]
    monthly_enrolments: tuple[MonthlyEnrolment, ...]
    age_distribution: tuple[ShareSlice, ...]
    gender_distribution: tuple[ShareSlice, ...]
    urban_rural_split: tuple[ShareSlice, ...]
