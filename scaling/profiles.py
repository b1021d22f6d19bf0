"""
scaling/profiles.py

Per-signal tuning constants for :class:`scaling.scaler.SignalScaler`.

The tables approximate empirical behaviour of each region and update type.
They are configuration data, not logic: every section of the dashboard
scales its fixtures through one of the profiles below.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from scaling.scaler import ScalingMode, ScalingProfile

# ---------------------------------------------------------------------------
# Shared multiplier tables
# ---------------------------------------------------------------------------

TIME_WINDOW_SHARES: Mapping[str, float] = MappingProxyType(
    {
        "7d": 0.019,  # ~7/365
        "30d": 0.082,  # ~30/365
        "90d": 0.247,  # ~90/365
        "1y": 1.0,
        "custom": 1.0,
    }
)
"""Fraction of annual volume covered by each time-window preset."""

CATEGORY_UPDATE_SHARES: Mapping[str, float] = MappingProxyType(
    {
        "all": 1.0,
        "demographic": 0.35,
        "biometric": 0.18,
        "address": 0.35,
        "mobile": 0.28,
        "email": 0.12,
    }
)
"""Share of total update volume touched by each update type.

The shares sum to 1.28, not 1.0. Categories overlap: a single update
transaction may change several fields, so it counts towards each of them.
"""

FRICTION_FALLBACK = 1.35
"""Friction index reported when no region matches the selection."""

# ---------------------------------------------------------------------------
# Anomaly detection
# ---------------------------------------------------------------------------

REGION_ANOMALY_RATES: Mapping[str, float] = MappingProxyType(
    {
        # better systems
        "KL": 0.4, "TS": 0.5, "KA": 0.6, "TN": 0.7,
        "AP": 0.8, "PB": 0.9, "HR": 0.9, "GJ": 1.0, "OD": 1.0,
        # more complex operations
        "MP": 1.2, "MH": 1.3, "RJ": 1.3, "WB": 1.5, "UP": 1.7, "BR": 1.8,
    }
)

CATEGORY_ANOMALY_RATES: Mapping[str, float] = MappingProxyType(
    {
        "mobile": 0.5,
        "email": 0.6,
        "address": 1.2,
        "demographic": 1.3,
        "biometric": 1.5,
    }
)

LOW_ANOMALY_RATE = 0.8
HIGH_ANOMALY_RATE = 1.3


def _tier_offsets(
    rates: Mapping[str, float],
    *,
    low_offset: float,
    high_offset: float,
) -> Mapping[str, float]:
    """Map low-rate regions to *low_offset* and high-rate regions to *high_offset*."""
    offsets: dict[str, float] = {}
    for code, rate in rates.items():
        if rate < LOW_ANOMALY_RATE:
            offsets[code] = low_offset
        elif rate > HIGH_ANOMALY_RATE:
            offsets[code] = high_offset
    return MappingProxyType(offsets)


ACTIVE_ANOMALIES = ScalingProfile(
    name="active_anomalies",
    region_table=REGION_ANOMALY_RATES,
    category_table=CATEGORY_ANOMALY_RATES,
    time_table=TIME_WINDOW_SHARES,
    lower=1,
    digits=0,
)

HIGH_SEVERITY_ANOMALIES = ScalingProfile(
    name="high_severity_anomalies",
    region_table=REGION_ANOMALY_RATES,
    category_table=CATEGORY_ANOMALY_RATES,
    time_table=TIME_WINDOW_SHARES,
    lower=0,
    digits=0,
)

DETECTION_ACCURACY = ScalingProfile(
    name="detection_accuracy",
    mode=ScalingMode.ADDITIVE,
    region_table=_tier_offsets(REGION_ANOMALY_RATES, low_offset=1.5, high_offset=-1.2),
    lower=85.0,
    upper=99.9,
    digits=1,
)

RESOLUTION_DAYS = ScalingProfile(
    name="resolution_days",
    mode=ScalingMode.ADDITIVE,
    region_table=_tier_offsets(REGION_ANOMALY_RATES, low_offset=-0.5, high_offset=0.8),
    lower=0.5,
    digits=1,
)

# ---------------------------------------------------------------------------
# Update behaviour
# ---------------------------------------------------------------------------

REGION_FRICTION_OFFSETS: Mapping[str, float] = MappingProxyType(
    {
        "KL": -0.27, "TS": -0.20, "KA": -0.17, "TN": -0.13, "AP": -0.10,
        "PB": -0.07, "HR": -0.03, "GJ": 0.0, "OD": 0.03, "MP": 0.07,
        "MH": 0.10, "RJ": 0.13, "WB": 0.20, "UP": 0.27, "BR": 0.33,
    }
)

CATEGORY_FRICTION_OFFSETS: Mapping[str, float] = MappingProxyType(
    {
        "mobile": -0.15,  # easiest
        "email": -0.10,
        "address": 0.05,
        "demographic": 0.10,
        "biometric": 0.20,  # hardest
    }
)

MONTHLY_FRICTION = ScalingProfile(
    name="monthly_friction",
    mode=ScalingMode.ADDITIVE,
    region_table=REGION_FRICTION_OFFSETS,
    category_table=CATEGORY_FRICTION_OFFSETS,
    lower=1.0,
    upper=2.0,
    digits=2,
)

COMPLETION_RATE = ScalingProfile(
    name="completion_rate",
    mode=ScalingMode.ADDITIVE,
    lower=50,
    upper=95,
    digits=0,
)
"""Bounds for completion rates derived as ``100 / friction``."""

# ---------------------------------------------------------------------------
# Visual insights
# ---------------------------------------------------------------------------

REGION_PERFORMANCE_OFFSETS: Mapping[str, float] = MappingProxyType(
    {
        "KL": 8, "TS": 6, "KA": 5, "TN": 4, "AP": 2,
        "PB": 0, "HR": 0, "GJ": -1, "OD": -2, "MP": -3,
        "MH": -4, "RJ": -5, "WB": -6, "UP": -8, "BR": -10,
    }
)

RADAR_SCORE = ScalingProfile(
    name="radar_score",
    mode=ScalingMode.ADDITIVE,
    region_table=REGION_PERFORMANCE_OFFSETS,
    lower=50,
    upper=100,
    digits=1,
)

QUARTERLY_ENROLMENTS = ScalingProfile(
    name="quarterly_enrolments",
    time_table=TIME_WINDOW_SHARES,
    digits=0,
)

QUARTERLY_UPDATES = ScalingProfile(
    name="quarterly_updates",
    category_table=CATEGORY_UPDATE_SHARES,
    time_table=TIME_WINDOW_SHARES,
    digits=0,
)

# ---------------------------------------------------------------------------
# Societal signals
# ---------------------------------------------------------------------------

SEASONAL_VOLUME = ScalingProfile(
    name="seasonal_volume",
    time_table=TIME_WINDOW_SHARES,
    digits=0,
)

SIGNAL_CLUSTERS = ScalingProfile(
    name="signal_clusters",
    time_table=TIME_WINDOW_SHARES,
    lower=1,
    digits=0,
)
"""Applied to the region-adjusted cluster baseline."""

NEW_SIGNALS = ScalingProfile(
    name="new_signals",
    time_table=TIME_WINDOW_SHARES,
    lower=1,
    digits=0,
)

REGION_FOCUS_SHARE = 0.3
"""Fraction of signal clusters that remain visible for a single region."""
