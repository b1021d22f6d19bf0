"""
app/domain/filters.py

Filter selection model shared by every dashboard section.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from app.domain.regions import ALL_REGIONS

ALL_CATEGORIES = "all"
"""Sentinel category selecting every update type."""

DEFAULT_DATE_RANGE: tuple[date, date] = (date(2024, 4, 1), date(2025, 3, 31))


class TimeWindow(str, Enum):
    """
    Reporting-period presets offered by the time selector.
    """

    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_QUARTER = "90d"
    LAST_YEAR = "1y"
    CUSTOM = "custom"


class UpdateCategory(str, Enum):
    """
    Update transaction types offered by the category selector.
    """

    DEMOGRAPHIC = "demographic"
    BIOMETRIC = "biometric"
    ADDRESS = "address"
    MOBILE = "mobile"
    EMAIL = "email"


TIME_WINDOW_LABELS: dict[str, str] = {
    TimeWindow.LAST_7_DAYS.value: "Last 7 Days",
    TimeWindow.LAST_30_DAYS.value: "Last 30 Days",
    TimeWindow.LAST_QUARTER.value: "Last Quarter",
    TimeWindow.LAST_YEAR.value: "Last Year",
    TimeWindow.CUSTOM.value: "Custom Range",
}

CATEGORY_LABELS: dict[str, str] = {
    ALL_CATEGORIES: "All Update Types",
    UpdateCategory.DEMOGRAPHIC.value: "Demographic Updates",
    UpdateCategory.BIOMETRIC.value: "Biometric Updates",
    UpdateCategory.ADDRESS.value: "Address Updates",
    UpdateCategory.MOBILE.value: "Mobile Updates",
    UpdateCategory.EMAIL.value: "Email Updates",
}


@dataclass(frozen=True)
class FilterSelection:
    """
    One immutable snapshot of the global filter controls.

    Values are kept as plain strings so that unrecognised enumerants reach
    the calculators unchanged; those fall back to identity scaling rather
    than failing. ``date_range`` is only consulted for the ``custom`` window.
    """

    region: str = ALL_REGIONS
    time_window: str = TimeWindow.LAST_YEAR.value
    category: str = ALL_CATEGORIES
    date_range: tuple[date, date] | None = DEFAULT_DATE_RANGE

    def __post_init__(self) -> None:
        # Enum members hash by name, not value; keep plain strings so equal
        # selections share a cache key.
        for name in ("region", "time_window", "category"):
            value = getattr(self, name)
            if isinstance(value, Enum):
                object.__setattr__(self, name, value.value)
        if self.date_range is not None and not isinstance(self.date_range, tuple):
            object.__setattr__(self, "date_range", tuple(self.date_range))

    @property
    def has_region(self) -> bool:
        return self.region != ALL_REGIONS

    @property
    def has_category(self) -> bool:
        return self.category != ALL_CATEGORIES

    @property
    def is_custom(self) -> bool:
        return self.time_window == TimeWindow.CUSTOM.value
