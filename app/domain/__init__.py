"""
app/domain package marker.
"""

from app.domain.filters import ALL_CATEGORIES, FilterSelection, TimeWindow, UpdateCategory
from app.domain.regions import ALL_REGIONS, REGION_STATS, RegionStat, RegionTableError

__all__ = [
    "ALL_CATEGORIES",
    "ALL_REGIONS",
    "FilterSelection",
    "REGION_STATS",
    "RegionStat",
    "RegionTableError",
    "TimeWindow",
    "UpdateCategory",
]
