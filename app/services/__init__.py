"""
app/services package marker.
"""

from app.services.csv_loader_service import CSVLoader, CSVLoadResult, parse_csv
from app.services.metrics_service import (
    FilteredMetrics,
    FilteredMetricsService,
    get_filtered_metrics,
)
from app.services.section_service import SectionService

__all__ = [
    "CSVLoader",
    "CSVLoadResult",
    "FilteredMetrics",
    "FilteredMetricsService",
    "SectionService",
    "get_filtered_metrics",
    "parse_csv",
]
