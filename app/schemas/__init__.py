"""
app/schemas package marker.
"""

from app.schemas.fixtures import DashboardFixtures

__all__ = ["DashboardFixtures"]
