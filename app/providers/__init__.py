"""
app/providers package marker.
"""

from app.providers.base import BaseFixtureProvider, FixtureLoadError
from app.providers.static_provider import StaticFixtureProvider, get_fixture_provider

__all__ = [
    "BaseFixtureProvider",
    "FixtureLoadError",
    "StaticFixtureProvider",
    "get_fixture_provider",
]
