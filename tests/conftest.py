"""
pytest configuration and shared fixtures for the sitrep tests.

Nothing here touches the network: feed clients are patched per test and
the composer is driven with in-memory catalogs and base maps.
"""

import pytest

from sitrep.fusion.corpus import TextItem
from sitrep.ingest import basemap_client
from sitrep.ingest.basemap_client import BaseMap, CountryShape


def make_items(titles, alert=False):
    return [TextItem(id=f"n{i}", title=t, is_alert=alert) for i, t in enumerate(titles)]


@pytest.fixture()
def items():
    return make_items


@pytest.fixture(autouse=True)
def clear_basemap_cache():
    basemap_client.clear_cache()
    yield
    basemap_client.clear_cache()


@pytest.fixture()
def small_base_map():
    """Two boxes: Iran (sanctioned, mideast primary) and France."""
    return BaseMap(countries=[
        CountryShape("364", "Iran", "IRN", [[(44.0, 25.0), (63.0, 25.0), (63.0, 40.0), (44.0, 40.0), (44.0, 25.0)]]),
        CountryShape("250", "France", "FRA", [[(-5.0, 42.0), (8.0, 42.0), (8.0, 51.0), (-5.0, 51.0), (-5.0, 42.0)]]),
    ])
