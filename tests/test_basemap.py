"""
Unit tests for the country outline loader.
"""

import geopandas as gpd
import pytest
import requests
from shapely.geometry import box

from turbine_viz import basemap
from turbine_viz.basemap import download_boundaries, get_boundary_cache_path, load_basemap
from turbine_viz.errors import DataUnavailable


class FakeResponse:
    def __init__(self, content, status=200):
        self.content = content
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status}")


@pytest.fixture
def world_file(tmp_path, monkeypatch):
    """Small boundary file standing in for the downloaded archive."""
    path = tmp_path / "countries.geojson"
    gpd.GeoDataFrame(
        {"NAME": ["Canada", "United States of America", "France"],
         "CONTINENT": ["North America", "North America", "Europe"]},
        geometry=[box(-141, 49, -52, 70), box(-125, 25, -67, 49), box(-5, 42, 8, 51)],
        crs="EPSG:4326",
    ).to_file(path, driver="GeoJSON")
    monkeypatch.setattr(basemap, "download_boundaries", lambda cache_dir, force=False: path)
    return path


class TestDownloadBoundaries:

    def test_downloads_once(self, tmp_path, monkeypatch):
        calls = []
        monkeypatch.setattr(basemap.requests, "get",
                            lambda url, timeout: calls.append(url) or FakeResponse(b"PK\x03\x04"))
        path = download_boundaries(tmp_path)
        assert path == get_boundary_cache_path(tmp_path)
        assert path.read_bytes() == b"PK\x03\x04"
        download_boundaries(tmp_path)
        assert len(calls) == 1

    def test_download_failure(self, tmp_path, monkeypatch):
        def boom(url, timeout):
            raise requests.ConnectionError("offline")

        monkeypatch.setattr(basemap.requests, "get", boom)
        with pytest.raises(DataUnavailable):
            download_boundaries(tmp_path)
        assert not get_boundary_cache_path(tmp_path).exists()

    def test_http_error(self, tmp_path, monkeypatch):
        monkeypatch.setattr(basemap.requests, "get", lambda url, timeout: FakeResponse(b"", status=503))
        with pytest.raises(DataUnavailable):
            download_boundaries(tmp_path)


class TestLoadBasemap:

    def test_filters_to_continent(self, tmp_path, world_file):
        gdf = load_basemap(tmp_path)
        assert isinstance(gdf, gpd.GeoDataFrame)
        assert sorted(gdf["NAME"]) == ["Canada", "United States of America"]

    def test_no_filter(self, tmp_path, world_file):
        assert len(load_basemap(tmp_path, continent=None)) == 3

    def test_unknown_continent(self, tmp_path, world_file):
        with pytest.raises(DataUnavailable, match="Antarctica"):
            load_basemap(tmp_path, continent="Antarctica")

    def test_unreadable_file(self, tmp_path, monkeypatch):
        junk = tmp_path / "junk.geojson"
        junk.write_bytes(b"not a boundary file")
        monkeypatch.setattr(basemap, "download_boundaries", lambda cache_dir, force=False: junk)
        with pytest.raises(DataUnavailable, match="unreadable"):
            load_basemap(tmp_path)
