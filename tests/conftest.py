import matplotlib
matplotlib.use("Agg")

import geopandas as gpd
import pandas as pd
import pytest
from PIL import Image
from shapely.geometry import box


@pytest.fixture
def raw_turbines():
    """Three turbines, two projects, in the raw release's column names."""
    return pd.DataFrame({
        "objectid": ["1", "2", "3"],
        "province_territory": ["Alberta", "Alberta", "Ontario"],
        "project_name": ["A", "A", "B"],
        "total_project_capacity_mw": ["10", "10", "30"],
        "turbine_rated_capacity_k_w": ["1500", "1500", "2300"],
        "commissioning_date": ["2001", "2001", "2002"],
        "latitude": ["50", "52", "45"],
        "longitude": ["-100", "-102", "-90"],
    })


@pytest.fixture
def empty_raw():
    return pd.DataFrame(columns=["objectid", "project_name", "commissioning_date",
                                 "total_project_capacity_mw", "turbine_rated_capacity_k_w",
                                 "latitude", "longitude"])


@pytest.fixture
def make_frames():
    def _make(n, size=(40, 30), color="red"):
        return [Image.new("RGB", size, color) for _ in range(n)]
    return _make


@pytest.fixture
def background():
    """Two rectangles standing in for Canada and the US."""
    return gpd.GeoDataFrame(
        {"NAME": ["Canada", "United States of America"], "CONTINENT": ["North America"] * 2},
        geometry=[box(-141, 49, -52, 70), box(-125, 25, -67, 49)],
        crs="EPSG:4326",
    )
