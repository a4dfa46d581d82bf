"""
Country outlines for the project map background.

The Natural Earth admin-0 countries archive is downloaded once into the
boundary cache and read with geopandas.
"""

import logging
from pathlib import Path
from typing import Optional

import geopandas as gpd
import requests

from turbine_viz.config import BOUNDARY_CACHE_DIR, BOUNDARY_CONTINENT, BOUNDARY_URL, HTTP_TIMEOUT
from turbine_viz.errors import DataUnavailable

logger = logging.getLogger(__name__)


def get_boundary_cache_path(cache_dir: Path = BOUNDARY_CACHE_DIR) -> Path:
    return Path(cache_dir) / Path(BOUNDARY_URL).name


def download_boundaries(cache_dir: Path = BOUNDARY_CACHE_DIR, force: bool = False) -> Path:
    cache_path = get_boundary_cache_path(cache_dir)
    if cache_path.exists() and not force:
        logger.info("Using cached boundary data: %s", cache_path)
        return cache_path

    logger.info("Downloading country boundaries from %s", BOUNDARY_URL)
    try:
        r = requests.get(BOUNDARY_URL, timeout=HTTP_TIMEOUT)
        r.raise_for_status()
    except requests.RequestException as e:
        raise DataUnavailable(f"could not fetch {BOUNDARY_URL}") from e

    try:
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        cache_path.write_bytes(r.content)
    except OSError as e:
        raise DataUnavailable(f"could not store boundaries at {cache_path}") from e
    return cache_path


def load_basemap(cache_dir: Path = BOUNDARY_CACHE_DIR, continent: Optional[str] = BOUNDARY_CONTINENT,
                 force: bool = False) -> gpd.GeoDataFrame:
    """Country polygons, optionally limited to one continent."""
    path = download_boundaries(cache_dir, force=force)
    try:
        gdf = gpd.read_file(path)
    except Exception as e:
        raise DataUnavailable(f"unreadable boundary file {path}") from e

    if continent is not None:
        gdf = gdf[gdf["CONTINENT"] == continent]
    if gdf.empty:
        raise DataUnavailable(f"no boundaries for continent {continent!r} in {path}")
    logger.info("Loaded %d country outlines", len(gdf))
    return gdf.reset_index(drop=True)
