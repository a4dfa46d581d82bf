import io
import logging
from datetime import date
from pathlib import Path
from typing import Optional

import pandas as pd
import requests

from turbine_viz.config import CACHE_DIR, DATASET_BASE_URL, DATASET_NAME, HTTP_TIMEOUT
from turbine_viz.errors import DataUnavailable, SchemaMismatch

logger = logging.getLogger(__name__)

# raw column -> TurbineRecord field
COLUMN_MAP = {
    "objectid": "id",
    "project_name": "project_name",
    "commissioning_date": "year",
    "total_project_capacity_mw": "capacity_project",
    "turbine_rated_capacity_k_w": "capacity_turbine",
    "latitude": "lat",
    "longitude": "lon",
}
TURBINE_FIELDS = list(COLUMN_MAP.values())

# Known defects in the source release, keyed by turbine id
DATA_CORRECTIONS = {
    "1451": {"project_name": "Newfoundland Project"},
}


def release_date(year: int, week: int) -> date:
    """Releases go out on the Tuesday of the given ISO week."""
    try:
        return date.fromisocalendar(year, week, 2)
    except ValueError as e:
        raise DataUnavailable(f"no release for year={year} week={week}") from e


def release_url(year: int, week: int, dataset: str = DATASET_NAME) -> str:
    d = release_date(year, week)
    return f"{DATASET_BASE_URL}/{d.year}/{d.isoformat()}/{dataset}.csv"


def fetch_turbines(year: int, week: int, dataset: str = DATASET_NAME,
                   cache_dir: Optional[Path] = CACHE_DIR, refresh: bool = False) -> pd.DataFrame:
    """Load one weekly release as a raw, all-text table.

    Reads ``<cache_dir>/<dataset>_<year>_w<week>.csv`` when it exists,
    otherwise downloads the release and writes it to that cache.
    """
    cache_path = Path(cache_dir) / f"{dataset}_{year}_w{week:02d}.csv" if cache_dir else None
    if cache_path is not None and cache_path.exists() and not refresh:
        logger.info("Reading cached release %s", cache_path)
        try:
            return pd.read_csv(cache_path, dtype=str)
        except (OSError, ValueError) as e:
            raise DataUnavailable(f"unreadable cache {cache_path}") from e

    url = release_url(year, week, dataset)
    logger.info("Downloading %s", url)
    try:
        r = requests.get(url, timeout=HTTP_TIMEOUT)
        r.raise_for_status()
    except requests.RequestException as e:
        raise DataUnavailable(f"could not fetch {url}") from e

    try:
        df = pd.read_csv(io.StringIO(r.text), dtype=str)
    except ValueError as e:
        raise DataUnavailable(f"could not parse {url}") from e

    if cache_path is not None:
        try:
            cache_path.parent.mkdir(parents=True, exist_ok=True)
            df.to_csv(cache_path, index=False)
            logger.debug("Cached release at %s", cache_path)
        except OSError as e:
            # the download itself succeeded, so only the cache is lost
            logger.warning("Could not cache release at %s: %s", cache_path, e)
    logger.info("Loaded %d turbine rows", len(df))
    return df


def _select_columns(raw: pd.DataFrame) -> pd.DataFrame:
    # a column already carrying its target name stands in for the raw one
    picked = {}
    missing = []
    for src, field in COLUMN_MAP.items():
        if src in raw.columns:
            picked[field] = raw[src]
        elif field in raw.columns:
            picked[field] = raw[field]
        else:
            missing.append(src)
    if missing:
        raise SchemaMismatch(f"missing columns: {', '.join(missing)}")
    return pd.DataFrame(picked, index=raw.index)


def apply_corrections(df: pd.DataFrame, corrections: dict = DATA_CORRECTIONS) -> pd.DataFrame:
    out = df.copy()
    for turbine_id, fixes in corrections.items():
        mask = (out["id"] == turbine_id).fillna(False).astype(bool)
        if not mask.any():
            continue
        for field, value in fixes.items():
            out.loc[mask, field] = value
        logger.info("Applied correction to id %s: %s", turbine_id, fixes)
    return out


def parse_year(text: pd.Series) -> pd.Series:
    """First run of digits in the commissioning text, e.g. '2001/2002' -> 2001."""
    token = text.astype("string").str.extract(r"(\d+)", expand=False)
    return pd.to_numeric(token, errors="coerce").astype("Int64")


def normalize_turbines(raw: pd.DataFrame) -> pd.DataFrame:
    df = _select_columns(raw)
    df["id"] = df["id"].astype("string").str.strip()
    df["project_name"] = df["project_name"].astype("string")
    df = apply_corrections(df)
    df["year"] = parse_year(df["year"])
    for col in ["capacity_project", "capacity_turbine", "lat", "lon"]:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)

    id_num = pd.to_numeric(df["id"], errors="coerce")
    df = (
        df.assign(_id_num=id_num)
          .sort_values(["year", "_id_num", "id"], na_position="last", kind="mergesort")
          .drop(columns="_id_num")
          .reset_index(drop=True)
    )
    return df[TURBINE_FIELDS]
