import logging

import pandas as pd

from turbine_viz.errors import EmptyGroup

logger = logging.getLogger(__name__)

PROJECT_FIELDS = ["project_name", "year", "lat", "lon", "capacity_project"]
TREND_FIELDS = ["year", "capacity", "capacity_cum"]


def aggregate_projects(turbines: pd.DataFrame) -> pd.DataFrame:
    """Collapse turbines into one row per project name.

    Coordinates are averaged, capacity is the max reported (every turbine
    carries the whole project's MW), year is the earliest known.
    """
    if turbines.empty:
        return pd.DataFrame(columns=PROJECT_FIELDS)

    projects = (
        turbines.groupby("project_name", sort=False, dropna=True)
                .agg(year=("year", "min"), lat=("lat", "mean"), lon=("lon", "mean"),
                     capacity_project=("capacity_project", "max"))
                .reset_index()
    )
    if projects.empty:
        raise EmptyGroup(f"{len(turbines)} turbine rows but none has a project name")

    projects["year"] = projects["year"].astype("Int64")
    projects = projects.sort_values(["year", "project_name"], na_position="last").reset_index(drop=True)
    logger.info("Aggregated %d turbines into %d projects", len(turbines), len(projects))
    return projects[PROJECT_FIELDS]


def build_capacity_trend(projects: pd.DataFrame) -> pd.DataFrame:
    dated = projects.dropna(subset=["year"])
    if dated.empty:
        return pd.DataFrame(columns=TREND_FIELDS)

    trend = (
        dated.groupby("year", as_index=False)["capacity_project"].sum()
             .rename(columns={"capacity_project": "capacity"})
             .sort_values("year")
             .reset_index(drop=True)
    )
    trend["year"] = trend["year"].astype(int)
    trend["capacity_cum"] = trend["capacity"].cumsum()
    return trend[TREND_FIELDS]
