from pathlib import Path
from typing import Tuple

from pydantic import BaseModel, Field, model_validator

# Source release (weekly community data drop, keyed by year + ISO week)
DATASET_NAME = "wind-turbine"
DATASET_YEAR = 2020
DATASET_WEEK = 44
DATASET_BASE_URL = "https://raw.githubusercontent.com/rfordatascience/tidytuesday/master/data"
HTTP_TIMEOUT = 30

# Paths
CACHE_DIR = Path("data")
OUT_DIR = Path("out")

# Output artifacts
LINE_GIF = "capacity_line.gif"
MAP_GIF = "project_map.gif"
COMBINED_GIF = "combined.gif"

# Fixed map background extent (Canada), degrees
MAP_EXTENT = {"min_lon": -141.0, "max_lon": -52.0, "min_lat": 41.0, "max_lat": 70.0}

# Country outlines drawn behind the project map
BOUNDARY_URL = "https://naturalearth.s3.amazonaws.com/110m_cultural/ne_110m_admin_0_countries.zip"
BOUNDARY_CACHE_DIR = CACHE_DIR / "boundaries"
BOUNDARY_CONTINENT = "North America"


class AnimationConfig(BaseModel):
    """Timing and sizing shared by both rendered charts.

    Both charts must be rendered with the same instance so their frame
    sequences pair up index by index.
    """
    nframes: int = Field(default=100, ge=1)
    duration: float = Field(default=25, gt=0)      # seconds
    start_pause: int = Field(default=10, ge=0)     # frames
    end_pause: int = Field(default=15, ge=0)       # frames
    year_range: Tuple[int, int] = (1992, 2020)
    width: int = Field(default=400, ge=1)          # px
    height: int = Field(default=400, ge=1)         # px
    dpi: int = Field(default=100, ge=1)
    size_breaks: Tuple[float, ...] = (100, 200, 300)  # MW
    size_range: Tuple[float, float] = (1, 12)         # point radius

    @model_validator(mode="after")
    def _check(self):
        if self.start_pause + self.end_pause >= self.nframes:
            raise ValueError("pauses must leave at least one moving frame")
        if self.year_range[0] >= self.year_range[1]:
            raise ValueError("year_range must be ascending")
        if self.size_range[0] > self.size_range[1]:
            raise ValueError("size_range must be ascending")
        return self

    @property
    def fps(self) -> float:
        return self.nframes / self.duration

    def frame_years(self):
        """Depicted (fractional) year for every frame, pauses included."""
        start, end = self.year_range
        moving = self.nframes - self.start_pause - self.end_pause
        if moving == 1:
            steps = [float(end)]
        else:
            span = end - start
            steps = [start + span * i / (moving - 1) for i in range(moving)]
        return [float(start)] * self.start_pause + steps + [float(end)] * self.end_pause
