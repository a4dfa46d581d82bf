import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from turbine_viz.aggregate import aggregate_projects, build_capacity_trend
from turbine_viz.basemap import load_basemap
from turbine_viz.charts import render_capacity_line, render_project_map
from turbine_viz.compose import compose_gif
from turbine_viz.config import (CACHE_DIR, COMBINED_GIF, DATASET_WEEK, DATASET_YEAR, LINE_GIF, MAP_GIF,
                                OUT_DIR, AnimationConfig)
from turbine_viz.data import fetch_turbines, normalize_turbines

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    line_gif: Path
    map_gif: Path
    combined_gif: Path
    n_projects: int
    n_frames: int


def run_pipeline(out_dir=OUT_DIR, config: Optional[AnimationConfig] = None,
                 year: int = DATASET_YEAR, week: int = DATASET_WEEK,
                 cache_dir=CACHE_DIR, refresh: bool = False) -> PipelineResult:
    config = config or AnimationConfig()
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    raw = fetch_turbines(year, week, cache_dir=cache_dir, refresh=refresh)
    turbines = normalize_turbines(raw)
    projects = aggregate_projects(turbines)
    trend = build_capacity_trend(projects)
    logger.info("%d turbines, %d projects, %d years of capacity", len(turbines), len(projects), len(trend))
    background = load_basemap(Path(cache_dir or CACHE_DIR) / "boundaries")

    line_gif = out_dir / LINE_GIF
    map_gif = out_dir / MAP_GIF
    line_frames = render_capacity_line(trend, config, line_gif)
    map_frames = render_project_map(projects, background, config, map_gif)

    combined = compose_gif(line_frames, map_frames, out_dir / COMBINED_GIF, config.fps)
    return PipelineResult(line_gif, map_gif, combined, len(projects), len(line_frames))
