import logging
from io import BytesIO
from typing import List

import geopandas as gpd
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.animation import AbstractMovieWriter, FuncAnimation
from PIL import Image

from turbine_viz.compose import write_gif
from turbine_viz.config import MAP_EXTENT, AnimationConfig

logger = logging.getLogger(__name__)


class FrameCollector(AbstractMovieWriter):
    """Movie writer that keeps every grabbed frame as a Pillow image.

    Nothing is written while saving; the caller writes ``.frames`` once
    every frame has rendered.
    """

    def setup(self, fig, outfile, dpi=None):
        super().setup(fig, outfile, dpi=dpi)
        self.frames: List[Image.Image] = []

    def grab_frame(self, **savefig_kwargs):
        buf = BytesIO()
        self.fig.savefig(buf, **{**savefig_kwargs, "format": "rgba", "dpi": self.dpi})
        img = Image.frombuffer("RGBA", self.frame_size, buf.getbuffer(), "raw", "RGBA", 0, 1)
        self.frames.append(img.convert("RGB"))

    def finish(self):
        pass


def _figure(config: AnimationConfig):
    return plt.subplots(figsize=(config.width / config.dpi, config.height / config.dpi), dpi=config.dpi)


def _animate(fig, update, config: AnimationConfig, out_gif) -> List[Image.Image]:
    writer = FrameCollector(fps=config.fps)
    try:
        anim = FuncAnimation(fig, update, frames=config.nframes, blit=False, repeat=False)
        anim.save(str(out_gif), writer=writer, dpi=config.dpi)
    finally:
        plt.close(fig)
    write_gif(writer.frames, out_gif, config.fps)
    logger.info("Rendered %d frames to %s", len(writer.frames), out_gif)
    return writer.frames


def render_capacity_line(trend: pd.DataFrame, config: AnimationConfig, out_gif) -> List[Image.Image]:
    """Cumulative capacity line, revealed year by year."""
    years = trend["year"].to_numpy(dtype=float)
    cum = trend["capacity_cum"].to_numpy(dtype=float)
    frame_years = config.frame_years()
    y0, y1 = config.year_range
    ymax = max(cum.max() if len(cum) else 0.0, 1.0) * 1.05

    fig, ax = _figure(config)

    def update(i):
        now = frame_years[i]
        ax.clear()
        ax.set_xlim(y0, y1)
        ax.set_ylim(0, ymax)
        ax.set_xlabel("Year"); ax.set_ylabel("Cumulative capacity (MW)")
        ax.set_title("Installed wind capacity")
        ax.grid(True, alpha=0.3)
        shown = years <= now
        xs, ys = years[shown], cum[shown]
        if len(xs) and years[0] <= now < years[-1]:
            xs = np.append(xs, now)
            ys = np.append(ys, np.interp(now, years, cum))
        ax.plot(xs, ys, color="tab:blue")
        ax.scatter(years[shown], cum[shown], s=12, color="tab:blue", zorder=3)
        ax.text(0.03, 0.95, f"{int(now)}", transform=ax.transAxes, va="top", fontsize=12)
        return []

    return _animate(fig, update, config, out_gif)


def point_radius(capacity, config: AnimationConfig) -> np.ndarray:
    """Area-proportional radius: 0 MW -> smallest radius, top of scale -> largest."""
    cap = np.clip(np.asarray(capacity, dtype=float), 0, None)
    top = max(max(config.size_breaks), float(np.nanmax(cap)) if cap.size else 0.0)
    r0, r1 = config.size_range
    return r0 + (r1 - r0) * np.sqrt(cap / top)


def render_project_map(projects: pd.DataFrame, background: gpd.GeoDataFrame, config: AnimationConfig,
                       out_gif) -> List[Image.Image]:
    """Projects as capacity-sized points over country outlines, revealed by year."""
    dated = projects.dropna(subset=["year"])
    years = dated["year"].to_numpy(dtype=float)
    sizes = (2 * point_radius(dated["capacity_project"].fillna(0), config)) ** 2
    legend_sizes = (2 * point_radius(list(config.size_breaks), config)) ** 2
    frame_years = config.frame_years()

    fig, ax = _figure(config)

    def update(i):
        now = frame_years[i]
        ax.clear()
        ax.set_facecolor("#e8eef4")
        background.plot(ax=ax, color="#f4f1e8", edgecolor="#8c8c8c", linewidth=0.5, aspect="auto", zorder=0)
        ax.set_xlim(MAP_EXTENT["min_lon"], MAP_EXTENT["max_lon"])
        ax.set_ylim(MAP_EXTENT["min_lat"], MAP_EXTENT["max_lat"])
        ax.set_xlabel("Longitude"); ax.set_ylabel("Latitude")
        ax.set_title(f"Wind projects: {int(now)}")
        shown = years <= now
        ax.scatter(dated["lon"].to_numpy()[shown], dated["lat"].to_numpy()[shown],
                   s=sizes[shown], color="tab:green", alpha=0.6, edgecolors="none")
        handles = [ax.scatter([], [], s=s, color="tab:green", alpha=0.6, edgecolors="none")
                   for s in legend_sizes]
        ax.legend(handles, [f"{b:g} MW" for b in config.size_breaks], loc="lower left",
                  fontsize=7, frameon=False)
        return []

    return _animate(fig, update, config, out_gif)
