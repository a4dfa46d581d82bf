import logging
from pathlib import Path
from typing import List, Sequence

from PIL import Image

from turbine_viz.errors import FrameCountMismatch, OutputWriteFailed

logger = logging.getLogger(__name__)


def side_by_side(left: Image.Image, right: Image.Image) -> Image.Image:
    canvas = Image.new("RGB", (left.width + right.width, max(left.height, right.height)), "white")
    canvas.paste(left.convert("RGB"), (0, 0))
    canvas.paste(right.convert("RGB"), (left.width, 0))
    return canvas


def compose_frames(frames_a: Sequence[Image.Image], frames_b: Sequence[Image.Image]) -> List[Image.Image]:
    if len(frames_a) != len(frames_b):
        raise FrameCountMismatch(f"{len(frames_a)} frames vs {len(frames_b)} frames")
    return [side_by_side(a, b) for a, b in zip(frames_a, frames_b)]


def write_gif(frames: Sequence[Image.Image], path, fps: float) -> Path:
    """Write frames as an endlessly looping GIF; a partial file is removed on failure."""
    path = Path(path)
    if not frames:
        raise OutputWriteFailed(f"no frames to write to {path}")
    try:
        with open(path, "wb") as fh:
            frames[0].save(
                fh,
                format="GIF",
                save_all=True,
                append_images=list(frames[1:]),
                duration=int(round(1000 / fps)),
                loop=0,
            )
    except (OSError, ValueError) as e:
        if path.is_file():
            path.unlink()
        raise OutputWriteFailed(f"could not write {path}") from e
    logger.info("Wrote %d frames to %s", len(frames), path)
    return path


def compose_gif(frames_a, frames_b, path, fps: float) -> Path:
    """Pair the two sequences frame by frame and write the result."""
    return write_gif(compose_frames(frames_a, frames_b), path, fps)
