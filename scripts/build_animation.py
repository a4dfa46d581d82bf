# scripts/build_animation.py  (no argparse; runs the whole batch with defaults)
import sys
from pathlib import Path

# ---- locate project root (folder that contains 'turbine_viz' and 'scripts') ----
THIS_FILE = Path(__file__).resolve()
ROOT = THIS_FILE.parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# ---- headless rendering ----
import matplotlib
matplotlib.use("Agg")

# ---- project imports ----
from turbine_viz.config import AnimationConfig, OUT_DIR
from turbine_viz.logging_config import setup_logging
from turbine_viz.pipeline import run_pipeline

setup_logging("INFO")

result = run_pipeline(OUT_DIR, AnimationConfig())

print("Wrote:", result.line_gif)
print("Wrote:", result.map_gif)
print("Wrote:", result.combined_gif, f"({result.n_frames} frames)")
