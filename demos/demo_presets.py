#!/usr/bin/env python3
"""
Demo: All Presets

Computes every built-in preset once and draws them side by side:
- Field lines and sampled arrows
- Sources, probe and force arrow
- Equilibrium point (two-charge presets)

Usage:
    python demo_presets.py [--show] [--seeds N]
"""

import sys
import argparse
import math
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import TracingConfig
from core.io import available_presets, load_preset
from visualization import FieldScene, Visualizer, snapshot_summary


def main():
    parser = argparse.ArgumentParser(description="Render all presets")
    parser.add_argument("--show", action="store_true", help="Display plot interactively")
    parser.add_argument("--seeds", type=int, default=120, help="Field line seeds per preset")
    args = parser.parse_args()

    names = available_presets()
    field = FieldScene(tracing=TracingConfig(seed_count=args.seeds, random_seed=0))

    cols = 3
    rows = math.ceil(len(names) / cols)
    viz = Visualizer(output_dir=Path(__file__).parent / "out", figsize=(6, 5))
    viz.create_figure(subplots=(rows, cols), title="Presets")

    for i, name in enumerate(names):
        snapshot = field.compute(load_preset(name))
        for line in snapshot_summary(snapshot):
            print(line)
        viz.plot_snapshot(snapshot, ax_index=i, title=name)

    # Hide unused panels
    for j in range(len(names), rows * cols):
        viz.axes.flat[j].set_visible(False)

    viz.finalize(save="presets.png", show=args.show)


if __name__ == "__main__":
    main()
