#!/usr/bin/env python
"""
Convenience launcher for built-in presets.

Run a preset:
  python run_demo.py dipole
  python run_demo.py sample_problem_1 --show

List presets:
  python run_demo.py list
"""

import sys
import argparse
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from core.config import TracingConfig
from core.io import available_presets, load_preset
from visualization import FieldScene, Visualizer, snapshot_summary


def main():
    parser = argparse.ArgumentParser(description="Render a built-in preset")
    parser.add_argument("preset", type=str, help="Preset name, or 'list'")
    parser.add_argument("--show", action="store_true", help="Display plot interactively")
    parser.add_argument("--seeds", type=int, default=200, help="Field line seed count (default: 200)")
    parser.add_argument("--out", type=str, default="results", help="Output directory (default: results)")
    args = parser.parse_args()

    if args.preset == "list":
        print("Available presets:")
        for name in available_presets():
            print(f"  python run_demo.py {name}")
        sys.exit(0)

    try:
        scene = load_preset(args.preset)
    except KeyError as e:
        print(f"Error: {e.args[0]}")
        sys.exit(1)

    field = FieldScene(tracing=TracingConfig(seed_count=args.seeds, random_seed=0))
    snapshot = field.compute(scene)

    for line in snapshot_summary(snapshot):
        print(line)

    viz = Visualizer(output_dir=args.out)
    viz.plot_snapshot(snapshot)
    viz.finalize(save=f"{scene.name}.png", show=args.show)


if __name__ == "__main__":
    main()
