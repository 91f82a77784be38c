#!/usr/bin/env python3
"""
Demo: Potential Contours

Plots the potential in the z = 0 plane for a case directory or a preset.

Usage:
    python demo_potential.py <case_dir | preset> [--show] [--extent H]

Example:
    python demo_potential.py ../cases/three_masses
    python demo_potential.py dipole --show
"""

import sys
import argparse
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.io import CaseLoader, available_presets, load_preset
from physics import DEFAULT_CONSTANTS
from visualization.plotters import PotentialPlotter


def main():
    parser = argparse.ArgumentParser(description="Potential contours on the z=0 plane")
    parser.add_argument("target", type=str, help="Case directory or preset name")
    parser.add_argument("--show", action="store_true", help="Display plot interactively")
    parser.add_argument("--extent", type=float, default=8.0, help="Slice half-width (scene units)")
    args = parser.parse_args()

    if args.target in available_presets():
        scene = load_preset(args.target)
        constants = DEFAULT_CONSTANTS
        out_dir = Path(__file__).parent / "out"
    else:
        case = CaseLoader.load_case(Path(args.target).resolve())
        scene = case.scene
        constants = case.constants
        out_dir = case.output_dir

    print(f"Scene: {scene.name} ({scene.mode.value}, {scene.num_sources} sources)")

    plotter = PotentialPlotter(scene, constants)
    save_path = None
    if not args.show:
        out_dir.mkdir(parents=True, exist_ok=True)
        save_path = str(out_dir / f"{scene.name}_potential.png")
    plotter.plot(half_extent=args.extent, save_path=save_path)


if __name__ == "__main__":
    main()
