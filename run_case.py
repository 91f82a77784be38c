"""
Run a field case defined by a YAML config file.
"""

import sys
import argparse
import logging
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from pydantic import ValidationError

from core.io import Case, CaseLoader
from visualization import FieldScene, Visualizer, snapshot_summary
from visualization.plotters import PotentialPlotter


def main():
    parser = argparse.ArgumentParser(description="Run Inverse-Square Field Case")
    parser.add_argument("case_file", type=str, help="Path to YAML case file (or case directory)")
    parser.add_argument("--show", action="store_true", help="Display plot interactively")
    parser.add_argument("--potential", action="store_true", help="Also save a z=0 potential contour plot")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s: %(message)s")

    case_path = Path(args.case_file).resolve()
    if case_path.is_dir():
        case_path = case_path / "case.yaml"
    if not case_path.exists():
        print(f"Error: Case file not found: {case_path}")
        sys.exit(1)

    print(f"Loading case: {case_path.name}")
    try:
        scene, config = CaseLoader.load(case_path)
    except (ValidationError, KeyError, ValueError) as e:
        print(f"Error loading case: {e}")
        sys.exit(1)

    case = Case(scene=scene, config=config, case_dir=case_path.parent)
    print(f"Case '{case.name}' loaded successfully.")

    # Compute every kernel output once
    print("Computing field...")
    field = FieldScene.from_case(case)
    snapshot = field.compute(case.scene)

    for line in snapshot_summary(snapshot):
        print(line)

    if case.visualization.enabled:
        print("Generating visualization...")
        viz = Visualizer(
            output_dir=case.output_dir,
            protect_overwrite=config.output.protect_overwrite,
            figsize=case.visualization.figsize,
            half_extent=case.sampling.half_extent,
        )
        viz.plot_snapshot(snapshot, case.visualization)
        viz.finalize(save=f"{case_path.parent.name}_field.png", show=args.show)

        if args.potential:
            plotter = PotentialPlotter(case.scene, case.constants)
            save_path = viz.output.get_path(f"{case_path.parent.name}_potential.png")
            plotter.plot(half_extent=case.sampling.half_extent, save_path=str(save_path))

    print("Done.")


if __name__ == "__main__":
    main()
