#!/usr/bin/env python3
"""
Demo: Equilibrium Search

Moves the second charge of a pair through a range of values and prints the
closed-form estimate next to the refined zero-field point, for both
refinement methods.

Usage:
    python demo_equilibrium.py
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import EquilibriumConfig
from core.geometry import Scene
from physics import EquilibriumSolver, field_at


def main():
    base = Scene(name="pair").add_source((-2.0, 0.0, 0.0), 4.0e-9, "q1")

    newton = EquilibriumSolver(EquilibriumConfig(method="newton"))
    gradient = EquilibriumSolver(EquilibriumConfig(method="gradient", max_iterations=50))

    print(f"{'q2 [C]':>10}  {'estimate x':>11}  {'newton x':>11}  {'status':>14}  "
          f"{'gradient x':>11}  {'status':>14}")

    for q2 in (4.0e-9, 1.0e-9, -1.0e-9, -4.0e-9, -9.0e-9):
        scene = base.add_source((2.0, 0.0, 0.0), q2, "q2")

        estimate = newton.estimate(scene.sources, scene.mode)
        n = newton.solve(scene.sources, scene.mode)
        g = gradient.solve(scene.sources, scene.mode)

        if estimate.position is None:
            print(f"{q2:>10.1e}  {'-':>11}  {'-':>11}  {n.status.value:>14}  "
                  f"{'-':>11}  {g.status.value:>14}")
            continue

        print(f"{q2:>10.1e}  {estimate.position.x:>11.6f}  {n.position.x:>11.6f}  "
              f"{n.status.value:>14}  {g.position.x:>11.6f}  {g.status.value:>14}")

        residual = field_at(n.position, scene.sources, scene.mode).magnitude()
        print(f"{'':>10}  |E| at newton point: {residual:.3e} N/C")


if __name__ == "__main__":
    main()
