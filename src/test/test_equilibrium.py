"""
Test the two-charge equilibrium solver: closed forms, refinement and statuses.
"""

import math
import pytest
import numpy as np
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import EquilibriumConfig
from core.geometry import FieldMode, FieldSource, Scene
from core.io import load_preset
from physics import EquilibriumSolver, EquilibriumStatus, field_at


def pair(q1, x1, q2, x2):
    return [FieldSource("q1", (x1, 0, 0), q1), FieldSource("q2", (x2, 0, 0), q2)]


class TestClosedForm:
    """Analytic zero-field points."""

    def test_equal_like_charges_at_midpoint(self):
        scene = load_preset("two_like_charges")
        result = EquilibriumSolver().solve(scene.sources, scene.mode)

        assert result.status is EquilibriumStatus.FOUND
        assert result.found
        np.testing.assert_allclose(result.position.to_array(), [0.0, 0.0, 0.0], atol=1e-9)
        assert result.relative_residual <= 1e-9
        assert result.iterations == 0

    def test_unequal_like_charges(self):
        # r1 = d sqrt(q1) / (sqrt(q1) + sqrt(q2)) = 3 * 1 / 3
        result = EquilibriumSolver().solve(pair(1e-9, 0.0, 4e-9, 3.0), FieldMode.ELECTRIC)

        assert result.found
        np.testing.assert_allclose(result.position.to_array(), [1.0, 0.0, 0.0], atol=1e-9)

    def test_opposite_charges_beyond_weaker(self):
        # x = d sqrt(1) / (sqrt(4) - sqrt(1)) = d beyond q2
        result = EquilibriumSolver().solve(pair(4e-9, 0.0, -1e-9, 1.0), FieldMode.ELECTRIC)

        assert result.found
        np.testing.assert_allclose(result.position.to_array(), [2.0, 0.0, 0.0], atol=1e-9)

    def test_opposite_charges_weaker_first(self):
        result = EquilibriumSolver().solve(pair(-1e-9, 0.0, 4e-9, 1.0), FieldMode.ELECTRIC)

        assert result.found
        np.testing.assert_allclose(result.position.to_array(), [-1.0, 0.0, 0.0], atol=1e-9)

    def test_sample_problem(self):
        scene = load_preset("sample_problem_1")
        result = EquilibriumSolver().solve(scene.sources, scene.mode)

        a_weak = math.sqrt(3.3e-9)
        a_strong = math.sqrt(1.0e-8)
        x = a_weak * 4.5 / (a_strong - a_weak)

        assert result.found
        assert result.position.x == pytest.approx(-2.7 - x, rel=1e-9)

        E = field_at(result.position, scene.sources, scene.mode)
        E1 = field_at(result.position, scene.sources[:1], scene.mode)
        assert E.magnitude() < 1e-6 * E1.magnitude()

    def test_off_axis_pair(self):
        sources = [FieldSource("a", (1, 1, 1), 2e-9), FieldSource("b", (3, 3, 3), 2e-9)]
        result = EquilibriumSolver().solve(sources, FieldMode.ELECTRIC)

        assert result.found
        np.testing.assert_allclose(result.position.to_array(), [2.0, 2.0, 2.0], atol=1e-9)


class TestDegenerateCases:
    """Configurations mapped to status values."""

    def test_equal_magnitude_opposite_pair(self):
        scene = load_preset("dipole")
        result = EquilibriumSolver().solve(scene.sources, scene.mode)

        assert result.status is EquilibriumStatus.NO_EQUILIBRIUM
        assert result.position is None
        assert not result.found

    def test_coincident_sources(self):
        result = EquilibriumSolver().solve(pair(1e-9, 0.0, 2e-9, 0.05), FieldMode.ELECTRIC)
        assert result.status is EquilibriumStatus.NO_EQUILIBRIUM

    def test_zero_valued_source(self):
        result = EquilibriumSolver().solve(pair(1e-9, 0.0, 0.0, 2.0), FieldMode.ELECTRIC)
        assert result.status is EquilibriumStatus.NO_EQUILIBRIUM

    @pytest.mark.parametrize("count", [0, 1, 3])
    def test_wrong_source_count(self, count):
        sources = [FieldSource(f"s{i}", (i, 0, 0), 1e-9) for i in range(count)]
        result = EquilibriumSolver().solve(sources, FieldMode.ELECTRIC)
        assert result.status is EquilibriumStatus.UNSUPPORTED

    def test_gravity_unsupported(self):
        result = EquilibriumSolver().solve(pair(10.0, -1.0, 10.0, 1.0), FieldMode.GRAVITY)
        assert result.status is EquilibriumStatus.UNSUPPORTED
        assert result.position is None


class TestRefinement:
    """Iterative correction from a start position."""

    def test_newton_converges_from_offset_start(self):
        sources = pair(1e-9, -1.0, 1e-9, 1.0)
        result = EquilibriumSolver().refine(sources, (0.3, 0.0, 0.0))

        assert result.status is EquilibriumStatus.FOUND
        assert result.iterations >= 1
        assert result.iterations <= 10
        assert abs(result.position.x) < 1e-6

    def test_budget_exhausted(self):
        sources = pair(1e-9, -1.0, 1e-9, 1.0)
        solver = EquilibriumSolver(EquilibriumConfig(max_iterations=0))
        result = solver.refine(sources, (0.3, 0.0, 0.0))

        assert result.status is EquilibriumStatus.NON_CONVERGED
        assert result.position.x == pytest.approx(0.3)
        assert result.iterations == 0

    def test_best_estimate_is_kept(self):
        sources = pair(1e-9, -1.0, 1e-9, 1.0)
        start = EquilibriumSolver(EquilibriumConfig(max_iterations=0)).refine(sources, (0.3, 0.0, 0.0))

        solver = EquilibriumSolver(EquilibriumConfig(method="gradient", max_iterations=3))
        result = solver.refine(sources, (0.3, 0.0, 0.0))

        assert result.status is EquilibriumStatus.NON_CONVERGED
        assert result.iterations == 3
        assert result.relative_residual <= start.relative_residual

    def test_gradient_from_exact_estimate(self):
        scene = load_preset("two_like_charges")
        solver = EquilibriumSolver(EquilibriumConfig(method="gradient"))
        result = solver.solve(scene.sources, scene.mode)

        assert result.found
        assert result.iterations == 0

    def test_estimate_skips_refinement(self):
        scene = Scene(name="p").add_source((0, 0, 0), 1e-9).add_source((3, 0, 0), 4e-9)
        estimate = EquilibriumSolver().estimate(scene.sources, scene.mode)

        assert estimate.status is EquilibriumStatus.FOUND
        assert math.isnan(estimate.residual)
        assert estimate.position.x == pytest.approx(1.0)
