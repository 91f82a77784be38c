"""
Test probe readout values and number formatting.
"""

import pytest
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.geometry import Scene
from core.io import load_preset
from physics import (
    COULOMB_CONSTANT,
    compute_probe_readout,
    format_number,
    format_latex,
    format_constant_latex,
)

K = COULOMB_CONSTANT


class TestProbeReadout:
    """Quantities behind the formula display."""

    def test_no_probe(self):
        scene = load_preset("dipole").without_probe()
        assert compute_probe_readout(scene) is None

    def test_no_sources(self):
        scene = Scene(name="empty").with_probe((0, 0, 0))
        assert compute_probe_readout(scene) is None

    def test_sample_problem(self):
        readout = compute_probe_readout(load_preset("sample_problem_1"))

        E1 = K * 3.3e-9 / 0.27 ** 2
        E2 = K * 1.0e-8 / 0.18 ** 2

        assert readout.nearest_source.value == -1.0e-8
        assert readout.distance == pytest.approx(0.18)
        assert readout.distance_squared == pytest.approx(0.18 ** 2)
        assert readout.field_magnitude == pytest.approx(E1 + E2, rel=1e-9)
        assert readout.source_field_magnitude == pytest.approx(E2, rel=1e-9)
        assert readout.force_magnitude == pytest.approx(2.0e-12 * (E1 + E2), rel=1e-9)
        assert readout.distance_between_sources == pytest.approx(0.45)

    def test_potentials(self):
        readout = compute_probe_readout(load_preset("sample_problem_1"))

        V = K * 3.3e-9 / 0.27 - K * 1.0e-8 / 0.18
        assert readout.potential == pytest.approx(V, rel=1e-9)
        assert readout.source_potential == pytest.approx(-K * 1.0e-8 / 0.18, rel=1e-9)
        # Probe sits at the origin
        assert readout.potential_difference == pytest.approx(0.0, abs=1e-6)

    def test_source_distances(self):
        readout = compute_probe_readout(load_preset("sample_problem_1"))
        distances = [d.distance for d in readout.source_distances]
        assert distances == pytest.approx([0.27, 0.18])

    def test_single_source_has_no_pair_distance(self):
        readout = compute_probe_readout(load_preset("single_source"))
        assert readout.distance_between_sources is None
        assert readout.distance == pytest.approx(0.2)


class TestFormatting:
    """Display formatting."""

    def test_fixed(self):
        assert format_number(3.14159) == "3.14"
        assert format_number(0.0) == "0.00"
        assert format_number(-12.5, 1) == "-12.5"

    def test_scientific(self):
        assert format_number(8.99e9) == "8.99e+9"
        assert format_number(2.0e-12) == "2.00e-12"
        assert format_number(-1234567.0) == "-1.23e+6"

    def test_latex(self):
        assert format_latex(0.0) == "0"
        assert format_latex(8.99e9) == "\\left(8.99 \\times 10^{9}\\right)"
        assert format_latex(3.3e-9, brackets=False) == "3.30 \\times 10^{-9}"
        assert format_latex(0.5) == "0.50"

    def test_constant_latex(self):
        assert format_constant_latex(8.99e9) == "\\left(8.99 \\times 10^{9}\\right)"
        assert format_constant_latex(6.674e-11) == "\\left(6.67 \\times 10^{-11}\\right)"
        assert format_constant_latex(0.5) == "0.5"
        assert format_constant_latex(100.0) == "100"
