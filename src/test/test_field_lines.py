"""
Test field line seeding, integration, termination and assembly.
"""

import pytest
import numpy as np
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import TracingConfig
from core.geometry import FieldMode, FieldSource
from core.io import load_preset
from visualization.field_lines import (
    LineTracer,
    LineState,
    FieldLine,
    TraceTermination,
    generate_seeds,
    FORWARD,
    BACKWARD,
)


@pytest.fixture
def single_source():
    return [FieldSource("q", (0, 0, 0), 2.0)]


class TestSeeds:
    """Fibonacci sphere seeding."""

    def test_seeds_on_sphere(self):
        seeds = generate_seeds([], 10, radius=6.0)
        assert seeds.shape == (10, 3)
        np.testing.assert_allclose(np.linalg.norm(seeds, axis=1), 6.0)

    def test_poles(self):
        seeds = generate_seeds([], 10, radius=6.0)
        np.testing.assert_allclose(seeds[0], [0.0, 6.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(seeds[-1, 1], -6.0)

    def test_single_seed_at_top(self):
        seeds = generate_seeds([], 1, radius=6.0)
        np.testing.assert_allclose(seeds, [[0.0, 6.0, 0.0]], atol=1e-12)

    def test_zero_count(self):
        assert generate_seeds([], 0).shape == (0, 3)

    def test_seed_inside_exclusion_dropped(self):
        sources = [FieldSource("q", (0, 6, 0), 1.0)]
        seeds = generate_seeds(sources, 10, radius=6.0, exclusion_radius=0.15)
        assert len(seeds) == 9


class TestTraceDirection:
    """Single-direction integration."""

    def test_forward_moves_along_field(self, single_source):
        tracer = LineTracer()
        path = tracer.trace_direction((1, 0, 0), single_source, FieldMode.ELECTRIC, FORWARD)

        # Start point is not recorded
        assert path[0, 0] == pytest.approx(1.05)
        assert np.all(np.diff(path[:, 0]) > 0)
        assert len(path) <= tracer.config.max_steps
        assert abs(path[-1, 0]) <= tracer.config.bounds

    def test_backward_stops_short_of_source(self, single_source):
        tracer = LineTracer()
        path = tracer.trace_direction((1, 0, 0), single_source, FieldMode.ELECTRIC, BACKWARD)

        assert 16 <= len(path) <= 17
        assert np.linalg.norm(path[-1]) >= tracer.config.exclusion_radius

    def test_no_point_inside_exclusion(self, single_source):
        tracer = LineTracer()
        line = tracer.trace_field_line((0, 3, 0), single_source, FieldMode.ELECTRIC)

        assert len(line) > 0
        assert np.min(np.linalg.norm(line, axis=1)) >= tracer.config.exclusion_radius

    def test_no_point_outside_bounds(self, single_source):
        tracer = LineTracer()
        path = tracer.trace_direction((1, 0, 0), single_source, FieldMode.ELECTRIC, FORWARD)
        assert np.all(np.abs(path) <= tracer.config.bounds)

    def test_max_steps_bounds_integration(self, single_source):
        tracer = LineTracer(TracingConfig(max_steps=10))
        path = tracer.trace_direction((1, 0, 0), single_source, FieldMode.ELECTRIC, FORWARD)
        assert len(path) == 10

    def test_fixed_step_length(self, single_source):
        tracer = LineTracer()
        path = tracer.trace_direction((0, 2, 1), single_source, FieldMode.ELECTRIC, FORWARD)
        steps = np.linalg.norm(np.diff(path, axis=0), axis=1)
        np.testing.assert_allclose(steps, 0.05, rtol=1e-9)

    def test_invalid_sign(self, single_source):
        with pytest.raises(ValueError):
            LineTracer().trace_direction((1, 0, 0), single_source, FieldMode.ELECTRIC, 0)

    def test_no_sources(self):
        path = LineTracer().trace_direction((1, 0, 0), [], FieldMode.ELECTRIC)
        assert path.shape == (0, 3)


class TestTraceFieldLine:
    """Bidirectional assembly of one line."""

    def test_assembly_contains_seed(self, single_source):
        tracer = LineTracer()
        seed = np.array([0.0, 3.0, 0.0])
        line = tracer.trace_field_line(seed, single_source, FieldMode.ELECTRIC)

        backward = tracer.trace_direction(seed, single_source, FieldMode.ELECTRIC, BACKWARD)
        forward = tracer.trace_direction(seed, single_source, FieldMode.ELECTRIC, FORWARD)

        assert len(line) == len(backward) + 1 + len(forward)
        np.testing.assert_allclose(line[len(backward)], seed)
        np.testing.assert_allclose(line[0], backward[-1])
        np.testing.assert_allclose(line[-1], forward[-1])

    def test_line_runs_from_source_outward(self, single_source):
        line = LineTracer().trace_field_line((0, 3, 0), single_source, FieldMode.ELECTRIC)
        assert np.linalg.norm(line[0]) < np.linalg.norm(line[-1])

    def test_seed_inside_exclusion(self, single_source):
        line = LineTracer().trace_field_line((0.05, 0, 0), single_source, FieldMode.ELECTRIC)
        assert line.shape == (0, 3)

    def test_short_line_discarded(self, single_source):
        tracer = LineTracer(TracingConfig(max_steps=5, min_points=20))
        line = tracer.trace_field_line((0, 3, 0), single_source, FieldMode.ELECTRIC)
        assert line.shape == (0, 3)


class TestTraceFieldLines:
    """Batch tracing."""

    def test_no_sources(self):
        assert LineTracer().trace_field_lines([], FieldMode.ELECTRIC) == []

    def test_dipole_lines(self):
        scene = load_preset("dipole")
        tracer = LineTracer(TracingConfig(seed_count=40, random_seed=0))
        lines = tracer.trace_field_lines(scene.sources, scene.mode)

        assert len(lines) > 0
        for line in lines:
            assert isinstance(line, FieldLine)
            assert line.num_points >= 20
            assert line.num_points <= 2 * 600 + 1
            assert 0.0 <= line.phase_offset < 1.0

    def test_batch_matches_single_line(self, single_source):
        tracer = LineTracer(TracingConfig(seed_count=8, random_seed=0))
        lines = tracer.trace_field_lines(single_source, FieldMode.ELECTRIC)
        seeds = tracer.generate_seeds(single_source)

        single = tracer.trace_field_line(seeds[3], single_source, FieldMode.ELECTRIC)
        np.testing.assert_allclose(lines[3].points, single)

    def test_phase_offsets_reproducible(self, single_source):
        config = TracingConfig(seed_count=12, random_seed=42)
        a = LineTracer(config).trace_field_lines(single_source, FieldMode.ELECTRIC)
        b = LineTracer(config).trace_field_lines(single_source, FieldMode.ELECTRIC)
        assert [l.phase_offset for l in a] == [l.phase_offset for l in b]

    def test_stats_and_states(self):
        scene = load_preset("two_like_charges")
        result = LineTracer(TracingConfig(seed_count=30, random_seed=0)).trace(scene.sources, scene.mode)

        stats = result.stats
        assert stats.assembled + stats.discarded == stats.seeds
        assert stats.assembled == len(result.lines)
        assert len(result.states) == stats.seeds
        assert set(result.states) <= {LineState.ASSEMBLED, LineState.DISCARDED}
        # Every seed passes through both tracing phases
        assert stats.states[LineState.SEEDED] == stats.seeds
        assert stats.states[LineState.TRACING_FORWARD] == stats.seeds
        assert stats.states[LineState.TRACING_BACKWARD] == stats.seeds
        assert stats.states.get(LineState.ASSEMBLED, 0) == stats.assembled
        assert stats.states.get(LineState.DISCARDED, 0) == stats.discarded
        # Two directions per seed
        assert sum(stats.terminations.values()) == 2 * stats.seeds

    def test_gravity_lines_end_at_mass(self):
        scene = load_preset("planet_test_mass")
        result = LineTracer(TracingConfig(seed_count=10, random_seed=0)).trace(scene.sources, scene.mode)

        assert TraceTermination.SOURCE in result.stats.terminations
        for line in result.lines:
            # Field points inward, so the forward end is at the mass
            end = np.linalg.norm(line.points[-1])
            assert 0.15 - 1e-12 <= end < 0.15 + 0.05 + 1e-9

    def test_dipole_lines_clear_of_sources(self):
        scene = load_preset("dipole")
        tracer = LineTracer(TracingConfig(seed_count=50, random_seed=0))
        lines = tracer.trace_field_lines(scene.sources, scene.mode)

        assert len(lines) > 0
        for line in lines:
            gaps = np.linalg.norm(line.points[:, None, :] - scene.positions[None, :, :], axis=2)
            assert gaps.min() >= tracer.config.exclusion_radius - 1e-12
