"""
Field line tracing by fixed-step Euler integration.

Seeds are spread over a sphere shell with a Fibonacci (golden-angle)
distribution. From each seed the line is integrated forward along the field
and backward against it, then assembled into one continuous polyline:

    reverse(backward) + [seed] + forward

All seeds of a batch advance together, one vectorized field evaluation per
step. Each direction is bounded by max_steps, so tracing always terminates.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple
import numpy as np
from numpy.typing import NDArray
from scipy.spatial import cKDTree

from core.config.schemas import TracingConfig
from core.geometry.primitives import VectorLike, as_array, as_point_array
from core.geometry.sources import FieldMode, FieldSource
from physics.constants import PhysicsConstants, DEFAULT_CONSTANTS
from physics.field import source_arrays, source_contributions, distance_to_nearest_source

logger = logging.getLogger(__name__)

FORWARD = 1
BACKWARD = -1

GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))


class LineState(str, Enum):
    """Lifecycle of a candidate field line."""
    SEEDED = "seeded"
    TRACING_FORWARD = "tracing_forward"
    TRACING_BACKWARD = "tracing_backward"
    ASSEMBLED = "assembled"
    DISCARDED = "discarded"


class TraceTermination(str, Enum):
    """Why integration in one direction stopped."""
    BOUNDS = "bounds"
    SOURCE = "source"
    FIELD_VANISHED = "field_vanished"
    MAX_STEPS = "max_steps"


@dataclass(eq=False)
class FieldLine:
    """
    One continuous integrated curve.

    Attributes:
        points: (n, 3) ordered positions [scene units]
        phase_offset: Random offset in [0, 1) for animated rendering
    """
    points: NDArray[np.float64]
    phase_offset: float = 0.0

    @property
    def num_points(self) -> int:
        return len(self.points)

    @property
    def length(self) -> float:
        """Polyline arc length [scene units]."""
        if len(self.points) < 2:
            return 0.0
        return float(np.sum(np.linalg.norm(np.diff(self.points, axis=0), axis=1)))

    def __repr__(self) -> str:
        return f"FieldLine(points={self.num_points}, phase={self.phase_offset:.3f})"


@dataclass
class TraceStats:
    """Counters for one tracing pass (for logging and diagnostics)."""
    seeds: int = 0
    assembled: int = 0
    discarded: int = 0
    terminations: dict = field(default_factory=dict)
    states: dict = field(default_factory=dict)

    def record(self, reasons: Sequence[TraceTermination]):
        for reason in reasons:
            self.terminations[reason] = self.terminations.get(reason, 0) + 1

    def enter(self, state: LineState, count: int = 1):
        """Count lines entering a state."""
        self.states[state] = self.states.get(state, 0) + count


@dataclass
class TraceResult:
    """Assembled lines plus the statistics of the pass that produced them."""
    lines: List[FieldLine]
    stats: TraceStats
    states: List[LineState] = field(default_factory=list)


def generate_seeds(sources: Sequence[FieldSource],
                   count: int,
                   radius: float = 6.0,
                   exclusion_radius: float = 0.15) -> NDArray[np.float64]:
    """
    Fibonacci-sphere seed points on a shell centred at the origin.

    Seeds are approximately uniform in solid angle. Seeds landing within the
    exclusion radius of any source are dropped.

    Returns:
        (n, 3) seed positions [scene units], n <= count
    """
    if count <= 0:
        return np.zeros((0, 3))

    i = np.arange(count, dtype=np.float64)
    if count == 1:
        y = np.ones(1)
    else:
        y = 1.0 - (i / (count - 1)) * 2.0
    ring = np.sqrt(np.maximum(1.0 - y * y, 0.0))
    theta = GOLDEN_ANGLE * i

    seeds = radius * np.column_stack([np.cos(theta) * ring, y, np.sin(theta) * ring])

    if len(sources) > 0:
        seeds = seeds[distance_to_nearest_source(seeds, sources) >= exclusion_radius]
    return seeds


class LineTracer:
    """
    Traces field lines for a source configuration.

    Usage:
        tracer = LineTracer(TracingConfig(seed_count=120, random_seed=0))
        lines = tracer.trace_field_lines(scene.sources, scene.mode)
    """

    def __init__(self,
                 config: Optional[TracingConfig] = None,
                 constants: PhysicsConstants = DEFAULT_CONSTANTS):
        self.config = config if config is not None else TracingConfig()
        self.constants = constants

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------

    def generate_seeds(self,
                       sources: Sequence[FieldSource],
                       count: Optional[int] = None) -> NDArray[np.float64]:
        """Seeds on the configured shell (count defaults to config.seed_count)."""
        return generate_seeds(
            sources,
            self.config.seed_count if count is None else count,
            radius=self.config.seed_radius,
            exclusion_radius=self.config.exclusion_radius,
        )

    # -------------------------------------------------------------------------
    # Integration
    # -------------------------------------------------------------------------

    def _integrate(self,
                   starts: NDArray[np.float64],
                   sources: Sequence[FieldSource],
                   mode: FieldMode,
                   sign: int) -> Tuple[List[NDArray[np.float64]], List[TraceTermination]]:
        """
        Integrate every start point in one direction.

        Returns:
            (paths, reasons): checked positions per start (start excluded) and
            the termination reason of each
        """
        if sign not in (FORWARD, BACKWARD):
            raise ValueError(f"sign must be +1 or -1, got {sign}")

        cfg = self.config
        n_starts = len(starts)
        pos = np.array(starts, dtype=np.float64, copy=True)
        history = np.empty((cfg.max_steps, n_starts, 3), dtype=np.float64)
        lengths = np.zeros(n_starts, dtype=np.int64)
        taken = np.zeros(n_starts, dtype=np.int64)
        active = np.ones(n_starts, dtype=bool)
        reasons = [TraceTermination.MAX_STEPS] * n_starts

        if len(sources) == 0:
            return [np.zeros((0, 3)) for _ in range(n_starts)], [TraceTermination.FIELD_VANISHED] * n_starts

        scale = self.constants.meters_per_scene_unit
        sources_m, values = source_arrays(sources, self.constants)
        tree = cKDTree(sources_m / scale)
        step = sign * cfg.step_size

        # One extra pass so the position reached by the last step is checked
        for _ in range(cfg.max_steps + 1):
            idx = np.flatnonzero(active)
            if idx.size == 0:
                break

            current = pos[idx]
            outside = np.any(np.abs(current) > cfg.bounds, axis=1)
            nearest, _ = tree.query(current, k=1)
            near_source = (nearest < cfg.exclusion_radius) & ~outside

            for j in idx[outside]:
                reasons[j] = TraceTermination.BOUNDS
            for j in idx[near_source]:
                reasons[j] = TraceTermination.SOURCE
            active[idx[outside | near_source]] = False

            idx = idx[~(outside | near_source)]
            if idx.size == 0:
                break

            fields = source_contributions(pos[idx] * scale, sources_m, values, mode, self.constants).sum(axis=1)
            magnitude = np.linalg.norm(fields, axis=1)
            vanished = ~(magnitude >= cfg.min_field) | (magnitude == 0)

            for j in idx[vanished]:
                reasons[j] = TraceTermination.FIELD_VANISHED
            active[idx[vanished]] = False

            # Only positions that passed every check are kept; the start is not
            accepted = idx[~vanished]
            stepped = accepted[taken[accepted] > 0]
            history[lengths[stepped], stepped] = pos[stepped]
            lengths[stepped] += 1

            exhausted = taken[accepted] >= cfg.max_steps
            active[accepted[exhausted]] = False

            moving = accepted[~exhausted]
            if moving.size == 0:
                break

            direction = fields[~vanished][~exhausted] / magnitude[~vanished][~exhausted, None]
            pos[moving] += direction * step
            taken[moving] += 1

        paths = [history[:lengths[j], j].copy() for j in range(n_starts)]
        return paths, reasons

    def trace_direction(self,
                        start: VectorLike,
                        sources: Sequence[FieldSource],
                        mode: FieldMode,
                        sign: int = FORWARD) -> NDArray[np.float64]:
        """
        Integrate from a single start point in one direction.

        Stops on leaving the bounding box, entering an exclusion radius, a
        vanishing field, or after max_steps steps.

        Returns:
            (n, 3) visited positions, the start point itself excluded
        """
        paths, _ = self._integrate(as_array(start)[None, :], sources, mode, sign)
        return paths[0]

    def _assemble(self,
                  seed: NDArray[np.float64],
                  backward: NDArray[np.float64],
                  forward: NDArray[np.float64]) -> Optional[NDArray[np.float64]]:
        line = np.vstack([backward[::-1], seed[None, :], forward])
        if len(line) < self.config.min_points:
            return None
        return line

    def trace_field_line(self,
                         seed: VectorLike,
                         sources: Sequence[FieldSource],
                         mode: FieldMode) -> NDArray[np.float64]:
        """
        Trace one line through a seed in both directions.

        Returns:
            (n, 3) assembled polyline, or an empty (0, 3) array if the seed lies
            inside an exclusion radius or the line is shorter than min_points
        """
        seed_arr = as_array(seed)
        if len(sources) > 0:
            if distance_to_nearest_source(seed_arr[None, :], sources)[0] < self.config.exclusion_radius:
                return np.zeros((0, 3))

        forward = self.trace_direction(seed_arr, sources, mode, FORWARD)
        backward = self.trace_direction(seed_arr, sources, mode, BACKWARD)
        line = self._assemble(seed_arr, backward, forward)
        return np.zeros((0, 3)) if line is None else line

    def trace(self,
              sources: Sequence[FieldSource],
              mode: FieldMode,
              count: Optional[int] = None,
              seeds: Optional[NDArray] = None,
              rng: Optional[np.random.Generator] = None) -> TraceResult:
        """
        Seed, integrate and assemble a full set of field lines.

        Args:
            sources: Point sources
            mode: Field mode
            count: Seed count (defaults to config.seed_count)
            seeds: Explicit seed points (overrides sphere seeding)
            rng: Generator for phase offsets (defaults to config.random_seed)
        """
        stats = TraceStats()
        if len(sources) == 0:
            return TraceResult(lines=[], stats=stats)

        if seeds is None:
            seed_pts = self.generate_seeds(sources, count)
        else:
            seed_pts = as_point_array(seeds)
            if len(seed_pts) > 0:
                clear = distance_to_nearest_source(seed_pts, sources) >= self.config.exclusion_radius
                seed_pts = seed_pts[clear]
        if rng is None:
            rng = np.random.default_rng(self.config.random_seed)

        n_seeds = len(seed_pts)
        stats.seeds = n_seeds
        states = [LineState.SEEDED] * n_seeds
        stats.enter(LineState.SEEDED, n_seeds)

        paths = {}
        for state, sign in ((LineState.TRACING_FORWARD, FORWARD), (LineState.TRACING_BACKWARD, BACKWARD)):
            states = [state] * n_seeds
            stats.enter(state, n_seeds)
            logger.debug("%s: %d seeds", state.value, n_seeds)
            paths[sign], reasons = self._integrate(seed_pts, sources, mode, sign)
            stats.record(reasons)
        forward, backward = paths[FORWARD], paths[BACKWARD]

        lines: List[FieldLine] = []
        for i, seed in enumerate(seed_pts):
            points = self._assemble(seed, backward[i], forward[i])
            if points is None:
                states[i] = LineState.DISCARDED
                stats.discarded += 1
            else:
                states[i] = LineState.ASSEMBLED
                stats.assembled += 1
                lines.append(FieldLine(points=points, phase_offset=float(rng.random())))
            stats.enter(states[i])

        logger.debug(
            "Traced %d lines from %d seeds (%d discarded); states %s",
            stats.assembled, stats.seeds, stats.discarded,
            {state.value: n for state, n in stats.states.items()}
        )
        return TraceResult(lines=lines, stats=stats, states=states)

    def trace_field_lines(self,
                          sources: Sequence[FieldSource],
                          mode: FieldMode,
                          count: Optional[int] = None,
                          rng: Optional[np.random.Generator] = None) -> List[FieldLine]:
        """Assembled field lines for the configured seed shell."""
        return self.trace(sources, mode, count=count, rng=rng).lines
