"""
Full field computation for a scene snapshot.
Runs sampling, tracing, equilibrium and probe evaluation together, with
caching so repeated renders of an unchanged scene reuse the result.
"""

from __future__ import annotations
import itertools
import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from core.config.schemas import SamplingConfig, TracingConfig, EquilibriumConfig
from core.geometry.primitives import Vector3
from core.geometry.scene import Scene
from core.geometry.sources import FieldMode
from physics.constants import PhysicsConstants, DEFAULT_CONSTANTS
from physics.equilibrium import EquilibriumSolver, EquilibriumResult
from physics.field import force_on_probe
from physics.readout import ProbeReadout, compute_probe_readout, format_number
from .vectors import VectorSampler, SampleResult
from .field_lines import LineTracer, FieldLine, TraceStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldSnapshot:
    """
    Immutable result of one recompute.

    Attributes:
        revision: Monotonic tag of the request that produced this snapshot
        scene: Scene the snapshot was computed from
        samples: Arrow samples
        lines: Assembled field lines
        equilibrium: Zero-field search result
        probe_force: Force on the probe [N], None without a probe
        readout: Probe readout, None without a probe or sources
        trace_stats: Tracing counters
    """
    revision: int
    scene: Scene
    samples: List[SampleResult]
    lines: List[FieldLine]
    equilibrium: EquilibriumResult
    probe_force: Optional[Vector3] = None
    readout: Optional[ProbeReadout] = None
    trace_stats: Optional[TraceStats] = None

    @property
    def mode(self) -> FieldMode:
        return self.scene.mode


class SnapshotBuffer:
    """
    Holds the most recent snapshot; stale results are rejected.

    A result is accepted only if its revision is newer than the one held, so
    an out-of-order completion never overwrites a later state.
    """

    def __init__(self):
        self._current: Optional[FieldSnapshot] = None

    @property
    def current(self) -> Optional[FieldSnapshot]:
        return self._current

    def offer(self, snapshot: FieldSnapshot) -> bool:
        """Store the snapshot if it is newer; returns whether it was accepted."""
        if self._current is not None and snapshot.revision <= self._current.revision:
            logger.debug(
                "Dropping stale snapshot r%d (holding r%d)",
                snapshot.revision, self._current.revision
            )
            return False
        self._current = snapshot
        return True

    def clear(self):
        self._current = None


class FieldScene:
    """
    Computes and caches all field outputs for a scene.

    This class separates the expensive kernel work from rendering, allowing
    multiple plots to reuse the same computed snapshot.

    Usage:
        field = FieldScene(sampling=SamplingConfig(half_extent=6.0))
        snapshot = field.compute(scene)
        print(len(snapshot.samples), len(snapshot.lines))
    """

    def __init__(self,
                 sampling: Optional[SamplingConfig] = None,
                 tracing: Optional[TracingConfig] = None,
                 equilibrium: Optional[EquilibriumConfig] = None,
                 constants: PhysicsConstants = DEFAULT_CONSTANTS):
        self.constants = constants
        self.sampler = VectorSampler(sampling, constants)
        self.tracer = LineTracer(tracing, constants)
        self.solver = EquilibriumSolver(equilibrium, constants)

        self._revisions = itertools.count(1)
        self._scene: Optional[Scene] = None
        self._snapshot: Optional[FieldSnapshot] = None

    @classmethod
    def from_case(cls, case) -> "FieldScene":
        """Build from a loaded Case's kernel settings."""
        return cls(
            sampling=case.sampling,
            tracing=case.tracing,
            equilibrium=case.equilibrium,
            constants=case.constants,
        )

    def compute(self,
                scene: Scene,
                revision: Optional[int] = None,
                force: bool = False) -> FieldSnapshot:
        """
        Compute every field output for a scene (with caching).

        Args:
            scene: Snapshot to evaluate
            revision: Tag for last-write-wins ordering (auto-incremented if None)
            force: If True, recompute even if cached

        Returns:
            FieldSnapshot
        """
        if revision is None:
            revision = next(self._revisions)

        if not force and self._is_cached(scene):
            logger.debug("Using cached field snapshot for '%s'", scene.name)
            if self._snapshot.revision == revision:
                return self._snapshot
            return replace(self._snapshot, revision=revision)

        samples = self.sampler.compute(scene.sources, scene.mode)
        traced = self.tracer.trace(scene.sources, scene.mode)
        equilibrium = self.solver.solve(scene.sources, scene.mode)

        probe_force = None
        if scene.probe is not None:
            probe_force = force_on_probe(
                scene.probe.position, scene.probe.value, scene.mode, scene.sources, self.constants
            )

        snapshot = FieldSnapshot(
            revision=revision,
            scene=scene,
            samples=samples,
            lines=traced.lines,
            equilibrium=equilibrium,
            probe_force=probe_force,
            readout=compute_probe_readout(scene, self.constants),
            trace_stats=traced.stats,
        )

        self._scene = scene
        self._snapshot = snapshot

        logger.info(
            "Computed '%s' r%d: %d vectors, %d lines, equilibrium %s",
            scene.name, revision, len(samples), len(traced.lines), equilibrium.status.value
        )
        return snapshot

    def _is_cached(self, scene: Scene) -> bool:
        """Check if the given scene matches the cached computation."""
        return self._snapshot is not None and self._scene == scene

    def get_cached(self) -> Optional[FieldSnapshot]:
        """Return the cached snapshot, or None if nothing has been computed."""
        return self._snapshot

    def clear_cache(self):
        """Clear cached snapshot to free memory."""
        self._scene = None
        self._snapshot = None


def snapshot_summary(snapshot: FieldSnapshot) -> List[str]:
    """Human-readable summary lines for command-line reporting."""
    scene = snapshot.scene
    lines = [
        f"Scene: {scene.name} ({scene.mode.value}, {scene.num_sources} sources)",
        f"  Vectors: {len(snapshot.samples)}",
        f"  Field lines: {len(snapshot.lines)}",
    ]
    if snapshot.trace_stats is not None:
        lines.append(
            f"    seeds={snapshot.trace_stats.seeds}, discarded={snapshot.trace_stats.discarded}"
        )

    eq = snapshot.equilibrium
    if eq.position is not None:
        lines.append(
            f"  Equilibrium: {eq.status.value} at {eq.position} "
            f"(|E|={eq.residual:.3e}, {eq.iterations} iterations)"
        )
    else:
        lines.append(f"  Equilibrium: {eq.status.value}")

    readout = snapshot.readout
    if readout is not None:
        force = readout.force
        lines.append(
            f"  Probe: |F|={format_number(readout.force_magnitude)} N "
            f"({format_number(force.x)}, {format_number(force.y)}, {format_number(force.z)})"
        )
        lines.append(
            f"    nearest={readout.nearest_source.id}, r={format_number(readout.distance, 4)} m, "
            f"|E|={format_number(readout.field_magnitude)}, V={format_number(readout.potential)}"
        )
    return lines
