"""
Zero-field (equilibrium) point for a pair of point charges.

The estimate comes from the closed-form 1D solution along the line through
both charges and is then refined iteratively:

    like signs:      r1 = d √|q1| / (√|q1| + √|q2|)        (between the charges)
    opposite signs:  x  = d √|q_weak| / (√|q_strong| - √|q_weak|)
                     (outside the segment, beyond the weaker charge)

Only two-charge electric configurations are handled. Everything else maps to
a status value; the solver never raises for degenerate physics.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple
import numpy as np
from numpy.typing import NDArray

from core.config.schemas import EquilibriumConfig
from core.geometry.primitives import Vector3, VectorLike, as_array
from core.geometry.sources import FieldMode, FieldSource
from .constants import PhysicsConstants, DEFAULT_CONSTANTS
from .field import source_arrays, source_contributions

logger = logging.getLogger(__name__)


class EquilibriumStatus(str, Enum):
    FOUND = "found"
    NON_CONVERGED = "non_converged"
    UNSUPPORTED = "unsupported"
    NO_EQUILIBRIUM = "no_equilibrium"


@dataclass(frozen=True)
class EquilibriumResult:
    """
    Outcome of an equilibrium search.

    Attributes:
        status: Search outcome
        position: Best estimate [scene units], None unless FOUND or NON_CONVERGED
        residual: |E_net| at the position [N/C]
        relative_residual: |E_net| / (|E1| + |E2|) at the position
        iterations: Refinement steps taken
    """
    status: EquilibriumStatus
    position: Optional[Vector3] = None
    residual: float = math.nan
    relative_residual: float = math.nan
    iterations: int = 0

    @property
    def found(self) -> bool:
        return self.status is EquilibriumStatus.FOUND

    @property
    def has_position(self) -> bool:
        return self.position is not None

    @classmethod
    def unsupported(cls) -> "EquilibriumResult":
        return cls(status=EquilibriumStatus.UNSUPPORTED)

    @classmethod
    def none(cls) -> "EquilibriumResult":
        return cls(status=EquilibriumStatus.NO_EQUILIBRIUM)


class EquilibriumSolver:
    """
    Locates the point where the net electric field of two charges vanishes.

    Usage:
        solver = EquilibriumSolver(EquilibriumConfig(tolerance=1e-12))
        result = solver.solve(scene.sources, scene.mode)
        if result.found:
            print(result.position)
    """

    def __init__(self,
                 config: Optional[EquilibriumConfig] = None,
                 constants: PhysicsConstants = DEFAULT_CONSTANTS):
        self.config = config if config is not None else EquilibriumConfig()
        self.constants = constants

    def _supported(self, sources: Sequence[FieldSource], mode: FieldMode) -> bool:
        return FieldMode(mode) is FieldMode.ELECTRIC and len(sources) == 2

    def estimate(self, sources: Sequence[FieldSource], mode: FieldMode) -> EquilibriumResult:
        """
        Closed-form zero-field point, without refinement.

        Returns:
            Result with status FOUND and the analytic position (residual is
            not evaluated), or UNSUPPORTED / NO_EQUILIBRIUM
        """
        if not self._supported(sources, mode):
            return EquilibriumResult.unsupported()

        s1, s2 = sources
        q1, q2 = s1.value, s2.value
        if q1 == 0.0 or q2 == 0.0:
            return EquilibriumResult.none()

        p1 = s1.position.to_array()
        p2 = s2.position.to_array()
        d = float(np.linalg.norm(p2 - p1))
        if d < self.constants.min_distance:
            return EquilibriumResult.none()

        a1 = math.sqrt(abs(q1))
        a2 = math.sqrt(abs(q2))
        axis = (p2 - p1) / d

        if (q1 > 0) == (q2 > 0):
            r1 = d * a1 / (a1 + a2)
            point = p1 + axis * r1
        else:
            if math.isclose(a1, a2, rel_tol=1e-12):
                return EquilibriumResult.none()
            if a1 < a2:
                weak, away, a_weak, a_strong = p1, -axis, a1, a2
            else:
                weak, away, a_weak, a_strong = p2, axis, a2, a1
            point = weak + away * (a_weak * d / (a_strong - a_weak))

        return EquilibriumResult(status=EquilibriumStatus.FOUND, position=Vector3.from_array(point))

    def _residual(self,
                  point_m: NDArray,
                  sources_m: NDArray,
                  values: NDArray) -> Tuple[NDArray, float, float]:
        """Net field, |E_net| and |E_net| / (|E1| + |E2|) at a point in metres."""
        contrib = source_contributions(point_m[None, :], sources_m, values,
                                       FieldMode.ELECTRIC, self.constants)[0]
        net = contrib.sum(axis=0)
        residual = float(np.linalg.norm(net))
        scale = float(np.sum(np.linalg.norm(contrib, axis=1)))
        relative = residual / scale if scale > 0 else math.inf
        return net, residual, relative

    def _newton_step(self,
                     point_m: NDArray,
                     net: NDArray,
                     sources_m: NDArray,
                     values: NDArray) -> Optional[NDArray]:
        """One Newton update of the axial field component along the source axis."""
        origin = sources_m[0]
        d = float(np.linalg.norm(sources_m[1] - origin))
        axis = (sources_m[1] - origin) / d

        s = float(np.dot(point_m - origin, axis))
        s_sources = np.array([0.0, d])
        r = np.maximum(np.abs(s - s_sources), self.constants.min_distance_m)

        f = float(np.dot(net, axis))
        df = float(np.sum(-2.0 * self.constants.coulomb * values / r ** 3))
        if df == 0.0 or not math.isfinite(df):
            return None
        return origin + axis * (s - f / df)

    def refine(self,
               sources: Sequence[FieldSource],
               start: VectorLike) -> EquilibriumResult:
        """
        Iteratively drive the net field toward zero from a start position.

        Stops as soon as the relative residual is within tolerance, or after
        max_iterations corrections. The lowest-residual point visited is
        returned; FOUND if it meets the tolerance, else NON_CONVERGED.

        Args:
            sources: Exactly two electric point charges
            start: Initial position [scene units]
        """
        if len(sources) != 2:
            return EquilibriumResult.unsupported()

        cfg = self.config
        scale = self.constants.meters_per_scene_unit
        sources_m, values = source_arrays(sources, self.constants)

        point = as_array(start) * scale
        net, residual, relative = self._residual(point, sources_m, values)
        best = (relative, residual, point)

        iterations = 0
        while relative > cfg.tolerance and iterations < cfg.max_iterations:
            if cfg.method == "newton":
                update = self._newton_step(point, net, sources_m, values)
                if update is None:
                    break
                point = update
            else:
                # Step opposite the field, length proportional to |E|
                point = point - net * cfg.gain
            iterations += 1

            net, residual, relative = self._residual(point, sources_m, values)
            if relative < best[0]:
                best = (relative, residual, point)

        relative, residual, point = best
        status = EquilibriumStatus.FOUND if relative <= cfg.tolerance else EquilibriumStatus.NON_CONVERGED

        logger.debug(
            "Equilibrium %s after %d iterations (relative residual %.3e)",
            status.value, iterations, relative
        )

        return EquilibriumResult(
            status=status,
            position=Vector3.from_array(point / scale),
            residual=residual,
            relative_residual=relative,
            iterations=iterations,
        )

    def solve(self, sources: Sequence[FieldSource], mode: FieldMode) -> EquilibriumResult:
        """
        Find the zero-field point of a two-charge electric configuration.

        Returns:
            EquilibriumResult; UNSUPPORTED unless exactly two sources in
            ELECTRIC mode, NO_EQUILIBRIUM for an equal-magnitude opposite
            pair, coincident charges or a zero-valued charge
        """
        initial = self.estimate(sources, mode)
        if initial.position is None:
            logger.debug("Equilibrium %s", initial.status.value)
            return initial
        return self.refine(sources, initial.position)
