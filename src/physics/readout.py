"""
Live numeric readout for a probe (test charge / test mass).

Collects the quantities a formula display substitutes into its equations:
distance to the nearest source, field and force magnitudes, potentials, and
the pairwise source distance for two-source scenes. All values are SI.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np

from core.geometry.primitives import Vector3
from core.geometry.scene import Scene
from core.geometry.sources import FieldSource
from .constants import PhysicsConstants, DEFAULT_CONSTANTS
from .field import field_at, force_on_probe, potential_at


@dataclass(frozen=True)
class SourceDistance:
    source_id: str
    distance: float          # [m]
    distance_squared: float  # [m²]


@dataclass(frozen=True)
class ProbeReadout:
    """
    Probe quantities for the current scene.

    Attributes:
        nearest_source: Source closest to the probe (first one on ties)
        distance: Probe to nearest source [m]
        distance_squared: distance² [m²]
        field_magnitude: |net field| at the probe
        force: Net force on the probe [N]
        force_magnitude: |force| [N]
        source_field_magnitude: |field| of the nearest source alone
        potential: Total potential at the probe
        source_potential: Potential of the nearest source alone
        potential_difference: V(probe) - V(origin)
        source_distances: Probe distance to every source, in scene order
        distance_between_sources: Source separation [m], two-source scenes only
    """
    nearest_source: FieldSource
    distance: float
    distance_squared: float
    field_magnitude: float
    force: Vector3
    force_magnitude: float
    source_field_magnitude: float
    potential: float
    source_potential: float
    potential_difference: float
    source_distances: Tuple[SourceDistance, ...]
    distance_between_sources: Optional[float] = None


def compute_probe_readout(scene: Scene,
                          constants: PhysicsConstants = DEFAULT_CONSTANTS) -> Optional[ProbeReadout]:
    """Readout for the scene's probe; None without a probe or without sources."""
    if scene.probe is None or scene.num_sources == 0:
        return None

    mode = scene.mode
    sources = scene.sources
    probe = scene.probe
    scale = constants.meters_per_scene_unit

    probe_m = probe.position.to_array() * scale
    dists = np.linalg.norm(scene.positions * scale - probe_m, axis=1)
    nearest_idx = int(np.argmin(dists))
    nearest = sources[nearest_idx]
    r = float(dists[nearest_idx])

    force = force_on_probe(probe.position, probe.value, mode, sources, constants)
    potential = potential_at(probe.position, sources, mode, constants)
    origin_potential = potential_at(Vector3.zero(), sources, mode, constants)

    between = None
    if scene.num_sources == 2:
        between = float(np.linalg.norm(scene.positions[1] - scene.positions[0]) * scale)

    return ProbeReadout(
        nearest_source=nearest,
        distance=r,
        distance_squared=r * r,
        field_magnitude=field_at(probe.position, sources, mode, constants).magnitude(),
        force=force,
        force_magnitude=force.magnitude(),
        source_field_magnitude=field_at(probe.position, [nearest], mode, constants).magnitude(),
        potential=potential,
        source_potential=potential_at(probe.position, [nearest], mode, constants),
        potential_difference=potential - origin_potential,
        source_distances=tuple(
            SourceDistance(source_id=s.id, distance=float(d), distance_squared=float(d * d))
            for s, d in zip(sources, dists)
        ),
        distance_between_sources=between,
    )


# -----------------------------------------------------------------------------
# Number formatting
# -----------------------------------------------------------------------------

def _use_scientific(value: float) -> bool:
    return abs(value) >= 1e6 or (value != 0 and abs(value) < 1e-3)


def _split_exponential(value: float, decimals: int) -> Tuple[str, int]:
    mantissa, exponent = f"{value:.{decimals}e}".split("e")
    return mantissa, int(exponent)


def format_number(value: float, decimals: int = 2) -> str:
    """Plain-text number: '1.23e+6' for very large or small values, else fixed."""
    if _use_scientific(value):
        mantissa, exponent = _split_exponential(value, decimals)
        return f"{mantissa}e{exponent:+d}"
    return f"{value:.{decimals}f}"


def format_latex(value: float, decimals: int = 2, brackets: bool = True) -> str:
    """LaTeX number, e.g. '\\left(8.99 \\times 10^{9}\\right)'."""
    if value == 0:
        return "0"
    if _use_scientific(value):
        mantissa, exponent = _split_exponential(value, decimals)
        notation = f"{mantissa} \\times 10^{{{exponent}}}"
        return f"\\left({notation}\\right)" if brackets else notation
    return f"{value:.{decimals}f}"


def format_constant_latex(value: float) -> str:
    """LaTeX for a physical constant; scientific unless in [1e-3, 1e6)."""
    if value >= 1e6 or value < 1e-3:
        mantissa, exponent = _split_exponential(value, 2)
        return f"\\left({mantissa} \\times 10^{{{exponent}}}\\right)"
    return repr(float(value)) if value != int(value) else str(int(value))
