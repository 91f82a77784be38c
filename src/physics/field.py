"""
Point evaluation of inverse-square fields: field vector, potential, force.

Pure functions of their inputs. Positions are given in scene units and are
converted to metres before any physics; results are SI.

Electric:  E = k q / r²   directed source -> point (sign carried by q)
Gravity:   g = G m / r²   directed point -> source
"""

from __future__ import annotations
from typing import Sequence, Tuple
import numpy as np
from numpy.typing import NDArray
from scipy.spatial import cKDTree

from core.geometry.primitives import Vector3, VectorLike, as_array, as_point_array
from core.geometry.sources import FieldMode, FieldSource
from .constants import PhysicsConstants, DEFAULT_CONSTANTS


def field_constant(mode: FieldMode, constants: PhysicsConstants = DEFAULT_CONSTANTS) -> float:
    """Force-law constant for the given mode (k or G)."""
    if FieldMode(mode) is FieldMode.ELECTRIC:
        return constants.coulomb
    return constants.gravitational


def source_arrays(sources: Sequence[FieldSource],
                  constants: PhysicsConstants) -> Tuple[NDArray, NDArray]:
    """Source positions in metres (N, 3) and signed values (N,)."""
    if len(sources) == 0:
        return np.zeros((0, 3)), np.zeros(0)
    positions = np.vstack([s.position.to_array() for s in sources])
    values = np.array([s.value for s in sources], dtype=np.float64)
    return positions * constants.meters_per_scene_unit, values


def source_contributions(points_m: NDArray,
                         sources_m: NDArray,
                         values: NDArray,
                         mode: FieldMode,
                         constants: PhysicsConstants) -> NDArray:
    """
    Per-source field vectors at each point.

    Args:
        points_m: (M, 3) evaluation points [m]
        sources_m: (N, 3) source positions [m]
        values: (N,) signed source values

    Returns:
        (M, N, 3) contribution of source j at point i
    """
    delta = points_m[:, None, :] - sources_m[None, :, :]   # source -> point
    dist = np.linalg.norm(delta, axis=-1)
    r = np.maximum(dist, constants.min_distance_m)

    # Unit direction; a point sitting on a source gets the zero vector
    unit = delta / r[..., None]
    magnitude = field_constant(mode, constants) * values[None, :] / (r * r)

    if FieldMode(mode) is FieldMode.ELECTRIC:
        return magnitude[..., None] * unit
    return -magnitude[..., None] * unit


def field_contributions(point: VectorLike,
                        sources: Sequence[FieldSource],
                        mode: FieldMode,
                        constants: PhysicsConstants = DEFAULT_CONSTANTS) -> NDArray[np.float64]:
    """
    Individual field vector of every source at a point.

    Returns:
        (N, 3) array, row j is the contribution of sources[j] [N/C or N/kg]
    """
    sources_m, values = source_arrays(sources, constants)
    point_m = as_array(point)[None, :] * constants.meters_per_scene_unit
    return source_contributions(point_m, sources_m, values, mode, constants)[0]


def field_at_points(points: NDArray | Sequence[VectorLike],
                    sources: Sequence[FieldSource],
                    mode: FieldMode,
                    constants: PhysicsConstants = DEFAULT_CONSTANTS) -> NDArray[np.float64]:
    """
    Net field at many points (vectorized superposition).

    Args:
        points: (M, 3) positions in scene units

    Returns:
        (M, 3) field vectors in SI units
    """
    pts = as_point_array(points)
    if len(sources) == 0 or len(pts) == 0:
        return np.zeros((len(pts), 3), dtype=np.float64)
    sources_m, values = source_arrays(sources, constants)
    contrib = source_contributions(pts * constants.meters_per_scene_unit, sources_m, values, mode, constants)
    return contrib.sum(axis=1)


def field_at(point: VectorLike,
             sources: Sequence[FieldSource],
             mode: FieldMode,
             constants: PhysicsConstants = DEFAULT_CONSTANTS) -> Vector3:
    """
    Net field vector at a point.

    Args:
        point: Position in scene units
        sources: Point sources
        mode: ELECTRIC (N/C) or GRAVITY (N/kg)
        constants: Constants to evaluate with

    Returns:
        Field vector; the zero vector when there are no sources
    """
    return Vector3.from_array(field_at_points(as_array(point)[None, :], sources, mode, constants)[0])


def electric_field_at(point: VectorLike,
                      sources: Sequence[FieldSource],
                      constants: PhysicsConstants = DEFAULT_CONSTANTS) -> Vector3:
    """Electric field E = Σ k q / r² r̂ [N/C]."""
    return field_at(point, sources, FieldMode.ELECTRIC, constants)


def gravitational_field_at(point: VectorLike,
                           sources: Sequence[FieldSource],
                           constants: PhysicsConstants = DEFAULT_CONSTANTS) -> Vector3:
    """Gravitational field g = Σ G m / r² (toward each mass) [N/kg]."""
    return field_at(point, sources, FieldMode.GRAVITY, constants)


def potential_at_points(points: NDArray | Sequence[VectorLike],
                        sources: Sequence[FieldSource],
                        mode: FieldMode,
                        constants: PhysicsConstants = DEFAULT_CONSTANTS) -> NDArray[np.float64]:
    """
    Scalar potential at many points.

    Returns:
        (M,) potentials; zeros when there are no sources
    """
    pts = as_point_array(points)
    if len(sources) == 0 or len(pts) == 0:
        return np.zeros(len(pts), dtype=np.float64)
    sources_m, values = source_arrays(sources, constants)
    delta = pts[:, None, :] * constants.meters_per_scene_unit - sources_m[None, :, :]
    r = np.maximum(np.linalg.norm(delta, axis=-1), constants.min_distance_m)
    potential = field_constant(mode, constants) * np.sum(values[None, :] / r, axis=1)
    if FieldMode(mode) is FieldMode.GRAVITY:
        return -potential
    return potential


def potential_at(point: VectorLike,
                 sources: Sequence[FieldSource],
                 mode: FieldMode,
                 constants: PhysicsConstants = DEFAULT_CONSTANTS) -> float:
    """
    Scalar potential at a point (signed, algebraic superposition).

    Electric: V = Σ k q / r   [V]
    Gravity:  U = Σ -G m / r  [J/kg]
    """
    return float(potential_at_points(as_array(point)[None, :], sources, mode, constants)[0])


def electric_potential_at(point: VectorLike,
                          sources: Sequence[FieldSource],
                          constants: PhysicsConstants = DEFAULT_CONSTANTS) -> float:
    return potential_at(point, sources, FieldMode.ELECTRIC, constants)


def gravitational_potential_at(point: VectorLike,
                               sources: Sequence[FieldSource],
                               constants: PhysicsConstants = DEFAULT_CONSTANTS) -> float:
    return potential_at(point, sources, FieldMode.GRAVITY, constants)


def potential_difference(point1: VectorLike,
                         point2: VectorLike,
                         mode: FieldMode,
                         sources: Sequence[FieldSource],
                         constants: PhysicsConstants = DEFAULT_CONSTANTS) -> float:
    """Potential difference V(point2) - V(point1)."""
    return (potential_at(point2, sources, mode, constants)
            - potential_at(point1, sources, mode, constants))


def force_on_probe(point: VectorLike,
                   probe_value: float,
                   mode: FieldMode,
                   sources: Sequence[FieldSource],
                   constants: PhysicsConstants = DEFAULT_CONSTANTS) -> Vector3:
    """
    Force on a test charge/mass: F = q E (electric) or F = m g (gravity) [N].
    """
    return field_at(point, sources, mode, constants) * probe_value


def distance_to_nearest_source(points: NDArray | Sequence[VectorLike],
                               sources: Sequence[FieldSource]) -> NDArray[np.float64]:
    """
    Distance from each point to the closest source, in scene units.

    Returns:
        (M,) distances; +inf everywhere when there are no sources
    """
    pts = as_point_array(points)
    if len(sources) == 0:
        return np.full(len(pts), np.inf)
    if len(pts) == 0:
        return np.zeros(0)
    tree = cKDTree(np.vstack([s.position.to_array() for s in sources]))
    distances, _ = tree.query(pts, k=1)
    return np.asarray(distances, dtype=np.float64)
