"""Inverse-square field physics: kernel, equilibrium search and probe readout."""

from .constants import (
    COULOMB_CONSTANT,
    GRAVITATIONAL_CONSTANT,
    MIN_DISTANCE,
    METERS_PER_SCENE_UNIT,
    PhysicsConstants,
    DEFAULT_CONSTANTS,
)
from .units import scene_to_meters, meters_to_scene
from .field import (
    field_at,
    field_at_points,
    field_contributions,
    electric_field_at,
    gravitational_field_at,
    potential_at,
    potential_at_points,
    electric_potential_at,
    gravitational_potential_at,
    potential_difference,
    force_on_probe,
    distance_to_nearest_source,
)
from .equilibrium import EquilibriumSolver, EquilibriumResult, EquilibriumStatus
from .readout import ProbeReadout, compute_probe_readout, format_number, format_latex, format_constant_latex

__all__ = [
    "COULOMB_CONSTANT",
    "GRAVITATIONAL_CONSTANT",
    "MIN_DISTANCE",
    "METERS_PER_SCENE_UNIT",
    "PhysicsConstants",
    "DEFAULT_CONSTANTS",
    "scene_to_meters",
    "meters_to_scene",
    "field_at",
    "field_at_points",
    "field_contributions",
    "electric_field_at",
    "gravitational_field_at",
    "potential_at",
    "potential_at_points",
    "electric_potential_at",
    "gravitational_potential_at",
    "potential_difference",
    "force_on_probe",
    "distance_to_nearest_source",
    "EquilibriumSolver",
    "EquilibriumResult",
    "EquilibriumStatus",
    "ProbeReadout",
    "compute_probe_readout",
    "format_number",
    "format_latex",
    "format_constant_latex",
]
