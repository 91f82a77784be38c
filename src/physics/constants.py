"""
Physical constants and numerical floors used by the field kernel.

Real SI values so that textbook problems reproduce exactly. Every kernel
function takes a PhysicsConstants instance so callers (and formula displays)
can override or echo the values actually used.
"""

from __future__ import annotations
from dataclasses import dataclass


COULOMB_CONSTANT = 8.99e9            # k [N·m²/C²]
GRAVITATIONAL_CONSTANT = 6.674e-11   # G [N·m²/kg²]
MIN_DISTANCE = 0.1                   # distance floor [scene units]
METERS_PER_SCENE_UNIT = 0.1          # 1 scene unit = 10 cm


@dataclass(frozen=True)
class PhysicsConstants:
    """
    Bundle of constants for one evaluation.

    Attributes:
        coulomb: Coulomb constant k [N·m²/C²]
        gravitational: Gravitational constant G [N·m²/kg²]
        min_distance: Distance floor applied before squaring [scene units]
        meters_per_scene_unit: Scene-to-physical length scale [m]
    """
    coulomb: float = COULOMB_CONSTANT
    gravitational: float = GRAVITATIONAL_CONSTANT
    min_distance: float = MIN_DISTANCE
    meters_per_scene_unit: float = METERS_PER_SCENE_UNIT

    def __post_init__(self):
        if self.min_distance <= 0:
            raise ValueError(f"min_distance must be positive, got {self.min_distance}")
        if self.meters_per_scene_unit <= 0:
            raise ValueError(
                f"meters_per_scene_unit must be positive, got {self.meters_per_scene_unit}"
            )

    @property
    def min_distance_m(self) -> float:
        """Distance floor in metres."""
        return self.min_distance * self.meters_per_scene_unit


DEFAULT_CONSTANTS = PhysicsConstants()
