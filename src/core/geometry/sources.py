"""
Field sources, probe and field mode.

A source is a point charge (electric mode) or a point mass (gravity mode).
The probe is a test charge/mass used only to measure force; it never
contributes to the field.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import math

from .primitives import Vector3, VectorLike, as_vector3


class FieldMode(str, Enum):
    """Force law selector."""
    ELECTRIC = "electric"
    GRAVITY = "gravity"


@dataclass(frozen=True)
class FieldSource:
    """
    Point source.

    Attributes:
        id: Unique identifier within a scene
        position: Position in scene units
        value: Signed charge [C] or mass [kg]
    """
    id: str
    position: Vector3
    value: float

    def __post_init__(self):
        object.__setattr__(self, "position", as_vector3(self.position))
        object.__setattr__(self, "value", float(self.value))
        if not math.isfinite(self.value):
            raise ValueError(f"Source '{self.id}' has non-finite value {self.value}")

    @property
    def sign(self) -> int:
        """Sign of the source value (-1, 0 or +1)."""
        if self.value > 0:
            return 1
        if self.value < 0:
            return -1
        return 0

    def moved_to(self, position: VectorLike) -> FieldSource:
        return FieldSource(id=self.id, position=as_vector3(position), value=self.value)

    def with_value(self, value: float) -> FieldSource:
        return FieldSource(id=self.id, position=self.position, value=value)


@dataclass(frozen=True)
class Probe:
    """
    Test charge (electric) or test mass (gravity).

    Attributes:
        position: Position in scene units
        value: Signed test charge [C] or test mass [kg]
    """
    position: Vector3
    value: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "position", as_vector3(self.position))
        object.__setattr__(self, "value", float(self.value))
