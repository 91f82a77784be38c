"""Geometry primitives, point sources and scene snapshots."""

from .primitives import Vector3, as_array, as_vector3, as_point_array
from .sources import FieldMode, FieldSource, Probe
from .scene import Scene

__all__ = [
    "Vector3",
    "as_array",
    "as_vector3",
    "as_point_array",
    "FieldMode",
    "FieldSource",
    "Probe",
    "Scene",
]
