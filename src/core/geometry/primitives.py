"""
Geometric primitives: Vector3 and position helpers.

Positions, directions and field values all share the same immutable triple.
Positions are expressed in scene units; field values in SI units.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Sequence, Union
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class Vector3:
    """Immutable 3D vector."""
    x: float
    y: float
    z: float = 0.0

    def to_array(self) -> NDArray[np.float64]:
        """Convert to NumPy array (3,)."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @classmethod
    def from_array(cls, arr: NDArray[np.float64]) -> Vector3:
        """Create from NumPy array."""
        arr = np.asarray(arr, dtype=np.float64)
        if arr.shape != (3,):
            raise ValueError(f"Expected array of shape (3,), got {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]), z=float(arr[2]))

    @classmethod
    def zero(cls) -> Vector3:
        return cls(0.0, 0.0, 0.0)

    def magnitude(self) -> float:
        """Vector magnitude (L2 norm)."""
        return float(np.linalg.norm(self.to_array()))

    def normalize(self) -> Vector3:
        """Return unit vector in same direction."""
        mag = self.magnitude()
        if mag < 1e-300:
            raise ValueError("Cannot normalize zero vector")
        return Vector3.from_array(self.to_array() / mag)

    def dot(self, other: Vector3) -> float:
        """Dot product."""
        return float(np.dot(self.to_array(), other.to_array()))

    def cross(self, other: Vector3) -> Vector3:
        """Cross product."""
        return Vector3.from_array(np.cross(self.to_array(), other.to_array()))

    def distance_to(self, other: Vector3) -> float:
        """Euclidean distance to another point."""
        return float(np.linalg.norm(self.to_array() - other.to_array()))

    def is_close(self, other: Vector3, rel_tol: float = 1e-9, abs_tol: float = 0.0) -> bool:
        """Component-wise closeness check."""
        return bool(np.allclose(self.to_array(), other.to_array(), rtol=rel_tol, atol=abs_tol))

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3.from_array(self.to_array() + other.to_array())

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3.from_array(self.to_array() - other.to_array())

    def __mul__(self, scalar: float) -> Vector3:
        return Vector3.from_array(self.to_array() * scalar)

    def __rmul__(self, scalar: float) -> Vector3:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector3:
        if scalar == 0:
            raise ValueError("Division by zero")
        return Vector3.from_array(self.to_array() / scalar)

    def __neg__(self) -> Vector3:
        return Vector3.from_array(-self.to_array())

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def __repr__(self) -> str:
        return f"Vector3({self.x:.6g}, {self.y:.6g}, {self.z:.6g})"


VectorLike = Union[Vector3, Sequence[float], NDArray[np.float64]]


def as_array(point: VectorLike) -> NDArray[np.float64]:
    """
    Coerce a Vector3, tuple or array into a float64 array of shape (3,).

    Raises:
        ValueError: If the input does not have exactly three components
    """
    if isinstance(point, Vector3):
        return point.to_array()
    arr = np.asarray(point, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"Expected 3 components, got shape {arr.shape}")
    return arr


def as_vector3(point: VectorLike) -> Vector3:
    """Coerce a tuple or array into a Vector3."""
    if isinstance(point, Vector3):
        return point
    return Vector3.from_array(as_array(point))


def as_point_array(points: Iterable[VectorLike]) -> NDArray[np.float64]:
    """
    Stack points into an (N, 3) array.

    An empty input gives an array of shape (0, 3).
    """
    if isinstance(points, np.ndarray):
        arr = np.asarray(points, dtype=np.float64)
        if arr.size == 0:
            return np.zeros((0, 3), dtype=np.float64)
        if arr.ndim != 2 or arr.shape[1] != 3:
            raise ValueError(f"Expected array of shape (N, 3), got {arr.shape}")
        return arr

    rows = [as_array(p) for p in points]
    if not rows:
        return np.zeros((0, 3), dtype=np.float64)
    return np.vstack(rows)
