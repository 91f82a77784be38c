"""
Unit conversion between scene units and metres.
"""

from __future__ import annotations
import numpy as np
from numpy.typing import NDArray

from core.geometry.primitives import Vector3, VectorLike
from .constants import METERS_PER_SCENE_UNIT


def scene_to_meters(pos: VectorLike | NDArray,
                    scale: float = METERS_PER_SCENE_UNIT) -> NDArray[np.float64]:
    """
    Convert scene coordinates to metres.

    Accepts a single position (3,) or a stack of positions (N, 3).
    """
    if isinstance(pos, Vector3):
        return pos.to_array() * scale
    return np.asarray(pos, dtype=np.float64) * scale


def meters_to_scene(pos: VectorLike | NDArray,
                    scale: float = METERS_PER_SCENE_UNIT) -> NDArray[np.float64]:
    """Convert metres to scene coordinates."""
    if isinstance(pos, Vector3):
        return pos.to_array() / scale
    return np.asarray(pos, dtype=np.float64) / scale
