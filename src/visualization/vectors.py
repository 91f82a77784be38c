"""
Vector field sampling for arrow rendering.

Samples the field on a bounded 3D lattice, attributes every sample to its
dominant source and maps magnitudes onto a log-scaled display strength.
Normalization is a second pass over the full sample set.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence
import numpy as np
from numpy.typing import NDArray

from core.config.schemas import SamplingConfig
from core.geometry.primitives import Vector3, as_point_array
from core.geometry.sources import FieldMode, FieldSource
from physics.constants import PhysicsConstants, DEFAULT_CONSTANTS
from physics.field import source_contributions, source_arrays, distance_to_nearest_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleResult:
    """
    One renderable field sample.

    Attributes:
        position: Sample position [scene units]
        field: Net field vector [SI]
        magnitude: |field|
        dominant_source: Index of the source with the largest individual contribution
        strength: Log-normalized display strength in [0, 1]
    """
    position: Vector3
    field: Vector3
    magnitude: float
    dominant_source: int
    strength: float


def generate_lattice(half_extent: float,
                     step: float,
                     max_samples: int = 500) -> NDArray[np.float64]:
    """
    Regular lattice over [-half_extent, half_extent]³.

    Points are ordered x-major, z-minor. If the lattice holds more than
    max_samples points, every Nth point is kept with N = ceil(count / cap).

    Returns:
        (n, 3) positions in scene units
    """
    if half_extent < 0 or step <= 0:
        raise ValueError(f"Invalid lattice: half_extent={half_extent}, step={step}")

    n_axis = int(math.floor(2.0 * half_extent / step + 1e-9)) + 1
    axis = -half_extent + step * np.arange(n_axis, dtype=np.float64)
    XX, YY, ZZ = np.meshgrid(axis, axis, axis, indexing='ij')
    points = np.column_stack([XX.ravel(), YY.ravel(), ZZ.ravel()])

    if len(points) > max_samples:
        skip = math.ceil(len(points) / max_samples)
        points = points[::skip]

    return points


def normalize_strengths(magnitudes: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Map magnitudes to [0, 1] on a log10 scale between their min and max.

    Every value maps to 1.0 when all magnitudes are equal. Magnitudes must be
    strictly positive.
    """
    mags = np.asarray(magnitudes, dtype=np.float64)
    if mags.size == 0:
        return np.zeros(0)

    mag_min = float(mags.min())
    mag_max = float(mags.max())
    if mag_max <= mag_min:
        return np.ones_like(mags)

    log_min = math.log10(mag_min)
    log_max = math.log10(mag_max)
    if log_max <= log_min:
        return np.ones_like(mags)

    t = (np.log10(mags) - log_min) / (log_max - log_min)
    return np.clip(t, 0.0, 1.0)


def dominant_source_indices(contributions: NDArray[np.float64]) -> NDArray[np.int64]:
    """
    Index of the largest individual contribution per point.

    Args:
        contributions: (M, N, 3) per-source field vectors

    Returns:
        (M,) source indices; ties resolve to the lowest index
    """
    if contributions.shape[1] == 0:
        return np.zeros(contributions.shape[0], dtype=np.int64)
    return np.argmax(np.linalg.norm(contributions, axis=-1), axis=1)


class VectorSampler:
    """
    Samples a 3D vector field for arrow rendering.

    Usage:
        sampler = VectorSampler(SamplingConfig(half_extent=6.0))
        samples = sampler.compute(scene.sources, scene.mode)
    """

    def __init__(self,
                 config: Optional[SamplingConfig] = None,
                 constants: PhysicsConstants = DEFAULT_CONSTANTS):
        self.config = config if config is not None else SamplingConfig()
        self.constants = constants

    def generate_lattice(self,
                         half_extent: Optional[float] = None,
                         step: Optional[float] = None) -> NDArray[np.float64]:
        """Lattice using the configured extent, step and cap unless overridden."""
        return generate_lattice(
            self.config.half_extent if half_extent is None else half_extent,
            self.config.step if step is None else step,
            self.config.max_samples,
        )

    def sample(self,
               points: NDArray | Sequence,
               sources: Sequence[FieldSource],
               mode: FieldMode) -> List[SampleResult]:
        """
        Evaluate, filter, attribute and normalize samples.

        Points within the exclusion radius of any source are skipped; samples
        whose magnitude falls below the absolute floor are omitted.
        """
        pts = as_point_array(points)
        if len(sources) == 0 or len(pts) == 0:
            return []

        # Pass 1: raw fields for points clear of every source
        keep = distance_to_nearest_source(pts, sources) >= self.config.exclusion_radius
        pts = pts[keep]
        if len(pts) == 0:
            logger.debug("All %d lattice points fall inside exclusion radii", int(keep.size))
            return []

        sources_m, values = source_arrays(sources, self.constants)
        contrib = source_contributions(pts * self.constants.meters_per_scene_unit,
                                       sources_m, values, mode, self.constants)
        fields = contrib.sum(axis=1)
        magnitudes = np.linalg.norm(fields, axis=1)

        visible = (magnitudes >= self.config.min_field) & (magnitudes > 0)
        pts, fields, magnitudes, contrib = pts[visible], fields[visible], magnitudes[visible], contrib[visible]
        if len(pts) == 0:
            return []

        # Pass 2: attribution and normalization over the full set
        dominant = dominant_source_indices(contrib)
        strengths = normalize_strengths(magnitudes)

        logger.debug(
            "Sampled %d vectors (|F| range [%.3g, %.3g])",
            len(pts), magnitudes.min(), magnitudes.max()
        )

        return [
            SampleResult(
                position=Vector3.from_array(pts[i]),
                field=Vector3.from_array(fields[i]),
                magnitude=float(magnitudes[i]),
                dominant_source=int(dominant[i]),
                strength=float(strengths[i]),
            )
            for i in range(len(pts))
        ]

    def compute(self, sources: Sequence[FieldSource], mode: FieldMode) -> List[SampleResult]:
        """Generate the configured lattice and sample it."""
        if len(sources) == 0:
            return []
        return self.sample(self.generate_lattice(), sources, mode)
