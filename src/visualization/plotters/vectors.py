"""
Arrow plotting for sampled 3D field vectors.
"""

from typing import List, Sequence
import numpy as np
from mpl_toolkits.mplot3d.axes3d import Axes3D

from core.geometry.sources import FieldMode, FieldSource
from ..colors import arrow_color, arrow_length
from ..vectors import SampleResult


class VectorPlotter:
    """
    Draws one arrow per sample: fixed-ish length, hue from the dominant
    source, brightness from the normalized strength.
    """

    def __init__(self, sources: Sequence[FieldSource], mode: FieldMode):
        self.sources = list(sources)
        self.mode = FieldMode(mode)

    def draw(self,
             ax: Axes3D,
             samples: List[SampleResult],
             scale: float = 1.0,
             linewidth: float = 1.2):
        """
        Draw arrows on a 3D axis.

        Args:
            ax: Target 3D axis
            samples: Sampler output
            scale: Arrow length multiplier
            linewidth: Shaft width
        """
        if not samples:
            return None

        positions = np.array([s.position.to_tuple() for s in samples])
        directions = np.array([s.field.to_tuple() for s in samples])
        directions /= np.linalg.norm(directions, axis=1)[:, None]
        lengths = np.array([arrow_length(s.strength, scale) for s in samples])
        vecs = directions * lengths[:, None]

        colors = [arrow_color(s.strength, s.dominant_source, self.sources, self.mode) for s in samples]
        # 3D quiver draws each arrow as a shaft plus two head segments
        segment_colors = colors + [c for c in colors for _ in range(2)]

        return ax.quiver(
            positions[:, 0], positions[:, 1], positions[:, 2],
            vecs[:, 0], vecs[:, 1], vecs[:, 2],
            colors=segment_colors, length=1.0, normalize=False,
            arrow_length_ratio=0.25, linewidth=linewidth
        )
