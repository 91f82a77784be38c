"""
Polyline plotting for traced field lines.
"""

from typing import List
from mpl_toolkits.mplot3d.axes3d import Axes3D

from ..field_lines import FieldLine


class FieldLinePlotter:
    """Draws assembled field lines as 3D polylines."""

    def __init__(self, color: str = '#8899aa', alpha: float = 0.6, linewidth: float = 0.8):
        self.color = color
        self.alpha = alpha
        self.linewidth = linewidth

    def draw(self, ax: Axes3D, lines: List[FieldLine]):
        for line in lines:
            pts = line.points
            ax.plot(pts[:, 0], pts[:, 1], pts[:, 2],
                    color=self.color, alpha=self.alpha, linewidth=self.linewidth)
