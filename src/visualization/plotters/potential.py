"""
Contour plotting of the scalar potential on the z = 0 plane.
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import Tuple, Optional
from matplotlib.colors import SymLogNorm

from core.geometry.scene import Scene
from core.geometry.sources import FieldMode
from physics.constants import PhysicsConstants, DEFAULT_CONSTANTS
from physics.field import potential_at_points


class PotentialPlotter:
    """
    Plots filled potential contours for a scene slice.
    """

    def __init__(self, scene: Scene, constants: PhysicsConstants = DEFAULT_CONSTANTS):
        """
        Args:
            scene: Scene whose sources define the potential
            constants: Constants to evaluate with
        """
        self.scene = scene
        self.constants = constants

    def compute(self,
                half_extent: float = 8.0,
                resolution: int = 100) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Potential on a square grid in the z = 0 plane.

        Returns:
            (XX, YY, V) meshgrid coordinates [scene units] and potential
        """
        axis = np.linspace(-half_extent, half_extent, resolution)
        XX, YY = np.meshgrid(axis, axis)
        points = np.column_stack([XX.ravel(), YY.ravel(), np.zeros(XX.size)])
        V = potential_at_points(points, self.scene.sources, self.scene.mode, self.constants)
        return XX, YY, V.reshape(XX.shape)

    @staticmethod
    def norm(V: np.ndarray, linear_fraction: float = 1e-3) -> SymLogNorm:
        """
        Symmetric-log colour normalization spanning +-max|V|.

        Values within linear_fraction * max|V| of zero are mapped linearly.
        """
        scale = float(np.max(np.abs(V))) if np.size(V) else 0.0
        if scale == 0.0:
            scale = 1.0
        return SymLogNorm(linthresh=scale * linear_fraction, vmin=-scale, vmax=scale, base=10)

    def plot(self,
             half_extent: float = 8.0,
             resolution: int = 100,
             levels: int = 30,
             figsize: Tuple[float, float] = (10, 8),
             save_path: Optional[str] = None):
        """
        Plot potential contours.

        The colour scale is symmetric-log so both signs and the steep wells
        near sources stay readable.

        Args:
            half_extent: Slice half-width [scene units]
            resolution: Grid points per axis
            levels: Number of contour levels
            figsize: Figure dimensions
            save_path: Output file path (None = show)
        """
        XX, YY, V = self.compute(half_extent, resolution)
        unit = 'V' if self.scene.mode is FieldMode.ELECTRIC else 'J/kg'

        fig, ax = plt.subplots(figsize=figsize)

        norm = self.norm(V)
        # Level boundaries evenly spaced in the normalized (signed-log) space
        bounds = np.asarray(norm.inverse(np.linspace(0.0, 1.0, levels + 1)), dtype=np.float64)

        cmap = 'RdBu_r' if self.scene.mode is FieldMode.ELECTRIC else 'viridis'
        cf = ax.contourf(XX, YY, V, levels=bounds, norm=norm, cmap=cmap, extend='both')
        plt.colorbar(cf, ax=ax, label=f'V [{unit}]')

        positions = self.scene.positions
        if len(positions):
            ax.plot(positions[:, 0], positions[:, 1], 'ko', markersize=6, zorder=10)

        ax.set_xlabel('X [scene units]')
        ax.set_ylabel('Y [scene units]')
        ax.set_title(f'Potential, z = 0 (linear within ±{norm.linthresh:.2e} {unit})')
        ax.set_aspect('equal')
        ax.grid(True, alpha=0.3)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150)
            print(f"Potential contours saved: {save_path}")
        else:
            plt.show()

        plt.close(fig)
