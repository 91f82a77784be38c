"""
Unified visualization facade for field scenes.

Provides a single entry point for all visualization tasks:
- Scene: sources and probe
- Field: sampled arrows, traced field lines, equilibrium point

Handles common concerns:
- Figure creation and sizing (3D axes)
- Save vs display logic
- Subplot composition
- Output path management (with datetime override protection)
"""

from pathlib import Path
from datetime import datetime
from typing import Optional, Tuple, List, Union
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from mpl_toolkits.mplot3d.axes3d import Axes3D

from core.config.schemas import VisualizationConfig
from core.geometry import Scene, FieldMode
from core.geometry.primitives import Vector3
from physics.equilibrium import EquilibriumResult
from .colors import source_color, force_arrow_length, PROBE_COLOR, FORCE_COLOR, EQUILIBRIUM_COLOR
from .field_lines import FieldLine
from .field3d import FieldSnapshot
from .plotters import VectorPlotter, FieldLinePlotter
from .vectors import SampleResult


class OutputManager:
    """
    Manages output paths and save behavior.

    Features:
    - Auto-creates the output directory if missing
    - Optional datetime subfolder for overwrite protection
    - Consistent path resolution
    """

    def __init__(self,
                 base_dir: Union[str, Path],
                 protect_overwrite: bool = False):
        """
        Args:
            base_dir: Base output directory
            protect_overwrite: If True, saves to timestamped subfolder
        """
        self.base_dir = Path(base_dir)
        self.protect_overwrite = protect_overwrite
        self._output_dir: Optional[Path] = None

    @property
    def output_dir(self) -> Path:
        """Get (and create) the output directory."""
        if self._output_dir is None:
            if self.protect_overwrite:
                timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
                self._output_dir = self.base_dir / timestamp
            else:
                self._output_dir = self.base_dir

            self._output_dir.mkdir(parents=True, exist_ok=True)

        return self._output_dir

    def get_path(self, filename: str) -> Path:
        """Get full path for a file in the output directory."""
        return self.output_dir / filename

    def reset(self):
        """Reset output directory (for new timestamp on next access)."""
        self._output_dir = None


class Visualizer:
    """
    Main visualization facade.

    Renders kernel outputs on 3D axes with a consistent interface for
    save/show behavior and subplot composition. Only consumes plain data
    (samples, lines, vectors); never computes fields itself.

    Usage:
        viz = Visualizer(output_dir='cases/dipole/out')
        viz.plot_snapshot(snapshot)
        viz.finalize(save='field.png')

        # Side by side
        viz.create_figure(subplots=(1, 2))
        viz.plot_vectors(snapshot.samples, scene, ax_index=0)
        viz.plot_field_lines(snapshot.lines, ax_index=1)
        viz.finalize(save='combined.png')
    """

    def __init__(self,
                 output_dir: Optional[Union[str, Path]] = None,
                 protect_overwrite: bool = False,
                 figsize: Tuple[float, float] = (10, 8),
                 half_extent: float = 8.0):
        """
        Args:
            output_dir: Base output directory for saves
            protect_overwrite: Save to timestamped subfolder
            figsize: Default figure size
            half_extent: Axis limits are [-half_extent, half_extent] on each axis
        """
        self.default_figsize = figsize
        self.half_extent = half_extent

        if output_dir is not None:
            self.output = OutputManager(output_dir, protect_overwrite)
        else:
            self.output = None

        # Current figure state
        self.fig: Optional[Figure] = None
        self.axes: Optional[Union[Axes3D, np.ndarray]] = None
        self._subplot_shape: Optional[Tuple[int, int]] = None

    # -------------------------------------------------------------------------
    # Figure Management
    # -------------------------------------------------------------------------

    def create_figure(self,
                      subplots: Tuple[int, int] = (1, 1),
                      figsize: Optional[Tuple[float, float]] = None,
                      title: Optional[str] = None) -> Tuple[Figure, Union[Axes3D, np.ndarray]]:
        """
        Create a new figure of 3D subplots.

        Args:
            subplots: (rows, cols) subplot grid
            figsize: Figure size (uses default if None)
            title: Super title for figure

        Returns:
            (fig, axes) tuple
        """
        if figsize is None:
            w, h = self.default_figsize
            figsize = (w * subplots[1], h * subplots[0])

        self.fig, self.axes = plt.subplots(
            subplots[0], subplots[1], figsize=figsize,
            subplot_kw={'projection': '3d'}
        )
        self._subplot_shape = subplots

        for ax in np.atleast_1d(self.axes).flat:
            self._style_axis(ax)

        if title:
            self.fig.suptitle(title, fontsize=14, fontweight='bold')

        return self.fig, self.axes

    def _get_ax(self, ax_index: Optional[int] = None) -> Axes3D:
        """Get axis for plotting."""
        if self.fig is None:
            self.create_figure()

        if ax_index is None:
            if isinstance(self.axes, np.ndarray):
                return self.axes.flat[0]
            return self.axes

        if isinstance(self.axes, np.ndarray):
            return self.axes.flat[ax_index]

        if ax_index != 0:
            raise ValueError(f"ax_index={ax_index} invalid for single subplot")
        return self.axes

    def _style_axis(self, ax: Axes3D):
        h = self.half_extent
        ax.set_xlim(-h, h)
        ax.set_ylim(-h, h)
        ax.set_zlim(-h, h)
        ax.set_box_aspect((1, 1, 1))
        ax.set_xlabel('X')
        ax.set_ylabel('Y')
        ax.set_zlabel('Z')

    def finalize(self,
                 save: Optional[str] = None,
                 show: bool = False,
                 dpi: int = 150,
                 tight_layout: bool = True) -> Optional[Path]:
        """
        Finalize figure: save and/or display.

        Args:
            save: Filename to save (in output_dir). None = don't save.
            show: Whether to display interactively
            dpi: Resolution for saved image
            tight_layout: Apply tight_layout before saving

        Returns:
            Path of the saved image, if saved
        """
        if self.fig is None:
            raise ValueError("No figure to finalize. Call a plot method first.")

        if tight_layout:
            self.fig.tight_layout()

        save_path = None
        if save is not None:
            if self.output is None:
                save_path = Path(save)
            else:
                save_path = self.output.get_path(save)

            self.fig.savefig(save_path, dpi=dpi, bbox_inches='tight')
            print(f"Saved: {save_path}")

        if show:
            plt.show()

        if not show:
            plt.close(self.fig)
            self.fig = None
            self.axes = None

        return save_path

    # -------------------------------------------------------------------------
    # Scene
    # -------------------------------------------------------------------------

    def plot_sources(self,
                     scene: Scene,
                     ax_index: Optional[int] = None,
                     size: float = 120.0,
                     labels: bool = True):
        """
        Draw sources as coloured spheres (sign colours or gravity palette).

        Args:
            scene: Scene to draw
            ax_index: Subplot index
            size: Marker area
            labels: Annotate each source with its id
        """
        ax = self._get_ax(ax_index)
        for i, src in enumerate(scene.sources):
            x, y, z = src.position.to_tuple()
            ax.scatter([x], [y], [z], s=size, color=source_color(i, scene.mode, src),
                       edgecolors='black', linewidths=0.5, depthshade=False, zorder=10)
            if labels:
                ax.text(x, y, z + 0.4, src.id, fontsize=8)

    def plot_probe(self,
                   scene: Scene,
                   force: Optional[Vector3] = None,
                   ax_index: Optional[int] = None):
        """
        Draw the probe and, if given, its force arrow (log-scaled length).

        Args:
            scene: Scene holding the probe
            force: Force on the probe [N]
            ax_index: Subplot index
        """
        if scene.probe is None:
            return

        ax = self._get_ax(ax_index)
        x, y, z = scene.probe.position.to_tuple()
        ax.scatter([x], [y], [z], s=60, color=PROBE_COLOR, edgecolors='black',
                   linewidths=0.5, depthshade=False, zorder=11)

        if force is None:
            return
        magnitude = force.magnitude()
        length = force_arrow_length(magnitude)
        if length is None:
            return
        direction = force / magnitude * length
        ax.quiver(x, y, z, direction.x, direction.y, direction.z,
                  color=FORCE_COLOR, arrow_length_ratio=0.25, linewidth=2.5)

    # -------------------------------------------------------------------------
    # Field
    # -------------------------------------------------------------------------

    def plot_vectors(self,
                     samples: List[SampleResult],
                     scene: Scene,
                     ax_index: Optional[int] = None,
                     scale: float = 1.0,
                     title: Optional[str] = None):
        """
        Draw sampled field arrows.

        Args:
            samples: Sampler output
            scene: Scene (for source colours)
            ax_index: Subplot index
            scale: Arrow length multiplier
            title: Subplot title
        """
        ax = self._get_ax(ax_index)
        VectorPlotter(scene.sources, scene.mode).draw(ax, samples, scale=scale)
        if title:
            ax.set_title(title)

    def plot_field_lines(self,
                         lines: List[FieldLine],
                         ax_index: Optional[int] = None,
                         color: str = '#8899aa',
                         title: Optional[str] = None):
        """
        Draw traced field lines.

        Args:
            lines: Tracer output
            ax_index: Subplot index
            color: Line colour
            title: Subplot title
        """
        ax = self._get_ax(ax_index)
        FieldLinePlotter(color=color).draw(ax, lines)
        if title:
            ax.set_title(title)

    def plot_equilibrium(self,
                         result: EquilibriumResult,
                         ax_index: Optional[int] = None):
        """Mark the equilibrium estimate (nothing drawn without a position)."""
        if result.position is None:
            return
        ax = self._get_ax(ax_index)
        x, y, z = result.position.to_tuple()
        marker = 'X' if result.found else 'x'
        ax.scatter([x], [y], [z], s=90, marker=marker, color=EQUILIBRIUM_COLOR,
                   edgecolors='black', linewidths=0.8, depthshade=False, zorder=12)

    def plot_snapshot(self,
                      snapshot: FieldSnapshot,
                      config: Optional[VisualizationConfig] = None,
                      ax_index: Optional[int] = None,
                      title: Optional[str] = None):
        """
        Draw every enabled layer of a computed snapshot.

        Args:
            snapshot: FieldScene output
            config: Layer toggles and arrow scale (defaults if None)
            ax_index: Subplot index
            title: Subplot title (defaults to scene name and mode)
        """
        if config is None:
            config = VisualizationConfig()
        scene = snapshot.scene

        if config.show_lines:
            self.plot_field_lines(snapshot.lines, ax_index=ax_index)
        if config.show_vectors:
            self.plot_vectors(snapshot.samples, scene, ax_index=ax_index,
                              scale=config.field_display_scale)
        self.plot_sources(scene, ax_index=ax_index)
        if config.show_probe:
            self.plot_probe(scene, snapshot.probe_force, ax_index=ax_index)
        if config.show_equilibrium:
            self.plot_equilibrium(snapshot.equilibrium, ax_index=ax_index)

        if title is None:
            kind = 'Electric' if scene.mode is FieldMode.ELECTRIC else 'Gravitational'
            title = f"{scene.name}: {kind} field"
        self._get_ax(ax_index).set_title(title)
