"""
Case class - unified container for all case data.

Provides clean access to:
- Scene (sources, probe, mode)
- Physical constants
- Sampling, tracing and equilibrium settings
- Visualization and output settings
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

from ..geometry import Scene, FieldMode
from ..config.schemas import (
    SimulationConfig,
    SamplingConfig,
    TracingConfig,
    EquilibriumConfig,
    VisualizationConfig,
)


@dataclass
class Case:
    """
    Unified container for a field case.

    Provides direct attribute access to commonly used values:
        case.name
        case.scene
        case.mode
        case.constants
        case.sampling / case.tracing / case.equilibrium

    Usage:
        from core.io import CaseLoader

        case = CaseLoader.load_case('cases/dipole')
        print(case.name, case.num_sources)
    """

    scene: Scene
    config: SimulationConfig
    case_dir: Path

    @property
    def name(self) -> str:
        """Case name."""
        return self.config.name

    @property
    def description(self) -> str:
        """Case description."""
        return self.config.description

    @property
    def mode(self) -> FieldMode:
        """Active field mode."""
        return self.scene.mode

    @property
    def num_sources(self) -> int:
        """Number of sources."""
        return self.scene.num_sources

    @property
    def constants(self) -> "PhysicsConstants":
        """Physical constants the case is evaluated with."""
        return self.config.constants.to_constants()

    # -------------------------------------------------------------------------
    # Kernel Settings
    # -------------------------------------------------------------------------

    @property
    def sampling(self) -> SamplingConfig:
        return self.config.sampling

    @property
    def tracing(self) -> TracingConfig:
        return self.config.tracing

    @property
    def equilibrium(self) -> EquilibriumConfig:
        return self.config.equilibrium

    @property
    def visualization(self) -> VisualizationConfig:
        return self.config.visualization

    # -------------------------------------------------------------------------
    # Output Paths
    # -------------------------------------------------------------------------

    @property
    def output_dir(self) -> Path:
        """Output directory, relative paths resolved against the case directory."""
        out = Path(self.config.output.directory)
        if out.is_absolute():
            return out
        return self.case_dir / out

    def __repr__(self) -> str:
        return (
            f"Case(name='{self.name}', "
            f"mode={self.mode.value}, "
            f"sources={self.num_sources})"
        )
