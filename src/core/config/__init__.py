"""Configuration schemas for cases and kernel parameters."""

from .schemas import (
    ConstantsConfig,
    SamplingConfig,
    TracingConfig,
    EquilibriumConfig,
    SourceConfig,
    ProbeConfig,
    OutputConfig,
    VisualizationConfig,
    SimulationConfig,
)

__all__ = [
    "ConstantsConfig",
    "SamplingConfig",
    "TracingConfig",
    "EquilibriumConfig",
    "SourceConfig",
    "ProbeConfig",
    "OutputConfig",
    "VisualizationConfig",
    "SimulationConfig",
]
