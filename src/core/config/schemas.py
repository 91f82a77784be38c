"""
Pydantic schemas for configuration validation.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Tuple, Optional, Literal

from core.geometry.sources import FieldMode


class ConstantsConfig(BaseModel):
    """Physical constants and length scale (overridable for formula displays)."""
    coulomb: float = Field(
        default=8.99e9,
        gt=0,
        description="Coulomb constant k [N·m²/C²]"
    )
    gravitational: float = Field(
        default=6.674e-11,
        gt=0,
        description="Gravitational constant G [N·m²/kg²]"
    )
    min_distance: float = Field(
        default=0.1,
        gt=0,
        description="Distance floor applied before squaring [scene units]"
    )
    meters_per_scene_unit: float = Field(
        default=0.1,
        gt=0,
        description="Metres per scene unit"
    )

    def to_constants(self) -> "PhysicsConstants":
        """Build the kernel's frozen constants bundle."""
        from physics.constants import PhysicsConstants

        return PhysicsConstants(
            coulomb=self.coulomb,
            gravitational=self.gravitational,
            min_distance=self.min_distance,
            meters_per_scene_unit=self.meters_per_scene_unit,
        )


class SamplingConfig(BaseModel):
    """Lattice sampling for arrow rendering."""
    half_extent: float = Field(
        default=8.0,
        gt=0,
        description="Lattice half-width in each axis [scene units]"
    )
    step: float = Field(
        default=2.0,
        gt=0,
        description="Lattice spacing [scene units]"
    )
    max_samples: int = Field(
        default=500,
        gt=0,
        description="Cap on lattice size before deterministic thinning"
    )
    exclusion_radius: float = Field(
        default=0.8,
        ge=0,
        description="Skip lattice points closer than this to any source [scene units]"
    )
    min_field: float = Field(
        default=1e-10,
        ge=0,
        description="Omit samples whose field magnitude is below this floor"
    )


class TracingConfig(BaseModel):
    """Field line seeding and fixed-step integration."""
    seed_count: int = Field(
        default=200,
        ge=0,
        description="Number of seed points on the sphere shell"
    )
    seed_radius: float = Field(
        default=6.0,
        gt=0,
        description="Radius of the seed sphere shell [scene units]"
    )
    step_size: float = Field(
        default=0.05,
        gt=0,
        description="Euler step length [scene units]"
    )
    max_steps: int = Field(
        default=600,
        gt=0,
        description="Maximum steps per direction"
    )
    exclusion_radius: float = Field(
        default=0.15,
        ge=0,
        description="Stop tracing when this close to a source [scene units]"
    )
    bounds: float = Field(
        default=20.0,
        gt=0,
        description="Half-width of the tracing bounding box [scene units]"
    )
    min_field: float = Field(
        default=1e-15,
        ge=0,
        description="Stop tracing where the field magnitude vanishes"
    )
    min_points: int = Field(
        default=20,
        ge=1,
        description="Discard assembled lines shorter than this"
    )
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for line phase offsets (None = nondeterministic)"
    )


class EquilibriumConfig(BaseModel):
    """Zero-field point refinement."""
    tolerance: float = Field(
        default=1e-9,
        gt=0,
        description="Relative residual |E_net| / (|E1| + |E2|) accepted as converged"
    )
    max_iterations: int = Field(
        default=10,
        ge=0,
        description="Maximum refinement steps"
    )
    method: Literal["newton", "gradient"] = Field(
        default="newton",
        description="Refinement update rule"
    )
    gain: float = Field(
        default=1e-6,
        gt=0,
        description="Gradient method step per unit field [m per N/C]"
    )


class SourceConfig(BaseModel):
    """A single point source."""
    id: Optional[str] = Field(default=None, description="Source identifier")
    position: Tuple[float, float, float] = Field(..., description="Position (x, y, z)")
    value: float = Field(..., description="Signed charge [C] or mass [kg]")
    units: Literal["scene", "meters"] = Field(
        default="scene",
        description="Units of 'position'"
    )


class ProbeConfig(BaseModel):
    """Test charge / test mass."""
    position: Tuple[float, float, float] = Field(..., description="Position (x, y, z)")
    value: float = Field(default=1.0, description="Signed test charge [C] or mass [kg]")
    units: Literal["scene", "meters"] = Field(
        default="scene",
        description="Units of 'position'"
    )


class OutputConfig(BaseModel):
    """Output configuration."""
    directory: str = Field(
        default="./results",
        description="Output directory path"
    )
    protect_overwrite: bool = Field(
        default=False,
        description="Save into a timestamped subfolder"
    )


class VisualizationConfig(BaseModel):
    """Visualization settings."""
    enabled: bool = Field(default=True, description="Enable visualization")
    show_vectors: bool = Field(default=True, description="Draw sampled field arrows")
    show_lines: bool = Field(default=True, description="Draw traced field lines")
    show_equilibrium: bool = Field(default=True, description="Mark the equilibrium point")
    show_probe: bool = Field(default=True, description="Draw probe and force arrow")
    field_display_scale: float = Field(
        default=1.0,
        gt=0,
        description="Arrow length multiplier"
    )
    figsize: Tuple[float, float] = Field(
        default=(10.0, 8.0),
        description="Figure size (inches)"
    )


class SimulationConfig(BaseModel):
    """Top-level case configuration."""
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    name: str = Field(..., description="Case name")
    description: str = Field(default="", description="Case description")
    mode: Optional[FieldMode] = Field(
        default=None,
        description="Field mode (defaults to the preset's mode, else electric)"
    )
    preset: Optional[str] = Field(
        default=None,
        description="Start from a named preset instead of explicit sources"
    )
    sources: List[SourceConfig] = Field(
        default_factory=list,
        description="Point sources"
    )
    probe: Optional[ProbeConfig] = Field(default=None, description="Test charge/mass")

    constants: ConstantsConfig = Field(default_factory=ConstantsConfig)
    sampling: SamplingConfig = Field(default_factory=SamplingConfig)
    tracing: TracingConfig = Field(default_factory=TracingConfig)
    equilibrium: EquilibriumConfig = Field(default_factory=EquilibriumConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    visualization: VisualizationConfig = Field(default_factory=VisualizationConfig)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Check name is not blank."""
        if not v or not v.strip():
            raise ValueError("Case name cannot be empty")
        return v.strip()

    @field_validator('sources')
    @classmethod
    def check_unique_ids(cls, v):
        """Ensure explicit source ids are unique."""
        ids = [src.id for src in v if src.id is not None]
        if len(ids) != len(set(ids)):
            duplicates = [sid for sid in ids if ids.count(sid) > 1]
            raise ValueError(f"Duplicate source ids: {set(duplicates)}")
        return v

    @model_validator(mode='after')
    def check_preset_or_sources(self):
        """A case takes its sources from a preset or lists them, not both."""
        if self.preset is not None and self.sources:
            raise ValueError("Specify either 'preset' or 'sources', not both")
        return self
