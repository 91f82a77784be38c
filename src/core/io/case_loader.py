"""
YAML case file loader with validation.
"""

from pathlib import Path
from typing import Tuple
import yaml

from ..config.schemas import SimulationConfig
from ..geometry.scene import Scene
from ..geometry.sources import FieldMode
from .presets import load_preset
from .case import Case
from physics.units import meters_to_scene


class CaseLoader:
    """Load and validate field cases from YAML files."""

    @staticmethod
    def load(filepath: str | Path) -> Tuple[Scene, SimulationConfig]:
        """
        Load case file and create Scene.

        Args:
            filepath: Path to YAML case file

        Returns:
            Tuple of (Scene object, validated config)

        Note:
            Consider using load_case() instead for cleaner access.
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"Case file not found: {filepath}")

        with open(filepath, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        config = SimulationConfig(**raw_config)
        scene = CaseLoader.build_scene(config)

        return scene, config

    @staticmethod
    def _to_scene_units(position, units: str, scale: float):
        if units == "meters":
            return tuple(meters_to_scene(position, scale))
        return position

    @staticmethod
    def build_scene(config: SimulationConfig) -> Scene:
        """
        Build Scene from validated config.

        Sources given in metres are converted with the configured length
        scale. A preset provides sources and probe unless the case overrides
        the probe; an explicit mode overrides the preset's mode.

        Raises:
            KeyError: If the preset name is unknown
        """
        scale = config.constants.meters_per_scene_unit

        if config.preset is not None:
            scene = load_preset(config.preset)
            scene = Scene(
                name=config.name,
                mode=config.mode if config.mode is not None else scene.mode,
                sources=scene.sources,
                probe=scene.probe,
                description=config.description or scene.description,
            )
        else:
            scene = Scene(
                name=config.name,
                mode=config.mode if config.mode is not None else FieldMode.ELECTRIC,
                description=config.description,
            )
            for src in config.sources:
                position = CaseLoader._to_scene_units(src.position, src.units, scale)
                scene = scene.add_source(position, src.value, source_id=src.id)

        if config.probe is not None:
            position = CaseLoader._to_scene_units(config.probe.position, config.probe.units, scale)
            scene = scene.with_probe(position, config.probe.value)

        return scene

    @staticmethod
    def validate(filepath: str | Path) -> bool:
        """
        Validate case file without building scene.

        Args:
            filepath: Path to YAML case file

        Returns:
            True if valid, raises ValidationError otherwise
        """
        filepath = Path(filepath)

        with open(filepath, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        # Raises ValidationError if invalid
        SimulationConfig(**raw_config)

        return True

    @staticmethod
    def load_case(case_dir: str | Path) -> Case:
        """
        Load a case directory and return a Case object.

        This is the recommended way to load cases:
            case = CaseLoader.load_case('cases/dipole')
            print(case.name, case.mode)
            snapshot = FieldScene.from_case(case).compute(case.scene)

        Args:
            case_dir: Path to case directory (containing case.yaml)

        Returns:
            Case object with scene, config, and helper properties
        """
        case_dir = Path(case_dir)
        case_file = case_dir / "case.yaml"

        if not case_file.exists():
            raise FileNotFoundError(f"No case.yaml found in {case_dir}")

        scene, config = CaseLoader.load(case_file)

        return Case(
            scene=scene,
            config=config,
            case_dir=case_dir
        )
