"""
Built-in classroom scenes.

Presets list sources without ids; ids are generated when the preset is
applied. A preset without a mode keeps the mode of the scene it is applied to.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..geometry.primitives import VectorLike
from ..geometry.scene import Scene
from ..geometry.sources import FieldMode
from physics.units import meters_to_scene


@dataclass(frozen=True)
class Preset:
    """
    Attributes:
        name: Registry key
        description: Short human-readable summary
        sources: (position [scene units], value) pairs
        probe: Optional (position [scene units], value)
        mode: Mode override, None to keep the current mode
    """
    name: str
    description: str
    sources: Tuple[Tuple[VectorLike, float], ...]
    probe: Optional[Tuple[VectorLike, float]] = None
    mode: Optional[FieldMode] = None


PRESETS: Dict[str, Preset] = {
    "single_source": Preset(
        name="single_source",
        description="Single source at the origin",
        sources=(((0.0, 0.0, 0.0), 2.0),),
        probe=((2.0, 0.0, 0.0), 1.0),
    ),
    "dipole": Preset(
        name="dipole",
        description="Positive and negative charge pair",
        sources=(
            ((-1.0, 0.0, 0.0), 2.0),
            ((1.0, 0.0, 0.0), -2.0),
        ),
        probe=((0.0, 1.0, 0.0), 1.0),
        mode=FieldMode.ELECTRIC,
    ),
    "two_like_charges": Preset(
        name="two_like_charges",
        description="Two equal like charges",
        sources=(
            ((-2.0, 0.0, 0.0), 2.0),
            ((2.0, 0.0, 0.0), 2.0),
        ),
        probe=((0.0, 0.0, 0.0), 1.0),
    ),
    "planet_test_mass": Preset(
        name="planet_test_mass",
        description="Planet and test mass",
        sources=(((0.0, 0.0, 0.0), 10.0),),
        probe=((3.0, 0.0, 0.0), 1.0),
        mode=FieldMode.GRAVITY,
    ),
    # Two point charges 45 cm apart with the test charge at P (origin):
    # q1 = +3.3e-9 C at x = -0.27 m, q2 = -1.0e-8 C at x = +0.18 m, q = +2.0e-12 C
    "sample_problem_1": Preset(
        name="sample_problem_1",
        description="Textbook problem: two point charges in 1D",
        sources=(
            (tuple(meters_to_scene((-0.27, 0.0, 0.0))), 3.3e-9),
            (tuple(meters_to_scene((0.18, 0.0, 0.0))), -1.0e-8),
        ),
        probe=(tuple(meters_to_scene((0.0, 0.0, 0.0))), 2.0e-12),
        mode=FieldMode.ELECTRIC,
    ),
}


def available_presets() -> List[str]:
    """Names of the built-in presets."""
    return list(PRESETS)


def get_preset(name: str) -> Preset:
    """
    Raises:
        KeyError: If no preset has this name
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise KeyError(
            f"Unknown preset '{name}'. Available: {', '.join(available_presets())}"
        ) from None


def load_preset(name: str, base: Optional[Scene] = None) -> Scene:
    """
    Build a scene from a preset.

    Args:
        name: Preset name
        base: Scene being replaced; supplies the mode when the preset has none

    Returns:
        New Scene holding the preset's sources and probe
    """
    preset = get_preset(name)

    if preset.mode is not None:
        mode = preset.mode
    elif base is not None:
        mode = base.mode
    else:
        mode = FieldMode.ELECTRIC

    scene = Scene(name=preset.name, mode=mode, description=preset.description)
    for position, value in preset.sources:
        scene = scene.add_source(position, value)
    if preset.probe is not None:
        position, value = preset.probe
        scene = scene.with_probe(position, value)
    return scene
