"""IO utilities: case loader and built-in presets."""

from .presets import Preset, PRESETS, available_presets, get_preset, load_preset
from .case_loader import CaseLoader
from .case import Case

__all__ = [
    "Preset",
    "PRESETS",
    "available_presets",
    "get_preset",
    "load_preset",
    "CaseLoader",
    "Case",
]
