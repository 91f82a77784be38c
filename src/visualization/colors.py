"""
Display mapping: colours and arrow lengths for sources, samples and forces.

Hue identifies the dominant source, brightness encodes field strength. Arrow
lengths vary only slightly with strength so colour stays the primary cue.
"""

import math
from typing import Optional, Sequence, Tuple
from matplotlib.colors import to_rgb

from core.geometry.sources import FieldMode, FieldSource

RGB = Tuple[float, float, float]

POSITIVE_COLOR = "#ff3333"
NEGATIVE_COLOR = "#3399ff"
GRAVITY_PALETTE = ("#ffdd00", "#00ff88", "#00aaff", "#ff6600", "#cc00ff")
NEUTRAL_COLOR = "#999999"
PROBE_COLOR = "#b197fc"
FORCE_COLOR = "#fffb00"
EQUILIBRIUM_COLOR = "#ffffff"

MIN_BRIGHTNESS = 0.45
BASE_ARROW_LENGTH = 0.6       # scene units
LENGTH_VARIATION = 0.3        # up to 1.3x at full strength

MIN_FORCE_LENGTH = 0.2        # scene units
MAX_FORCE_LENGTH = 1.5
FORCE_LOG_RANGE = (1e-15, 1e-6)   # N
MIN_VISIBLE_FORCE = 1e-12         # N


def source_color(index: int, mode: FieldMode, source: FieldSource) -> str:
    """
    Base colour of a source.

    Electric sources are coloured by sign (zero counts as positive); gravity
    sources cycle through a fixed palette by index.
    """
    if FieldMode(mode) is FieldMode.ELECTRIC:
        return POSITIVE_COLOR if source.value >= 0 else NEGATIVE_COLOR
    return GRAVITY_PALETTE[index % len(GRAVITY_PALETTE)]


def arrow_brightness(strength: float) -> float:
    """Brightness 0.45 + 0.55 t, clamped to [0.45, 1]."""
    return max(MIN_BRIGHTNESS, min(1.0, MIN_BRIGHTNESS + (1.0 - MIN_BRIGHTNESS) * strength))


def arrow_color(strength: float,
                dominant_source: int,
                sources: Sequence[FieldSource],
                mode: FieldMode) -> RGB:
    """RGB of a sample arrow: dominant source hue scaled by brightness."""
    if len(sources) == 0:
        return to_rgb(NEUTRAL_COLOR)
    base = to_rgb(source_color(dominant_source, mode, sources[dominant_source]))
    b = arrow_brightness(strength)
    return (base[0] * b, base[1] * b, base[2] * b)


def arrow_length(strength: float, scale: float = 1.0) -> float:
    """Arrow length 0.6 (1 + 0.3 t) * scale [scene units]."""
    return BASE_ARROW_LENGTH * (1.0 + LENGTH_VARIATION * strength) * scale


def force_arrow_length(magnitude: float) -> Optional[float]:
    """
    Length of the probe force arrow [scene units].

    Log-scales 1e-15..1e-6 N onto 0.2..1.5. Returns None below 1e-12 N, where
    the arrow is not drawn.
    """
    if magnitude < MIN_VISIBLE_FORCE:
        return None
    lo, hi = FORCE_LOG_RANGE
    log_min, log_max = math.log10(lo), math.log10(hi)
    t = (math.log10(max(magnitude, lo)) - log_min) / (log_max - log_min)
    t = max(0.0, min(1.0, t))
    return MIN_FORCE_LENGTH + t * (MAX_FORCE_LENGTH - MIN_FORCE_LENGTH)
