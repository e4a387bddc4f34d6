# cel_shade/constants.py
from __future__ import annotations

"""
Shared constants for the cel-shading passes and the CLI.
"""

from typing import Tuple

# Hue comes out of the hexcone conversion in a signed range; shifting by this
# many degrees puts it in [0, 360).
HUE_SHIFT_DEGREES: float = 180.0
HUE_FULL_TURN: float = 360.0

# Saturation, value and luminance are bucketed on a 0..100 scale.
PERCENT_SCALE: float = 100.0

# Relative luminance weights applied to the raw 8-bit channels.
LUMINANCE_WEIGHTS: Tuple[float, float, float] = (0.212671, 0.715160, 0.072169)

CHANNEL_MAX: float = 255.0

MISSING_BRIGHTNESS_MESSAGE = (
    "Either luminance bounds or value bounds must be specified!"
)

DEFAULT_OUTPUT_SUFFIX = "_cel"

__all__ = [
    "HUE_SHIFT_DEGREES",
    "HUE_FULL_TURN",
    "PERCENT_SCALE",
    "LUMINANCE_WEIGHTS",
    "CHANNEL_MAX",
    "MISSING_BRIGHTNESS_MESSAGE",
    "DEFAULT_OUTPUT_SUFFIX",
]
