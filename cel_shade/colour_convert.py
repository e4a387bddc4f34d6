# cel_shade/colour_convert.py
from __future__ import annotations

"""
Colour conversions used for bucketing.

Exports:
  rgb_to_hsv_pixel(rgb)   -> HSVSample
  luminance_pixel(rgb)    -> float in [0, 1]
  rgb_to_hsv(image)       -> (hue, saturation, value) planes
  luminance(image)        -> float64 plane in [0, 1]

Hue is the hexcone hue shifted by 180 degrees and wrapped into [0, 360):
pure red sits at 180, cyan at 0. Saturation and value are scaled to 0..100.

The scalar and vectorised paths use the same float64 operations in the same
order, so a pixel lands in the same bucket whichever path computed it.
"""

from typing import Sequence, Tuple

import numpy as np

from .constants import (
    CHANNEL_MAX,
    HUE_FULL_TURN,
    HUE_SHIFT_DEGREES,
    LUMINANCE_WEIGHTS,
    PERCENT_SCALE,
)
from .core_types import F64Plane, HSVSample

_WR, _WG, _WB = LUMINANCE_WEIGHTS


# Scalar reference


def _shift_hue(hue_deg: float) -> float:
    return (hue_deg + HUE_SHIFT_DEGREES) % HUE_FULL_TURN


def rgb_to_hsv_pixel(rgb: Sequence[int]) -> HSVSample:
    """Convert one 8-bit RGB triple to a shifted HSVSample."""
    r, g, b = float(rgb[0]), float(rgb[1]), float(rgb[2])
    mx = max(r, g, b)
    mn = min(r, g, b)
    d = mx - mn

    if d == 0.0:
        h = 0.0
    elif mx == r:
        h = ((g - b) / d % 6.0) * 60.0
    elif mx == g:
        h = ((b - r) / d + 2.0) * 60.0
    else:
        h = ((r - g) / d + 4.0) * 60.0

    s = d / mx * PERCENT_SCALE if mx > 0.0 else 0.0
    v = mx / CHANNEL_MAX * PERCENT_SCALE
    return HSVSample(_shift_hue(h), s, v)


def luminance_pixel(rgb: Sequence[int]) -> float:
    """Relative luminance of one 8-bit RGB triple, in [0, 1]."""
    r, g, b = float(rgb[0]), float(rgb[1]), float(rgb[2])
    return (_WR * r + _WG * g + _WB * b) / CHANNEL_MAX


# Vectorised


def rgb_to_hsv(image: np.ndarray) -> Tuple[F64Plane, F64Plane, F64Plane]:
    """
    Vectorised HSV for an array[..., 3] of 8-bit channels.

    Returns (hue, saturation, value) as float64 arrays shaped like image[..., 0].
    """
    arr = np.asarray(image).astype(np.float64, copy=False)
    r = arr[..., 0]
    g = arr[..., 1]
    b = arr[..., 2]
    mx = arr.max(axis=-1)
    mn = arr.min(axis=-1)
    d = mx - mn

    grey = d == 0.0
    safe_d = np.where(grey, 1.0, d)
    h_r = np.mod((g - b) / safe_d, 6.0)
    h_g = (b - r) / safe_d + 2.0
    h_b = (r - g) / safe_d + 4.0
    h = np.where(mx == r, h_r, np.where(mx == g, h_g, h_b)) * 60.0
    h = np.where(grey, 0.0, h)
    hue = np.mod(h + HUE_SHIFT_DEGREES, HUE_FULL_TURN)

    sat = np.zeros_like(mx)
    np.divide(d, mx, out=sat, where=mx > 0.0)
    sat *= PERCENT_SCALE

    val = mx / CHANNEL_MAX * PERCENT_SCALE
    return hue, sat, val


def luminance(image: np.ndarray) -> F64Plane:
    """Vectorised relative luminance in [0, 1] for an array[..., 3]."""
    arr = np.asarray(image).astype(np.float64, copy=False)
    return (_WR * arr[..., 0] + _WG * arr[..., 1] + _WB * arr[..., 2]) / CHANNEL_MAX


__all__ = [
    "rgb_to_hsv_pixel",
    "luminance_pixel",
    "rgb_to_hsv",
    "luminance",
]
