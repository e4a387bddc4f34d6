# cel_shade/bucket.py
from __future__ import annotations

"""
Map (hue, saturation, value-or-luminance) to a discrete CellIndex.

Hue uses an explicit sorted threshold list; saturation and value/luminance
are split into equal-width chunks of the 0..100 range. Chunk buckets are
unbounded above: a scalar of exactly 100 lands in bucket `chunks`. Quotients
within a hair of an integer are snapped to it before flooring, so float
rounding in 100 / chunks never drops a boundary value into the bucket below.
"""

import math
from typing import Sequence

import numpy as np

from .colour_convert import luminance, luminance_pixel, rgb_to_hsv, rgb_to_hsv_pixel
from .constants import PERCENT_SCALE
from .core_types import CelConfig, CellArray, CellIndex, F64Plane


def hue_bucket(hue: float, thresholds: Sequence[float]) -> int:
    """Number of sorted thresholds the hue has reached (hue >= threshold)."""
    index = 0
    for threshold in thresholds:
        if hue >= threshold:
            index += 1
        else:
            break
    return index


def hue_buckets(hue: F64Plane, thresholds: Sequence[float]) -> np.ndarray:
    """Vectorised hue_bucket. Returns int64 with hue's shape."""
    if len(thresholds) == 0:
        return np.zeros(np.shape(hue), dtype=np.int64)
    edges = np.asarray(thresholds, dtype=np.float64)
    return np.searchsorted(edges, hue, side="right").astype(np.int64, copy=False)


# Quotients this close to an integer are treated as that integer, so that
# 100 / (100 / chunks) floors to chunks for every chunk count.
_SNAP_TOLERANCE = 1e-9


def chunk_bucket(pct: float, chunks: int) -> int:
    """floor(pct / (100 / chunks)), with near-integer quotients snapped."""
    q = pct / (PERCENT_SCALE / chunks)
    nearest = round(q)
    if abs(q - nearest) < _SNAP_TOLERANCE:
        q = float(nearest)
    return int(math.floor(q))


def chunk_buckets(pct: F64Plane, chunks: int) -> np.ndarray:
    """Vectorised chunk_bucket. Returns int64 with pct's shape."""
    q = np.asarray(pct, dtype=np.float64) / (PERCENT_SCALE / chunks)
    nearest = np.rint(q)
    q = np.where(np.abs(q - nearest) < _SNAP_TOLERANCE, nearest, q)
    return np.floor(q).astype(np.int64)


def bucket(
    hue: float, saturation_pct: float, brightness_pct: float, config: CelConfig
) -> CellIndex:
    """Cell for one sample; brightness_pct is value or luminance per config."""
    return (
        hue_bucket(hue, config.hue_thresholds),
        chunk_bucket(saturation_pct, config.saturation_chunks),
        chunk_bucket(brightness_pct, config.brightness.chunks),
    )


def cell_index_of_pixel(rgb: Sequence[int], config: CelConfig) -> CellIndex:
    """Converter + indexer for a single pixel."""
    hsv = rgb_to_hsv_pixel(rgb)
    if config.uses_luminance:
        brightness = luminance_pixel(rgb) * PERCENT_SCALE
    else:
        brightness = hsv.value
    return bucket(hsv.hue, hsv.saturation, brightness, config)


def brightness_plane(image: np.ndarray, value: F64Plane, config: CelConfig) -> F64Plane:
    """Scalar feeding the third axis: HSV value or luminance, 0..100."""
    if config.uses_luminance:
        return luminance(image) * PERCENT_SCALE
    return value


def cells_from_planes(
    hue: F64Plane, sat: F64Plane, brightness: F64Plane, config: CelConfig
) -> CellArray:
    """Stack the three per-axis buckets into int64 (N, 3) rows."""
    out = np.empty((hue.size, 3), dtype=np.int64)
    out[:, 0] = hue_buckets(hue, config.hue_thresholds).reshape(-1)
    out[:, 1] = chunk_buckets(sat, config.saturation_chunks).reshape(-1)
    out[:, 2] = chunk_buckets(brightness, config.brightness.chunks).reshape(-1)
    return out


def cell_indices(image: np.ndarray, config: CelConfig) -> CellArray:
    """
    Cell index rows for every pixel of an (H, W, 3) buffer, row-major.

    Returns int64 (H*W, 3). Pure function of the buffer and config, so both
    passes agree on every pixel.
    """
    hue, sat, val = rgb_to_hsv(image)
    return cells_from_planes(hue, sat, brightness_plane(image, val, config), config)


__all__ = [
    "hue_bucket",
    "hue_buckets",
    "chunk_bucket",
    "chunk_buckets",
    "bucket",
    "cell_index_of_pixel",
    "brightness_plane",
    "cells_from_planes",
    "cell_indices",
]
