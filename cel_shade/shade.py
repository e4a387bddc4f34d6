# cel_shade/shade.py
from __future__ import annotations

"""
Two-pass cel shading.

Pass 1 (aggregate_cells) buckets every pixel and accumulates per-cell channel
sums and counts into a read-only CellTable. Pass 2 (rewrite_pixels) buckets
every pixel again and overwrites it with its cell's floor mean. Pass 2 must
not start before pass 1 has seen the whole buffer.
"""

from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np

from .bucket import brightness_plane, cell_index_of_pixel, cell_indices, cells_from_planes
from .colour_convert import rgb_to_hsv, rgb_to_hsv_pixel
from .core_types import (
    CelConfig,
    CellIndex,
    CellStats,
    CellTable,
    ConfigurationError,
    ConfigurationProblem,
    F64Plane,
    Ran,
    ShadeOutcome,
    U8Image,
    assert_u8_image_rgb,
)


def hue_histogram(hue: F64Plane) -> Tuple[Tuple[int, int], ...]:
    """(truncated hue degree, count) pairs sorted by hue."""
    flat = np.asarray(hue, dtype=np.float64).reshape(-1)
    if flat.size == 0:
        return ()
    degrees, counts = np.unique(flat.astype(np.int64), return_counts=True)
    return tuple(zip(degrees.tolist(), counts.tolist()))


def aggregate_cells(
    image: np.ndarray, config: CelConfig, *, with_histogram: bool = True
) -> CellTable:
    """
    Pass 1: per-cell channel sums and pixel counts. Does not touch image.

    Channel sums are exact and stored as int64. The hue histogram is optional
    instrumentation; it never affects bucketing.
    """
    rgb = assert_u8_image_rgb(image)
    flat = rgb.reshape(-1, 3)
    if flat.shape[0] == 0:
        return CellTable.build({})

    hue, sat, val = rgb_to_hsv(rgb)
    cells = cells_from_planes(hue, sat, brightness_plane(rgb, val, config), config)

    uniq, inverse, counts = np.unique(
        cells, axis=0, return_inverse=True, return_counts=True
    )
    inverse = inverse.reshape(-1)
    n_cells = uniq.shape[0]
    # float64 bincount sums are exact integers up to 2**53.
    sums = np.stack(
        [
            np.rint(np.bincount(inverse, weights=flat[:, c], minlength=n_cells))
            for c in range(3)
        ],
        axis=1,
    ).astype(np.int64)

    stats: Dict[CellIndex, CellStats] = {
        (int(h), int(s), int(v)): CellStats((int(r), int(g), int(b)), int(n))
        for (h, s, v), (r, g, b), n in zip(uniq.tolist(), sums.tolist(), counts.tolist())
    }
    histogram = hue_histogram(hue) if with_histogram else ()
    return CellTable.build(stats, histogram)


def aggregate_pixels(
    pixels: Iterable[Sequence[int]], config: CelConfig
) -> CellTable:
    """
    Scalar pass 1 over any iterable of RGB triples.

    Slow; kept as the per-pixel reference for aggregate_cells.
    """
    stats: Dict[CellIndex, CellStats] = {}
    hues: Dict[int, int] = {}
    for rgb in pixels:
        index = cell_index_of_pixel(rgb, config)
        current = stats.get(index)
        if current is None:
            current = CellStats((0, 0, 0), 0)
        stats[index] = current.add(rgb)
        degree = int(rgb_to_hsv_pixel(rgb).hue)
        hues[degree] = hues.get(degree, 0) + 1
    return CellTable.build(stats, hues.items())


def rewrite_pixels(image: np.ndarray, table: CellTable, config: CelConfig) -> U8Image:
    """
    Pass 2: overwrite every pixel with its cell's mean, in place.

    table is only read. Raises InvariantViolation if a pixel maps to a cell
    table does not hold, which means table came from a different buffer or
    config.
    """
    rgb = assert_u8_image_rgb(image)
    if rgb.size == 0:
        return rgb

    cells = cell_indices(rgb, config)
    uniq, inverse = np.unique(cells, axis=0, return_inverse=True)
    inverse = inverse.reshape(-1)

    means = np.empty((uniq.shape[0], 3), dtype=np.uint8)
    for i, (h, s, v) in enumerate(uniq.tolist()):
        means[i] = table.mean_of((h, s, v))

    rgb[...] = means[inverse].reshape(rgb.shape)
    return rgb


def cel_shade(image: np.ndarray, config: CelConfig) -> CellTable:
    """Run both passes on image (mutated in place). Returns the pass-1 table."""
    table = aggregate_cells(image, config)
    rewrite_pixels(image, table, config)
    return table


def shade_with_options(
    image: np.ndarray,
    hue_thresholds: Iterable[float],
    saturation_chunks: int,
    value_chunks: Optional[int] = None,
    luminance_chunks: Optional[int] = None,
) -> ShadeOutcome:
    """
    Validate loose options, then cel shade image in place.

    Returns Ran on success, or ConfigurationProblem (image untouched) when the
    options do not form a valid config.
    """
    try:
        config = CelConfig.from_options(
            hue_thresholds, saturation_chunks, value_chunks, luminance_chunks
        )
    except ConfigurationError as e:
        return ConfigurationProblem(str(e))

    table = cel_shade(image, config)
    return Ran(len(table), table.pixel_count, table.hue_histogram)


__all__ = [
    "hue_histogram",
    "aggregate_cells",
    "aggregate_pixels",
    "rewrite_pixels",
    "cel_shade",
    "shade_with_options",
]
