"""
cel_shade package.

Purpose:
  Posterizing "cel shading" for RGB images. Pixels are bucketed by hue,
  saturation and value (or luminance), and every bucket is flattened to its
  mean colour. See cel_shade.cli for the command line.

Public API:
  cel_shade          : run both passes on a uint8 (H,W,3) buffer in place.
  shade_with_options : same, from loose CLI-style options; returns Ran or
                       ConfigurationProblem.
  aggregate_cells    : pass 1, per-cell sums and counts (read-only CellTable).
  rewrite_pixels     : pass 2, overwrite pixels with their cell mean.
  CelConfig          : immutable bucketing configuration.
  colour_convert     : RGB -> shifted HSV and relative luminance.
  bucket             : (hue, saturation, brightness) -> CellIndex.
  image_io           : Pillow decode/encode helpers.

Quick start:
  from cel_shade import CelConfig, ValueMode, cel_shade
  cfg = CelConfig((30.0, 90.0), saturation_chunks=4, brightness=ValueMode(5))
  cel_shade(rgb, cfg)
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import bucket
from . import colour_convert
from . import core_types
from . import image_io
from . import shade

from .core_types import (  # noqa: E402,F401
    CelConfig,
    CellStats,
    CellTable,
    ConfigurationError,
    ConfigurationProblem,
    InvariantViolation,
    LuminanceMode,
    Ran,
    ValueMode,
)
from .shade import (  # noqa: E402,F401
    aggregate_cells,
    cel_shade,
    rewrite_pixels,
    shade_with_options,
)

__all__ = [
    "__version__",
    "bucket",
    "colour_convert",
    "core_types",
    "image_io",
    "shade",
    "CelConfig",
    "CellStats",
    "CellTable",
    "ConfigurationError",
    "ConfigurationProblem",
    "InvariantViolation",
    "LuminanceMode",
    "Ran",
    "ValueMode",
    "aggregate_cells",
    "cel_shade",
    "rewrite_pixels",
    "shade_with_options",
]
