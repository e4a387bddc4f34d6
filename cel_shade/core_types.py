# cel_shade/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, errors, and lightweight helpers.
"""

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .constants import MISSING_BRIGHTNESS_MESSAGE

# Basic aliases

RGBTuple = Tuple[int, int, int]
CellIndex = Tuple[int, int, int]  # (hue bucket, saturation bucket, value/luminance bucket)

U8Image = NDArray[np.uint8]  # (H, W, 3)
F64Plane = NDArray[np.float64]  # (H, W) or (N,)
CellArray = NDArray[np.int64]  # (N, 3) cell index rows

# Errors


class CelShadeError(Exception):
    """Base class for cel-shading errors."""


class ConfigurationError(CelShadeError, ValueError):
    """Bucketing options are missing or out of range."""


class InvariantViolation(CelShadeError, RuntimeError):
    """Pass 2 produced a cell that pass 1 never saw. Always a bug."""


# Value objects


@dataclass(frozen=True)
class HSVSample:
    """Per-pixel HSV: hue in [0, 360), saturation and value in [0, 100]."""

    hue: float
    saturation: float
    value: float


@dataclass(frozen=True)
class ValueMode:
    """Bucket the third axis on HSV value."""

    chunks: int


@dataclass(frozen=True)
class LuminanceMode:
    """Bucket the third axis on relative luminance."""

    chunks: int


BrightnessMode = Union[ValueMode, LuminanceMode]


@dataclass(frozen=True)
class CelConfig:
    """
    Immutable bucketing configuration for one run.

    hue_thresholds must be sorted ascending; use from_options() to build one
    from loose CLI-style values.
    """

    hue_thresholds: Tuple[float, ...]
    saturation_chunks: int
    brightness: BrightnessMode

    def __post_init__(self) -> None:
        if not _is_positive_int(self.saturation_chunks):
            raise ConfigurationError(
                f"saturation chunks must be a positive integer, got {self.saturation_chunks!r}"
            )
        if not isinstance(self.brightness, (ValueMode, LuminanceMode)):
            raise ConfigurationError(f"unknown brightness mode {self.brightness!r}")
        if not _is_positive_int(self.brightness.chunks):
            raise ConfigurationError(
                f"{self.brightness_name} chunks must be a positive integer, "
                f"got {self.brightness.chunks!r}"
            )
        for t in self.hue_thresholds:
            if not math.isfinite(t):
                raise ConfigurationError(f"hue threshold must be finite, got {t!r}")
        if list(self.hue_thresholds) != sorted(self.hue_thresholds):
            raise ConfigurationError("hue thresholds must be sorted ascending")

    @classmethod
    def from_options(
        cls,
        hue_thresholds: Iterable[float],
        saturation_chunks: int,
        value_chunks: Optional[int] = None,
        luminance_chunks: Optional[int] = None,
    ) -> "CelConfig":
        """
        Build a config from CLI-style options.

        Exactly one of value_chunks / luminance_chunks must be given.
        Raises ConfigurationError otherwise.
        """
        if value_chunks is None and luminance_chunks is None:
            raise ConfigurationError(MISSING_BRIGHTNESS_MESSAGE)
        if value_chunks is not None and luminance_chunks is not None:
            raise ConfigurationError(
                "value chunks and luminance chunks are mutually exclusive"
            )
        brightness: BrightnessMode = (
            ValueMode(value_chunks)
            if value_chunks is not None
            else LuminanceMode(luminance_chunks)  # type: ignore[arg-type]
        )
        thresholds = tuple(sorted(float(t) for t in hue_thresholds))
        return cls(thresholds, saturation_chunks, brightness)

    @property
    def uses_luminance(self) -> bool:
        return isinstance(self.brightness, LuminanceMode)

    @property
    def brightness_name(self) -> str:
        return "luminance" if self.uses_luminance else "value"


@dataclass(frozen=True)
class CellStats:
    """Running channel sums and pixel count for one cell."""

    sums: Tuple[int, int, int]
    count: int

    @property
    def mean(self) -> RGBTuple:
        """Per-channel floor(sum / count)."""
        r, g, b = self.sums
        c = self.count
        return (r // c, g // c, b // c)

    def add(self, rgb: Sequence[int]) -> "CellStats":
        """Return a copy with one more pixel accumulated."""
        r, g, b = self.sums
        return CellStats(
            (r + int(rgb[0]), g + int(rgb[1]), b + int(rgb[2])), self.count + 1
        )


@dataclass(frozen=True, eq=False)
class CellTable:
    """
    Read-only result of pass 1.

    stats maps every occupied CellIndex to its CellStats. hue_histogram is
    instrumentation only and never feeds back into bucketing.
    """

    stats: Mapping[CellIndex, CellStats]
    hue_histogram: Tuple[Tuple[int, int], ...] = ()

    @classmethod
    def build(
        cls,
        stats: Mapping[CellIndex, CellStats],
        hue_histogram: Iterable[Tuple[int, int]] = (),
    ) -> "CellTable":
        frozen: Dict[CellIndex, CellStats] = dict(stats)
        return cls(MappingProxyType(frozen), tuple(sorted(hue_histogram)))

    def __len__(self) -> int:
        return len(self.stats)

    def __contains__(self, index: object) -> bool:
        return index in self.stats

    def mean_of(self, index: CellIndex) -> RGBTuple:
        """Mean colour of a cell; a missing cell is an InvariantViolation."""
        try:
            return self.stats[index].mean
        except KeyError:
            raise InvariantViolation(
                f"cell {index} was not recorded in pass 1"
            ) from None

    @property
    def pixel_count(self) -> int:
        return sum(s.count for s in self.stats.values())


# Outcomes


@dataclass(frozen=True)
class Ran:
    """Both passes completed and the buffer was rewritten."""

    cell_count: int
    pixel_count: int
    hue_histogram: Tuple[Tuple[int, int], ...] = ()


@dataclass(frozen=True)
class ConfigurationProblem:
    """Nothing ran; message is meant for the user."""

    message: str


ShadeOutcome = Union[Ran, ConfigurationProblem]


# Small helpers


def _is_positive_int(value: object) -> bool:
    return (
        isinstance(value, (int, np.integer))
        and not isinstance(value, bool)
        and int(value) > 0
    )


def assert_u8_image_rgb(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,3) image and return it typed as U8Image."""
    if (
        not isinstance(image, np.ndarray)
        or image.dtype != np.uint8
        or image.ndim != 3
        or image.shape[-1] != 3
    ):
        raise TypeError("expected uint8 (H,W,3) image")
    return image  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "RGBTuple",
    "CellIndex",
    "U8Image",
    "F64Plane",
    "CellArray",
    # errors
    "CelShadeError",
    "ConfigurationError",
    "InvariantViolation",
    # value objects
    "HSVSample",
    "ValueMode",
    "LuminanceMode",
    "BrightnessMode",
    "CelConfig",
    "CellStats",
    "CellTable",
    # outcomes
    "Ran",
    "ConfigurationProblem",
    "ShadeOutcome",
    # helpers
    "assert_u8_image_rgb",
]
