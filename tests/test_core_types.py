from __future__ import annotations

import math

import numpy as np
import pytest

from cel_shade.core_types import (
    CelConfig,
    CellStats,
    CellTable,
    ConfigurationError,
    InvariantViolation,
    LuminanceMode,
    ValueMode,
    assert_u8_image_rgb,
)


def test_from_options_sorts_thresholds():
    cfg = CelConfig.from_options([200, 10.5, 90], 3, value_chunks=4)
    assert cfg.hue_thresholds == (10.5, 90.0, 200.0)
    assert cfg.brightness == ValueMode(4)
    assert not cfg.uses_luminance


def test_from_options_luminance():
    cfg = CelConfig.from_options([], 2, luminance_chunks=6)
    assert cfg.brightness == LuminanceMode(6)
    assert cfg.uses_luminance
    assert cfg.brightness_name == "luminance"


def test_from_options_needs_a_brightness_axis():
    with pytest.raises(ConfigurationError, match="Either luminance bounds or value bounds"):
        CelConfig.from_options([], 2)


def test_from_options_rejects_both_axes():
    with pytest.raises(ConfigurationError, match="mutually exclusive"):
        CelConfig.from_options([], 2, value_chunks=3, luminance_chunks=3)


@pytest.mark.parametrize("sat, val", [(0, 3), (3, 0), (-1, 3), (2, -5), (True, 3)])
def test_rejects_non_positive_chunks(sat, val):
    with pytest.raises(ConfigurationError):
        CelConfig.from_options([], sat, value_chunks=val)


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_rejects_non_finite_thresholds(bad):
    with pytest.raises(ConfigurationError):
        CelConfig.from_options([10.0, bad], 2, value_chunks=2)


def test_direct_construction_requires_sorted_thresholds():
    with pytest.raises(ConfigurationError):
        CelConfig((90.0, 10.0), 2, ValueMode(2))


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)
    assert issubclass(InvariantViolation, RuntimeError)


def test_config_is_frozen():
    cfg = CelConfig((), 1, ValueMode(1))
    with pytest.raises(AttributeError):
        cfg.saturation_chunks = 2  # type: ignore[misc]


def test_cell_stats_mean_truncates():
    stats = CellStats((0, 0, 0), 0).add((255, 10, 1)).add((200, 11, 0))
    assert stats.count == 2
    assert stats.sums == (455, 21, 1)
    assert stats.mean == (227, 10, 0)


def test_cell_table_is_read_only():
    table = CellTable.build({(0, 1, 2): CellStats((10, 20, 30), 2)}, [(5, 1), (1, 1)])
    assert len(table) == 1
    assert (0, 1, 2) in table
    assert table.mean_of((0, 1, 2)) == (5, 10, 15)
    assert table.hue_histogram == ((1, 1), (5, 1))
    with pytest.raises(TypeError):
        table.stats[(9, 9, 9)] = CellStats((0, 0, 0), 1)  # type: ignore[index]


def test_cell_table_missing_cell():
    table = CellTable.build({})
    with pytest.raises(InvariantViolation):
        table.mean_of((0, 0, 0))


def test_small_helpers():
    img = np.zeros((1, 1, 3), dtype=np.uint8)
    assert assert_u8_image_rgb(img) is img
    with pytest.raises(TypeError):
        assert_u8_image_rgb(np.zeros((1, 1), dtype=np.uint8))
