from __future__ import annotations

from cel_shade.utils import (
    count_distinct_colours,
    format_number_compact,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    print_config_line,
    top_hue_degrees,
)

from .conftest import u8


def test_key_value_pairs_group_thousands():
    line = key_value_pairs_to_string(
        [("Hue thresholds", "30,90"), ("Saturation chunks", 4), ("Pixels", 1234567)]
    )
    assert line == "Hue thresholds: 30,90  Saturation chunks: 4  Pixels: 1,234,567"


def test_format_number_compact_passes_strings_through():
    assert format_number_compact(12000) == "12,000"
    assert format_number_compact("-") == "-"


def test_config_line_routes_to_debug(capsys):
    print_config_line("cel", [("Value chunks", 5)], debug=True)
    print_config_line("cel", [("Value chunks", 5)], debug=False)
    assert capsys.readouterr().out.splitlines() == [
        "[debug] [cel] Value chunks: 5",
        "[cel] Value chunks: 5",
    ]


def test_durations():
    assert format_seconds_compact(0.0125) == "12.5ms"
    assert format_seconds_compact(2.5) == "2.500s"
    assert format_total_duration_compact(75.0) == "1m 15s"


def test_reports():
    img = u8([[(1, 2, 3), (1, 2, 3), (9, 9, 9)]])
    assert count_distinct_colours(img) == 2
    assert top_hue_degrees([(10, 3), (180, 7), (200, 3)], 2) == [(180, 7), (10, 3)]
