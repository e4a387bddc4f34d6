# cel_shade/cli.py
"""
cel-shade
Posterize an image by bucketing pixels on hue / saturation / value (or
luminance) and flattening every bucket to its mean colour.

Usage:
  cel-shade INPUT [OUTPUT] -s S (-v V | -l L) [-h 30,90,150] [--debug]

Options:
  -h, --hue-thresholds : comma-separated hue split points in degrees, [0, 360).
                         Repeatable. Omit for a single hue bucket.
  -s, --saturation-chunks : equal-width saturation buckets.
  -v, --value-chunks      : equal-width HSV value buckets.
  -l, --luminance-chunks  : equal-width relative-luminance buckets.
  --help                  : show usage (-h is taken by hue thresholds).

Output:
  Same format as the input by default. If OUTPUT is omitted, writes
  <stem>_cel<suffix> next to INPUT.
"""

from __future__ import annotations

import argparse
import math
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import UnidentifiedImageError

from .constants import HUE_FULL_TURN
from .core_types import ConfigurationProblem, ShadeOutcome
from .image_io import default_output_path, load_image_rgb, save_image_rgb
from .shade import shade_with_options
from .utils import (
    count_distinct_colours,
    debug_log,
    error,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    top_hue_degrees,
    warn,
)

# CLI args & small helpers


def _comma_floats(text: str) -> List[float]:
    """'30, 90,150' -> [30.0, 90.0, 150.0]. Empty string -> []."""
    out: List[float] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            value = float(part)
        except ValueError:
            raise argparse.ArgumentTypeError(f"not a number: {part!r}") from None
        if not math.isfinite(value):
            raise argparse.ArgumentTypeError(f"hue threshold must be finite: {part!r}")
        out.append(value)
    return out


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cel-shade",
        description="Cel shade an image by flattening hue/saturation/brightness buckets to their mean colour.",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="Show this message and exit")
    parser.add_argument("input", type=Path, help="Input image")
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        default=None,
        help="Output image (optional, defaults to <stem>_cel<suffix>)",
    )
    parser.add_argument(
        "-h",
        "--hue-thresholds",
        type=_comma_floats,
        action="extend",
        default=[],
        help="Comma-separated hue thresholds in degrees. Repeatable.",
    )
    parser.add_argument(
        "-s",
        "--saturation-chunks",
        type=_positive_int,
        required=True,
        help="Number of saturation buckets",
    )
    brightness = parser.add_mutually_exclusive_group()
    brightness.add_argument(
        "-v", "--value-chunks", type=_positive_int, default=None, help="Number of value buckets"
    )
    brightness.add_argument(
        "-l",
        "--luminance-chunks",
        type=_positive_int,
        default=None,
        help="Number of luminance buckets",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose run details")
    return parser


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        input: Path to the source image
        output: optional Path for the result
        hue_thresholds: list of floats, unsorted
        saturation_chunks: int > 0
        value_chunks / luminance_chunks: int > 0 or None (at most one set)
        debug: bool
    """
    return build_parser().parse_args(argv)


def _warn_unreachable_thresholds(thresholds: Sequence[float]) -> None:
    for t in thresholds:
        if t <= 0.0 or t >= HUE_FULL_TURN:
            warn(f"hue threshold {t:g} is outside (0, 360) and splits nothing")


# Per-file processing


def shade_file(
    src: Path,
    dst: Optional[Path],
    hue_thresholds: Sequence[float],
    saturation_chunks: int,
    value_chunks: Optional[int],
    luminance_chunks: Optional[int],
    debug: bool = False,
) -> ShadeOutcome:
    """
    load -> cel shade -> save -> report.

    Nothing is written when the options are incomplete; the returned
    ConfigurationProblem carries the message for the user.
    """
    t_start = time.perf_counter()
    if dst is None:
        dst = default_output_path(src)

    print_banner(src.name)
    rgb = load_image_rgb(src)
    height, width = rgb.shape[0], rgb.shape[1]
    t_loaded = time.perf_counter()

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{width}x{height}"),
                    ("Unique colours", count_distinct_colours(rgb)),
                ]
            )
        )

    outcome = shade_with_options(
        rgb, hue_thresholds, saturation_chunks, value_chunks, luminance_chunks
    )
    if isinstance(outcome, ConfigurationProblem):
        return outcome
    t_shaded = time.perf_counter()

    save_image_rgb(dst, rgb)
    t_saved = time.perf_counter()

    log(f"Wrote {dst.name} | size={width}x{height} | cells={outcome.cell_count:,}")
    if debug:
        debug_log("busiest hue degrees:")
        for degree, count in top_hue_degrees(outcome.hue_histogram, 10):
            debug_log(f"  {degree:>3}: {count:,}")
        debug_log(
            f"Total {format_total_duration_compact(t_saved - t_start)}  "
            f"(load={format_seconds_compact(t_loaded - t_start)}, "
            f"shade={format_seconds_compact(t_shaded - t_loaded)}, "
            f"save={format_seconds_compact(t_saved - t_shaded)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_saved - t_start)}")
    return outcome


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point. Returns the process exit status.

    Missing value/luminance chunks is reported and exits 0 without writing.
    """
    args = parse_cli_args(argv)

    print_config_line(
        "cel",
        [
            ("Hue thresholds", ",".join(f"{t:g}" for t in sorted(args.hue_thresholds)) or "-"),
            ("Saturation chunks", args.saturation_chunks),
            ("Value chunks", args.value_chunks or "-"),
            ("Luminance chunks", args.luminance_chunks or "-"),
        ],
        debug=args.debug,
    )
    _warn_unreachable_thresholds(args.hue_thresholds)

    src: Path = args.input
    if not src.exists():
        error(f"not found: {src}")
        return 2

    try:
        outcome = shade_file(
            src,
            args.output,
            args.hue_thresholds,
            args.saturation_chunks,
            args.value_chunks,
            args.luminance_chunks,
            debug=args.debug,
        )
    except (UnidentifiedImageError, OSError, ValueError) as e:
        error(str(e))
        return 1

    if isinstance(outcome, ConfigurationProblem):
        log(outcome.message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
