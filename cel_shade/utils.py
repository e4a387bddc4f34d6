# cel_shade/utils.py
from __future__ import annotations

"""
Shared helpers for the CLI: duration formatting, small report helpers, and
tidy print-based logging.
"""

import sys
from typing import Any, Iterable, List, Sequence, Tuple

import numpy as np

from .core_types import U8Image


# Time formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'Ss.s', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


# Reports


def count_distinct_colours(rgb: U8Image) -> int:
    """Number of distinct RGB triples in an (H, W, 3) buffer."""
    flat = rgb.reshape(-1, 3)
    if flat.shape[0] == 0:
        return 0
    return int(np.unique(flat, axis=0).shape[0])


def top_hue_degrees(
    histogram: Sequence[Tuple[int, int]], k: int = 10
) -> List[Tuple[int, int]]:
    """The k most populated (hue degree, count) pairs, largest first."""
    return sorted(histogram, key=lambda hc: (-hc[1], hc[0]))[: max(0, k)]


# Pretty logging


def format_number_compact(value: Any) -> str:
    """Ints as 1,234; anything else via str()."""
    if isinstance(value, int):
        return f"{value:,}"
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """Format (name, value) pairs as 'Name: value' blocks separated by sep."""
    out: List[str] = []
    for name, value in pairs:
        out.append(f"{name}{eq}{format_number_compact(value)}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit one config line, e.g.:
      [cel] Hue thresholds: 30,90  Saturation chunks: 4  Value chunks: 5
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    "format_seconds_compact",
    "format_total_duration_compact",
    "count_distinct_colours",
    "top_hue_degrees",
    "format_number_compact",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
