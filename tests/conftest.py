from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image


def u8(rows) -> np.ndarray:
    """Nested [[(r,g,b), ...], ...] -> uint8 (H, W, 3)."""
    return np.array(rows, dtype=np.uint8)


@pytest.fixture
def random_image() -> np.ndarray:
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(24, 32, 3), dtype=np.uint8)


@pytest.fixture
def two_reds_png(tmp_path: Path) -> Path:
    path = tmp_path / "reds.png"
    Image.fromarray(u8([[(255, 0, 0), (200, 0, 0)]])).save(path)
    return path
