# cel_shade/image_io.py
from __future__ import annotations

import io
from pathlib import Path

import numpy as np
from PIL import Image, ImageCms, ImageOps

from .constants import DEFAULT_OUTPUT_SUFFIX
from .core_types import U8Image, assert_u8_image_rgb

"""
Image I/O helpers: decode to an sRGB (H, W, 3) uint8 buffer and encode back.

Errors from Pillow (missing file, unidentified format, unknown output
extension) propagate unchanged.
"""


def _convert_to_srgb_rgb(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")
    if not icc_bytes:
        return im.convert("RGB")
    if im.mode in ("P", "PA"):
        # Palette entries are in the profile's RGB space.
        im = im.convert("RGB")

    try:
        src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
        dst_prof = ImageCms.createProfile("sRGB")
        im2 = ImageCms.profileToProfile(
            im,
            src_prof,
            dst_prof,
            renderingIntent=ImageCms.Intent.PERCEPTUAL,
            outputMode="RGB",
        )
    except (ImageCms.PyCMSError, OSError, ValueError):
        # Unreadable profile or one that does not match the pixel mode:
        # treat the pixels as sRGB already.
        return im.convert("RGB")
    if im2 is None:
        return im.convert("RGB")
    return im2


def load_image_rgb(path: Path) -> U8Image:
    """Decode path into a writable uint8 (H, W, 3) sRGB buffer. Alpha is dropped."""
    with Image.open(path) as im0:
        im = _convert_to_srgb_rgb(im0)
    arr = np.array(im, dtype=np.uint8)
    return np.ascontiguousarray(arr[..., :3])


def save_image_rgb(path: Path, rgb: np.ndarray) -> Path:
    """Encode rgb to path; Pillow picks the format from the suffix."""
    rgb = assert_u8_image_rgb(rgb)
    Image.fromarray(np.ascontiguousarray(rgb)).save(path)
    return path


def default_output_path(src: Path) -> Path:
    """<stem>_cel<suffix> next to src, keeping the input's format."""
    return src.with_name(f"{src.stem}{DEFAULT_OUTPUT_SUFFIX}{src.suffix}")


__all__ = [
    "load_image_rgb",
    "save_image_rgb",
    "default_output_path",
]
