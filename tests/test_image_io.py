from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image, ImageCms, UnidentifiedImageError

from cel_shade.image_io import default_output_path, load_image_rgb, save_image_rgb

from .conftest import u8


def test_png_round_trip(tmp_path: Path):
    img = u8([[(1, 2, 3), (250, 128, 0)], [(0, 0, 0), (255, 255, 255)]])
    path = save_image_rgb(tmp_path / "x.png", img)
    back = load_image_rgb(path)
    assert back.dtype == np.uint8
    assert np.array_equal(back, img)


def test_load_drops_alpha(tmp_path: Path):
    rgba = np.zeros((2, 3, 4), dtype=np.uint8)
    rgba[..., 0] = 200
    rgba[..., 3] = 17
    path = tmp_path / "a.png"
    Image.fromarray(rgba).save(path)
    rgb = load_image_rgb(path)
    assert rgb.shape == (2, 3, 3)
    assert rgb.flags.writeable
    assert np.all(rgb[..., 0] == 200)


def test_load_converts_palette_images(tmp_path: Path):
    path = tmp_path / "p.png"
    im = Image.new("P", (4, 2), 0)
    im.putpalette([10, 200, 30] + [0] * 765)
    im.save(path)
    rgb = load_image_rgb(path)
    assert rgb.shape == (2, 4, 3)
    assert rgb[0, 0].tolist() == [10, 200, 30]


def test_save_keeps_format_from_suffix(tmp_path: Path):
    path = save_image_rgb(tmp_path / "x.bmp", u8([[(9, 8, 7)]]))
    with Image.open(path) as im:
        assert im.format == "BMP"


def test_unreadable_file_raises(tmp_path: Path):
    path = tmp_path / "junk.png"
    path.write_bytes(b"not an image")
    with pytest.raises(UnidentifiedImageError):
        load_image_rgb(path)


def test_unknown_output_extension_raises(tmp_path: Path):
    with pytest.raises(ValueError):
        save_image_rgb(tmp_path / "x.notaformat", u8([[(0, 0, 0)]]))


def test_default_output_path():
    assert default_output_path(Path("/a/b/photo.jpg")) == Path("/a/b/photo_cel.jpg")
    assert default_output_path(Path("tile.png")) == Path("tile_cel.png")


def _srgb_icc_bytes() -> bytes:
    return ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB")).tobytes()


@pytest.mark.parametrize(
    "mode, fill, name",
    [("L", 90, "grey.png"), ("CMYK", (0, 200, 200, 0), "print.jpg"), ("RGB", (1, 2, 3), "rgb.png")],
)
def test_embedded_profile_is_applied_for_any_mode(tmp_path: Path, monkeypatch, mode, fill, name):
    path = tmp_path / name
    Image.new(mode, (3, 2), fill).save(path, icc_profile=_srgb_icc_bytes())

    seen = []

    def fake_profile_to_profile(im, src, dst, renderingIntent=None, outputMode=None):
        seen.append((im.mode, outputMode))
        return im.convert("RGB")

    monkeypatch.setattr(ImageCms, "profileToProfile", fake_profile_to_profile)
    rgb = load_image_rgb(path)
    assert seen == [(mode, "RGB")]
    assert rgb.shape == (2, 3, 3)


def test_srgb_profile_keeps_colours(tmp_path: Path):
    img = u8([[(10, 200, 30), (250, 250, 250)], [(0, 0, 0), (128, 64, 192)]])
    path = tmp_path / "tagged.png"
    Image.fromarray(img).save(path, icc_profile=_srgb_icc_bytes())
    back = load_image_rgb(path).astype(np.int16)
    assert np.abs(back - img.astype(np.int16)).max() <= 2
