"""Tests for thumbnail composition."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image, ImageFont

from ytpublish.core.errors import ValidationError
from ytpublish.media.thumbnail import ThumbnailCompositor, ThumbnailSpec
from ytpublish.settings import ThumbnailSettings


class StubFont:
    """Reports fixed measurements; never used for drawing."""

    def __init__(self, width: int, ascent: int = 150, descent: int = 40, left: int = 0) -> None:
        self.width = width
        self.left = left
        self.ascent = ascent
        self.descent = descent

    def getbbox(self, text: str):
        return (self.left, 0, self.left + self.width, self.ascent)

    def getmetrics(self):
        return (self.ascent, self.descent)


def _images(tmp_path: Path, *, background_format: str = "PNG") -> tuple[Path, Path]:
    suffix = ".png" if background_format == "PNG" else ".jpg"
    background = tmp_path / f"frame{suffix}"
    Image.new("RGB", (1920, 1080), (0, 0, 255)).save(background, format=background_format)

    overlay = Image.new("RGBA", (2000, 2000), (0, 0, 0, 0))
    overlay.putpixel((0, 0), (255, 0, 0, 255))
    overlay_path = tmp_path / "logos.png"
    overlay.save(overlay_path)
    return background, overlay_path


def test_too_wide_caption_fails_without_writing(tmp_path: Path) -> None:
    background, overlay = _images(tmp_path)
    output = tmp_path / "out" / "thumb.png"
    compositor = ThumbnailCompositor(ThumbnailSettings(), font=StubFont(width=1601))

    with pytest.raises(ValidationError) as excinfo:
        compositor.render(ThumbnailSpec(background, overlay, "far too long", output))

    assert not output.exists()
    assert excinfo.value.details["width"] == 1601
    assert excinfo.value.details["limit"] == 1600
    leftovers = list(output.parent.iterdir()) if output.parent.exists() else []
    assert leftovers == []


def test_existing_output_is_returned_untouched(tmp_path: Path) -> None:
    background, overlay = _images(tmp_path)
    output = tmp_path / "thumb.png"
    output.write_bytes(b"existing")
    compositor = ThumbnailCompositor(ThumbnailSettings(), font=StubFont(width=5000))

    assert compositor.render(ThumbnailSpec(background, overlay, "anything", output)) == output
    assert output.read_bytes() == b"existing"


def test_layout_centres_lines_from_top_offset() -> None:
    compositor = ThumbnailCompositor(ThumbnailSettings(), font=StubFont(width=400))
    lines = compositor.layout("one\ntwo", (1920, 1080))

    assert [(line.x, line.y) for line in lines] == [(760, 660), (760, 850)]
    assert lines[0].height == 190


def test_layout_offsets_origin_by_left_bearing() -> None:
    compositor = ThumbnailCompositor(ThumbnailSettings(), font=StubFont(width=400, left=12))
    [line] = compositor.layout("one", (1920, 1080))

    assert (line.x, line.width) == (748, 400)


def test_caption_ink_is_horizontally_centred() -> None:
    compositor = ThumbnailCompositor(ThumbnailSettings(), font=ImageFont.load_default(size=80))
    background = Image.new("RGB", (1920, 1080), (0, 0, 0))
    overlay = Image.new("RGBA", (1920, 1080), (0, 0, 0, 0))

    composed = compositor.compose(background, overlay, "Wall")

    ink = composed.convert("L").getbbox()
    assert ink is not None
    assert abs((ink[0] + ink[2]) / 2 - 960) <= 2


def test_caption_taller_than_canvas_is_rejected() -> None:
    compositor = ThumbnailCompositor(ThumbnailSettings(), font=StubFont(width=100, ascent=160, descent=40))
    compositor.layout("a\nb", (1920, 1080))
    with pytest.raises(ValidationError) as excinfo:
        compositor.layout("a\nb\nc", (1920, 1080))
    assert excinfo.value.details["line"] == "c"


def test_render_composites_overlay_on_top(tmp_path: Path) -> None:
    background, overlay = _images(tmp_path)
    output = tmp_path / "thumb.png"
    font = ImageFont.load_default(size=40)
    compositor = ThumbnailCompositor(ThumbnailSettings(), font=font)

    assert compositor.render(ThumbnailSpec(background, overlay, "Hello\nWorld", output)) == output

    with Image.open(output) as image:
        assert image.format == "PNG"
        assert image.size == (1920, 1080)
        rgba = image.convert("RGBA")
        assert rgba.getpixel((0, 0)) == (255, 0, 0, 255)
        assert rgba.getpixel((1919, 10)) == (0, 0, 255, 255)


def test_jpeg_background_is_saved_as_png(tmp_path: Path) -> None:
    background, overlay = _images(tmp_path, background_format="JPEG")
    output = tmp_path / "thumb.jpg"
    compositor = ThumbnailCompositor(ThumbnailSettings(), font=ImageFont.load_default(size=40))

    compositor.render(ThumbnailSpec(background, overlay, "Hi", output))

    with Image.open(output) as image:
        assert image.format == "PNG"
