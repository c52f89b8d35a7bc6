"""Thumbnail composition: caption text on a still frame, watermark on top."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from PIL import Image, ImageDraw, ImageFont

from ..core.errors import ValidationError
from ..settings import ThumbnailSettings
from ..utils.file_helper import atomic_write
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

DEJAVU_BOLD = Path("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf")
ALPHA_FORMATS = frozenset({"PNG", "WEBP", "TIFF"})


@dataclass(frozen=True, slots=True)
class ThumbnailSpec:
    background: Path
    overlay: Path
    caption: str
    output: Path


@dataclass(frozen=True, slots=True)
class LineLayout:
    text: str
    x: int
    y: int
    width: int
    height: int


class ThumbnailCompositor:
    """Centres each caption line horizontally, stacking lines from ``top_offset`` down."""

    def __init__(self, settings: ThumbnailSettings | None = None, *, font: Any | None = None) -> None:
        self._settings = settings or ThumbnailSettings()
        self._font = font

    @property
    def font(self) -> Any:
        if self._font is None:
            self._font = self._load_font()
        return self._font

    def layout(self, caption: str, canvas_size: tuple[int, int]) -> list[LineLayout]:
        """Measure every line and reject the caption before anything is drawn."""
        canvas_width, canvas_height = canvas_size
        line_height = self._line_height()
        y = self._settings.top_offset
        lines: list[LineLayout] = []
        for text in caption.split("\n"):
            left, width = self._line_extent(text)
            if width > self._settings.max_line_width:
                raise ValidationError(
                    "Caption line is too wide",
                    details={"line": text, "width": width, "limit": self._settings.max_line_width},
                )
            if y + line_height > canvas_height:
                raise ValidationError(
                    "Caption line does not fit the canvas height",
                    details={"line": text, "bottom": y + line_height, "limit": canvas_height},
                )
            # Draw origin, offset by the left bearing so the ink is centred.
            lines.append(LineLayout(text, (canvas_width - width) // 2 - left, y, width, line_height))
            y += line_height
        return lines

    def compose(self, background: Image.Image, overlay: Image.Image, caption: str) -> Image.Image:
        canvas = background.convert("RGBA")
        lines = self.layout(caption, canvas.size)

        draw = ImageDraw.Draw(canvas)
        for line in lines:
            draw.text((line.x, line.y), line.text, font=self.font, fill=self._settings.text_color)

        watermark = overlay.convert("RGBA").crop((0, 0, canvas.width, canvas.height))
        return Image.alpha_composite(canvas, watermark)

    def render(self, spec: ThumbnailSpec) -> Path:
        """Write the composed thumbnail to ``spec.output`` unless it already exists."""
        if spec.output.exists():
            LOGGER.info(
                "Thumbnail already exists, skipping composition",
                extra={"event": "thumbnail.skip", "path": str(spec.output)},
            )
            return spec.output

        with Image.open(spec.background) as background, Image.open(spec.overlay) as overlay:
            fmt = background.format if background.format in ALPHA_FORMATS else "PNG"
            image = self.compose(background, overlay, spec.caption)

        atomic_write(spec.output, lambda tmp: image.save(tmp, format=fmt))
        LOGGER.info(
            "Thumbnail written",
            extra={"event": "thumbnail.written", "path": str(spec.output), "format": fmt},
        )
        return spec.output

    def _line_extent(self, text: str) -> tuple[int, int]:
        left, _, right, _ = self.font.getbbox(text)
        return int(left), int(right - left)

    def _line_height(self) -> int:
        font = self.font
        if hasattr(font, "getmetrics"):
            ascent, descent = font.getmetrics()
            return int(ascent + descent)
        _, top, _, bottom = font.getbbox("Ag")
        return int(bottom - top)

    def _load_font(self) -> Any:
        size = self._settings.font_size
        candidates = [path for path in (self._settings.font_path, DEJAVU_BOLD) if path is not None]
        for path in candidates:
            try:
                return ImageFont.truetype(str(path), size)
            except OSError:
                LOGGER.warning(
                    "Font not usable, trying next candidate",
                    extra={"event": "thumbnail.font_fallback", "path": str(path)},
                )
        return ImageFont.load_default(size=size)


__all__ = ["LineLayout", "ThumbnailCompositor", "ThumbnailSpec"]
