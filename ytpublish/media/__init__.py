"""Artwork generation: still frames and composed thumbnails."""

from .screenshot import ScreenshotGenerator, screenshot_path
from .thumbnail import LineLayout, ThumbnailCompositor, ThumbnailSpec

__all__ = [
    "LineLayout",
    "ScreenshotGenerator",
    "ThumbnailCompositor",
    "ThumbnailSpec",
    "screenshot_path",
]
