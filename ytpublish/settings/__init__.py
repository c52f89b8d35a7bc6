"""Settings package exports."""

from .loader import (
    AppConfig,
    PathSettings,
    ThumbnailSettings,
    UploadDefaults,
    YouTubeSettings,
    load_config,
)

__all__ = [
    "AppConfig",
    "PathSettings",
    "ThumbnailSettings",
    "UploadDefaults",
    "YouTubeSettings",
    "load_config",
]
