"""Helpers for loading configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:  # pragma: no cover - Python 3.11+ includes tomllib
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older versions
    import tomli as tomllib  # type: ignore[no-redef]

DEFAULT_CONFIG_NAME = "config.toml"
CONFIG_ENV_VAR = "YTPUBLISH_CONFIG"

DEFAULT_API_BASE_URL = "https://www.googleapis.com/youtube/v3"
DEFAULT_UPLOAD_BASE_URL = "https://www.googleapis.com/upload/youtube/v3"
DEFAULT_KEYWORDS = "rust,tutorial,youtube,upload,ytpublish"


@dataclass(slots=True)
class YouTubeSettings:
    api_base_url: str = DEFAULT_API_BASE_URL
    upload_base_url: str = DEFAULT_UPLOAD_BASE_URL
    timeout: float = 60.0
    chunk_size: int = 8 * 1024 * 1024
    page_size: int = 10
    max_pages: int = 1000


@dataclass(slots=True)
class PathSettings:
    token_cache: Path = field(default_factory=lambda: Path("token.json"))


@dataclass(slots=True)
class ThumbnailSettings:
    font_path: Path | None = None
    font_size: int = 192
    max_line_width: int = 1600
    top_offset: int = 660
    text_color: tuple[int, int, int, int] = (227, 228, 229, 255)
    watermark: Path = field(default_factory=lambda: Path("logos.png"))
    screenshot_second: int = 360
    ffmpeg_bin: str = "ffmpeg"
    suffix: str = "-thumbnail.png"


@dataclass(slots=True)
class UploadDefaults:
    keywords: str = DEFAULT_KEYWORDS
    privacy: str = "private"
    category: str = "science"
    publish_at: str = "coming=friday"
    publish_time: str = "08:00:00"
    first_episode_date: str = "2020-09-01"
    playlist_id: str | None = None


@dataclass(slots=True)
class AppConfig:
    youtube: YouTubeSettings = field(default_factory=YouTubeSettings)
    paths: PathSettings = field(default_factory=PathSettings)
    thumbnail: ThumbnailSettings = field(default_factory=ThumbnailSettings)
    upload: UploadDefaults = field(default_factory=UploadDefaults)
    source: Path | None = None


def _to_path(value: str | None, *, base: Path, fallback: Path) -> Path:
    if not value:
        candidate = fallback
    else:
        candidate = Path(value).expanduser()
    return candidate if candidate.is_absolute() else base / candidate


def _config_path(explicit: str | os.PathLike[str] | None = None) -> tuple[Path, bool]:
    """Return the config location and whether the caller asked for it."""
    if explicit:
        return Path(explicit), True
    env_value = os.environ.get(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value), True
    return Path.cwd() / DEFAULT_CONFIG_NAME, False


def _load_toml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("rb") as fp:
        return tomllib.load(fp)


def _color(value: Any, fallback: tuple[int, int, int, int]) -> tuple[int, int, int, int]:
    if value is None:
        return fallback
    channels = [int(part) for part in value]
    if len(channels) == 3:
        channels.append(255)
    if len(channels) != 4 or any(not 0 <= part <= 255 for part in channels):
        raise ValueError(f"text_color must hold 3 or 4 values in 0-255, got {value!r}")
    return channels[0], channels[1], channels[2], channels[3]


def _build_youtube(section: dict[str, Any]) -> YouTubeSettings:
    defaults = YouTubeSettings()
    return YouTubeSettings(
        api_base_url=str(section.get("api_base_url", defaults.api_base_url)).rstrip("/"),
        upload_base_url=str(section.get("upload_base_url", defaults.upload_base_url)).rstrip("/"),
        timeout=float(section.get("timeout", defaults.timeout)),
        chunk_size=int(section.get("chunk_size", defaults.chunk_size)),
        page_size=int(section.get("page_size", defaults.page_size)),
        max_pages=int(section.get("max_pages", defaults.max_pages)),
    )


def _build_thumbnail(section: dict[str, Any], *, base: Path) -> ThumbnailSettings:
    defaults = ThumbnailSettings()
    font_value = section.get("font_path")
    return ThumbnailSettings(
        font_path=_to_path(font_value, base=base, fallback=Path()) if font_value else None,
        font_size=int(section.get("font_size", defaults.font_size)),
        max_line_width=int(section.get("max_line_width", defaults.max_line_width)),
        top_offset=int(section.get("top_offset", defaults.top_offset)),
        text_color=_color(section.get("text_color"), defaults.text_color),
        watermark=_to_path(section.get("watermark"), base=base, fallback=defaults.watermark),
        screenshot_second=int(section.get("screenshot_second", defaults.screenshot_second)),
        ffmpeg_bin=str(section.get("ffmpeg_bin", defaults.ffmpeg_bin)),
        suffix=str(section.get("suffix", defaults.suffix)),
    )


def _build_upload(section: dict[str, Any]) -> UploadDefaults:
    defaults = UploadDefaults()
    playlist = section.get("playlist_id")
    return UploadDefaults(
        keywords=str(section.get("keywords", defaults.keywords)),
        privacy=str(section.get("privacy", defaults.privacy)),
        category=str(section.get("category", defaults.category)),
        publish_at=str(section.get("publish_at", defaults.publish_at)),
        publish_time=str(section.get("publish_time", defaults.publish_time)),
        first_episode_date=str(section.get("first_episode_date", defaults.first_episode_date)),
        playlist_id=str(playlist) if playlist else None,
    )


def load_config(config_path: str | os.PathLike[str] | None = None) -> AppConfig:
    """Load configuration from ``--config``, ``YTPUBLISH_CONFIG`` or ``./config.toml``.

    An explicitly named file must exist; when the default file is absent the
    built-in defaults apply. Relative paths inside the file resolve against
    the file's own directory.
    """
    path, explicit = _config_path(config_path)
    if not explicit and not path.exists():
        base = Path.cwd()
        return AppConfig(
            paths=PathSettings(token_cache=base / "token.json"),
            thumbnail=_build_thumbnail({}, base=base),
        )

    data = _load_toml(path)
    base = path.resolve().parent
    paths_section = data.get("paths", {})

    return AppConfig(
        youtube=_build_youtube(data.get("youtube", {})),
        paths=PathSettings(
            token_cache=_to_path(
                paths_section.get("token_cache"), base=base, fallback=Path("token.json")
            ),
        ),
        thumbnail=_build_thumbnail(data.get("thumbnail", {}), base=base),
        upload=_build_upload(data.get("upload", {})),
        source=path,
    )


__all__ = [
    "AppConfig",
    "PathSettings",
    "ThumbnailSettings",
    "UploadDefaults",
    "YouTubeSettings",
    "load_config",
]
