"""Data models for the YouTube publishing workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from pathlib import Path

from ytpublish.core.errors import ParseError
from ytpublish.core.scheduling import SchedulingMode
from ytpublish.core.steps import StepReport
from ytpublish.platforms.base import CatalogEntry


class _NamedChoice(Enum):
    @classmethod
    def parse(cls, value: str):
        name = value.strip().lower()
        for member in cls:
            if member.name.lower() == name:
                return member
        raise ParseError(
            f"Unknown {cls.__name__.lower()}",
            details={"value": value, "available": cls.names()},
        )

    @classmethod
    def names(cls) -> list[str]:
        return [member.name.lower() for member in cls]


class Category(_NamedChoice):
    """YouTube video category ids."""

    FILM = 1
    AUTOS = 2
    MUSIC = 10
    PETS = 15
    SPORTS = 17
    TRAVEL = 19
    GAMING = 20
    PEOPLE = 22
    COMEDY = 23
    ENTERTAINMENT = 24
    NEWS = 25
    HOWTO = 26
    EDUCATION = 27
    SCIENCE = 28

    @property
    def category_id(self) -> str:
        return str(self.value)


class Privacy(_NamedChoice):
    PUBLIC = "public"
    PRIVATE = "private"
    UNLISTED = "unlisted"


class ChangeMode(_NamedChoice):
    APPEND = "append"
    REPLACE = "replace"
    PREPEND = "prepend"


@dataclass(slots=True)
class SubmissionMetadata:
    """Everything the catalog needs to know about a new video."""

    title: str
    description: str
    tags: list[str]
    category: Category
    privacy: Privacy
    publish_at: datetime | None = None
    episode_number: int | None = None

    @property
    def catalog_title(self) -> str:
        if self.episode_number is None:
            return self.title
        return f"{self.episode_number:X}. {self.title}"


@dataclass(slots=True)
class UploadRequest:
    """A validated ``upload`` invocation."""

    video: Path
    description: str
    schedule: SchedulingMode
    publish_time: time
    first_episode_date: date | str
    keywords: str
    category: Category = Category.SCIENCE
    privacy: Privacy = Privacy.PRIVATE
    title: str | None = None
    episode_number: int | None = None
    thumbnail: Path | None = None
    watermark: Path | None = None
    thumb_second: int | None = None
    playlist_id: str | None = None
    dry_run: bool = False


@dataclass(slots=True)
class UpdateRequest:
    """A validated ``update`` invocation; ``video_id`` may be the ``uploaded`` sentinel."""

    video_id: str
    description: str | None = None
    change_mode: ChangeMode = ChangeMode.APPEND
    thumbnail_dir: Path | None = None
    watermark: Path | None = None
    thumb_second: int | None = None
    playlist_id: str | None = None

    @property
    def targets_uploads(self) -> bool:
        return self.video_id == UPLOADED_SENTINEL


UPLOADED_SENTINEL = "uploaded"


@dataclass(slots=True)
class SubmissionPreview:
    """What an upload would submit, without touching the network."""

    title: str
    catalog_title: str
    publish_method: str
    publish_at: str | None
    publish_error: str | None
    episode_number: int | None
    category: Category
    privacy: Privacy
    tags: list[str]
    description: str
    thumbnail_caption: str

    def as_dict(self) -> dict[str, object]:
        return {
            "publish-at": self.publish_method,
            "publish-datetime": self.publish_at or f"unavailable ({self.publish_error})",
            "episode_nr": (
                "n/a" if self.episode_number is None else f"{self.episode_number} (0x{self.episode_number:X})"
            ),
            "youtube-title": self.catalog_title,
            "category": self.category.name.lower(),
            "privacy": self.privacy.value,
            "thumb-title": self.thumbnail_caption,
            "youtube-description": self.description,
            "youtube-tags": list(self.tags),
        }


@dataclass(slots=True)
class UploadResult:
    video_id: str
    metadata: SubmissionMetadata
    thumbnail: Path | None
    report: StepReport


@dataclass(slots=True)
class UpdateOutcome:
    video_id: str
    entry: CatalogEntry | None = None
    thumbnail: Path | None = None
    report: StepReport = field(default_factory=StepReport)


__all__ = [
    "Category",
    "ChangeMode",
    "Privacy",
    "SubmissionMetadata",
    "SubmissionPreview",
    "UPLOADED_SENTINEL",
    "UpdateOutcome",
    "UpdateRequest",
    "UploadRequest",
    "UploadResult",
]
