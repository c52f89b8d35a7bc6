"""Components shared by the upload and update workflows."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ytpublish.core.scheduling import format_timestamp
from ytpublish.services.models import ChangeMode, SubmissionMetadata


class PayloadBuilder:
    """Builds the ``snippet`` + ``status`` resource body for a new video."""

    def build(self, metadata: SubmissionMetadata) -> dict[str, Any]:
        status: dict[str, Any] = {
            "privacyStatus": metadata.privacy.value,
            "selfDeclaredMadeForKids": False,
        }
        if metadata.publish_at is not None:
            status["publishAt"] = format_timestamp(metadata.publish_at)
        return {
            "snippet": {
                "title": metadata.catalog_title,
                "description": metadata.description,
                "tags": list(metadata.tags),
                "categoryId": metadata.category.category_id,
            },
            "status": status,
        }


def merge_description(old: str, new: str, mode: ChangeMode) -> str:
    """Combine an existing description with ``new``.

    Trailing whitespace of the existing text is dropped before joining, so
    ``"old "`` appended with ``"new"`` gives ``"oldnew"``.
    """
    if mode is ChangeMode.REPLACE:
        return new
    if mode is ChangeMode.PREPEND:
        return new + old.rstrip()
    return old.rstrip() + new


def find_episode_file(directory: Path, prefix: str) -> Path | None:
    """First regular file in ``directory`` (sorted by name) whose name starts with ``prefix``."""
    if not directory.is_dir():
        raise FileNotFoundError(f"Video directory not found: {directory}")
    for candidate in sorted(directory.iterdir(), key=lambda path: path.name):
        if candidate.is_file() and candidate.name.upper().startswith(prefix.upper()):
            if candidate.suffix.lower() == ".png":
                continue
            return candidate
    return None


__all__ = ["PayloadBuilder", "find_episode_file", "merge_description"]
