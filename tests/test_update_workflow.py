"""Tests for the update workflow."""

from __future__ import annotations

from pathlib import Path

import pytest

from ytpublish.core.errors import ScreenshotError, TransportError, ValidationError
from ytpublish.platforms import CatalogEntry, EntrySnippet, PlaylistMembership
from ytpublish.services.models import ChangeMode, UpdateRequest
from ytpublish.services.update_workflow import UpdateWorkflow


class StubCatalog:
    def __init__(self, uploads: list[CatalogEntry] | None = None, *, fail_on: set[str] | None = None) -> None:
        self.uploads = uploads or []
        self.fail_on = fail_on or set()
        self.calls: list[tuple] = []

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise TransportError(f"{name} failed")

    def list_uploaded(self, page_size=None):
        self._record("list_uploaded")
        return list(self.uploads)

    def update_description(self, entry_id, text, mode):
        self._record("update_description", entry_id, text, mode)
        return CatalogEntry(id=entry_id, title="2A. 2A-intro", description=text)

    def read_snippet(self, entry_id):
        self._record("read_snippet", entry_id)
        return EntrySnippet(title="2A. 2A-intro", description="")

    def attach_thumbnail(self, entry_id, image_path):
        self._record("attach_thumbnail", entry_id, image_path)

    def add_to_playlist(self, playlist_id, entry_id):
        self._record("add_to_playlist", playlist_id, entry_id)
        return PlaylistMembership(playlist_id, entry_id)


class StubScreenshots:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.captured: list[Path] = []

    def capture(self, video: Path, at_second: int) -> Path:
        if self.fail:
            raise ScreenshotError("ffmpeg failed")
        self.captured.append(video)
        return video.with_suffix(".png")


class StubCompositor:
    def __init__(self) -> None:
        self.specs = []

    def render(self, spec):
        self.specs.append(spec)
        return spec.output


def _episodes(tmp_path: Path) -> Path:
    directory = tmp_path / "videos"
    directory.mkdir()
    (directory / "2A-intro.mp4").write_bytes(b"video")
    return directory


def test_description_merge_for_single_video() -> None:
    catalog = StubCatalog()
    outcomes = UpdateWorkflow(catalog).run(
        UpdateRequest(video_id="vid1", description="more", change_mode=ChangeMode.PREPEND)
    )

    assert catalog.calls == [("update_description", "vid1", "more", ChangeMode.PREPEND)]
    assert outcomes[0].entry is not None and outcomes[0].entry.description == "more"
    assert outcomes[0].report.steps == {"description": "completed"}


def test_description_failure_is_fatal() -> None:
    catalog = StubCatalog(fail_on={"update_description"})
    with pytest.raises(TransportError):
        UpdateWorkflow(catalog).run(UpdateRequest(video_id="vid1", description="x", playlist_id="PL1"))
    assert [call[0] for call in catalog.calls] == ["update_description"]


def test_uploaded_sentinel_regenerates_thumbnails_by_episode(tmp_path: Path) -> None:
    catalog = StubCatalog(
        uploads=[CatalogEntry(id="a", title="2A. 2A-intro"), CatalogEntry(id="b", title="Trailer")]
    )
    screenshots = StubScreenshots()
    compositor = StubCompositor()
    directory = _episodes(tmp_path)

    outcomes = UpdateWorkflow(catalog, screenshots=screenshots, compositor=compositor).run(
        UpdateRequest(video_id="uploaded", thumbnail_dir=directory)
    )

    assert [outcome.video_id for outcome in outcomes] == ["a", "b"]
    assert screenshots.captured == [directory / "2A-intro.mp4"]
    assert compositor.specs[0].caption == "2A-intro"
    assert compositor.specs[0].output == directory / "2A-intro-thumbnail.png"
    assert ("attach_thumbnail", "a", directory / "2A-intro-thumbnail.png") in catalog.calls
    assert not any(call[0] == "attach_thumbnail" and call[1] == "b" for call in catalog.calls)
    assert outcomes[1].thumbnail is None


def test_thumbnail_and_playlist_failures_are_best_effort(tmp_path: Path) -> None:
    catalog = StubCatalog(fail_on={"add_to_playlist"})

    outcomes = UpdateWorkflow(catalog, screenshots=StubScreenshots(fail=True), compositor=StubCompositor()).run(
        UpdateRequest(video_id="vid1", thumbnail_dir=_episodes(tmp_path), playlist_id="PL1")
    )

    assert outcomes[0].report.failed_steps() == ["thumbnail", "playlist"]
    assert [call[0] for call in catalog.calls] == ["read_snippet", "add_to_playlist"]


def test_nothing_to_update_is_rejected() -> None:
    with pytest.raises(ValidationError):
        UpdateWorkflow(StubCatalog()).run(UpdateRequest(video_id="vid1"))
