"""Workflow for amending videos that are already published."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ytpublish.core.errors import ScreenshotError, TransportError, ValidationError
from ytpublish.core.steps import StepRunner, WorkflowStep
from ytpublish.media import ScreenshotGenerator, ThumbnailCompositor, ThumbnailSpec
from ytpublish.platforms import CatalogClient, CatalogEntry
from ytpublish.services.components import find_episode_file
from ytpublish.services.metadata import derive_title, episode_prefix, try_episode_number
from ytpublish.services.models import ChangeMode, UpdateOutcome, UpdateRequest
from ytpublish.settings import ThumbnailSettings
from ytpublish.utils.file_helper import sibling_with_suffix
from ytpublish.utils.logging import get_logger

LOGGER = get_logger(__name__)

THUMBNAIL_TOLERATED = (TransportError, OSError, ScreenshotError, ValidationError)


@dataclass(slots=True)
class _UpdateContext:
    video_id: str
    title: str | None = None
    entry: CatalogEntry | None = None
    thumbnail: Path | None = None


class UpdateWorkflow:
    """Applies description, thumbnail and playlist changes to one video or all uploads."""

    def __init__(
        self,
        catalog: CatalogClient,
        *,
        thumbnail_settings: ThumbnailSettings | None = None,
        compositor: ThumbnailCompositor | None = None,
        screenshots: ScreenshotGenerator | None = None,
    ) -> None:
        self._catalog = catalog
        self._thumbnails = thumbnail_settings or ThumbnailSettings()
        self._compositor = compositor or ThumbnailCompositor(self._thumbnails)
        self._screenshots = screenshots or ScreenshotGenerator(self._thumbnails.ffmpeg_bin)

    def targets(self, request: UpdateRequest) -> list[CatalogEntry]:
        if request.targets_uploads:
            return self._catalog.list_uploaded()
        return [CatalogEntry(id=request.video_id)]

    def run(self, request: UpdateRequest) -> list[UpdateOutcome]:
        if request.description is None and request.thumbnail_dir is None and not request.playlist_id:
            raise ValidationError(
                "Nothing to update: pass a description, a thumbnail directory or a playlist",
                details={"video_id": request.video_id},
            )
        outcomes = []
        for target in self.targets(request):
            outcomes.append(self._update_one(request, target))
        return outcomes

    def _update_one(self, request: UpdateRequest, target: CatalogEntry) -> UpdateOutcome:
        context = _UpdateContext(video_id=target.id, title=target.title or None)
        steps: list[WorkflowStep[_UpdateContext]] = []
        description = request.description
        if description is not None:
            mode = request.change_mode
            steps.append(WorkflowStep("description", lambda ctx: self._merge_description(description, mode, ctx)))
        directory = request.thumbnail_dir
        if directory is not None:
            steps.append(
                WorkflowStep(
                    "thumbnail",
                    lambda ctx: self._regenerate_thumbnail(directory, request, ctx),
                    required=False,
                    tolerated=THUMBNAIL_TOLERATED,
                )
            )
        if request.playlist_id:
            playlist_id = request.playlist_id
            steps.append(
                WorkflowStep(
                    "playlist",
                    lambda ctx: self._catalog.add_to_playlist(playlist_id, ctx.video_id),
                    required=False,
                )
            )

        report = StepRunner(steps).run(context)
        return UpdateOutcome(
            video_id=context.video_id,
            entry=context.entry,
            thumbnail=context.thumbnail,
            report=report,
        )

    def _merge_description(self, text: str, mode: ChangeMode, ctx: _UpdateContext) -> None:
        ctx.entry = self._catalog.update_description(ctx.video_id, text, mode)
        ctx.title = ctx.entry.title

    def _regenerate_thumbnail(self, directory: Path, request: UpdateRequest, ctx: _UpdateContext) -> None:
        title = ctx.title if ctx.title is not None else self._catalog.read_snippet(ctx.video_id).title
        episode = try_episode_number(None, title)
        if episode is None:
            LOGGER.warning(
                "Title has no episode prefix, skipping thumbnail",
                extra={"event": "update.thumbnail_skipped", "video_id": ctx.video_id, "title": title},
            )
            return
        video = find_episode_file(directory, episode_prefix(episode))
        if video is None:
            LOGGER.warning(
                "No video file for episode, skipping thumbnail",
                extra={
                    "event": "update.thumbnail_skipped",
                    "video_id": ctx.video_id,
                    "prefix": episode_prefix(episode),
                },
            )
            return

        second = request.thumb_second if request.thumb_second is not None else self._thumbnails.screenshot_second
        background = self._screenshots.capture(video, second)
        spec = ThumbnailSpec(
            background=background,
            overlay=request.watermark or self._thumbnails.watermark,
            caption=derive_title(None, video),
            output=sibling_with_suffix(video, self._thumbnails.suffix),
        )
        ctx.thumbnail = self._compositor.render(spec)
        self._catalog.attach_thumbnail(ctx.video_id, ctx.thumbnail)


__all__ = ["UpdateWorkflow"]
