"""Workflow for uploading a new video with its thumbnail and playlist membership."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Callable

from ytpublish.core.errors import ParseError, ValidationError
from ytpublish.core.scheduling import WeeksAfterEpoch, format_timestamp, resolve
from ytpublish.core.steps import StepRunner, WorkflowStep
from ytpublish.media import ScreenshotGenerator, ThumbnailCompositor, ThumbnailSpec
from ytpublish.platforms import CatalogClient
from ytpublish.services.components import PayloadBuilder
from ytpublish.services.metadata import derive_tags, derive_title, try_episode_number
from ytpublish.services.models import SubmissionMetadata, SubmissionPreview, UploadRequest, UploadResult
from ytpublish.settings import ThumbnailSettings
from ytpublish.utils.file_helper import sibling_with_suffix
from ytpublish.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class _UploadContext:
    video: Path
    payload: dict[str, Any]
    thumbnail: Path
    video_id: str = ""


class UploadWorkflow:
    """Coordinates metadata derivation, artwork, upload and playlist insertion."""

    def __init__(
        self,
        catalog: CatalogClient | None,
        *,
        thumbnail_settings: ThumbnailSettings | None = None,
        compositor: ThumbnailCompositor | None = None,
        screenshots: ScreenshotGenerator | None = None,
        payload_builder: PayloadBuilder | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._catalog = catalog
        self._thumbnails = thumbnail_settings or ThumbnailSettings()
        self._compositor = compositor or ThumbnailCompositor(self._thumbnails)
        self._screenshots = screenshots or ScreenshotGenerator(self._thumbnails.ffmpeg_bin)
        self._payload_builder = payload_builder or PayloadBuilder()
        self._today = today

    def build_metadata(self, request: UploadRequest) -> SubmissionMetadata:
        """Derive title, episode and tags and resolve the publish timestamp."""
        title = derive_title(request.title, request.video)
        episode = try_episode_number(request.episode_number, title)
        schedule = request.schedule
        if isinstance(schedule, WeeksAfterEpoch):
            schedule = schedule.with_episode(episode)
        publish_at = resolve(schedule, self._today(), request.publish_time, request.first_episode_date)
        return SubmissionMetadata(
            title=title,
            description=request.description,
            tags=derive_tags(request.keywords),
            category=request.category,
            privacy=request.privacy,
            publish_at=publish_at,
            episode_number=episode,
        )

    def preview(self, request: UploadRequest) -> SubmissionPreview:
        """Report what would be submitted; no network, no thumbnail work."""
        title = derive_title(request.title, request.video)
        episode = try_episode_number(request.episode_number, title)
        publish_at: str | None = None
        publish_error: str | None = None
        try:
            publish_at = format_timestamp(self.build_metadata(request).publish_at)
        except (ParseError, ValidationError) as exc:
            publish_error = str(exc)
        metadata = SubmissionMetadata(
            title=title,
            description=request.description,
            tags=derive_tags(request.keywords),
            category=request.category,
            privacy=request.privacy,
            episode_number=episode,
        )
        return SubmissionPreview(
            title=title,
            catalog_title=metadata.catalog_title,
            publish_method=request.schedule.method,
            publish_at=publish_at,
            publish_error=publish_error,
            episode_number=episode,
            category=request.category,
            privacy=request.privacy,
            tags=metadata.tags,
            description=request.description,
            thumbnail_caption=title,
        )

    def prepare_thumbnail(self, request: UploadRequest, caption: str) -> Path:
        """Explicit thumbnail as given; else reuse or create ``<stem><suffix>`` beside the video."""
        if request.thumbnail is not None:
            if not request.thumbnail.is_file():
                raise FileNotFoundError(f"Thumbnail not found: {request.thumbnail}")
            return request.thumbnail

        target = sibling_with_suffix(request.video, self._thumbnails.suffix)
        if target.exists():
            LOGGER.info("Reusing existing thumbnail", extra={"event": "upload.thumbnail_reused", "path": str(target)})
            return target

        second = request.thumb_second if request.thumb_second is not None else self._thumbnails.screenshot_second
        background = self._screenshots.capture(request.video, second)
        spec = ThumbnailSpec(
            background=background,
            overlay=request.watermark or self._thumbnails.watermark,
            caption=caption,
            output=target,
        )
        return self._compositor.render(spec)

    def publish(self, request: UploadRequest) -> UploadResult:
        if self._catalog is None:
            raise RuntimeError("A catalog client is required to publish")
        catalog = self._catalog
        if not request.video.is_file():
            raise FileNotFoundError(f"Video not found: {request.video}")

        metadata = self.build_metadata(request)
        thumbnail = self.prepare_thumbnail(request, metadata.title)
        context = _UploadContext(
            video=request.video,
            payload=self._payload_builder.build(metadata),
            thumbnail=thumbnail,
        )

        def create(ctx: _UploadContext) -> None:
            ctx.video_id = catalog.create_entry(ctx.video, ctx.payload)

        def attach(ctx: _UploadContext) -> None:
            catalog.attach_thumbnail(ctx.video_id, ctx.thumbnail)

        steps: list[WorkflowStep[_UploadContext]] = [
            WorkflowStep("create", create),
            WorkflowStep("attach-thumbnail", attach, required=False),
        ]
        playlist_id = request.playlist_id
        if playlist_id:
            steps.append(
                WorkflowStep(
                    "playlist",
                    lambda ctx: catalog.add_to_playlist(playlist_id, ctx.video_id),
                    required=False,
                )
            )

        report = StepRunner(steps).run(context)
        LOGGER.info(
            "Upload workflow finished",
            extra={
                "event": "upload.finished",
                "video_id": context.video_id,
                "failed_steps": report.failed_steps(),
            },
        )
        return UploadResult(
            video_id=context.video_id,
            metadata=metadata,
            thumbnail=thumbnail,
            report=report,
        )


__all__ = ["UploadWorkflow"]
