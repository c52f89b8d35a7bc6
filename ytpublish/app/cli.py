"""Command-line interface for uploading, listing and updating YouTube videos."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Callable, Sequence, TypeVar

from ..core.errors import CommandNotImplemented, ParseError, PublishError, ValidationError
from ..core.scheduling import (
    describe_methods,
    parse_clock_time,
    parse_episode_literal,
    parse_iso_date,
    parse_schedule,
)
from ..platforms import CatalogEntry
from ..platforms.youtube import YouTubeCatalogClient, YouTubeCredentialStore
from ..services.models import Category, ChangeMode, Privacy, UpdateRequest, UploadRequest
from ..services.update_workflow import UpdateWorkflow
from ..services.upload_workflow import UploadWorkflow
from ..settings import AppConfig, ThumbnailSettings, load_config
from ..utils.file_helper import read_text
from ..utils.logging import configure_logging, get_logger, level_for_verbosity

LOGGER = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

T = TypeVar("T")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(level=level_for_verbosity(args.verbose), structured=not args.log_plain)

    handler: Callable[[argparse.Namespace, AppConfig], int] | None = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    try:
        config = load_config(args.config)
        return handler(args, config)
    except CommandNotImplemented:
        print("Not yet implemented", file=sys.stderr)
        return EXIT_FAILURE
    except (ParseError, ValidationError) as exc:
        LOGGER.error("Invalid input: %s", exc, extra={"event": "cli.error", "command": args.command})
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE
    except (PublishError, OSError) as exc:
        LOGGER.error(
            "Command failed: %s",
            exc,
            extra={"event": "cli.error", "command": args.command, "error_type": type(exc).__name__},
        )
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FAILURE


def _arg(parse: Callable[[str], T]) -> Callable[[str], T]:
    """Adapt a parser raising ``ParseError`` into an argparse ``type``."""

    def convert(value: str) -> T:
        try:
            return parse(value)
        except (ParseError, ValueError) as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    convert.__name__ = getattr(parse, "__name__", "value")
    return convert


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ytpublish", description="Automate YouTube uploads")
    parser.add_argument("--config", help="Path to configuration file", default=None)
    parser.add_argument(
        "--log-plain",
        action="store_true",
        help="Use plain-text logs instead of JSON",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")

    _add_upload_command(subparsers)
    _add_list_command(subparsers)
    _add_update_command(subparsers)

    return parser


def _add_thumbnail_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--thumbnail-watermark", type=Path, default=None, help="Overlay image placed on top")
    parser.add_argument(
        "--thumb-second", type=int, default=None, help="Video second the thumbnail frame is taken from"
    )
    parser.add_argument("--ffmpeg-bin", default=None, help="ffmpeg executable")


def _add_upload_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    upload = subparsers.add_parser("upload", help="Upload a video")
    upload.add_argument("--file", type=Path, required=True, help="Video file to upload")
    upload.add_argument("--description", required=True, help="Video description")
    upload.add_argument("--title", default=None, help="Title; defaults to the file name without extension")
    upload.add_argument("--thumbnail", type=Path, default=None, help="Ready-made thumbnail image")
    _add_thumbnail_options(upload)
    upload.add_argument(
        "--publish-at",
        type=_arg(parse_schedule),
        default=None,
        metavar="METHOD[=VALUE]",
        help="Scheduling method, see 'list --publish-methods'",
    )
    upload.add_argument(
        "--publish-time", type=_arg(parse_clock_time), default=None, metavar="HH:MM:SS", help="Publishing day-time"
    )
    upload.add_argument(
        "--episode-nr",
        type=_arg(parse_episode_literal),
        default=None,
        help="Episode number (0-255, decimal or 0x.. hex)",
    )
    upload.add_argument("--playlist-id", default=None, help="Playlist the video is added to")
    upload.add_argument("--keywords", default=None, help="Comma separated tags")
    upload.add_argument(
        "--privacy-status",
        type=_arg(Privacy.parse),
        default=None,
        metavar="{" + ",".join(Privacy.names()) + "}",
    )
    upload.add_argument(
        "--category",
        type=_arg(Category.parse),
        default=None,
        metavar="{" + ",".join(Category.names()) + "}",
    )
    upload.add_argument(
        "--first-episode-date", type=_arg(parse_iso_date), default=None, metavar="YYYY-MM-DD"
    )
    upload.add_argument("--pretend", action="store_true", help="Only print what would be uploaded")
    upload.set_defaults(handler=_handle_upload)


def _add_list_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    listing = subparsers.add_parser("list", help="List videos or scheduling methods")
    target = listing.add_mutually_exclusive_group(required=True)
    target.add_argument("--publish-methods", action="store_true", help="Show the scheduling methods")
    target.add_argument("--yt-top5", action="store_true", help="Show the five most popular videos")
    target.add_argument("--uploaded", action="store_true", help="Show the channel's uploads")
    target.add_argument("--playlist-id", default=None, help="Show the videos of a playlist")
    listing.add_argument("--page-size", type=int, default=None, help="Results per page (1-50)")
    listing.add_argument("--format", choices=("table", "json"), default="table")
    listing.set_defaults(handler=_handle_list)


def _add_update_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    update = subparsers.add_parser("update", help="Update published videos")
    update.add_argument("--video-id", required=True, help="Video id, or 'uploaded' for every upload")
    update.add_argument("--description", type=Path, default=None, help="File holding the description text")
    update.add_argument(
        "--change-desc",
        type=_arg(ChangeMode.parse),
        default=ChangeMode.APPEND,
        metavar="{" + ",".join(ChangeMode.names()) + "}",
    )
    update.add_argument(
        "--generate-thumbnail", type=Path, default=None, metavar="DIR", help="Directory holding episode videos"
    )
    _add_thumbnail_options(update)
    update.add_argument("--add-to-playlist", default=None, metavar="ID")
    update.set_defaults(handler=_handle_update)


def _thumbnail_settings(args: argparse.Namespace, config: AppConfig) -> ThumbnailSettings:
    if args.ffmpeg_bin:
        return replace(config.thumbnail, ffmpeg_bin=args.ffmpeg_bin)
    return config.thumbnail


def _open_session(config: AppConfig) -> Any:
    return YouTubeCredentialStore(config.paths.token_cache).open_session()


def _upload_request(args: argparse.Namespace, config: AppConfig) -> UploadRequest:
    defaults = config.upload
    first_episode: date = args.first_episode_date or parse_iso_date(defaults.first_episode_date)
    return UploadRequest(
        video=args.file,
        description=args.description,
        schedule=args.publish_at or parse_schedule(defaults.publish_at),
        publish_time=args.publish_time or parse_clock_time(defaults.publish_time),
        first_episode_date=first_episode,
        keywords=args.keywords if args.keywords is not None else defaults.keywords,
        category=args.category or Category.parse(defaults.category),
        privacy=args.privacy_status or Privacy.parse(defaults.privacy),
        title=args.title,
        episode_number=args.episode_nr,
        thumbnail=args.thumbnail,
        watermark=args.thumbnail_watermark,
        thumb_second=args.thumb_second,
        playlist_id=args.playlist_id or defaults.playlist_id,
        dry_run=args.pretend,
    )


def _handle_upload(args: argparse.Namespace, config: AppConfig) -> int:
    request = _upload_request(args, config)
    thumbnails = _thumbnail_settings(args, config)

    if request.dry_run:
        preview = UploadWorkflow(None, thumbnail_settings=thumbnails).preview(request)
        for key, value in preview.as_dict().items():
            rendered = json.dumps(value, ensure_ascii=False) if isinstance(value, list) else value
            print(f"{key}: {rendered}")
        return EXIT_OK

    LOGGER.info(
        "Upload started",
        extra={"event": "cli.command", "command": "upload", "file": str(request.video)},
    )
    with _open_session(config) as session:
        catalog = YouTubeCatalogClient(session, config.youtube)
        result = UploadWorkflow(catalog, thumbnail_settings=thumbnails).publish(request)

    print(f"video-id: {result.video_id}")
    print(f"thumbnail-path: {result.thumbnail}")
    for step in result.report.failed_steps():
        print(f"warning: step {step} failed: {result.report.errors.get(step)}", file=sys.stderr)
    return EXIT_OK


def _handle_list(args: argparse.Namespace, config: AppConfig) -> int:
    if args.publish_methods:
        for usage, help_text in describe_methods():
            print(f"{usage}\n    {help_text}")
        return EXIT_OK

    with _open_session(config) as session:
        catalog = YouTubeCatalogClient(session, config.youtube)
        if args.yt_top5:
            entries = catalog.list_most_popular(5)
        elif args.uploaded:
            entries = catalog.list_uploaded(args.page_size)
        else:
            entries = catalog.list_playlist(args.playlist_id, args.page_size)

    if args.format == "json":
        print(json.dumps([_entry_dict(entry) for entry in entries], ensure_ascii=False, indent=2))
    else:
        _print_entry_table(entries)
    return EXIT_OK


def _handle_update(args: argparse.Namespace, config: AppConfig) -> int:
    description = read_text(args.description) if args.description else None
    request = UpdateRequest(
        video_id=args.video_id,
        description=description,
        change_mode=args.change_desc,
        thumbnail_dir=args.generate_thumbnail,
        watermark=args.thumbnail_watermark,
        thumb_second=args.thumb_second,
        playlist_id=args.add_to_playlist,
    )
    with _open_session(config) as session:
        catalog = YouTubeCatalogClient(session, config.youtube)
        outcomes = UpdateWorkflow(catalog, thumbnail_settings=_thumbnail_settings(args, config)).run(request)

    for outcome in outcomes:
        statuses = ", ".join(f"{name}={status}" for name, status in outcome.report.steps.items())
        print(f"{outcome.video_id}: {statuses}")
    return EXIT_OK


def _entry_dict(entry: CatalogEntry) -> dict[str, Any]:
    return {"id": entry.id, "title": entry.title, "description": entry.description}


def _print_entry_table(entries: Sequence[CatalogEntry]) -> None:
    width = max((len(entry.id) for entry in entries), default=8)
    print("Id".ljust(width), "Title", sep="  ")
    for entry in entries:
        print(entry.id.ljust(width), entry.title, sep="  ")


__all__ = ["main"]
