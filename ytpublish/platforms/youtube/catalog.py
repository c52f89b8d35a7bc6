"""YouTube Data API v3 catalog client."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Callable, Mapping

from ...core.errors import ValidationError
from ...core.pagination import Page, collect_pages
from ...services.components import merge_description
from ...services.models import ChangeMode
from ...settings import YouTubeSettings
from ...utils.logging import get_logger
from ..base import CatalogEntry, EntrySnippet, PlaylistMembership
from .api import Session, YouTubeApiError, request_json
from .upload import ResumableUploader

LOGGER = get_logger(__name__)

MAX_PAGE_SIZE = 50


class YouTubeCatalogClient:
    """Talks to one channel through an explicit, already authorized session.

    Nothing is retried: a failed request surfaces as ``YouTubeApiError``.
    """

    def __init__(
        self,
        session: Session,
        settings: YouTubeSettings | None = None,
        *,
        uploader: ResumableUploader | None = None,
    ) -> None:
        self._session = session
        self._settings = settings or YouTubeSettings()
        self._uploader = uploader or ResumableUploader(
            session, timeout=self._settings.timeout, chunk_size=self._settings.chunk_size
        )

    def _api(self, resource: str) -> str:
        return f"{self._settings.api_base_url}/{resource}"

    def _get(self, resource: str, params: Mapping[str, Any]) -> dict[str, Any]:
        return request_json(
            self._session, "GET", self._api(resource), timeout=self._settings.timeout, params=dict(params)
        )

    def create_entry(self, video_path: Path, metadata: Mapping[str, Any]) -> str:
        url = f"{self._settings.upload_base_url}/videos?uploadType=resumable&part=snippet,status"
        result = self._uploader.upload(url, video_path, metadata=metadata)
        entry_id = result.get("id")
        if not entry_id:
            raise YouTubeApiError(
                "Upload finished without a video id", details={"path": str(video_path), "response": result}
            )
        LOGGER.info("Video created", extra={"event": "catalog.created", "video_id": entry_id})
        return str(entry_id)

    def attach_thumbnail(self, entry_id: str, image_path: Path) -> None:
        url = f"{self._settings.upload_base_url}/thumbnails/set?videoId={entry_id}&uploadType=resumable"
        self._uploader.upload(url, image_path)
        LOGGER.info(
            "Thumbnail attached",
            extra={"event": "catalog.thumbnail", "video_id": entry_id, "path": str(image_path)},
        )

    def add_to_playlist(self, playlist_id: str, entry_id: str) -> PlaylistMembership:
        body = {
            "snippet": {
                "playlistId": playlist_id,
                "resourceId": {"kind": "youtube#video", "videoId": entry_id},
            }
        }
        data = request_json(
            self._session,
            "POST",
            self._api("playlistItems"),
            timeout=self._settings.timeout,
            params={"part": "snippet"},
            json=body,
        )
        LOGGER.info(
            "Added to playlist",
            extra={"event": "catalog.playlist", "playlist_id": playlist_id, "video_id": entry_id},
        )
        return PlaylistMembership(playlist_id=playlist_id, entry_id=entry_id, item_id=data.get("id"))

    def list_playlist(self, playlist_id: str, page_size: int | None = None) -> list[CatalogEntry]:
        size = self._settings.page_size if page_size is None else page_size
        if not 1 <= size <= MAX_PAGE_SIZE:
            raise ValidationError(
                "Page size must be within 1-50", details={"page_size": size}
            )

        def fetch_page(cursor: str | None) -> Page[CatalogEntry]:
            params: dict[str, Any] = {"part": "snippet", "playlistId": playlist_id, "maxResults": size}
            if cursor:
                params["pageToken"] = cursor
            data = self._get("playlistItems", params)
            entries = []
            for item in data.get("items", []):
                snippet = item.get("snippet") or {}
                video_id = (snippet.get("resourceId") or {}).get("videoId") or item.get("id", "")
                entries.append(CatalogEntry.from_snippet(str(video_id), snippet))
            return Page(items=entries, next_cursor=data.get("nextPageToken"))

        return collect_pages(fetch_page, max_pages=self._settings.max_pages or None)

    def _video_items(self, entry_id: str) -> list[dict[str, Any]]:
        data = self._get("videos", {"part": "snippet", "id": entry_id})
        return list(data.get("items", []))

    def read_snippet(self, entry_id: str) -> EntrySnippet:
        items = self._video_items(entry_id)
        snippet = (items[0].get("snippet") if items else None) or {}
        return EntrySnippet(
            title=str(snippet.get("title", "")),
            description=str(snippet.get("description", "")),
        )

    def fetch_entry(self, entry_id: str) -> CatalogEntry:
        items = self._video_items(entry_id)
        if not items:
            raise YouTubeApiError("Video not found", details={"video_id": entry_id})
        return CatalogEntry.from_snippet(str(items[0].get("id", entry_id)), items[0].get("snippet"))

    def modify_snippet(
        self, entry_id: str, mutate: Callable[[dict[str, Any]], None]
    ) -> CatalogEntry:
        """Fetch the whole snippet, apply ``mutate`` and submit every field back.

        The update endpoint clears fields that are omitted from the body, so
        the read must always precede the write.
        """
        current = self.fetch_entry(entry_id)
        snippet = copy.deepcopy(current.snippet)
        mutate(snippet)
        data = request_json(
            self._session,
            "PUT",
            self._api("videos"),
            timeout=self._settings.timeout,
            params={"part": "snippet"},
            json={"id": entry_id, "snippet": snippet},
        )
        LOGGER.info("Snippet updated", extra={"event": "catalog.snippet", "video_id": entry_id})
        return CatalogEntry.from_snippet(str(data.get("id", entry_id)), data.get("snippet") or snippet)

    def update_description(self, entry_id: str, text: str, mode: ChangeMode) -> CatalogEntry:
        def apply(snippet: dict[str, Any]) -> None:
            snippet["description"] = merge_description(str(snippet.get("description", "")), text, mode)

        return self.modify_snippet(entry_id, apply)

    def resolve_uploads_playlist(self) -> str:
        data = self._get("channels", {"part": "contentDetails", "mine": "true"})
        items = data.get("items") or []
        uploads = (
            ((items[0].get("contentDetails") or {}).get("relatedPlaylists") or {}).get("uploads")
            if items
            else None
        )
        if not uploads:
            raise YouTubeApiError("Channel has no uploads playlist", details={"items": len(items)})
        return str(uploads)

    def list_uploaded(self, page_size: int | None = None) -> list[CatalogEntry]:
        return self.list_playlist(self.resolve_uploads_playlist(), page_size)

    def list_most_popular(self, max_results: int = 5) -> list[CatalogEntry]:
        if not 1 <= max_results <= MAX_PAGE_SIZE:
            raise ValidationError("max_results must be within 1-50", details={"max_results": max_results})
        params: dict[str, Any] = {"part": "snippet", "chart": "mostPopular", "maxResults": max_results}
        data = self._get("videos", params)
        return [
            CatalogEntry.from_snippet(str(item.get("id", "")), item.get("snippet"))
            for item in data.get("items", [])
        ]


__all__ = ["MAX_PAGE_SIZE", "YouTubeCatalogClient"]
