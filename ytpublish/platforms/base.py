"""Base contracts for video catalog platforms."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol


@dataclass(slots=True)
class CatalogEntry:
    """A published video as the catalog reports it.

    ``snippet`` keeps the server's record verbatim so that an update can send
    every field back, not only the one being changed.
    """

    id: str
    title: str = ""
    description: str = ""
    tags: list[str] = field(default_factory=list)
    snippet: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_snippet(cls, entry_id: str, snippet: Mapping[str, Any] | None) -> "CatalogEntry":
        data = dict(snippet or {})
        return cls(
            id=entry_id,
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            tags=list(data.get("tags", [])),
            snippet=data,
        )


@dataclass(slots=True)
class EntrySnippet:
    title: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True)
class PlaylistMembership:
    playlist_id: str
    entry_id: str
    item_id: str | None = None


class CatalogClient(Protocol):
    """Operations the workflows need from a remote video catalog."""

    def create_entry(self, video_path: Path, metadata: Mapping[str, Any]) -> str:
        """Upload ``video_path`` with the ``metadata`` resource body and return the new entry id."""

    def attach_thumbnail(self, entry_id: str, image_path: Path) -> None:
        """Replace the entry's thumbnail with ``image_path``."""

    def add_to_playlist(self, playlist_id: str, entry_id: str) -> PlaylistMembership:
        """Append the entry to a playlist."""

    def list_playlist(self, playlist_id: str, page_size: int | None = None) -> list[CatalogEntry]:
        """Return every entry of the playlist in server order."""

    def read_snippet(self, entry_id: str) -> EntrySnippet:
        """Return title and description of an entry."""

    def fetch_entry(self, entry_id: str) -> CatalogEntry:
        """Return the entry with its complete snippet."""

    def modify_snippet(
        self, entry_id: str, mutate: Callable[[dict[str, Any]], None]
    ) -> CatalogEntry:
        """Read the whole snippet, let ``mutate`` change it in place, write it all back."""

    def resolve_uploads_playlist(self) -> str:
        """Return the id of the authenticated channel's uploads playlist."""

    def list_uploaded(self, page_size: int | None = None) -> list[CatalogEntry]:
        """Return every entry the authenticated channel uploaded."""


__all__ = ["CatalogClient", "CatalogEntry", "EntrySnippet", "PlaylistMembership"]
