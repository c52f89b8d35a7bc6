"""Platform integration package."""

from __future__ import annotations

from .base import CatalogClient, CatalogEntry, EntrySnippet, PlaylistMembership

__all__ = [
    "CatalogClient",
    "CatalogEntry",
    "EntrySnippet",
    "PlaylistMembership",
]
