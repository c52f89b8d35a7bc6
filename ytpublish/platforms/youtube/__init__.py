"""YouTube platform adapters."""

from __future__ import annotations

from .api import YouTubeApiError
from .catalog import YouTubeCatalogClient
from .credentials import YouTubeCredentialStore
from .upload import ResumableUploader

__all__ = [
    "ResumableUploader",
    "YouTubeApiError",
    "YouTubeCatalogClient",
    "YouTubeCredentialStore",
]
