"""Resumable upload protocol used for videos and thumbnails.

A session is negotiated with a POST whose ``Location`` header names the
upload URL; the file is then streamed with PUT requests carrying a
``Content-Range``. The server answers ``308`` with a ``Range`` header while it
still expects bytes and ``200``/``201`` with the created resource at the end.
"""

from __future__ import annotations

import mimetypes
import re
from pathlib import Path
from typing import Any, Mapping

from ...core.errors import ValidationError
from ...utils.logging import get_logger
from .api import Session, YouTubeApiError, decode_json, send

LOGGER = get_logger(__name__)

RESUME_INCOMPLETE = 308
_RANGE_RE = re.compile(r"bytes=(\d+)-(\d+)")


def guess_content_type(path: Path, default: str = "application/octet-stream") -> str:
    return mimetypes.guess_type(path.name)[0] or default


def acknowledged_offset(range_header: str | None) -> int:
    """Next byte the server expects, from a ``Range: bytes=0-N`` header."""
    if not range_header:
        return 0
    match = _RANGE_RE.search(range_header)
    if not match:
        raise YouTubeApiError("Malformed Range header in upload response", details={"range": range_header})
    return int(match.group(2)) + 1


class ResumableUploader:
    def __init__(self, session: Session, *, timeout: float = 60.0, chunk_size: int = 8 * 1024 * 1024) -> None:
        if chunk_size <= 0:
            raise ValidationError("chunk_size must be positive", details={"chunk_size": chunk_size})
        self._session = session
        self._timeout = timeout
        self._chunk_size = chunk_size

    def start(
        self,
        url: str,
        *,
        content_type: str,
        content_length: int,
        metadata: Mapping[str, Any] | None = None,
    ) -> str:
        """Negotiate an upload session and return its upload URL."""
        headers = {
            "X-Upload-Content-Type": content_type,
            "X-Upload-Content-Length": str(content_length),
        }
        kwargs: dict[str, Any] = {"headers": headers}
        if metadata is not None:
            kwargs["json"] = dict(metadata)
        response = send(self._session, "POST", url, timeout=self._timeout, expected=(200, 201), **kwargs)
        location = response.headers.get("Location")
        if not location:
            raise YouTubeApiError(
                "Upload session response carries no Location header",
                details={"url": url, "status": response.status_code},
            )
        LOGGER.debug("Upload session opened", extra={"event": "upload.session", "url": url})
        return location

    def transfer(self, upload_url: str, path: Path, *, content_type: str) -> dict[str, Any]:
        """Stream ``path`` to ``upload_url`` chunk by chunk and return the final resource."""
        total = path.stat().st_size
        offset = 0
        with path.open("rb") as stream:
            while True:
                stream.seek(offset)
                chunk = stream.read(self._chunk_size)
                end = offset + len(chunk)
                headers = {
                    "Content-Type": content_type,
                    "Content-Length": str(len(chunk)),
                    "Content-Range": f"bytes {offset}-{end - 1}/{total}",
                }
                response = send(
                    self._session,
                    "PUT",
                    upload_url,
                    timeout=self._timeout,
                    expected=(200, 201, RESUME_INCOMPLETE),
                    data=chunk,
                    headers=headers,
                    allow_redirects=False,
                )
                if response.status_code != RESUME_INCOMPLETE:
                    return decode_json(response, method="PUT", url=upload_url)

                acknowledged = acknowledged_offset(response.headers.get("Range"))
                LOGGER.debug(
                    "Chunk acknowledged",
                    extra={"event": "upload.chunk", "acknowledged": acknowledged, "total": total},
                )
                if acknowledged >= total:
                    raise YouTubeApiError(
                        "Server received every byte but did not finish the upload",
                        details={"url": upload_url, "total": total},
                    )
                if acknowledged <= offset and chunk:
                    raise YouTubeApiError(
                        "Upload made no progress",
                        details={"url": upload_url, "offset": offset, "acknowledged": acknowledged},
                    )
                offset = acknowledged

    def upload(
        self,
        url: str,
        path: Path,
        *,
        metadata: Mapping[str, Any] | None = None,
        content_type: str | None = None,
    ) -> dict[str, Any]:
        size = path.stat().st_size
        if size == 0:
            raise ValidationError("Refusing to upload an empty file", details={"path": str(path)})
        ctype = content_type or guess_content_type(path)
        upload_url = self.start(url, content_type=ctype, content_length=size, metadata=metadata)
        result = self.transfer(upload_url, path, content_type=ctype)
        LOGGER.info(
            "Upload finished",
            extra={"event": "upload.done", "path": str(path), "bytes": size},
        )
        return result


__all__ = ["ResumableUploader", "acknowledged_offset", "guess_content_type"]
