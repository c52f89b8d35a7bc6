"""YouTube Data API request helpers."""

from __future__ import annotations

import json
from typing import Any, Iterable, Protocol

import requests

from ...core.errors import TransportError
from ...utils.logging import get_logger

LOGGER = get_logger(__name__)


class YouTubeApiError(TransportError):
    """Raised when a YouTube API call fails or answers with something unusable."""


class Session(Protocol):
    """The slice of ``requests.Session`` the clients rely on."""

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response: ...


def error_reason(response: requests.Response) -> str | None:
    """Extract ``error.errors[0].reason`` (or the message) from an API error body."""
    try:
        data = response.json()
    except ValueError:
        return None
    error = data.get("error") if isinstance(data, dict) else None
    if not isinstance(error, dict):
        return None
    errors = error.get("errors") or []
    if errors and isinstance(errors[0], dict) and errors[0].get("reason"):
        return str(errors[0]["reason"])
    message = error.get("message")
    return str(message) if message else None


def send(
    session: Session,
    method: str,
    url: str,
    *,
    timeout: float,
    expected: Iterable[int] = (200,),
    **kwargs: Any,
) -> requests.Response:
    """Issue one request; anything but an ``expected`` status raises ``YouTubeApiError``."""
    allowed = tuple(expected)
    try:
        response = session.request(method, url, timeout=timeout, **kwargs)
    except requests.RequestException as exc:
        raise YouTubeApiError(
            "Request to YouTube failed",
            details={"method": method, "url": url, "reason": str(exc)},
        ) from exc

    LOGGER.debug(
        "YouTube responded",
        extra={"event": "youtube.response", "method": method, "url": url, "status": response.status_code},
    )
    if response.status_code not in allowed:
        raise YouTubeApiError(
            "YouTube rejected the request",
            details={
                "method": method,
                "url": url,
                "status": response.status_code,
                "reason": error_reason(response),
            },
        )
    return response


def decode_json(response: requests.Response, *, method: str, url: str) -> dict[str, Any]:
    try:
        data = response.json()
    except (ValueError, json.JSONDecodeError) as exc:
        raise YouTubeApiError(
            "Could not decode YouTube response",
            details={"method": method, "url": url, "status": response.status_code, "body": response.text[:200]},
        ) from exc
    if not isinstance(data, dict):
        raise YouTubeApiError(
            "Unexpected YouTube response shape",
            details={"method": method, "url": url, "status": response.status_code},
        )
    return data


def request_json(
    session: Session,
    method: str,
    url: str,
    *,
    timeout: float,
    expected: Iterable[int] = (200,),
    **kwargs: Any,
) -> dict[str, Any]:
    response = send(session, method, url, timeout=timeout, expected=expected, **kwargs)
    return decode_json(response, method=method, url=url)


__all__ = ["Session", "YouTubeApiError", "decode_json", "error_reason", "request_json", "send"]
