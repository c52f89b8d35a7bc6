"""Error taxonomy shared by every ytpublish component."""

from __future__ import annotations

import json
from typing import Any, Mapping


class PublishError(RuntimeError):
    """Base error carrying enough context to reproduce a failure."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = dict(details or {})

    def __str__(self) -> str:
        base = super().__str__()
        if not self.details:
            return base
        try:
            detail_repr = json.dumps(self.details, ensure_ascii=False, default=str)
        except TypeError:
            detail_repr = str(self.details)
        return f"{base} | details: {detail_repr}"


class ParseError(PublishError, ValueError):
    """Malformed date, time, weekday or scheduling argument."""


class ValidationError(PublishError, ValueError):
    """Well-formed input that violates a constraint."""


class InvalidEpisodeEncoding(ValidationError):
    """The title does not start with a two-digit hexadecimal episode number."""


class TransportError(PublishError):
    """Network or protocol failure while talking to the catalog service."""


class PaginationOverrun(TransportError):
    """A listing kept returning continuation cursors past the page limit."""


class CredentialsError(PublishError):
    """No usable authorization context could be loaded."""


class ScreenshotError(PublishError):
    """The external screenshot binary failed to produce a still image."""


class CommandNotImplemented(PublishError):
    """Reserved for commands that are declared but not finished."""


__all__ = [
    "CommandNotImplemented",
    "CredentialsError",
    "InvalidEpisodeEncoding",
    "PaginationOverrun",
    "ParseError",
    "PublishError",
    "ScreenshotError",
    "TransportError",
    "ValidationError",
]
