"""Helper functions deriving video metadata from user input and file names."""

from __future__ import annotations

import string
from pathlib import Path

from ytpublish.core.errors import InvalidEpisodeEncoding, ValidationError

_HEX_DIGITS = frozenset(string.hexdigits)


def derive_title(explicit: str | None, filename: str | Path) -> str:
    """Return ``explicit`` when given, even if empty; otherwise the file stem."""
    if explicit is not None:
        return explicit
    return Path(filename).stem


def derive_episode_number(explicit: int | None, title: str) -> int:
    """Explicit number, or the first two title characters read as hexadecimal.

    ``"2A-intro"`` yields ``0x2A``; a one-character title such as ``"A"`` is read whole.
    """
    if explicit is not None:
        if not 0 <= explicit <= 255:
            raise ValidationError("Episode number must be within 0-255", details={"value": explicit})
        return explicit
    prefix = title[:2]
    if not prefix or not all(char in _HEX_DIGITS for char in prefix):
        raise InvalidEpisodeEncoding(
            "Title does not start with a hex episode number",
            details={"title": title},
        )
    return int(prefix, 16)


def try_episode_number(explicit: int | None, title: str) -> int | None:
    try:
        return derive_episode_number(explicit, title)
    except InvalidEpisodeEncoding:
        return None


def derive_tags(csv: str) -> list[str]:
    """Split on commas verbatim: no trimming, no de-duplication, empty segments kept."""
    return csv.split(",")


def episode_prefix(episode_number: int) -> str:
    """Two-digit upper-case hex, the prefix episode files are named with."""
    return f"{episode_number:02X}"


__all__ = [
    "derive_episode_number",
    "derive_tags",
    "derive_title",
    "episode_prefix",
    "try_episode_number",
]
