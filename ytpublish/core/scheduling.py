"""Publish-date computation.

A schedule is given on the command line as ``<method>=<value>`` and parsed
into one of the :data:`SchedulingMode` variants right away, so a malformed
date or weekday is rejected before any work starts.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta, timezone
from typing import Union

from .errors import ParseError, ValidationError

ISO_DATE_FORMAT = "%Y-%m-%d"
ISO_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass(frozen=True, slots=True)
class Immediate:
    """Current date at 0 o'clock, publishes as soon as possible."""

    method = "asap"


@dataclass(frozen=True, slots=True)
class NextWeekday:
    """Date of the coming weekday, e.g. ``coming=friday`` computes next friday."""

    weekday: int
    method = "coming"


@dataclass(frozen=True, slots=True)
class WeeksAfterEpoch:
    """Weeks after the first episode date, one week per episode number."""

    episode_number: int | None = None
    method = "weeks-from-episode"

    def with_episode(self, episode_number: int | None) -> "WeeksAfterEpoch":
        if self.episode_number is not None:
            return self
        return replace(self, episode_number=episode_number)


@dataclass(frozen=True, slots=True)
class FixedDate:
    """Given ISO date, combined with the publishing day-time."""

    value: date
    method = "iso-date"


@dataclass(frozen=True, slots=True)
class FixedDateTime:
    """Given ISO date and time."""

    value: datetime
    method = "iso-date-time"


SchedulingMode = Union[Immediate, NextWeekday, WeeksAfterEpoch, FixedDate, FixedDateTime]

_METHOD_USAGE = (
    (Immediate, "asap"),
    (NextWeekday, "coming=<weekday>"),
    (WeeksAfterEpoch, "weeks-from-episode[=<episode>]"),
    (FixedDate, "iso-date=YYYY-MM-DD"),
    (FixedDateTime, "iso-date-time=YYYY-MM-DD[ HH:MM:SS]"),
)


def parse_iso_date(value: str) -> date:
    try:
        return datetime.strptime(value.strip(), ISO_DATE_FORMAT).date()
    except ValueError as exc:
        raise ParseError("Invalid ISO date", details={"value": value}) from exc


def parse_iso_datetime(value: str) -> datetime:
    """Parse ``YYYY-MM-DD HH:MM:SS``; the time part is optional."""
    text = value.strip()
    if len(text) == 10:
        text = f"{text} 00:00:00"
    text = text.replace("T", " ", 1)
    try:
        return datetime.strptime(text, ISO_DATETIME_FORMAT)
    except ValueError as exc:
        raise ParseError("Invalid ISO date-time", details={"value": value}) from exc


def parse_clock_time(value: str) -> time:
    text = value.strip()
    fmt = "%H:%M:%S" if text.count(":") == 2 else "%H:%M"
    try:
        return datetime.strptime(text, fmt).time()
    except ValueError as exc:
        raise ParseError("Invalid clock time, expected HH:MM[:SS]", details={"value": value}) from exc


def parse_weekday(value: str) -> int:
    name = value.strip().lower()
    for index, full in enumerate(_WEEKDAYS):
        if name == full or name == full[:3]:
            return index
    raise ParseError("Unknown weekday", details={"value": value})


def parse_schedule(value: str) -> SchedulingMode:
    """Build a scheduling mode from ``<method>=<value>``.

    A missing ``=`` means an empty value, so ``asap`` and ``asap=`` are the same.
    """
    key, _, arg = value.partition("=")
    key = key.strip().lower()
    if key == "asap":
        return Immediate()
    if key == "coming":
        return NextWeekday(parse_weekday(arg))
    if key == "weeks-from-episode":
        if not arg.strip():
            return WeeksAfterEpoch()
        return WeeksAfterEpoch(_check_episode_range(parse_episode_literal(arg)))
    if key == "iso-date":
        return FixedDate(parse_iso_date(arg))
    if key == "iso-date-time":
        return FixedDateTime(parse_iso_datetime(arg))
    raise ParseError(
        "Unknown publish method",
        details={"value": value, "available": [method for _, method in _METHOD_USAGE]},
    )


def parse_episode_literal(value: str) -> int:
    """Decimal by default, hexadecimal with a ``0x`` prefix; ``08`` is eight."""
    text = value.strip()
    try:
        if text[:2].lower() == "0x":
            return int(text[2:], 16)
        return int(text, 10)
    except ValueError as exc:
        raise ParseError("Invalid episode number", details={"value": value}) from exc


def describe_methods() -> list[tuple[str, str]]:
    """Return ``(usage, help)`` for every scheduling method."""
    return [(usage, (cls.__doc__ or "").strip()) for cls, usage in _METHOD_USAGE]


def coming_weekday(start: date, weekday: int) -> date:
    """Next occurrence of ``weekday`` strictly after ``start``.

    Returns ``start`` unchanged when the scan finds nothing, which only
    happens for an out-of-range weekday.
    """
    if start.weekday() == weekday:
        return add_weeks(start, 1)
    for offset in range(1, 7):
        candidate = start + timedelta(days=offset)
        if candidate.weekday() == weekday:
            return candidate
    return start


def add_weeks(start: date, weeks: int) -> date:
    return start + timedelta(weeks=weeks)


def resolve(
    mode: SchedulingMode,
    reference: date | datetime,
    clock_time: time,
    episode_origin: date | str | None = None,
) -> datetime:
    """Compute the absolute UTC publish timestamp for ``mode``."""
    today = reference.date() if isinstance(reference, datetime) else reference

    if isinstance(mode, Immediate):
        return _utc(today, time())
    if isinstance(mode, NextWeekday):
        target = coming_weekday(today, mode.weekday)
        if target == today:
            raise ValidationError(
                "Weekday scan found no match",
                details={"reference": today.isoformat(), "weekday": mode.weekday},
            )
        return _utc(target, clock_time)
    if isinstance(mode, WeeksAfterEpoch):
        if mode.episode_number is None:
            raise ValidationError(
                "weeks-from-episode needs an episode number (explicit or hex title prefix)",
                details={"field": "episode_number"},
            )
        if episode_origin is None:
            raise ParseError("Missing first episode date", details={"field": "first_episode_date"})
        origin = parse_iso_date(episode_origin) if isinstance(episode_origin, str) else episode_origin
        return _utc(add_weeks(origin, mode.episode_number), clock_time)
    if isinstance(mode, FixedDate):
        return _utc(mode.value, clock_time)
    if isinstance(mode, FixedDateTime):
        return _utc(mode.value.date(), mode.value.time())
    raise TypeError(f"Unsupported scheduling mode: {mode!r}")


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)


def _utc(day: date, clock: time) -> datetime:
    return datetime.combine(day, clock.replace(microsecond=0, tzinfo=None), tzinfo=timezone.utc)


def _check_episode_range(number: int) -> int:
    if not 0 <= number <= 255:
        raise ParseError("Episode number must be within 0-255", details={"value": number})
    return number


__all__ = [
    "FixedDate",
    "FixedDateTime",
    "Immediate",
    "NextWeekday",
    "SchedulingMode",
    "WeeksAfterEpoch",
    "add_weeks",
    "coming_weekday",
    "describe_methods",
    "format_timestamp",
    "parse_clock_time",
    "parse_episode_literal",
    "parse_iso_date",
    "parse_iso_datetime",
    "parse_schedule",
    "parse_weekday",
    "resolve",
]
