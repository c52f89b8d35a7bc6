"""Core primitives: errors, scheduling, pagination and step execution."""

from .errors import (
    CommandNotImplemented,
    CredentialsError,
    InvalidEpisodeEncoding,
    PaginationOverrun,
    ParseError,
    PublishError,
    ScreenshotError,
    TransportError,
    ValidationError,
)
from .pagination import Page, collect_pages, iter_pages
from .steps import StepReport, StepRunner, WorkflowStep

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
    "Page",
    "collect_pages",
    "iter_pages",
    "StepReport",
    "StepRunner",
    "WorkflowStep",
]
