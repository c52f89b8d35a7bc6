"""Sequential step runner with required and best-effort steps."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Sequence, TypeVar

from ..utils.logging import get_logger
from .errors import TransportError

LOGGER = get_logger(__name__)

C = TypeVar("C")

# Failures a best-effort step may swallow.
TOLERATED_ERRORS: tuple[type[BaseException], ...] = (TransportError, OSError)


@dataclass(slots=True)
class WorkflowStep(Generic[C]):
    name: str
    handler: Callable[[C], None]
    required: bool = True
    tolerated: tuple[type[BaseException], ...] = TOLERATED_ERRORS


@dataclass(slots=True)
class StepReport:
    """Status per step name, in execution order."""

    STATUS_COMPLETED = "completed"
    STATUS_FAILED = "failed"

    steps: dict[str, str] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    def failed_steps(self) -> list[str]:
        return [name for name, status in self.steps.items() if status == self.STATUS_FAILED]


class StepRunner(Generic[C]):
    """Executes steps strictly in registration order."""

    def __init__(self, steps: Sequence[WorkflowStep[C]]) -> None:
        self._steps = list(steps)

    def run(self, context: C) -> StepReport:
        report = StepReport()
        for step in self._steps:
            LOGGER.info("Running step %s", step.name, extra={"event": "step.start", "step": step.name})
            try:
                step.handler(context)
            except Exception as exc:
                report.steps[step.name] = StepReport.STATUS_FAILED
                report.errors[step.name] = str(exc)
                if step.required or not isinstance(exc, step.tolerated):
                    raise
                LOGGER.warning(
                    "Best-effort step %s failed: %s",
                    step.name,
                    exc,
                    extra={"event": "step.skipped", "step": step.name, "error_type": type(exc).__name__},
                )
                continue
            report.steps[step.name] = StepReport.STATUS_COMPLETED
        return report


__all__ = ["StepReport", "StepRunner", "TOLERATED_ERRORS", "WorkflowStep"]
