"""Tests for the step runner."""

from __future__ import annotations

import pytest

from ytpublish.core.errors import ScreenshotError, TransportError
from ytpublish.core.steps import StepReport, StepRunner, WorkflowStep


def test_required_failure_stops_the_run() -> None:
    events: list[str] = []

    def step_b(_: object) -> None:
        events.append("b")
        raise TransportError("boom")

    runner = StepRunner(
        [
            WorkflowStep("a", lambda _: events.append("a")),
            WorkflowStep("b", step_b),
            WorkflowStep("c", lambda _: events.append("c"), required=False),
        ]
    )

    with pytest.raises(TransportError):
        runner.run(object())

    assert events == ["a", "b"]


def test_best_effort_transport_failure_is_recorded_and_run_continues() -> None:
    order: list[str] = []

    def flaky(_: object) -> None:
        order.append("flaky")
        raise TransportError("remote said no")

    runner = StepRunner(
        [
            WorkflowStep("first", lambda _: order.append("first")),
            WorkflowStep("flaky", flaky, required=False),
            WorkflowStep("last", lambda _: order.append("last"), required=False),
        ]
    )
    report = runner.run(object())

    assert order == ["first", "flaky", "last"]
    assert report.steps == {
        "first": StepReport.STATUS_COMPLETED,
        "flaky": StepReport.STATUS_FAILED,
        "last": StepReport.STATUS_COMPLETED,
    }
    assert report.failed_steps() == ["flaky"]
    assert "remote said no" in report.errors["flaky"]


def test_best_effort_step_still_propagates_unexpected_errors() -> None:
    def broken(_: object) -> None:
        raise KeyError("bug")

    runner = StepRunner([WorkflowStep("broken", broken, required=False)])
    with pytest.raises(KeyError):
        runner.run(object())


def test_custom_tolerated_errors() -> None:
    def shot(_: object) -> None:
        raise ScreenshotError("ffmpeg failed")

    runner = StepRunner(
        [WorkflowStep("thumb", shot, required=False, tolerated=(ScreenshotError,))]
    )
    assert runner.run(object()).failed_steps() == ["thumb"]
