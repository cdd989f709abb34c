"""Tests for the run wrapper (cli/runner.py) and the logger (cli/console.py).

Coverage:
* Duration formatting thresholds.
* Success line with the formatted duration.
* Sync and async handler failures: exit 1, exactly one error logged.
* Loop-reported async errors latch the logger.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from rich.console import Console

from siroc.cli import exit_codes
from siroc.cli.console import Logger
from siroc.cli.runner import format_duration, run_action, timed
from siroc.core.models import RootContext
from siroc.exceptions import SirocError


def _output(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


@pytest.fixture
def context(tmp_path: Path, make_context) -> RootContext:
    return make_context(tmp_path)


# ---------------------------------------------------------------------------
# format_duration
# ---------------------------------------------------------------------------

class TestFormatDuration:
    @pytest.mark.parametrize(
        ("milliseconds", "expected"),
        [
            (1500, "1.5s"),
            (1000, "1.0s"),
            (12_345, "12.3s"),
            (250, "250ms"),
            (999.4, "999ms"),
            (999.6, "1.0s"),
            (0.2, "0ms"),
        ],
    )
    def test_format(self, milliseconds: float, expected: str) -> None:
        assert format_duration(milliseconds) == expected


# ---------------------------------------------------------------------------
# run_action
# ---------------------------------------------------------------------------

class TestRunAction:
    def test_success_logs_duration(self, context: RootContext, console: Console) -> None:
        calls: list[tuple[Any, ...]] = []

        code = run_action(context, "building", lambda ctx, *args: calls.append((ctx, *args)), "x")

        assert code == exit_codes.SUCCESS
        assert calls == [(context, "x")]
        assert "Finished building in" in _output(console)
        assert context.logger.errored is False

    @patch("siroc.cli.runner.perf_counter", side_effect=[10.0, 11.5])
    def test_success_uses_seconds_above_one_second(
        self, _mock_clock: object, context: RootContext, console: Console,
    ) -> None:
        run_action(context, "building", lambda ctx: None)
        assert "Finished building in 1.5s" in _output(console)

    @patch("siroc.cli.runner.perf_counter", side_effect=[10.0, 10.25])
    def test_success_uses_milliseconds_below_one_second(
        self, _mock_clock: object, context: RootContext, console: Console,
    ) -> None:
        run_action(context, "stubbing", lambda ctx: None)
        assert "Finished stubbing in 250ms" in _output(console)

    def test_sync_failure_logs_once(self, context: RootContext, console: Console) -> None:
        def handler(ctx: RootContext) -> None:
            raise SirocError("nothing to build", hint="add a main field")

        code = run_action(context, "building", handler)

        out = _output(console)
        assert code == exit_codes.GENERAL_ERROR
        assert out.count("ERROR") == 1
        assert "nothing to build" in out
        assert "add a main field" in out
        assert "Finished" not in out
        assert context.logger.errored is True

    def test_unexpected_exception_shows_type(self, context: RootContext, console: Console) -> None:
        def handler(ctx: RootContext) -> None:
            raise ValueError("bad value")

        assert run_action(context, "running", handler) == exit_codes.GENERAL_ERROR
        assert "ValueError: bad value" in _output(console)

    def test_async_handler_is_awaited(self, context: RootContext, console: Console) -> None:
        seen: list[str] = []

        async def handler(ctx: RootContext) -> None:
            await asyncio.sleep(0)
            seen.append("done")

        assert run_action(context, "lint", handler) == exit_codes.SUCCESS
        assert seen == ["done"]
        assert "Finished lint" in _output(console)

    def test_async_failure_logs_once(self, context: RootContext, console: Console) -> None:
        async def handler(ctx: RootContext) -> None:
            await asyncio.sleep(0)
            raise RuntimeError("rejected")

        code = run_action(context, "lint", handler)

        out = _output(console)
        assert code == exit_codes.GENERAL_ERROR
        assert out.count("ERROR") == 1
        assert "RuntimeError: rejected" in out

    def test_loop_reported_error_latches(self, context: RootContext, console: Console) -> None:
        async def handler(ctx: RootContext) -> None:
            asyncio.get_running_loop().call_exception_handler(
                {"message": "Task exception was never retrieved", "exception": OSError("late")}
            )

        code = run_action(context, "lint", handler)

        assert code == exit_codes.SUCCESS
        assert context.logger.errored is True
        assert "OSError: late" in _output(console)

    def test_unawaited_task_failure_latches(self, context: RootContext, console: Console) -> None:
        ran: list[str] = []

        async def late() -> None:
            await asyncio.sleep(0.01)
            ran.append("late")
            raise OSError("late failure")

        async def handler(ctx: RootContext) -> None:
            asyncio.get_running_loop().create_task(late())

        code = run_action(context, "lint", handler)

        assert code == exit_codes.SUCCESS
        assert ran == ["late"]
        assert context.logger.errored is True
        assert "OSError: late failure" in _output(console)

    def test_unawaited_task_is_finished(self, context: RootContext) -> None:
        ran: list[str] = []

        async def background() -> None:
            await asyncio.sleep(0.01)
            ran.append("background")

        async def handler(ctx: RootContext) -> None:
            asyncio.get_running_loop().create_task(background())

        assert run_action(context, "lint", handler) == exit_codes.SUCCESS
        assert ran == ["background"]
        assert context.logger.errored is False

    def test_keyboard_interrupt_propagates(self, context: RootContext) -> None:
        def handler(ctx: RootContext) -> None:
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            run_action(context, "running", handler)


# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------

class TestLogger:
    def test_error_latch(self, console: Console) -> None:
        logger = Logger(console)
        assert logger.errored is False
        logger.error("first")
        assert logger.errored is True

    def test_debug_hidden_by_default(self, console: Console) -> None:
        Logger(console).debug("secret")
        assert "secret" not in _output(console)

    def test_debug_shown_when_enabled(self, console: Console) -> None:
        Logger(console, debug=True).debug("visible")
        assert "visible" in _output(console)

    def test_markup_in_messages_is_escaped(self, console: Console) -> None:
        Logger(console).info("[bold]literal[/bold]")
        assert "[bold]literal[/bold]" in _output(console)

    def test_success_escapes_markup(self, console: Console) -> None:
        Logger(console).success("built [esm] bundle")
        assert "built [esm] bundle" in _output(console)

    def test_success_emphasis(self, console: Console) -> None:
        Logger(console).success("Finished [x] in", emphasis="1.5s")
        assert "Finished [x] in 1.5s" in _output(console)

    def test_debug_error_includes_traceback(self, console: Console) -> None:
        logger = Logger(console, debug=True)
        try:
            raise ValueError("with trace")
        except ValueError as exc:
            logger.error(exc)
        assert "Traceback" in _output(console)

    def test_timed_logs_phase_in_debug(self, console: Console) -> None:
        logger = Logger(console, debug=True)
        with timed(logger, "load root package"):
            pass
        assert "load root package:" in _output(console)
