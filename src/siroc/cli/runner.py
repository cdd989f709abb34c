"""Run wrapper: timed, fail-fast invocation of a command handler.

Every command, built-in or custom, goes through :func:`run_action`.
It is the only place handler errors are caught; the result is an exit
code rather than a ``sys.exit`` so the entry point stays the single
exit path.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
from collections.abc import Awaitable, Callable, Iterator
from time import perf_counter
from typing import Any

from siroc.cli import exit_codes
from siroc.core.models import RootContext
from siroc.core.protocols import Reporter


def format_duration(milliseconds: float) -> str:
    """Render an elapsed time: ``"1.5s"`` from one second up, else ``"250ms"``."""
    rounded = round(milliseconds)
    if rounded >= 1000:
        return f"{milliseconds / 1000:.1f}s"
    return f"{rounded}ms"


def run_action(
    context: RootContext,
    label: str,
    action: Callable[..., Any],
    *args: Any,
) -> int:
    """Invoke ``action(context, *args)`` and report the outcome.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS`, or :data:`exit_codes.GENERAL_ERROR`
        after exactly one error was logged.
    """
    logger = context.logger
    start = perf_counter()
    try:
        result = action(context, *args)
        if inspect.isawaitable(result):
            _drive(result, logger)
    except Exception as exc:  # noqa: BLE001 - every handler failure ends here
        logger.error(exc)
        return exit_codes.GENERAL_ERROR

    elapsed = (perf_counter() - start) * 1000
    logger.success(f"Finished {label} in", emphasis=format_duration(elapsed))
    return exit_codes.SUCCESS


def _drive(awaitable: Awaitable[Any], logger: Reporter) -> Any:
    """Run *awaitable* to completion in a fresh event loop.

    Tasks the handler started but never awaited are waited for once
    the handler returns; their failures, and any other exception the
    loop reports without raising, are routed to the logger, which
    latches the error for the final exit code.
    """

    def _report(_loop: asyncio.AbstractEventLoop, ctx: dict[str, Any]) -> None:
        error = ctx.get("exception")
        logger.error(error if isinstance(error, BaseException) else str(ctx.get("message")))

    async def _main() -> Any:
        asyncio.get_running_loop().set_exception_handler(_report)
        result = await awaitable
        await _drain_pending(logger)
        return result

    return asyncio.run(_main())


async def _drain_pending(logger: Reporter) -> None:
    current = asyncio.current_task()
    pending = asyncio.all_tasks() - {current}
    while pending:
        results = await asyncio.gather(*pending, return_exceptions=True)
        for outcome in results:
            if isinstance(outcome, Exception):
                logger.error(outcome)
        pending = asyncio.all_tasks() - {current}


@contextlib.contextmanager
def timed(logger: Reporter, name: str) -> Iterator[None]:
    """Log how long the enclosed startup phase took (debug level)."""
    start = perf_counter()
    try:
        yield
    finally:
        logger.debug(f"{name}: {format_duration((perf_counter() - start) * 1000)}")
