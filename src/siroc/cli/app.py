"""CLI application entry point and command routing for siroc.

This module is the **sole error boundary** for the entire application.
Handler failures are reported by the run wrapper; anything that escapes
it (startup errors, ``KeyboardInterrupt``, unexpected exceptions) is
rendered here and mapped to a well-defined exit code.

Architecture notes
------------------
* No business logic lives here — work is delegated to
  :mod:`siroc.commands` through lazily imported handler shims.
* The root context is loaded explicitly at the start of :func:`main`
  and passed to every handler; there is no module-level state.
* This module is the only place that translates between the domain
  world and the OS process exit code.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from rich.console import Console

from siroc.cli import exit_codes
from siroc.cli.console import Logger
from siroc.cli.parser import PROG, build_parser, parse_invocation
from siroc.cli.runner import run_action, timed
from siroc.core.models import (
    BuildOptions,
    CommandSpec,
    OptionSpec,
    ParsedInvocation,
    PositionalSpec,
    RootContext,
    RunOptions,
)
from siroc.core.protocols import CommandHandler
from siroc.core.registry import CommandRegistry
from siroc.exceptions import SirocError
from siroc.infra.manifest import load_root_package

DEBUG_ENV: str = "SIROC_DEBUG"


# ---------------------------------------------------------------------------
# Handler shims (lazy imports keep --help / --version cheap)
# ---------------------------------------------------------------------------

def _build_options(invocation: ParsedInvocation) -> BuildOptions:
    return BuildOptions(
        packages=tuple(invocation.positionals.get("packages", ())),
        **invocation.flags,
    )


def _handle_build(context: RootContext, invocation: ParsedInvocation) -> None:
    from siroc.commands.build import build

    return build(context, _build_options(invocation))


def _handle_dev(context: RootContext, invocation: ParsedInvocation) -> None:
    from siroc.commands.dev import dev

    return dev(context, _build_options(invocation))


def _handle_run(context: RootContext, invocation: ParsedInvocation) -> None:
    from siroc.commands.run import run

    options = RunOptions(
        file=invocation.positionals["file"],
        args=tuple(invocation.positionals.get("args", ())),
        **invocation.flags,
    )
    return run(context, options)


def _handle_changelog(context: RootContext, invocation: ParsedInvocation) -> None:
    from siroc.commands.changelog import changelog

    return changelog(context)


# ---------------------------------------------------------------------------
# Command registration
# ---------------------------------------------------------------------------

def builtin_commands(context: RootContext) -> tuple[CommandSpec, ...]:
    """Return the built-in command descriptors (examples mention the root package)."""
    example = context.display_name
    return (
        CommandSpec(
            name="build",
            description="Bundle input files",
            handler=_handle_build,
            label="building",
            positionals=(PositionalSpec("packages", variadic=True),),
            options=(
                OptionSpec(
                    ("-w", "--watch"),
                    "Watch files in bundle and rebuild on changes",
                    dest="watch",
                    default=False,
                ),
                OptionSpec(("--dev",), "Build development bundle (only CJS)", dest="dev", default=False),
                OptionSpec(("-i", "--input"), "Specify input file name", dest="input", metavar="<input>"),
                OptionSpec(("-o", "--output"), "Specify output file name", dest="output", metavar="<output>"),
                OptionSpec(("-f", "--format"), "Specify output file format", dest="format", metavar="<format>"),
            ),
            examples=(f"{PROG} build", f"{PROG} build {example} -w"),
        ),
        CommandSpec(
            name="dev",
            description="Generate package stubs for quick development",
            handler=_handle_dev,
            label="stubbing",
            positionals=(PositionalSpec("packages", variadic=True),),
            examples=(f"{PROG} dev", f"{PROG} dev {example}"),
        ),
        CommandSpec(
            name="run",
            description="Run a script or command",
            handler=_handle_run,
            label="running",
            positionals=(PositionalSpec("file"), PositionalSpec("args", variadic=True)),
            options=(
                OptionSpec(
                    ("-w", "--workspaces"),
                    "Run command in all workspace packages.",
                    dest="workspaces",
                    default=False,
                ),
                OptionSpec(
                    ("-s", "--sequential"),
                    "Run sequentially rather than in parallel.",
                    dest="sequential",
                    default=False,
                ),
            ),
            examples=(f"{PROG} run src/test.ts", f"{PROG} run --workspaces ls"),
            allow_unknown_options=True,
        ),
        CommandSpec(
            name="changelog",
            description="Generate changelog",
            handler=_handle_changelog,
            label="generating changelog",
        ),
    )


def _custom_handler(handler: CommandHandler) -> Callable[[RootContext, ParsedInvocation], Any]:
    """Adapt a manifest handler (``handler(context)``) to the dispatch signature."""

    def _invoke(context: RootContext, invocation: ParsedInvocation) -> Any:
        return handler(context)

    return _invoke


def build_registry(context: RootContext) -> CommandRegistry:
    """Register built-in commands, then the manifest's custom commands in order.

    Raises
    ------
    CommandConflictError
        If a custom command reuses a registered name.
    """
    registry = CommandRegistry()
    for spec in builtin_commands(context):
        registry.register(spec)
    for command in context.commands:
        registry.register(
            CommandSpec(
                name=command.name,
                description=f"Custom command ({context.display_name})",
                handler=_custom_handler(command.handler),
                label=command.name,
            )
        )
    return registry


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: Sequence[str] | None = None,
    *,
    cwd: Path | None = None,
    console: Console | None = None,
) -> int:
    """Run the siroc CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.
    cwd:
        Project root holding ``package.json``; the working directory by
        default.
    console:
        Rich console for the logger; stderr by default.

    Returns
    -------
    int
        OS process exit code.  A handler that succeeded still yields
        :data:`exit_codes.GENERAL_ERROR` if any error was logged.

    Raises
    ------
    SirocError
        Startup failures (manifest, command conflicts) propagate to
        :func:`cli`; no command has run at that point.
    SystemExit
        For ``--help``, ``--version`` and usage errors.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    logger = Logger(console, debug=bool(os.environ.get(DEBUG_ENV)))

    with timed(logger, "load root package"):
        context = load_root_package(cwd or Path.cwd(), logger)

    with timed(logger, "load CLI"):
        registry = build_registry(context)
        parser = build_parser(registry)

    invocation = parse_invocation(parser, registry, args)
    spec = registry[invocation.command]

    code = run_action(context, spec.label, spec.handler, invocation)
    if code == exit_codes.SUCCESS and logger.errored:
        return exit_codes.GENERAL_ERROR
    return code


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    fallback = Logger(debug=bool(os.environ.get(DEBUG_ENV)))
    try:
        code = main()
        sys.exit(code)
    except SirocError as exc:
        fallback.error(exc)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        fallback.warn("Aborted by user.")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        fallback.error(exc)
        sys.exit(exit_codes.GENERAL_ERROR)
