"""Argument parsing driven by the command registry.

Each :class:`~siroc.core.models.CommandSpec` becomes an ``argparse``
sub-parser; parsed namespaces are folded back into a
:class:`~siroc.core.models.ParsedInvocation`.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import Any, NoReturn

from siroc.cli import exit_codes
from siroc.core.models import CommandSpec, ParsedInvocation
from siroc.core.registry import CommandRegistry
from siroc.version import __version__

PROG: str = "siroc"
DEFAULT_COMMAND: str = "build"

_RESERVED_FLAGS: frozenset[str] = frozenset({"-h", "--help", "-v", "--version"})


class SirocArgumentParser(argparse.ArgumentParser):
    """``ArgumentParser`` that reports usage errors with the CLI's general error code.

    The top-level parser also keeps its per-command sub-parsers in
    :attr:`command_parsers` so a command's arguments can be parsed by
    its own parser directly.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.command_parsers: dict[str, SirocArgumentParser] = {}

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(exit_codes.GENERAL_ERROR, f"{self.prog}: error: {message}\n")


# ---------------------------------------------------------------------------
# Parser construction
# ---------------------------------------------------------------------------

def build_parser(registry: CommandRegistry) -> SirocArgumentParser:
    """Construct the top-level parser with one sub-parser per registered command."""
    parser = SirocArgumentParser(
        prog=PROG,
        description="Zero-config builds for JavaScript and TypeScript packages.",
        epilog=f"Running '{PROG} [...packages]' without a command is the same as "
        f"'{PROG} {DEFAULT_COMMAND} [...packages]'.",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    for spec in registry:
        parser.command_parsers[spec.name] = _add_command(subparsers, spec)
    return parser


def _add_command(subparsers: argparse._SubParsersAction, spec: CommandSpec) -> SirocArgumentParser:
    epilog = None
    if spec.examples:
        epilog = "Examples:\n" + "\n".join(f"  {example}" for example in spec.examples)

    sub = subparsers.add_parser(
        spec.name,
        help=spec.description,
        description=f"{PROG} {spec.pattern}\n\n{spec.description}",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    for positional in spec.positionals:
        if positional.variadic:
            sub.add_argument(positional.name, nargs="*", default=[])
        else:
            sub.add_argument(positional.name)
    for option in spec.options:
        if option.takes_value:
            sub.add_argument(
                *option.flags,
                dest=option.dest,
                metavar=option.metavar,
                default=option.default,
                help=option.description,
            )
        else:
            sub.add_argument(
                *option.flags,
                dest=option.dest,
                action="store_true",
                default=bool(option.default),
                help=option.description,
            )
    return sub


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def with_default_command(argv: Sequence[str], registry: CommandRegistry) -> list[str]:
    """Prefix :data:`DEFAULT_COMMAND` when *argv* does not start with a command."""
    args = list(argv)
    if not args:
        return [DEFAULT_COMMAND]
    first = args[0]
    if first in registry or first in _RESERVED_FLAGS:
        return args
    return [DEFAULT_COMMAND, *args]


def parse_invocation(
    parser: SirocArgumentParser,
    registry: CommandRegistry,
    argv: Sequence[str],
) -> ParsedInvocation:
    """Parse *argv* into a :class:`ParsedInvocation`.

    ``--help`` / ``--version`` and usage errors leave through
    ``SystemExit`` raised by the parser, before any handler runs.

    Positionals may appear anywhere among the flags
    (``build pkgA -w pkgB``).  Commands that allow unknown options are
    parsed in order instead, and the unknown options are appended to
    the command's variadic positional where they appeared.
    """
    args = with_default_command(argv, registry)
    spec = registry.get(args[0])
    if spec is None:
        # Only -h / -v reach here; both exit from the top-level parser.
        parser.parse_args(args)
        parser.error("a command is required")

    sub = parser.command_parsers[spec.name]
    variadic = spec.variadic
    forwards_unknown = spec.allow_unknown_options and variadic is not None
    if forwards_unknown:
        namespace, extras = sub.parse_known_args(args[1:])
    else:
        namespace, extras = sub.parse_known_intermixed_args(args[1:])
        if extras:
            sub.error(f"unrecognized arguments: {' '.join(extras)}")

    values = vars(namespace)
    positionals: dict[str, object] = {}
    for positional in spec.positionals:
        value = values[positional.name]
        if positional.variadic:
            value = tuple(value)
            if extras:
                value = (*value, *extras)
        positionals[positional.name] = value

    flags = {option.dest: values[option.dest] for option in spec.options}
    return ParsedInvocation(command=spec.name, positionals=positionals, flags=flags)
