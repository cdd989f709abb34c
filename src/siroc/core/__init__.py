"""Core layer — descriptors, root context model, and pure planning logic.

Rules
-----
* No ``print()`` calls.
* No subprocesses and no filesystem writes.
* No imports from ``cli``, ``infra`` or ``commands``.
"""

from siroc.core.models import (
    BuildOptions,
    BuildTarget,
    CommandSpec,
    CustomCommand,
    OptionSpec,
    Package,
    ParsedInvocation,
    PositionalSpec,
    RootContext,
    RunOptions,
)
from siroc.core.protocols import CommandHandler, Reporter
from siroc.core.registry import CommandRegistry

__all__: list[str] = [
    "BuildOptions",
    "BuildTarget",
    "CommandHandler",
    "CommandRegistry",
    "CommandSpec",
    "CustomCommand",
    "OptionSpec",
    "Package",
    "ParsedInvocation",
    "PositionalSpec",
    "Reporter",
    "RootContext",
    "RunOptions",
]
