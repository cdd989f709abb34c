"""Domain models for siroc.

All models are **frozen** dataclasses — immutable value objects created
at startup (descriptors, root context) or once per invocation (parsed
invocation, command options).  They carry no I/O.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from siroc.core.protocols import Reporter

FALLBACK_PACKAGE_NAME: str = "@siroc/cli"
"""Placeholder used in example text when the root package has no name."""


# ---------------------------------------------------------------------------
# Command descriptors
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class OptionSpec:
    """Declared flag of a command.

    A spec without :attr:`metavar` is a boolean switch; with a metavar
    it takes a value (``-i <input>``).
    """

    flags: tuple[str, ...]
    """Flag spellings, e.g. ``("-w", "--watch")``."""

    description: str

    dest: str
    """Key under which the value appears in :attr:`ParsedInvocation.flags`."""

    default: Any = None

    metavar: str | None = None

    @property
    def takes_value(self) -> bool:
        return self.metavar is not None


@dataclass(frozen=True, slots=True)
class PositionalSpec:
    """Declared positional argument: a single required value or a variadic list."""

    name: str
    variadic: bool = False

    def render(self) -> str:
        return f"[...{self.name}]" if self.variadic else f"<{self.name}>"


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Schema of a CLI subcommand plus the handler it dispatches to."""

    name: str
    description: str
    handler: Callable[..., Any]
    """Called as ``handler(context, invocation)`` by the run wrapper."""

    label: str
    """Verb used in the success line, e.g. ``"building"``."""

    positionals: tuple[PositionalSpec, ...] = ()
    options: tuple[OptionSpec, ...] = ()
    examples: tuple[str, ...] = ()
    allow_unknown_options: bool = False

    @property
    def pattern(self) -> str:
        """Human-readable usage pattern, e.g. ``run <file> [...args]``."""
        return " ".join([self.name, *(p.render() for p in self.positionals)])

    @property
    def variadic(self) -> PositionalSpec | None:
        for positional in self.positionals:
            if positional.variadic:
                return positional
        return None


@dataclass(frozen=True, slots=True)
class ParsedInvocation:
    """Result of parsing argv against the registered commands."""

    command: str
    positionals: Mapping[str, Any] = field(default_factory=dict)
    """Positional name → ``str`` (required) or ``tuple[str, ...]`` (variadic)."""

    flags: Mapping[str, Any] = field(default_factory=dict)
    """Flag dest → value, with declared defaults applied."""


# ---------------------------------------------------------------------------
# Packages and root context
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Package:
    """A single npm package (the root or one workspace member)."""

    name: str
    root_dir: Path
    manifest: Mapping[str, Any]

    def entry(self, key: str) -> str | None:
        """Return a string manifest entry such as ``main`` or ``module``."""
        value = self.manifest.get(key)
        return value if isinstance(value, str) and value else None


@dataclass(frozen=True, slots=True)
class CustomCommand:
    """A manifest-declared command resolved to its handler at load time."""

    name: str
    reference: str
    """The ``module:attribute`` string from the manifest."""

    handler: Callable[..., Any]


@dataclass(frozen=True, slots=True)
class RootContext:
    """Process-wide state handed to every command handler.

    Built once by :func:`~siroc.core.manifest.load_root_package` and
    passed explicitly; never mutated afterwards (the logger keeps its
    own error latch).
    """

    root_dir: Path
    manifest: Mapping[str, Any]
    name: str | None
    logger: Reporter
    commands: tuple[CustomCommand, ...] = ()
    packages: tuple[Package, ...] = ()

    @property
    def display_name(self) -> str:
        """Package name for help/example text."""
        return self.name or FALLBACK_PACKAGE_NAME


# ---------------------------------------------------------------------------
# Command options
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BuildOptions:
    """Options accepted by the ``build`` and ``dev`` handlers."""

    packages: tuple[str, ...] = ()
    watch: bool = False
    dev: bool = False
    input: str | None = None
    output: str | None = None
    format: str | None = None


@dataclass(frozen=True, slots=True)
class RunOptions:
    """Options accepted by the ``run`` handler."""

    file: str
    args: tuple[str, ...] = ()
    workspaces: bool = False
    sequential: bool = False


@dataclass(frozen=True, slots=True)
class BuildTarget:
    """One output file of a package build (paths relative to the package)."""

    input: str
    output: str
    format: str
    """``cjs``, ``es`` or ``dts``."""
