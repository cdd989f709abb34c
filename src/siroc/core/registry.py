"""Ordered, name-unique collection of command descriptors."""

from __future__ import annotations

from collections.abc import Iterator

from siroc.core.models import CommandSpec
from siroc.exceptions import CommandConflictError


class CommandRegistry:
    """Holds every :class:`CommandSpec` known to the parser.

    Registration order is preserved (it is the order shown in help).
    Registering a name twice is an error rather than a silent override.
    """

    def __init__(self) -> None:
        self._commands: dict[str, CommandSpec] = {}

    def register(self, spec: CommandSpec) -> CommandSpec:
        """Add *spec*; raise :class:`CommandConflictError` on a duplicate name."""
        existing = self._commands.get(spec.name)
        if existing is not None:
            raise CommandConflictError(
                f"Command '{spec.name}' is already registered "
                f"({existing.description}).",
                hint="Rename the custom command in the 'siroc.commands' "
                "section of package.json.",
            )
        self._commands[spec.name] = spec
        return spec

    def get(self, name: str) -> CommandSpec | None:
        return self._commands.get(name)

    def __getitem__(self, name: str) -> CommandSpec:
        return self._commands[name]

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._commands)
