"""Protocols (interfaces) consumed by the core layer.

These define the contracts that CLI and infrastructure adapters must
satisfy.  Core code depends ONLY on these protocols — never on concrete
implementations.
"""

from __future__ import annotations

from typing import Any, Protocol


class Reporter(Protocol):
    """Contract for the logger carried by the root context.

    The concrete implementation lives in :mod:`siroc.cli.console`.
    """

    @property
    def errored(self) -> bool:
        """Whether :meth:`error` was called at least once."""
        ...  # pragma: no cover

    def info(self, message: str) -> None: ...  # pragma: no cover

    def success(self, message: str, *, emphasis: str | None = None) -> None: ...  # pragma: no cover

    def warn(self, message: str) -> None: ...  # pragma: no cover

    def debug(self, message: str) -> None: ...  # pragma: no cover

    def error(self, error: BaseException | str) -> None:
        """Report *error* and latch :attr:`errored`."""
        ...  # pragma: no cover


class CommandHandler(Protocol):
    """Contract for custom commands declared in the manifest.

    A handler receives the root context and may return ``None`` or an
    awaitable; the run wrapper drives awaitables to completion.
    """

    def __call__(self, context: Any, /) -> Any:
        ...  # pragma: no cover
