"""Rich console and the logger handed to command handlers.

The :class:`Logger` is the single reporting surface of the process:
handlers, the run wrapper and the error boundary all write through it.
It remembers whether an error was ever reported so the entry point can
force a failing exit code even when the last operation "succeeded".
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.traceback import Traceback

from siroc.exceptions import SirocError


def get_rich_console() -> Console:
    """Create a Rich console instance targeting stderr."""
    return Console(stderr=True, highlight=False)


class Logger:
    """Consola-style reporter (info / success / warn / error / debug).

    Parameters
    ----------
    console:
        Rich console to render to; a stderr console by default.
    debug:
        When ``True``, :meth:`debug` lines are shown and unexpected
        errors include a traceback.
    """

    def __init__(self, console: Console | None = None, *, debug: bool = False) -> None:
        self._console: Console = console or get_rich_console()
        self._debug: bool = debug
        self._errored: bool = False

    @property
    def console(self) -> Console:
        return self._console

    @property
    def errored(self) -> bool:
        """Latch: ``True`` once :meth:`error` has been called."""
        return self._errored

    # ------------------------------------------------------------------
    # Levels
    # ------------------------------------------------------------------

    def info(self, message: str) -> None:
        self._console.print(f"[cyan]ℹ[/cyan] {escape(message)}")

    def success(self, message: str, *, emphasis: str | None = None) -> None:
        """Report a success; *emphasis* is appended in bold."""
        line = f"[green]✔[/green] {escape(message)}"
        if emphasis is not None:
            line += f" [bold]{escape(emphasis)}[/bold]"
        self._console.print(line)

    def warn(self, message: str) -> None:
        self._console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def debug(self, message: str) -> None:
        if self._debug:
            self._console.print(f"[dim]⚙ {escape(message)}[/dim]")

    def error(self, error: BaseException | str) -> None:
        """Report *error* and set the :attr:`errored` latch.

        :class:`SirocError` renders as its message plus hint; other
        exceptions are prefixed with their type name.
        """
        self._errored = True

        if isinstance(error, str):
            self._console.print(f"[bold red]ERROR[/bold red] {escape(error)}")
            return

        if isinstance(error, SirocError):
            self._console.print(f"[bold red]ERROR[/bold red] {escape(str(error))}")
            if error.hint:
                self._console.print(f"[yellow]Hint:[/yellow] {escape(error.hint)}")
        else:
            detail = f"{type(error).__name__}: {error}" if str(error) else type(error).__name__
            self._console.print(f"[bold red]ERROR[/bold red] {escape(detail)}")

        if self._debug and error.__traceback__ is not None:
            self._console.print(
                Traceback.from_exception(type(error), error, error.__traceback__)
            )
