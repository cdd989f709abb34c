"""Custom exception hierarchy for siroc.

All exceptions that cross layer boundaries must inherit from
:class:`SirocError`.  Raw ``OSError`` / ``json`` / ``subprocess``
failures must be caught where they happen and re-raised as a typed
subclass defined here, so the CLI can render a clean message.

Hierarchy
---------
SirocError
├── ManifestError
│   └── InvalidCommandError
├── CommandConflictError
├── PackageNotFoundError
├── BuildConfigError
├── ToolNotFoundError
├── ProcessFailedError
└── GitError
"""

from __future__ import annotations


class SirocError(Exception):
    """Base exception for all siroc errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the logger can render a clean message without
    leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Startup ---------------------------------------------------------------

class ManifestError(SirocError):
    """Raised when the root (or a workspace) ``package.json`` cannot be loaded."""


class InvalidCommandError(ManifestError):
    """Raised when a custom command entry in the manifest is unusable."""


class CommandConflictError(SirocError):
    """Raised when two commands are registered under the same name."""


# --- Workspace / build -----------------------------------------------------

class PackageNotFoundError(SirocError):
    """Raised when a requested package is not part of the workspace."""


class BuildConfigError(SirocError):
    """Raised when no build target can be derived for a package."""


# --- Tooling / processes ---------------------------------------------------

class ToolNotFoundError(SirocError):
    """Raised when a required executable cannot be located."""


class ProcessFailedError(SirocError):
    """Raised when one or more child processes exit with a non-zero status."""


class GitError(SirocError):
    """Raised when a git query fails."""
