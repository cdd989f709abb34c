"""Infrastructure: executable detection.

Locates the external tools siroc drives (``rollup``, ``node``,
``jiti``, ``git``), preferring a project-local ``node_modules/.bin``
over the system PATH, and provides install guidance when one is
missing.

Rules
-----
* Detection via :func:`shutil.which` only — no subprocess.
* No permanent PATH modification.
* No automatic installation.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from siroc.exceptions import ToolNotFoundError

INSTALL_HINTS: dict[str, str] = {
    "rollup": "npm install --save-dev rollup",
    "jiti": "npm install --save-dev jiti",
    "node": "Install Node.js from https://nodejs.org/",
    "git": "Install git from https://git-scm.com/downloads",
}


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ToolStatus:
    """Result of an executable detection probe.

    Attributes
    ----------
    name : str
        Executable name that was searched for.
    path : Path | None
        Absolute path to the executable, or ``None``.
    install_hint : str | None
        Suggested install command.  ``None`` when the tool was found.
    """

    name: str
    path: Path | None
    install_hint: str | None

    @property
    def found(self) -> bool:
        return self.path is not None


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def search_path(project_dirs: Sequence[Path] = ()) -> str:
    """Build a PATH string with each project's ``node_modules/.bin`` first."""
    bins = [str(directory / "node_modules" / ".bin") for directory in project_dirs]
    system = os.environ.get("PATH", "")
    return os.pathsep.join([*bins, system] if system else bins)


def detect_tool(name: str, project_dirs: Sequence[Path] = ()) -> ToolStatus:
    """Probe for *name*; always returns a :class:`ToolStatus`."""
    result = shutil.which(name, path=search_path(project_dirs))
    if result is not None:
        return ToolStatus(name=name, path=Path(result).resolve(), install_hint=None)
    return ToolStatus(name=name, path=None, install_hint=INSTALL_HINTS.get(name))


def require_tool(name: str, project_dirs: Sequence[Path] = ()) -> Path:
    """Locate *name* or raise :class:`ToolNotFoundError`."""
    status = detect_tool(name, project_dirs)
    if status.path is None:
        raise ToolNotFoundError(
            f"{name} is not installed or not on PATH.",
            hint=status.install_hint,
        )
    return status.path
