"""Infrastructure layer — manifests, executables, and child processes.

Every raw ``OSError``, ``json`` or ``subprocess`` failure is caught here
and re-raised as a :class:`~siroc.exceptions.SirocError` subclass.

Rules
-----
* No imports from ``cli`` or ``commands``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from siroc.infra.git import GitClient
from siroc.infra.manifest import load_root_package
from siroc.infra.process import ProcessSpec, run_processes
from siroc.infra.rollup import RollupBundler
from siroc.infra.tools import ToolStatus, detect_tool, require_tool

__all__: list[str] = [
    "GitClient",
    "ProcessSpec",
    "RollupBundler",
    "ToolStatus",
    "detect_tool",
    "load_root_package",
    "require_tool",
    "run_processes",
]
