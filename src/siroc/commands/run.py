"""``siroc run`` — run a script or command, optionally in every workspace package.

Resolution
----------
* An existing ``.py`` file runs with the current interpreter.
* An existing ``.js`` / ``.mjs`` / ``.cjs`` file runs with ``node``.
* An existing ``.ts`` / ``.mts`` / ``.cts`` file runs with ``jiti``.
* Anything else is executed as a command (``siroc run --workspaces ls``).
"""

from __future__ import annotations

import sys
from pathlib import Path

from siroc.core.models import Package, RootContext, RunOptions
from siroc.infra.process import ProcessSpec, run_processes
from siroc.infra.tools import require_tool

_NODE_SUFFIXES: frozenset[str] = frozenset({".js", ".mjs", ".cjs"})
_TS_SUFFIXES: frozenset[str] = frozenset({".ts", ".mts", ".cts"})


def resolve_argv(file: str, args: tuple[str, ...], cwd: Path, root_dir: Path) -> tuple[str, ...]:
    """Return the argv that runs *file* with *args* from *cwd*."""
    path = cwd / file
    if not path.is_file():
        return (file, *args)

    suffix = path.suffix.lower()
    if suffix == ".py":
        return (sys.executable, str(path), *args)
    if suffix in _NODE_SUFFIXES:
        return (str(require_tool("node")), str(path), *args)
    if suffix in _TS_SUFFIXES:
        return (str(require_tool("jiti", (cwd, root_dir))), str(path), *args)
    return (str(path), *args)


def run(context: RootContext, options: RunOptions) -> None:
    """Run ``options.file`` in the root, or in each package with ``--workspaces``."""
    if options.workspaces:
        targets: tuple[Package, ...] = context.packages
    else:
        targets = (
            Package(name=context.display_name, root_dir=context.root_dir, manifest=context.manifest),
        )

    specs = [
        ProcessSpec(
            argv=resolve_argv(options.file, options.args, package.root_dir, context.root_dir),
            cwd=package.root_dir,
            label=package.name,
        )
        for package in targets
    ]
    context.logger.debug(f"running {options.file} in {len(specs)} package(s)")
    run_processes(specs, sequential=options.sequential or len(specs) == 1)
