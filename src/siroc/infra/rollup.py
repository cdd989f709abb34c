"""Rollup-backed bundling.

Translates planned :class:`~siroc.core.models.BuildTarget` entries into
``rollup`` command lines.  Bundling itself happens in the rollup
process; siroc only decides inputs, outputs and formats.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

from siroc.core.models import BuildTarget, Package
from siroc.infra.process import ProcessSpec
from siroc.infra.tools import require_tool, search_path


class RollupBundler:
    """Builds :class:`ProcessSpec` lists for packages in a workspace.

    Parameters
    ----------
    root_dir:
        Workspace root, searched for ``node_modules/.bin/rollup`` after
        the package's own directory.
    """

    def __init__(self, root_dir: Path) -> None:
        self._root_dir = root_dir

    def commands(
        self,
        package: Package,
        targets: Sequence[BuildTarget],
        *,
        watch: bool = False,
        dev: bool = False,
    ) -> list[ProcessSpec]:
        """Return one rollup invocation per target of *package*.

        Raises
        ------
        ToolNotFoundError
            When rollup cannot be located.
        """
        search_dirs = (package.root_dir, self._root_dir)
        rollup = require_tool("rollup", search_dirs)
        env = {
            **os.environ,
            "PATH": search_path(search_dirs),
            "NODE_ENV": "development" if dev else "production",
        }

        specs: list[ProcessSpec] = []
        for target in targets:
            argv = [
                str(rollup),
                "--input",
                target.input,
                "--file",
                target.output,
                "--format",
                target.format,
            ]
            if watch:
                argv.append("--watch")
            specs.append(
                ProcessSpec(
                    argv=tuple(argv),
                    cwd=package.root_dir,
                    label=f"{package.name} [{target.format}]",
                    env=env,
                )
            )
        return specs
