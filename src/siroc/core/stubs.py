"""Render development stubs that point package outputs at their sources.

A stub lets dependants import a workspace package without building it:
CommonJS stubs load the TypeScript source through ``jiti``, ES and
declaration stubs re-export it.
"""

from __future__ import annotations

import json
import posixpath

from siroc.core.models import BuildTarget


def render_stub(target: BuildTarget) -> str:
    """Return the file contents for *target*'s stub."""
    source = _relative_source(target)
    if target.format == "cjs":
        return (
            'module.exports = require("jiti")(null, { interopDefault: true })'
            f"(require.resolve({json.dumps(source)}))\n"
        )
    if target.format == "dts":
        return f"export * from {json.dumps(_strip_extension(source))}\n"
    return f"export * from {json.dumps(source)}\n"


def _relative_source(target: BuildTarget) -> str:
    out_dir = posixpath.dirname(posixpath.normpath(target.output)) or "."
    relative = posixpath.relpath(posixpath.normpath(target.input), out_dir)
    return relative if relative.startswith(".") else f"./{relative}"


def _strip_extension(path: str) -> str:
    root, _ = posixpath.splitext(path)
    return root
