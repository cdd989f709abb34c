"""Shared pytest fixtures and configuration for the siroc test suite.

Guidelines
----------
* No internet access in any test.
* rollup / node / git are mocked at the infra boundary.
* Projects are written into ``tmp_path``; tests never touch the real cwd.
"""

from __future__ import annotations

import io
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from siroc.cli.console import Logger
from siroc.core.models import Package, RootContext


def write_manifest(directory: Path, manifest: dict[str, Any]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps(manifest), encoding="utf-8")
    return path


@pytest.fixture
def console() -> Console:
    """Uncoloured console writing into a buffer (read with ``console.file.getvalue()``)."""
    return Console(file=io.StringIO(), width=200, color_system=None, highlight=False)


@pytest.fixture
def logger(console: Console) -> Logger:
    return Logger(console)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A single-package project with a TypeScript entry."""
    write_manifest(
        tmp_path,
        {"name": "@demo/app", "main": "dist/index.js", "module": "dist/index.mjs"},
    )
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "index.ts").write_text("export const x = 1\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A two-package yarn workspace."""
    write_manifest(tmp_path, {"name": "monorepo", "private": True, "workspaces": ["packages/*"]})
    for name in ("core", "utils"):
        pkg_dir = tmp_path / "packages" / name
        write_manifest(
            pkg_dir,
            {"name": f"@demo/{name}", "main": "dist/index.js", "types": "dist/index.d.ts"},
        )
        (pkg_dir / "src").mkdir()
        (pkg_dir / "src" / "index.ts").write_text("export {}\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def make_context(logger: Logger) -> Callable[..., RootContext]:
    """Build a :class:`RootContext` without reading files."""

    def _make(root_dir: Path, *packages: Package, name: str | None = "demo") -> RootContext:
        return RootContext(
            root_dir=root_dir,
            manifest={"name": name} if name else {},
            name=name,
            logger=logger,
            packages=packages,
        )

    return _make
