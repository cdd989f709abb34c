"""Infrastructure: root package loading.

Reads ``package.json`` from the project root, expands workspaces and
resolves the custom command table declared under the ``siroc`` key.
Everything here runs exactly once per process, before any command is
registered; every failure is raised as a
:class:`~siroc.exceptions.ManifestError` so startup aborts cleanly.
"""

from __future__ import annotations

import contextlib
import importlib
import json
import pkgutil
import sys
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from siroc.core.models import CustomCommand, Package, RootContext
from siroc.core.protocols import Reporter
from siroc.exceptions import InvalidCommandError, ManifestError

MANIFEST_NAME: str = "package.json"
OPTIONS_KEY: str = "siroc"


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def load_root_package(root_dir: Path, logger: Reporter) -> RootContext:
    """Load the root package found in *root_dir* and build the root context.

    Raises
    ------
    ManifestError
        When ``package.json`` is missing, unreadable or not a JSON object,
        or when a workspace member's manifest is invalid.
    InvalidCommandError
        When a custom command entry cannot be resolved to a callable.
    """
    root_dir = root_dir.resolve()
    try:
        manifest = read_manifest(root_dir / MANIFEST_NAME)
    except ManifestError as exc:
        raise ManifestError(f"Couldn't load package: {exc}", hint=exc.hint) from exc

    name = manifest.get("name")
    name = name if isinstance(name, str) and name else None

    options = manifest.get(OPTIONS_KEY) or {}
    if not isinstance(options, Mapping):
        raise ManifestError(
            f"Couldn't load package: '{OPTIONS_KEY}' in {MANIFEST_NAME} must be an object.",
        )

    return RootContext(
        root_dir=root_dir,
        manifest=manifest,
        name=name,
        logger=logger,
        commands=resolve_custom_commands(options.get("commands"), root_dir),
        packages=discover_packages(root_dir, manifest),
    )


# ---------------------------------------------------------------------------
# Manifest reading
# ---------------------------------------------------------------------------

def read_manifest(path: Path) -> dict[str, Any]:
    """Parse *path* as a JSON object."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ManifestError(
            f"{path} does not exist.",
            hint="Run siroc from a directory containing package.json.",
        ) from exc
    except OSError as exc:
        raise ManifestError(f"{path} could not be read: {exc.strerror}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ManifestError(
            f"{path} is not valid JSON (line {exc.lineno}, column {exc.colno}).",
        ) from exc

    if not isinstance(data, dict):
        raise ManifestError(f"{path} must contain a JSON object.")
    return data


# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------

def workspace_patterns(manifest: Mapping[str, Any]) -> tuple[str, ...]:
    """Return the workspace globs (yarn/npm array or ``{"packages": [...]}``)."""
    workspaces = manifest.get("workspaces")
    if isinstance(workspaces, Mapping):
        workspaces = workspaces.get("packages")
    if not isinstance(workspaces, list):
        return ()
    return tuple(p for p in workspaces if isinstance(p, str) and p)


def discover_packages(root_dir: Path, manifest: Mapping[str, Any]) -> tuple[Package, ...]:
    """Expand workspaces into packages; the root alone when there are none."""
    patterns = workspace_patterns(manifest)
    if not patterns:
        return (_package(root_dir, manifest),)

    seen: set[Path] = set()
    packages: list[Package] = []
    for pattern in patterns:
        try:
            candidates = sorted(root_dir.glob(pattern))
        except (ValueError, NotImplementedError) as exc:
            raise ManifestError(f"Invalid workspace pattern '{pattern}': {exc}") from exc
        for candidate in candidates:
            manifest_path = candidate / MANIFEST_NAME
            if candidate in seen or not manifest_path.is_file():
                continue
            seen.add(candidate)
            packages.append(_package(candidate, read_manifest(manifest_path)))
    return tuple(packages)


def _package(directory: Path, manifest: Mapping[str, Any]) -> Package:
    name = manifest.get("name")
    if not isinstance(name, str) or not name:
        name = directory.name
    return Package(name=name, root_dir=directory, manifest=manifest)


# ---------------------------------------------------------------------------
# Custom commands
# ---------------------------------------------------------------------------

def resolve_custom_commands(table: object, root_dir: Path) -> tuple[CustomCommand, ...]:
    """Resolve ``{"name": "module:attr"}`` into validated :class:`CustomCommand` entries.

    Order follows the manifest.  Modules are imported with *root_dir*
    on the import path so project-local task files are found.
    """
    if table is None:
        return ()
    if not isinstance(table, Mapping):
        raise InvalidCommandError(
            f"'{OPTIONS_KEY}.commands' must map command names to 'module:function' strings.",
        )

    commands: list[CustomCommand] = []
    with _project_on_path(root_dir):
        for name, reference in table.items():
            _validate_command_name(name)
            handler = _resolve_handler(name, reference)
            commands.append(CustomCommand(name=name, reference=reference, handler=handler))
    return tuple(commands)


def _validate_command_name(name: str) -> None:
    if not name or name.startswith("-") or any(ch.isspace() for ch in name):
        raise InvalidCommandError(
            f"'{name}' is not a valid command name.",
            hint="Command names must be non-empty, contain no spaces and not start with '-'.",
        )


def _resolve_handler(name: str, reference: object) -> Any:
    if not isinstance(reference, str) or not reference.strip():
        raise InvalidCommandError(
            f"Custom command '{name}' must reference a handler as 'module:function'.",
        )
    try:
        handler = pkgutil.resolve_name(reference.strip())
    except Exception as exc:  # noqa: BLE001 - task modules may fail in any way on import
        raise InvalidCommandError(
            f"Custom command '{name}' could not load '{reference}': {exc}",
        ) from exc
    if not callable(handler):
        raise InvalidCommandError(
            f"Custom command '{name}' references '{reference}', which is not callable.",
        )
    return handler


@contextlib.contextmanager
def _project_on_path(root_dir: Path) -> Iterator[None]:
    entry = str(root_dir)
    added = entry not in sys.path
    if added:
        sys.path.insert(0, entry)
    importlib.invalidate_caches()
    try:
        yield
    finally:
        if added:
            sys.path.remove(entry)
