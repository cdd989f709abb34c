"""Workspace package selection."""

from __future__ import annotations

from collections.abc import Sequence

from siroc.core.models import Package
from siroc.exceptions import PackageNotFoundError


def select_packages(packages: Sequence[Package], names: Sequence[str]) -> tuple[Package, ...]:
    """Return the packages matching *names*, or every package when *names* is empty.

    A name matches a package's manifest name or its directory name.
    Result order follows *names*; duplicates are collapsed.

    Raises
    ------
    PackageNotFoundError
        If any requested name matches no package.
    """
    if not names:
        return tuple(packages)

    selected: list[Package] = []
    missing: list[str] = []
    for name in names:
        match = next(
            (pkg for pkg in packages if name in (pkg.name, pkg.root_dir.name)),
            None,
        )
        if match is None:
            missing.append(name)
        elif match not in selected:
            selected.append(match)

    if missing:
        available = ", ".join(pkg.name for pkg in packages) or "none"
        raise PackageNotFoundError(
            f"Unknown package{'s' if len(missing) > 1 else ''}: {', '.join(missing)}",
            hint=f"Available packages: {available}",
        )
    return tuple(selected)
