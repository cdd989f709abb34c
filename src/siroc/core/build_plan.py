"""Derive build and stub targets from a package manifest.

Guarantees
----------
* Read-only: the only filesystem access is probing for a default input.
* Only :class:`~siroc.exceptions.SirocError` subclasses escape.
"""

from __future__ import annotations

import posixpath

from siroc.core.models import BuildOptions, BuildTarget, Package
from siroc.exceptions import BuildConfigError

DEFAULT_INPUTS: tuple[str, ...] = (
    "src/index.ts",
    "src/index.tsx",
    "src/index.mts",
    "src/index.js",
    "src/index.mjs",
)

FORMATS: tuple[str, ...] = ("cjs", "es")

_EXTENSION_FORMATS: dict[str, str] = {
    ".mjs": "es",
    ".cjs": "cjs",
}


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

def default_input(package: Package) -> str:
    """Return the first conventional entry file that exists in *package*."""
    for candidate in DEFAULT_INPUTS:
        if (package.root_dir / candidate).is_file():
            return candidate
    raise BuildConfigError(
        f"No input file found for {package.name}.",
        hint=f"Create one of {', '.join(DEFAULT_INPUTS)} or pass -i <input>.",
    )


def format_for_output(output: str) -> str:
    """Guess a bundle format from an output file extension (``cjs`` by default)."""
    _, ext = posixpath.splitext(output)
    return _EXTENSION_FORMATS.get(ext.lower(), "cjs")


# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------

def plan_build(package: Package, options: BuildOptions) -> tuple[BuildTarget, ...]:
    """Return the rollup targets for *package*.

    Rules
    -----
    * ``-i`` overrides the conventional ``src/index.*`` input.
    * ``-o`` builds exactly one target, in ``-f`` format or the format
      implied by the output extension.
    * Otherwise ``main`` is built as CJS and ``module`` as ES; ``--dev``
      keeps only the CJS target and ``-f`` keeps only that format.
    """
    if options.format is not None and options.format not in FORMATS:
        raise BuildConfigError(
            f"Unsupported format '{options.format}'.",
            hint=f"Use one of: {', '.join(FORMATS)}.",
        )

    source = options.input or default_input(package)

    if options.output:
        fmt = options.format or format_for_output(options.output)
        return (BuildTarget(input=source, output=options.output, format=fmt),)

    targets = [
        BuildTarget(input=source, output=output, format=fmt)
        for fmt, output in _manifest_outputs(package)
        if fmt != "dts"
    ]
    if options.dev:
        targets = [t for t in targets if t.format == "cjs"]
    if options.format is not None:
        targets = [t for t in targets if t.format == options.format]

    if not targets:
        raise BuildConfigError(
            f"Nothing to build for {package.name}.",
            hint="Declare 'main' (CJS) or 'module' (ES) in package.json, or pass -o <output>.",
        )
    return tuple(targets)


def plan_stubs(package: Package) -> tuple[BuildTarget, ...]:
    """Return the development stub targets for *package* (including ``types``)."""
    source = default_input(package)
    targets = tuple(
        BuildTarget(input=source, output=output, format=fmt)
        for fmt, output in _manifest_outputs(package)
    )
    if not targets:
        raise BuildConfigError(
            f"Nothing to stub for {package.name}.",
            hint="Declare 'main', 'module' or 'types' in package.json.",
        )
    return targets


def _manifest_outputs(package: Package) -> list[tuple[str, str]]:
    outputs: list[tuple[str, str]] = []
    main = package.entry("main")
    if main:
        outputs.append((format_for_output(main), main))
    module = package.entry("module")
    if module and module != main:
        outputs.append(("es", module))
    types = package.entry("types") or package.entry("typings")
    if types:
        outputs.append(("dts", types))
    return outputs
