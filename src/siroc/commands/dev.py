"""``siroc dev`` — write stubs so packages can be used without building."""

from __future__ import annotations

from siroc.core.build_plan import plan_stubs
from siroc.core.models import BuildOptions, RootContext
from siroc.core.stubs import render_stub
from siroc.core.workspace import select_packages


def dev(context: RootContext, options: BuildOptions) -> None:
    """Write a stub for every ``main``/``module``/``types`` entry of the selected packages."""
    packages = select_packages(context.packages, options.packages)
    for package in packages:
        targets = plan_stubs(package)
        for target in targets:
            path = package.root_dir / target.output
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(render_stub(target), encoding="utf-8")
        context.logger.info(f"Stubbed {package.name} ({len(targets)} files)")
