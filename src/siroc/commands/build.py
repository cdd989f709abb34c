"""``siroc build`` — bundle workspace packages with rollup."""

from __future__ import annotations

from siroc.core.build_plan import plan_build
from siroc.core.models import BuildOptions, RootContext
from siroc.core.workspace import select_packages
from siroc.infra.process import ProcessSpec, run_processes
from siroc.infra.rollup import RollupBundler


def build(context: RootContext, options: BuildOptions) -> None:
    """Build the selected packages (all of them when none are named).

    Targets are planned for every package before anything runs, so a
    misconfigured package fails the command without a partial build.
    Watch mode starts every rollup watcher at once; otherwise targets
    build one after another.
    """
    packages = select_packages(context.packages, options.packages)
    bundler = RollupBundler(context.root_dir)

    specs: list[ProcessSpec] = []
    for package in packages:
        targets = plan_build(package, options)
        context.logger.info(
            f"{package.name}: " + ", ".join(f"{t.output} ({t.format})" for t in targets)
        )
        specs.extend(bundler.commands(package, targets, watch=options.watch, dev=options.dev))

    run_processes(specs, sequential=not options.watch)
