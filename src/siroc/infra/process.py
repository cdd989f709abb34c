"""Infrastructure: child process execution.

This module is the **only** place in the codebase that spawns build
and script processes.  Output is inherited from the parent so tools
stream straight to the terminal; failures are collected and re-raised
as :class:`~siroc.exceptions.ProcessFailedError`.
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from siroc.exceptions import ProcessFailedError, ToolNotFoundError


@dataclass(frozen=True, slots=True)
class ProcessSpec:
    """A command to run in a directory."""

    argv: tuple[str, ...]
    cwd: Path
    label: str
    """Short name used in failure messages (usually the package name)."""

    env: Mapping[str, str] | None = None


@dataclass(frozen=True, slots=True)
class ProcessResult:
    spec: ProcessSpec
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_processes(specs: Sequence[ProcessSpec], *, sequential: bool) -> tuple[ProcessResult, ...]:
    """Run *specs* and raise if any of them fails.

    Parallel mode spawns every process before waiting on any; sequential
    mode runs them in order and stops at the first failure.

    Raises
    ------
    ProcessFailedError
        When at least one process exits non-zero.
    ToolNotFoundError
        When an executable cannot be spawned.
    """
    results: list[ProcessResult] = []
    if sequential:
        for spec in specs:
            process = _spawn(spec)
            result = ProcessResult(spec=spec, returncode=process.wait())
            results.append(result)
            if not result.ok:
                break
    else:
        running: list[tuple[ProcessSpec, subprocess.Popen[bytes]]] = []
        try:
            for spec in specs:
                running.append((spec, _spawn(spec)))
        except ToolNotFoundError:
            for _, process in running:
                process.terminate()
                process.wait()
            raise
        results.extend(ProcessResult(spec=spec, returncode=proc.wait()) for spec, proc in running)

    failed = [result for result in results if not result.ok]
    if failed:
        summary = ", ".join(f"{r.spec.label} (exit {r.returncode})" for r in failed)
        raise ProcessFailedError(f"Command failed in {summary}: {' '.join(failed[0].spec.argv)}")
    return tuple(results)


def _spawn(spec: ProcessSpec) -> subprocess.Popen[bytes]:
    env = dict(spec.env) if spec.env is not None else None
    try:
        return subprocess.Popen(list(spec.argv), cwd=spec.cwd, env=env)
    except FileNotFoundError as exc:
        raise ToolNotFoundError(
            f"Could not run '{spec.argv[0]}' in {spec.cwd}: {exc.strerror}.",
        ) from exc
