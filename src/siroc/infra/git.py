"""Infrastructure: read-only git queries used by the changelog command."""

from __future__ import annotations

import subprocess
from pathlib import Path

from siroc.exceptions import GitError, ToolNotFoundError
from siroc.infra.tools import INSTALL_HINTS


class GitClient:
    """Runs ``git`` in *cwd* and returns parsed output."""

    def __init__(self, cwd: Path) -> None:
        self._cwd = cwd

    def latest_tag(self) -> str | None:
        """Return the most recent reachable tag, or ``None`` if there is none."""
        completed = self._git("describe", "--tags", "--abbrev=0", check=False)
        if completed.returncode != 0:
            return None
        return completed.stdout.strip() or None

    def commit_subjects(self, since: str | None = None) -> list[str]:
        """Return commit subjects newest-first, limited to ``since..HEAD`` when given."""
        revision = f"{since}..HEAD" if since else "HEAD"
        completed = self._git("log", revision, "--format=%s")
        return [line for line in completed.stdout.splitlines() if line.strip()]

    def _git(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        try:
            completed = subprocess.run(
                ["git", *args],
                cwd=self._cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ToolNotFoundError("git is not installed or not on PATH.", hint=INSTALL_HINTS["git"]) from exc

        if check and completed.returncode != 0:
            detail = completed.stderr.strip() or f"exit status {completed.returncode}"
            raise GitError(f"git {' '.join(args)} failed: {detail}")
        return completed
