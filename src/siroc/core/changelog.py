"""Conventional-commit parsing and Markdown changelog rendering.

Pure functions only — commit subjects come from
:class:`~siroc.infra.git.GitClient`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

_SUBJECT = re.compile(
    r"^(?P<type>[a-zA-Z]+)"
    r"(?:\((?P<scope>[^)]*)\))?"
    r"(?P<breaking>!)?"
    r":\s+(?P<description>.+)$"
)

SECTIONS: dict[str, str] = {
    "feat": "Features",
    "fix": "Bug Fixes",
    "perf": "Performance Improvements",
    "revert": "Reverts",
}
"""Commit type → section title, in rendering order."""

BREAKING_TITLE: str = "⚠ BREAKING CHANGES"


@dataclass(frozen=True, slots=True)
class Commit:
    type: str
    scope: str | None
    description: str
    breaking: bool


def parse_commit(subject: str) -> Commit | None:
    """Parse a ``type(scope)!: description`` subject; ``None`` if it does not match."""
    match = _SUBJECT.match(subject.strip())
    if match is None:
        return None
    return Commit(
        type=match["type"].lower(),
        scope=match["scope"] or None,
        description=match["description"].strip(),
        breaking=match["breaking"] is not None,
    )


def group_commits(subjects: Iterable[str]) -> dict[str, list[Commit]]:
    """Group parsed commits by section title, skipping untracked types.

    Breaking commits are listed under :data:`BREAKING_TITLE` whatever
    their type, and additionally in their own section when it is tracked.
    """
    groups: dict[str, list[Commit]] = {}
    for subject in subjects:
        commit = parse_commit(subject)
        if commit is None:
            continue
        if commit.breaking:
            groups.setdefault(BREAKING_TITLE, []).append(commit)
        title = SECTIONS.get(commit.type)
        if title is not None:
            groups.setdefault(title, []).append(commit)
    return groups


def render_changelog(groups: dict[str, list[Commit]], *, since: str | None) -> str:
    """Render grouped commits as Markdown."""
    heading = f"## Changes since {since}" if since else "## Changes"
    lines = [heading, ""]

    titles = [BREAKING_TITLE, *SECTIONS.values()]
    if not any(groups.get(title) for title in titles):
        lines.append("_No notable changes._")
        return "\n".join(lines) + "\n"

    for title in titles:
        commits = groups.get(title)
        if not commits:
            continue
        lines.append(f"### {title}")
        lines.append("")
        lines.extend(_render_commit(commit) for commit in commits)
        lines.append("")
    return "\n".join(lines)


def _render_commit(commit: Commit) -> str:
    if commit.scope:
        return f"- **{commit.scope}:** {commit.description}"
    return f"- {commit.description}"
