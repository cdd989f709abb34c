"""``siroc changelog`` — print conventional commits since the latest tag."""

from __future__ import annotations

import sys

from siroc.core.changelog import group_commits, render_changelog
from siroc.core.models import RootContext
from siroc.infra.git import GitClient


def changelog(context: RootContext) -> None:
    git = GitClient(context.root_dir)
    since = git.latest_tag()
    subjects = git.commit_subjects(since)
    context.logger.debug(f"{len(subjects)} commits since {since or 'the first commit'}")
    sys.stdout.write(render_changelog(group_commits(subjects), since=since))
