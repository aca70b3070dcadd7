"""
Parse, group and render in one pass.

The functions here hold no state of their own and perform no I/O: the
caller supplies the raw commits, the tag map and the template, and gets
the Markdown text back.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Pattern, Set, Union

from vc_changelog.grouping.release_grouper import group_by_release
from vc_changelog.parsing.commit_model import ConventionalCommit
from vc_changelog.parsing.message_parser import parse_message
from vc_changelog.rendering.renderer import render_changelog
from vc_changelog.vcs.git_client import RawCommit


def parse_commits(
    raw_commits: Iterable[RawCommit],
    tag_map: Mapping[str, Set[str]],
) -> List[ConventionalCommit]:
    """Parse every raw commit, keeping order and dropping unrecognised ones.

    Tags are optional: a commit absent from ``tag_map`` is parsed with an
    empty tag set.
    """
    parsed: List[ConventionalCommit] = []
    for raw in raw_commits:
        commit = parse_message(raw.message, tag_map.get(raw.sha, ()), raw.commit_time)
        if commit is not None:
            parsed.append(commit)
    return parsed


def make_changelog(
    raw_commits: Iterable[RawCommit],
    tag_map: Mapping[str, Set[str]],
    tag_pattern: Union[str, Pattern[str]],
    template: Mapping[str, Any],
) -> str:
    """Return the Markdown changelog for newest-first ``raw_commits``."""
    commits = parse_commits(raw_commits, tag_map)
    buckets = group_by_release(commits, tag_pattern)
    return render_changelog(buckets, template)
