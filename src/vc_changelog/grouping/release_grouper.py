"""
Bucketing of parsed commits into releases.

Commits arrive newest first, as history is walked from the branch tip.
A commit carrying a release tag opens a bucket for that version, and
every untagged commit after it in the walk (i.e. older in real time)
is filed under the same version until the next tagged commit. Commits
seen before the first release tag belong to the unreleased bucket.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional, Pattern, Union

from vc_changelog.parsing.commit_model import (
    UNRELEASED,
    ConventionalCommit,
    ReleaseBucketMap,
    ReleaseType,
)


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


DEFAULT_TAG_PATTERN = r"^v\d{1,20}.\d{1,20}.\d{1,20}$"


def find_release_tag(tags: Iterable[str], pattern: Pattern[str]) -> Optional[str]:
    """Return the release tag among ``tags`` or ``None``.

    A tag is a release tag when ``pattern`` matches its whole name. When
    several tags match, the lexicographically greatest one is chosen so
    the result does not depend on set iteration order.
    """
    matching = [tag for tag in tags if pattern.fullmatch(tag)]
    if not matching:
        return None
    if len(matching) > 1:
        logger.debug("Commit carries several release tags %s; using %s", matching, max(matching))
    return max(matching)


def group_by_release(
    commits: Iterable[ConventionalCommit],
    tag_pattern: Union[str, Pattern[str]] = DEFAULT_TAG_PATTERN,
) -> ReleaseBucketMap:
    """Partition newest-first ``commits`` into release buckets.

    Parameters
    ----------
    commits : Iterable[ConventionalCommit]
        Parsed commits in history order, newest first.
    tag_pattern : Union[str, Pattern[str]]
        Regular expression recognising release tags.

    Returns
    -------
    ReleaseBucketMap
        Mapping from release to its commits, ordered by the first time
        each bucket was touched. Commit order within a bucket follows
        the input order.
    """
    pattern = re.compile(tag_pattern) if isinstance(tag_pattern, str) else tag_pattern
    buckets: ReleaseBucketMap = {}
    current_release: ReleaseType = UNRELEASED

    for commit in commits:
        version = find_release_tag(commit.tags, pattern)
        if version is not None:
            current_release = ReleaseType.released(version)
        buckets.setdefault(current_release, []).append(commit)

    logger.debug(
        "Grouped commits into %d bucket(s): %s",
        len(buckets),
        ", ".join(str(release) for release in buckets),
    )
    return buckets
