"""
Grouping of parsed commits into release buckets.

See :mod:`vc_changelog.grouping.release_grouper` for the single-pass
bucketing rules.
"""

from .release_grouper import DEFAULT_TAG_PATTERN, find_release_tag, group_by_release  # noqa: F401
