"""
Commit message parsing.

This package turns raw commit messages into typed
:class:`~vc_changelog.parsing.commit_model.ConventionalCommit` records.
See :mod:`vc_changelog.parsing.message_parser` for the segmentation
rules.
"""

from .commit_model import (  # noqa: F401
    UNRELEASED,
    CommitKind,
    ConventionalCommit,
    ReleaseBucketMap,
    ReleaseType,
)
from .message_parser import NO_DESCRIPTION, parse_message  # noqa: F401
