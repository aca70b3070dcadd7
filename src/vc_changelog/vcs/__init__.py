"""
Version control system (VCS) integration.

This package contains the :class:`GitClient` used to read the commit
history and the tag-to-commit map of a Git repository.
"""

from .git_client import GitClient, GitError, RawCommit  # noqa: F401
