"""
Git client implementation for vc_changelog.

This module wraps the read-only Git operations the changelog generator
needs: resolving the ref to walk, listing the commit history newest
first and mapping every tag to the commit it points at. All subprocess
calls go through :meth:`GitClient._run` so that unit tests can mock
them easily.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Set


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. The CLI re-enables propagation when it configures logging.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


TAG_REF_PREFIX = "refs/tags/"
# ``show-ref --dereference`` marks the fully peeled object of an annotated tag.
_PEELED_SUFFIX = "^{}"

# Field and record separators for ``git log`` output.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = "%H%x1f%ct%x1f%B%x1e"


@dataclass(frozen=True)
class RawCommit:
    """A commit as read from the repository, before parsing."""

    sha: str
    message: str
    commit_time: int


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for reading history and tags from a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def is_repo(path: Path) -> bool:
        """Return True if the given path is the root of a Git repository."""
        return (path / ".git").exists()

    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` directory is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                # reached filesystem root
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If Git cannot be started, or the command exits with a non-zero
            status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid characters instead of failing
            )
        except OSError as e:
            logger.error("Could not run Git in %s: %s", self.repo_root, e)
            raise GitError(f"Failed to run git in {self.repo_root}: {e}") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Refs and history
    # ------------------------------------------------------------------
    def resolve_ref(self, ref: str) -> str:
        """Return the full hash of the commit ``ref`` names.

        Raises
        ------
        GitError
            If ``ref`` does not resolve to a commit.
        """
        result = self._run(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], check=False)
        sha = result.stdout.strip()
        if result.returncode != 0 or not sha:
            raise GitError(f"Cannot resolve '{ref}' to a commit")
        return sha

    def get_tag_map(self) -> Dict[str, Set[str]]:
        """Map each tagged commit hash to the short names of its tags.

        Annotated tags are peeled through any chain of tag objects down to
        the commit they finally point at. The ``refs/tags/`` prefix is
        stripped from every tag name.

        Returns
        -------
        Dict[str, Set[str]]
            Commit hash to tag names, ordered by first encounter.
        """
        # show-ref exits with 1 when the repository has no tags at all.
        result = self._run(["show-ref", "--dereference", "--tags"], check=False)
        if result.returncode not in (0, 1):
            raise GitError(result.stderr.strip() or "git show-ref failed")

        direct: Dict[str, str] = {}
        peeled: Dict[str, str] = {}
        for line in result.stdout.splitlines():
            parts = line.split(None, 1)
            if len(parts) != 2 or not parts[1].startswith(TAG_REF_PREFIX):
                continue
            sha, ref = parts
            name = ref[len(TAG_REF_PREFIX):]
            if name.endswith(_PEELED_SUFFIX):
                peeled[name[: -len(_PEELED_SUFFIX)]] = sha
            else:
                direct[name] = sha

        tag_map: Dict[str, Set[str]] = {}
        for name, sha in direct.items():
            tag_map.setdefault(peeled.get(name, sha), set()).add(name)
        logger.debug("Found %d tagged commit(s)", len(tag_map))
        return tag_map

    def iter_commits(self, ref: str = "HEAD") -> List[RawCommit]:
        """Return the history reachable from ``ref``, newest first.

        Raises
        ------
        GitError
            If ``ref`` cannot be resolved or ``git log`` fails.
        """
        sha = self.resolve_ref(ref)
        result = self._run(["log", f"--format={_LOG_FORMAT}", sha], check=True)
        commits: List[RawCommit] = []
        for record in result.stdout.split(_RECORD_SEP):
            record = record.lstrip("\n")
            if not record:
                continue
            fields = record.split(_FIELD_SEP, 2)
            if len(fields) != 3:
                logger.debug("Skipping malformed log record: %r", record[:80])
                continue
            commit_sha, commit_time, message = fields
            try:
                timestamp = int(commit_time)
            except ValueError:
                logger.debug("Skipping commit %s with invalid time %r", commit_sha, commit_time)
                continue
            commits.append(RawCommit(sha=commit_sha, message=message.rstrip("\n"), commit_time=timestamp))
        logger.debug("Read %d commit(s) reachable from %s", len(commits), ref)
        return commits
