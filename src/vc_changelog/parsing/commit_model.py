"""
Data models for parsed commits and release buckets.

A :class:`ConventionalCommit` is the typed record produced from a raw
commit message. Its :class:`CommitKind` is one of the three recognised
prefixes. A :class:`ReleaseType` names the bucket a commit is filed
under: either the unreleased bucket or a released version.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional


class CommitKind(str, Enum):
    """Closed set of commit categories, valued by their message prefix."""

    FEATURE = "feat"
    FIX = "fix"
    CHANGE = "change"


@dataclass(frozen=True)
class ConventionalCommit:
    """Representation of a classified commit.

    Attributes
    ----------
    kind : CommitKind
        Category derived from the message prefix.
    tags : FrozenSet[str]
        Short names of every tag pointing at this commit.
    description : str
        Trimmed text after the last colon of the first line.
    body : Optional[str]
        Accumulated body text, ``None`` when the message has no body.
    footers : Dict[str, str]
        Footer key/value pairs. Later keys overwrite earlier ones.
    time_of_commit : int
        Commit timestamp in seconds since the epoch.
    """

    kind: CommitKind
    description: str
    time_of_commit: int
    tags: FrozenSet[str] = frozenset()
    body: Optional[str] = None
    footers: Dict[str, str] = field(default_factory=dict, hash=False, compare=True)


@dataclass(frozen=True)
class ReleaseType:
    """Bucket key: unreleased when ``version`` is ``None``, released otherwise."""

    version: Optional[str] = None

    @classmethod
    def released(cls, version: str) -> "ReleaseType":
        return cls(version=version)

    @property
    def is_released(self) -> bool:
        return self.version is not None

    def __str__(self) -> str:
        return self.version if self.version is not None else "Unreleased"


UNRELEASED = ReleaseType()

# Insertion ordered by first bucket touched during grouping.
ReleaseBucketMap = Dict[ReleaseType, List[ConventionalCommit]]
