"""
Conventional Commit message parser.

Classifies a raw commit message by its prefix and splits it into a
description, an optional body and a mapping of footers. The accepted
grammar is loose: a message is a feature, fix or change
when its text *starts with* ``feat``, ``fix`` or ``change``; no
``type(scope):`` validation is performed.

Malformed fragments never raise. Unrecognised messages yield ``None``,
footer lines that do not split into exactly one key and one value are
dropped, and a missing title falls back to a sentinel description.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .commit_model import CommitKind, ConventionalCommit


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. The CLI re-enables propagation when it configures logging.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


NO_DESCRIPTION = "No description provided."

# Checked in order; the first prefix the message starts with wins.
_PREFIXES: Tuple[Tuple[str, CommitKind], ...] = (
    ("feat", CommitKind.FEATURE),
    ("fix", CommitKind.FIX),
    ("change", CommitKind.CHANGE),
)


class _ScanState(Enum):
    TITLE = "title"
    BODY = "body"
    FOOTER = "footer"


_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(message: str) -> List[str]:
    """Split ``message`` on ``\\n``, ``\\r\\n`` and ``\\r`` only.

    Other characters :meth:`str.splitlines` treats as boundaries, such as
    ``\\x0c`` or ``\\u2028``, stay part of the line.
    """
    return _LINE_BREAK.split(message)


def classify_message(message: str) -> Optional[CommitKind]:
    """Return the commit kind for ``message`` or ``None`` if unrecognised.

    The test is a case-sensitive prefix match on the whole message.
    """
    for prefix, kind in _PREFIXES:
        if message.startswith(prefix):
            return kind
    return None


def extract_description(lines: Sequence[str]) -> str:
    """Return the trimmed text after the last colon of the first line."""
    if not lines or not lines[0].strip():
        return NO_DESCRIPTION
    title = lines[0]
    return title[title.rfind(":") + 1:].strip()


def _has_marker_before_end(line: str, marker: str) -> bool:
    index = line.find(marker)
    return 0 <= index < len(line) - 1


def _footer_follows(next_line: Optional[str]) -> bool:
    """Return True if ``next_line`` looks like a ``Key: value`` or ``#ref`` footer."""
    if next_line is None:
        return False
    return _has_marker_before_end(next_line, ":") or _has_marker_before_end(next_line, "#")


def split_body_and_footers(lines: Sequence[str]) -> Tuple[Optional[str], Dict[str, str]]:
    """Segment the lines after the title into a body and footers.

    A forward scan over the lines moves through three states:

    * ``TITLE``: the first blank line switches to ``BODY``.
    * ``BODY``: non-empty lines are concatenated onto the body with no
      separator. A blank line followed by a line carrying a ``:`` or
      ``#`` before its final character switches to ``FOOTER``.
    * ``FOOTER``: each line is split on ``:``; exactly two parts make a
      footer entry, anything else is discarded. Blank lines are ignored.

    Parameters
    ----------
    lines : Sequence[str]
        Every line of the message, including the title line.

    Returns
    -------
    Tuple[Optional[str], Dict[str, str]]
        The body (``None`` when empty) and the footer mapping.
    """
    state = _ScanState.TITLE
    body_parts: List[str] = []
    footers: Dict[str, str] = {}

    for index in range(1, len(lines)):
        line = lines[index]
        if not line.strip():
            if state is _ScanState.TITLE:
                state = _ScanState.BODY
            elif state is _ScanState.BODY:
                next_line = lines[index + 1] if index + 1 < len(lines) else None
                if _footer_follows(next_line):
                    state = _ScanState.FOOTER
            continue

        if state is _ScanState.BODY:
            body_parts.append(line)
        elif state is _ScanState.FOOTER:
            parts = line.split(":")
            if len(parts) == 2:
                footers[parts[0]] = parts[1]
            else:
                logger.debug("Discarding footer line without a single key/value: %r", line)

    body = "".join(body_parts)
    return (body or None), footers


def parse_message(
    message: str,
    tags: Iterable[str] = (),
    time_of_commit: int = 0,
) -> Optional[ConventionalCommit]:
    """Parse a full commit message into a :class:`ConventionalCommit`.

    Parameters
    ----------
    message : str
        The full, possibly multi-line, commit message.
    tags : Iterable[str]
        Short names of the tags pointing at the commit.
    time_of_commit : int
        Commit timestamp in seconds since the epoch.

    Returns
    -------
    Optional[ConventionalCommit]
        The parsed commit, or ``None`` if the message does not start with
        a recognised prefix.
    """
    kind = classify_message(message)
    if kind is None:
        logger.debug("Skipping non-conventional commit: %r", split_lines(message)[:1])
        return None

    lines = split_lines(message)
    body, footers = split_body_and_footers(lines)
    return ConventionalCommit(
        kind=kind,
        description=extract_description(lines),
        time_of_commit=time_of_commit,
        tags=frozenset(tags),
        body=body,
        footers=footers,
    )
