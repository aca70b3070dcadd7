"""
Template interpreter producing the Markdown changelog.

The renderer walks a template (see :mod:`vc_changelog.rendering.template`)
against a release bucket map. Every section of the template is optional:
a missing or malformed section contributes nothing, and unknown
directives are emitted as plain text. Rendering never fails on template
content.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from vc_changelog.parsing.commit_model import (
    UNRELEASED,
    CommitKind,
    ConventionalCommit,
    ReleaseBucketMap,
    ReleaseType,
)

from .markdown import HEADING_LEVEL_1, HORIZONTAL_RULE, NEW_LINE, MarkdownBuilder


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


DEFAULT_TITLE = "Change Log"
UNRELEASED_HEADING = "Unreleased Changes"

# Rendering order of the categories and their placeholder for empty lists.
CATEGORIES: Tuple[Tuple[CommitKind, str], ...] = (
    (CommitKind.FEATURE, "No new features added."),
    (CommitKind.FIX, "No new bugs addressed."),
    (CommitKind.CHANGE, "No new changes to existing features."),
)

ATTR = "attr"
TEXT = "text"
BREAK_AFTER = "breakAfter"


def _node(parent: Optional[Mapping[str, Any]], key: str) -> Optional[Mapping[str, Any]]:
    """Return ``parent[key]`` if it is a JSON object, else ``None``."""
    if parent is None:
        return None
    value = parent.get(key)
    return value if isinstance(value, Mapping) else None


def _string(node: Mapping[str, Any], key: str) -> Optional[str]:
    value = node.get(key)
    return value if isinstance(value, str) else None


def partition_by_kind(commits: Sequence[ConventionalCommit]) -> Dict[CommitKind, List[ConventionalCommit]]:
    """Split ``commits`` by kind, each list stably sorted oldest first."""
    partitioned: Dict[CommitKind, List[ConventionalCommit]] = {kind: [] for kind, _ in CATEGORIES}
    for commit in commits:
        partitioned[commit.kind].append(commit)
    return {
        kind: sorted(items, key=lambda commit: commit.time_of_commit)
        for kind, items in partitioned.items()
    }


class ChangelogRenderer:
    """Render a :data:`ReleaseBucketMap` through a template."""

    def __init__(self, buckets: ReleaseBucketMap, template: Mapping[str, Any]) -> None:
        self.buckets = buckets
        self.template = template

    def render(self) -> str:
        """Return the complete Markdown document."""
        out = MarkdownBuilder()
        self._render_title(out)
        self._render_node(out, _node(self.template, "introduction"))

        each_version = _node(self.template, "eachVersion")
        if each_version is not None:
            releases = self._releases_to_render()
            logger.debug("Rendering %d release section(s)", len(releases))
            for release, commits in releases:
                self._render_release(out, each_version, release, commits)
        return out.build()

    # ------------------------------------------------------------------
    # Document sections
    # ------------------------------------------------------------------
    def _render_title(self, out: MarkdownBuilder) -> None:
        title = _node(self.template, "title")
        if title is None or _string(title, TEXT) is None:
            out.emit(DEFAULT_TITLE, HEADING_LEVEL_1)
            out.emit("", HORIZONTAL_RULE)
            return
        self._render_node(out, title)

    def _releases_to_render(self) -> List[Tuple[ReleaseType, List[ConventionalCommit]]]:
        """Unreleased first, then released buckets in map order.

        The unreleased section is kept when it has commits, and also when
        there is nothing else to show.
        """
        released = [(release, commits) for release, commits in self.buckets.items() if release.is_released]
        unreleased = self.buckets.get(UNRELEASED, [])
        if unreleased or not released:
            return [(UNRELEASED, unreleased)] + released
        return released

    def _render_release(
        self,
        out: MarkdownBuilder,
        each_version: Mapping[str, Any],
        release: ReleaseType,
        commits: Sequence[ConventionalCommit],
    ) -> None:
        tag = _node(each_version, "tag")
        if tag is not None:
            heading = release.version if release.is_released else UNRELEASED_HEADING
            out.emit(heading, _string(tag, ATTR))
            out.emit_break(_string(tag, BREAK_AFTER))

        partitioned = partition_by_kind(commits)
        for kind, placeholder in CATEGORIES:
            category = _node(each_version, kind.value)
            if category is None:
                continue
            self._render_node(out, _node(category, "title"))
            items = partitioned[kind]
            if not items:
                out.emit(placeholder)
                continue
            each = _node(category, "each")
            for commit in items:
                self._render_commit(out, each, commit)

        out.emit("", NEW_LINE)
        out.emit("", HORIZONTAL_RULE)

    def _render_commit(
        self,
        out: MarkdownBuilder,
        each: Optional[Mapping[str, Any]],
        commit: ConventionalCommit,
    ) -> None:
        description = _node(each, "description")
        if description is not None:
            out.emit(commit.description, _string(description, ATTR))
            out.emit_break(_string(description, BREAK_AFTER))

        body = _node(each, "body")
        if body is not None and commit.body:
            out.emit(commit.body, _string(body, ATTR))
            out.emit_break(_string(body, BREAK_AFTER))

        footer = _node(each, "footer")
        if footer is not None and commit.footers:
            attr = _string(footer, ATTR)
            for key, value in commit.footers.items():
                out.emit(f"{key} : {value}", attr)
                out.line_break()
            out.emit_break(_string(footer, BREAK_AFTER))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _render_node(out: MarkdownBuilder, node: Optional[Mapping[str, Any]]) -> None:
        """Emit a ``{attr, text, breakAfter}`` node; nodes without text emit nothing."""
        if node is None:
            return
        text = _string(node, TEXT)
        if text is None:
            return
        out.emit(text, _string(node, ATTR))
        out.emit_break(_string(node, BREAK_AFTER))


def render_changelog(buckets: ReleaseBucketMap, template: Mapping[str, Any]) -> str:
    """Render ``buckets`` through ``template`` and return the Markdown text."""
    return ChangelogRenderer(buckets, template).render()
