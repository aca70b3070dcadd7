"""
Markdown emission for template directives.

Every ``attr``/``breakAfter`` string in a template maps to exactly one
emission rule below. Each emission ends with a newline. Unknown or
missing directives fall back to emitting the text unchanged.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional


HEADING_LEVEL_1 = "H1"
HEADING_LEVEL_2 = "H2"
HEADING_LEVEL_3 = "H3"
BOLD = "bold"
BULLET = "bullet"
PARAGRAPH = "para"
NEW_LINE = "newLine"
HORIZONTAL_RULE = "horizontalRule"


_FORMATTERS: Dict[str, Callable[[str], str]] = {
    HEADING_LEVEL_1: lambda text: f"# {text}",
    HEADING_LEVEL_2: lambda text: f"## {text}",
    HEADING_LEVEL_3: lambda text: f"### {text}",
    BOLD: lambda text: f"**{text}**",
    BULLET: lambda text: f"- {text}",
    PARAGRAPH: lambda text: text,
    NEW_LINE: lambda text: "",
    HORIZONTAL_RULE: lambda text: "---",
}


def format_line(text: str, directive: Optional[str]) -> str:
    """Return ``text`` rendered with ``directive``, without the trailing newline."""
    formatter = _FORMATTERS.get(directive or "")
    if formatter is None:
        return text
    return formatter(text)


class MarkdownBuilder:
    """Accumulates Markdown lines emitted through directives."""

    def __init__(self) -> None:
        self._parts: List[str] = []

    def emit(self, text: str, directive: Optional[str] = None) -> None:
        """Append ``text`` formatted with ``directive`` followed by a newline."""
        self._parts.append(format_line(text, directive) + "\n")

    def emit_break(self, directive: Optional[str]) -> None:
        """Append a ``breakAfter`` directive. ``None`` emits nothing."""
        if directive is None:
            return
        self.emit("", directive)

    def line_break(self) -> None:
        self._parts.append("\n")

    def build(self) -> str:
        return "".join(self._parts)
