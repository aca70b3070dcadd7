import unittest

from vc_changelog.rendering.markdown import MarkdownBuilder, format_line


class TestFormatLine(unittest.TestCase):
    def test_directive_vocabulary(self) -> None:
        self.assertEqual(format_line("T", "H1"), "# T")
        self.assertEqual(format_line("T", "H2"), "## T")
        self.assertEqual(format_line("T", "H3"), "### T")
        self.assertEqual(format_line("T", "bold"), "**T**")
        self.assertEqual(format_line("T", "bullet"), "- T")
        self.assertEqual(format_line("T", "para"), "T")
        self.assertEqual(format_line("T", "newLine"), "")
        self.assertEqual(format_line("T", "horizontalRule"), "---")

    def test_unknown_or_missing_directive_is_plain_text(self) -> None:
        self.assertEqual(format_line("T", "H7"), "T")
        self.assertEqual(format_line("T", "italic"), "T")
        self.assertEqual(format_line("T", None), "T")
        self.assertEqual(format_line("T", ""), "T")


class TestMarkdownBuilder(unittest.TestCase):
    def test_each_emission_ends_with_newline(self) -> None:
        out = MarkdownBuilder()
        out.emit("Title", "H1")
        out.emit("", "horizontalRule")
        out.emit("plain")
        self.assertEqual(out.build(), "# Title\n---\nplain\n")

    def test_break_directives(self) -> None:
        out = MarkdownBuilder()
        out.emit_break(None)
        out.emit_break("newLine")
        out.line_break()
        self.assertEqual(out.build(), "\n\n")


if __name__ == "__main__":
    unittest.main()
