import unittest

from vc_changelog.parsing.commit_model import CommitKind
from vc_changelog.parsing.message_parser import (
    NO_DESCRIPTION,
    classify_message,
    extract_description,
    parse_message,
    split_body_and_footers,
    split_lines,
)


class TestClassifyMessage(unittest.TestCase):
    def test_recognised_prefixes(self) -> None:
        self.assertEqual(classify_message("feat: add cache"), CommitKind.FEATURE)
        self.assertEqual(classify_message("fix(api): handle null"), CommitKind.FIX)
        self.assertEqual(classify_message("change: rename option"), CommitKind.CHANGE)

    def test_prefix_is_plain_substring_test(self) -> None:
        # No type(scope): grammar is enforced
        self.assertEqual(classify_message("feature toggles everywhere"), CommitKind.FEATURE)
        self.assertEqual(classify_message("fixup! something"), CommitKind.FIX)

    def test_unrecognised_messages(self) -> None:
        for message in ["docs: readme", "chore: bump", "Feat: capitalised", " feat: indented", ""]:
            self.assertIsNone(classify_message(message), message)


class TestExtractDescription(unittest.TestCase):
    def test_text_after_last_colon_is_trimmed(self) -> None:
        self.assertEqual(extract_description(["feat(core): scope: add thing  "]), "add thing")

    def test_title_without_colon_is_kept_whole(self) -> None:
        self.assertEqual(extract_description(["feature flag support"]), "feature flag support")

    def test_missing_or_blank_title(self) -> None:
        self.assertEqual(extract_description([]), NO_DESCRIPTION)
        self.assertEqual(extract_description(["   "]), NO_DESCRIPTION)


class TestSplitBodyAndFooters(unittest.TestCase):
    def test_title_only(self) -> None:
        body, footers = split_body_and_footers(["feat: x"])
        self.assertIsNone(body)
        self.assertEqual(footers, {})

    def test_lines_before_first_blank_are_ignored(self) -> None:
        body, footers = split_body_and_footers(["feat: x", "still title area", "Key: value"])
        self.assertIsNone(body)
        self.assertEqual(footers, {})

    def test_body_lines_are_concatenated_without_separator(self) -> None:
        body, _ = split_body_and_footers(["feat: x", "", "First line.", "Second line.", "", "Next paragraph."])
        self.assertEqual(body, "First line.Second line.Next paragraph.")

    def test_blank_line_then_footer_switches_state(self) -> None:
        lines = ["fix: y", "", "Body text.", "", "Reviewed-by: Alice", "Refs: 12"]
        body, footers = split_body_and_footers(lines)
        self.assertEqual(body, "Body text.")
        self.assertEqual(footers, {"Reviewed-by": " Alice", "Refs": " 12"})

    def test_hash_reference_triggers_footer_but_is_discarded(self) -> None:
        lines = ["fix: y", "", "Body.", "", "#123", "Closes: #42"]
        body, footers = split_body_and_footers(lines)
        self.assertEqual(body, "Body.")
        self.assertEqual(footers, {"Closes": " #42"})

    def test_colon_at_end_of_next_line_does_not_start_footers(self) -> None:
        lines = ["feat: z", "", "Intro.", "", "Notes:", "more"]
        body, footers = split_body_and_footers(lines)
        self.assertEqual(body, "Intro.Notes:more")
        self.assertEqual(footers, {})

    def test_malformed_footer_lines_are_dropped(self) -> None:
        lines = ["feat: z", "", "Body.", "", "Key: value", "weird footer no colon", "a:b:c", "", "Other: 1"]
        _, footers = split_body_and_footers(lines)
        self.assertEqual(footers, {"Key": " value", "Other": " 1"})
        self.assertNotIn("weird footer no colon", footers)

    def test_last_duplicate_footer_wins(self) -> None:
        lines = ["feat: z", "", "Body.", "", "Refs: 1", "Refs: 2"]
        _, footers = split_body_and_footers(lines)
        self.assertEqual(footers, {"Refs": " 2"})

    def test_blank_body_is_none(self) -> None:
        body, _ = split_body_and_footers(["feat: z", "", ""])
        self.assertIsNone(body)


class TestParseMessage(unittest.TestCase):
    def test_full_message(self) -> None:
        commit = parse_message(
            "feat: add cache\n\nThis adds an LRU cache.\n\nCloses: #42",
            tags={"v1.0.0"},
            time_of_commit=1700000000,
        )
        self.assertIsNotNone(commit)
        self.assertEqual(commit.kind, CommitKind.FEATURE)
        self.assertEqual(commit.description, "add cache")
        self.assertIn("This adds an LRU cache.", commit.body)
        self.assertEqual(commit.footers, {"Closes": " #42"})
        self.assertEqual(commit.tags, frozenset({"v1.0.0"}))
        self.assertEqual(commit.time_of_commit, 1700000000)

    def test_untagged_commit_is_parsed(self) -> None:
        commit = parse_message("change: tweak defaults")
        self.assertIsNotNone(commit)
        self.assertEqual(commit.kind, CommitKind.CHANGE)
        self.assertEqual(commit.tags, frozenset())
        self.assertIsNone(commit.body)
        self.assertEqual(commit.footers, {})

    def test_non_conventional_message_is_dropped(self) -> None:
        self.assertIsNone(parse_message("Merge branch 'main' into feature", tags={"v1.0.0"}))

    def test_windows_line_endings(self) -> None:
        commit = parse_message("fix: crlf\r\n\r\nBody.\r\n")
        self.assertEqual(commit.description, "crlf")
        self.assertEqual(commit.body, "Body.")

    def test_unicode_separators_do_not_break_the_title(self) -> None:
        commit = parse_message("feat: add x\u2028see: y")
        self.assertEqual(commit.description, "y")
        self.assertIsNone(commit.body)
        commit = parse_message("fix: page\x0cbreak: z\n\nBody.")
        self.assertEqual(commit.description, "z")
        self.assertEqual(commit.body, "Body.")


class TestSplitLines(unittest.TestCase):
    def test_only_newline_sequences_split(self) -> None:
        self.assertEqual(split_lines("a\r\nb\rc\nd"), ["a", "b", "c", "d"])
        self.assertEqual(split_lines("a\u2028b\x0bc\x1ed\x85e"), ["a\u2028b\x0bc\x1ed\x85e"])


if __name__ == "__main__":
    unittest.main()
