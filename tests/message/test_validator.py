"""Tests for advisory message validation."""

import unittest

from conventional_commit.message.commit_type import CommitType
from conventional_commit.message.validator import (
    HEADER_EXCEEDS_RECOMMENDED,
    HEADER_TOO_LONG,
    LINE_TOO_LONG,
    MALFORMED_HEADER,
    MISSING_BLANK_LINE,
    validate,
)


def kinds(violations):
    return [v.kind for v in violations]


class TestValidate(unittest.TestCase):
    def test_valid_header_passes(self):
        self.assertEqual(validate("feat: add x"), [])
        self.assertEqual(validate("fix(api)!: handle timeout"), [])

    def test_malformed_header(self):
        self.assertIn(MALFORMED_HEADER, kinds(validate("badheader")))
        self.assertIn(MALFORMED_HEADER, kinds(validate("feat:no space")))

    def test_emoji_header_is_accepted(self):
        header = f"{CommitType.FEATURE.emoji} feat: add x"
        self.assertNotIn(MALFORMED_HEADER, kinds(validate(header)))

    def test_header_length_levels(self):
        recommended = "feat: " + "x" * 50
        self.assertEqual(kinds(validate(recommended)), [HEADER_EXCEEDS_RECOMMENDED])
        too_long = "feat: " + "x" * 80
        self.assertEqual(kinds(validate(too_long)), [HEADER_TOO_LONG])

    def test_limits_are_configurable(self):
        message = "feat: " + "x" * 60
        self.assertEqual(validate(message, max_summary_length=100, max_line_length=100), [])

    def test_missing_blank_line_after_header(self):
        violations = validate("feat: add x\nbody right away")
        self.assertIn(MISSING_BLANK_LINE, kinds(violations))

    def test_blank_line_after_header(self):
        violations = validate("feat: add x\n\nbody after a blank line")
        self.assertNotIn(MISSING_BLANK_LINE, kinds(violations))

    def test_long_body_lines_report_line_numbers(self):
        message = "feat: add x\n\nshort\n" + "y" * 73 + "\n\nRefs: #1"
        violations = validate(message)
        self.assertEqual(kinds(violations), [LINE_TOO_LONG])
        self.assertEqual(violations[0].line_number, 4)

    def test_violations_never_raise(self):
        self.assertTrue(validate(""))


if __name__ == "__main__":
    unittest.main()
