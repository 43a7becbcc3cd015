"""
Advisory linting of commit messages.

:func:`validate` never raises for a badly formatted message and never
blocks a commit: every finding is returned as a :class:`Violation` for
the caller to print.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from conventional_commit.message.commit_type import CommitType

HEADER_RE = re.compile(r"^\w+(\([^)]+\))?!?:\s.+")

MALFORMED_HEADER = "MalformedHeader"
HEADER_TOO_LONG = "HeaderTooLong"
HEADER_EXCEEDS_RECOMMENDED = "HeaderExceedsRecommended"
MISSING_BLANK_LINE = "MissingBlankLineAfterHeader"
LINE_TOO_LONG = "LineTooLong"


@dataclass(frozen=True)
class Violation:
    """A single lint finding.

    ``line_number`` is 1-based and only set for line-level findings.
    """

    kind: str
    message: str
    line_number: Optional[int] = None


def validate(message: str, max_summary_length: int = 50, max_line_length: int = 72) -> List[Violation]:
    """Lint ``message`` and return the violations in line order."""
    lines = message.split("\n")
    header = lines[0]
    violations: List[Violation] = []

    if not HEADER_RE.match(CommitType.strip_emoji(header)):
        violations.append(Violation(
            MALFORMED_HEADER,
            "Header must match '<type>[(scope)][!]: <description>'",
        ))

    if len(header) > max_line_length:
        violations.append(Violation(
            HEADER_TOO_LONG,
            f"Header is {len(header)} characters (limit {max_line_length})",
        ))
    elif len(header) > max_summary_length:
        violations.append(Violation(
            HEADER_EXCEEDS_RECOMMENDED,
            f"Header is {len(header)} characters (recommended {max_summary_length})",
        ))

    if len(lines) > 1 and lines[1].strip():
        violations.append(Violation(
            MISSING_BLANK_LINE,
            "The line after the header must be blank",
            line_number=2,
        ))

    for number, line in enumerate(lines[1:], start=2):
        if line.strip() and len(line) > max_line_length:
            violations.append(Violation(
                LINE_TOO_LONG,
                f"Line {number} is {len(line)} characters (limit {max_line_length})",
                line_number=number,
            ))
    return violations
