"""
The closed set of Conventional Commit types.

Each member carries the tag written into the header, a short human
description shown in the type chooser, and an emoji glyph used when
emoji output is enabled.
"""

from __future__ import annotations

import re
from enum import Enum


class CommitType(Enum):
    """Conventional Commit type tags."""

    FEATURE = ("feat", "A new feature", "✨")
    FIX = ("fix", "A bug fix", "\U0001f41b")
    DOCS = ("docs", "Documentation only changes", "\U0001f4dd")
    STYLE = ("style", "Formatting, missing semicolons, white-space", "\U0001f484")
    REFACTOR = ("refactor", "A code change that neither fixes a bug nor adds a feature", "♻️")
    TEST = ("test", "Adding or correcting tests", "✅")
    CHORE = ("chore", "Maintenance that does not touch src or test files", "\U0001f527")
    REVERT = ("revert", "Reverts a previous commit", "⏪")
    CI_CONFIG = ("ci", "Changes to CI configuration files and scripts", "\U0001f477")
    BUILD_CONFIG = ("build", "Changes to the build system or dependencies", "\U0001f4e6")
    PERFORMANCE = ("perf", "A code change that improves performance", "⚡")

    def __init__(self, tag: str, description: str, emoji: str) -> None:
        self.tag = tag
        self.description = description
        self.emoji = emoji

    def __str__(self) -> str:
        return self.tag

    def choice_label(self, emoji: bool = False) -> str:
        """Return the option shown in the interactive type chooser."""
        label = f"{self.tag}: {self.description}"
        return f"{self.emoji} {label}" if emoji else label

    @classmethod
    def tags(cls) -> list:
        return [member.tag for member in cls]

    @classmethod
    def from_tag(cls, tag: str) -> "CommitType":
        """Look up a member by its header tag.

        Raises
        ------
        ValueError
            If ``tag`` is not one of the known tags.
        """
        for member in cls:
            if member.tag == tag:
                return member
        raise ValueError(
            f"Unknown commit type '{tag}'. Expected one of: {', '.join(cls.tags())}"
        )

    @classmethod
    def parse_choice(cls, option: str) -> "CommitType":
        """Parse the option picked in the type chooser.

        Only the first token matters and only its lowercase letters are
        kept, so ``"feat: A new feature"`` and an emoji-prefixed label
        resolve the same way.
        """
        tokens = [t for t in option.split() if re.sub(r"[^a-z]", "", t)]
        token = re.sub(r"[^a-z]", "", tokens[0]) if tokens else ""
        return cls.from_tag(token)

    @classmethod
    def strip_emoji(cls, header: str) -> str:
        """Remove a leading emoji glyph of a known type from ``header``."""
        for member in cls:
            if header.startswith(member.emoji):
                return header[len(member.emoji):].lstrip()
        return header
