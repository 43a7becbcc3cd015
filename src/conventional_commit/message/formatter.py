"""
Formatting of Conventional Commits v1.0.0 messages.

The header has the shape ``<type>[(scope)][!]: <summary>``; the optional
body and footer block follow, each separated from what precedes it by a
single blank line. All functions here are pure.
"""

from __future__ import annotations

import re
from typing import Optional

from conventional_commit.message.commit_type import CommitType
from conventional_commit.message.fields import CommitFields

SCOPE_CASES = ("lowercase", "uppercase", "camelCase")


def format_scope(scope: str, scope_case: str = "lowercase") -> str:
    """Normalize ``scope`` according to ``scope_case``.

    >>> format_scope("My Scope", "camelCase")
    'myScope'
    """
    scope = scope.strip()
    if scope_case == "uppercase":
        return scope.upper()
    if scope_case == "camelCase":
        words = [w for w in re.split(r"[\s_\-]+", scope) if w]
        if not words:
            return ""
        return words[0].lower() + "".join(w[:1].upper() + w[1:].lower() for w in words[1:])
    if scope_case == "lowercase":
        return scope.lower()
    raise ValueError(f"Unknown scope case '{scope_case}'. Expected one of: {', '.join(SCOPE_CASES)}")


def conventional_prefix(commit_type: CommitType, scope: Optional[str] = None, breaking: bool = False) -> str:
    """Return ``type(scope)!: `` with the optional parts only when present."""
    scope_part = f"({scope})" if scope else ""
    marker = "!" if breaking else ""
    return f"{commit_type.tag}{scope_part}{marker}: "


def format_header(fields: CommitFields, emoji: bool = False) -> str:
    header = conventional_prefix(fields.type, fields.scope, fields.breaking) + fields.summary.strip()
    if emoji:
        header = f"{fields.type.emoji} {header}"
    return header


def format_message(fields: CommitFields, emoji: bool = False) -> str:
    """Render ``fields`` as a complete commit message.

    Raises
    ------
    ValueError
        If the summary is empty.
    """
    if not fields.summary or not fields.summary.strip():
        raise ValueError("Commit summary must not be empty")

    parts = [format_header(fields, emoji=emoji)]
    if fields.description and fields.description.strip():
        parts.append(fields.description.strip("\n"))
    if fields.footers:
        parts.append("\n".join(fields.footers))
    return "\n\n".join(parts)
