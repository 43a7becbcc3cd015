"""
Data model for a commit message under construction.

A :class:`CommitFields` instance is owned by a single builder run and is
never persisted; the builder fills it field by field and hands it to the
formatter once every required field is resolved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from conventional_commit.message.commit_type import CommitType


@dataclass
class CommitFields:
    """Representation of a Conventional Commit message.

    Attributes
    ----------
    type : CommitType
        The commit type tag.
    summary : str
        Single-line summary written after the header prefix.
    scope : Optional[str]
        Optional scope, already case-normalized.
    breaking : bool
        Whether the commit introduces a breaking change.
    description : Optional[str]
        Optional multi-line body.
    footers : List[str]
        Footer lines (``Key: value``) in insertion order.
    """

    type: CommitType
    summary: str
    scope: Optional[str] = None
    breaking: bool = False
    description: Optional[str] = None
    footers: List[str] = field(default_factory=list)
