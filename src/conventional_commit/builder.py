"""
Commit message construction.

:class:`CommitMessageBuilder` resolves every field of a commit message
from, in order of precedence, an explicit value (a CLI flag), a named
template from the configuration, and finally an interactive prompt. The
builder produces a :class:`CommitFields` and a formatted message; it
never stages or commits anything itself.

When ``interactive`` is False, optional fields that were not given fall
back to their defaults instead of prompting. Required fields (type and
summary) are always prompted for when they cannot be resolved otherwise.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Mapping, Optional, Sequence

from conventional_commit.config.loader import Configuration
from conventional_commit.message.commit_type import CommitType
from conventional_commit.message.fields import CommitFields
from conventional_commit.message.formatter import conventional_prefix, format_message, format_scope
from conventional_commit.message.validator import Violation, validate
from conventional_commit.prompts.prompter import Prompter
from conventional_commit.vcs.git_client import GitClient, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


HISTORY_DEPTH = 50
MAX_MINED_SCOPES = 10
NO_SCOPE = "(no scope)"
CUSTOM_SCOPE = "(custom scope)"
SCOPE_RE = re.compile(r"^\w+\(([^)]+)\)!?:\s")


class InvalidInputError(ValueError):
    """Raised when an explicit value is not acceptable."""

    pass


def mine_scopes(summaries: Sequence[str], limit: int = MAX_MINED_SCOPES) -> List[str]:
    """Extract scopes from ``type(scope): description`` summaries.

    Scopes are deduplicated in first-seen order and capped at ``limit``.
    """
    scopes: List[str] = []
    for summary in summaries:
        match = SCOPE_RE.match(summary)
        if not match:
            continue
        scope = match.group(1).strip()
        if scope and scope not in scopes:
            scopes.append(scope)
        if len(scopes) >= limit:
            break
    return scopes


class CommitMessageBuilder:
    """Build one Conventional Commits message.

    Parameters
    ----------
    config : Configuration
        The merged configuration for this invocation.
    prompter : Prompter
        Collaborator used for every interactive question.
    git : Optional[GitClient]
        Used to mine scopes from recent history; optional.
    interactive : bool
        Whether optional fields that were not given should be prompted.
    """

    def __init__(
        self,
        config: Configuration,
        prompter: Prompter,
        git: Optional[GitClient] = None,
        interactive: bool = True,
    ) -> None:
        self.config = config
        self.prompter = prompter
        self.git = git
        self.interactive = interactive

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------
    def get_template(self, name: Optional[str]) -> Mapping[str, Any]:
        """Return the template called ``name`` or an empty mapping.

        Raises
        ------
        InvalidInputError
            If a name is given but no such template is configured.
        """
        if not name:
            return {}
        try:
            return self.config.templates[name]
        except KeyError:
            known = ", ".join(sorted(self.config.templates)) or "none configured"
            raise InvalidInputError(f"Unknown template '{name}' (available: {known})") from None

    # ------------------------------------------------------------------
    # Field resolution
    # ------------------------------------------------------------------
    def resolve_type(
        self,
        explicit: Optional[str] = None,
        template: Optional[Mapping[str, Any]] = None,
        detected: Optional[CommitType] = None,
    ) -> CommitType:
        if explicit:
            try:
                return CommitType.from_tag(explicit.strip().lower())
            except ValueError as exc:
                raise InvalidInputError(str(exc)) from exc
        if template and template.get("type"):
            return CommitType.from_tag(template["type"])
        if detected is not None:
            return detected

        options = [t.choice_label(emoji=self.config.emoji_enabled) for t in CommitType]
        choice = self.prompter.choose("Commit type:", options)
        return CommitType.parse_choice(choice)

    def scope_choices(self) -> List[str]:
        """Known scopes (sorted) followed by scopes mined from history."""
        choices = sorted(self.config.known_scopes)
        for scope in self._mined_scopes():
            if scope not in choices:
                choices.append(scope)
        return choices

    def _mined_scopes(self) -> List[str]:
        if self.git is None:
            return []
        try:
            summaries = self.git.get_recent_summaries(HISTORY_DEPTH)
        except GitError as exc:
            logger.warning("Could not read recent commits for scope suggestions: %s", exc)
            return []
        return mine_scopes(summaries)

    def resolve_scope(self, explicit: Optional[str] = None) -> Optional[str]:
        if explicit is not None:
            scope = format_scope(explicit, self.config.scope_case)
            return scope or None
        if not self.interactive:
            return None

        choices = self.scope_choices()
        if choices:
            picked = self.prompter.choose("Scope:", [NO_SCOPE] + choices + [CUSTOM_SCOPE])
            if picked == NO_SCOPE:
                return None
            if picked != CUSTOM_SCOPE:
                return format_scope(picked, self.config.scope_case) or None
        raw = self.prompter.input("Scope (optional)")
        return format_scope(raw, self.config.scope_case) or None

    def resolve_breaking(self, explicit: Optional[bool] = None) -> bool:
        if explicit is not None:
            return explicit
        if not self.interactive:
            return False
        return self.prompter.confirm("Is this a breaking change (!)?", default=False)

    def resolve_summary(
        self,
        commit_type: CommitType,
        scope: Optional[str] = None,
        breaking: bool = False,
        explicit: Optional[str] = None,
    ) -> str:
        """Return the summary, prompting until a non-empty line is entered.

        An over-long header is reported as a warning but accepted.
        """
        prefix = conventional_prefix(commit_type, scope, breaking)
        # the header as written, emoji glyph included, is what gets linted
        header_prefix = f"{commit_type.emoji} {prefix}" if self.config.emoji_enabled else prefix
        summary = (explicit or "").strip()
        limit = max(self.config.max_summary_length - len(header_prefix), 1)
        while not summary:
            summary = self.prompter.input(f"Summary: {prefix}", char_limit=limit).strip()
            if not summary:
                logger.info("The summary is required")

        summary = summary.splitlines()[0].strip()
        header_length = len(header_prefix) + len(summary)
        if header_length > self.config.max_summary_length:
            logger.warning(
                "Header is %d characters; the recommended maximum is %d",
                header_length,
                self.config.max_summary_length,
            )
        return summary

    def resolve_description(self, explicit: Optional[str] = None) -> Optional[str]:
        if explicit is not None:
            text = explicit
        elif self.interactive:
            text = self.prompter.write("Details of this change (optional)")
        else:
            return None
        text = text.strip("\n")
        return text if text.strip() else None

    def build_footers(
        self,
        breaking: bool = False,
        explicit_footer: Optional[str] = None,
        ticket: Optional[str] = None,
        co_authors: Sequence[str] = (),
    ) -> List[str]:
        """Collect footer lines in their fixed order.

        ``BREAKING CHANGE`` first, then the explicit footer, the ticket
        reference, and one ``Co-authored-by`` line per co-author.
        """
        footers: List[str] = []

        if breaking and self.config.breaking_change_footer_enabled:
            text = self.prompter.input("Describe the breaking change (optional)")
            if text:
                footers.append(f"BREAKING CHANGE: {text}")
        if explicit_footer and explicit_footer.strip():
            footers.append(explicit_footer.strip())
        if ticket and ticket.strip().lstrip("#"):
            footers.append(f"Refs: #{ticket.strip().lstrip('#')}")
        for author in co_authors:
            if author.strip():
                footers.append(f"Co-authored-by: {author.strip()}")

        if not footers and self.interactive:
            if self.prompter.confirm("Add a footer (e.g. Refs, Reviewed-by)?", default=False):
                key = self.prompter.input("Footer type (e.g. Refs, Reviewed-by)")
                value = self.prompter.input("Footer value")
                if key and value:
                    footers.append(f"{key}: {value}")
        return footers

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def build(
        self,
        type: Optional[str] = None,
        scope: Optional[str] = None,
        breaking: Optional[bool] = None,
        summary: Optional[str] = None,
        description: Optional[str] = None,
        footer: Optional[str] = None,
        ticket: Optional[str] = None,
        co_authors: Sequence[str] = (),
        template: Optional[str] = None,
        detected_type: Optional[CommitType] = None,
    ) -> CommitFields:
        """Resolve every field and return the completed :class:`CommitFields`.

        Explicit values win over template values, which win over prompts.
        """
        tpl = self.get_template(template)
        commit_type = self.resolve_type(type, tpl, detected_type)
        resolved_scope = self.resolve_scope(scope if scope is not None else tpl.get("scope"))
        is_breaking = self.resolve_breaking(breaking if breaking is not None else tpl.get("breaking"))
        resolved_summary = self.resolve_summary(
            commit_type, resolved_scope, is_breaking, summary or tpl.get("summary")
        )
        resolved_description = self.resolve_description(
            description if description is not None else tpl.get("description")
        )
        footers = self.build_footers(is_breaking, footer, ticket, co_authors)
        return CommitFields(
            type=commit_type,
            scope=resolved_scope,
            breaking=is_breaking,
            summary=resolved_summary,
            description=resolved_description,
            footers=footers,
        )

    def format(self, fields: CommitFields) -> str:
        return format_message(fields, emoji=self.config.emoji_enabled)

    def validate(self, message: str) -> List[Violation]:
        return validate(message, self.config.max_summary_length, self.config.max_line_length)
