"""Tests for the commit message builder pipeline."""

import logging
from types import MappingProxyType

import pytest

from conventional_commit.builder import (
    CUSTOM_SCOPE,
    NO_SCOPE,
    CommitMessageBuilder,
    InvalidInputError,
    mine_scopes,
)
from conventional_commit.config.loader import Configuration
from conventional_commit.message.commit_type import CommitType
from conventional_commit.message.fields import CommitFields
from conventional_commit.vcs.git_client import GitError


class FakeGit:
    def __init__(self, summaries=None, error=None):
        self.summaries = summaries or []
        self.error = error
        self.requested = None

    def get_recent_summaries(self, count=50):
        self.requested = count
        if self.error:
            raise self.error
        return self.summaries


def make_builder(prompter, interactive=True, git=None, **config):
    return CommitMessageBuilder(Configuration(**config), prompter, git=git, interactive=interactive)


def test_mine_scopes_dedupes_in_order_and_caps():
    summaries = ["feat(api): a", "fix: b", "fix(cli)!: c", "docs(api): d", "Merge branch x"]
    assert mine_scopes(summaries) == ["api", "cli"]
    many = [f"feat(s{i}): x" for i in range(20)]
    assert mine_scopes(many) == [f"s{i}" for i in range(10)]


def test_resolve_type_explicit(scripted_prompter):
    builder = make_builder(scripted_prompter())
    assert builder.resolve_type("FIX") is CommitType.FIX
    with pytest.raises(InvalidInputError):
        builder.resolve_type("feature")


def test_resolve_type_template_then_detected_then_prompt(scripted_prompter):
    prompter = scripted_prompter(choose=[lambda header, choices: choices[2]])
    builder = make_builder(prompter)
    assert builder.resolve_type(None, {"type": "docs"}) is CommitType.DOCS
    assert builder.resolve_type(None, {}, CommitType.TEST) is CommitType.TEST
    assert builder.resolve_type() is CommitType.DOCS
    kind, header, choices = prompter.calls[0]
    assert choices[0] == "feat: A new feature"
    assert len(choices) == len(CommitType)


def test_resolve_scope_explicit_is_normalized(scripted_prompter):
    builder = make_builder(scripted_prompter(), scope_case="camelCase")
    assert builder.resolve_scope("My Scope") == "myScope"
    assert builder.resolve_scope("  ") is None


def test_resolve_scope_offers_known_and_mined(scripted_prompter):
    git = FakeGit(["feat(web): a", "fix(api): b", "chore(deps): c"])
    prompter = scripted_prompter(choose=[lambda header, choices: choices[3]])
    builder = make_builder(prompter, git=git, known_scopes=frozenset({"api", "cli"}))

    assert builder.resolve_scope() == "web"
    _, _, choices = prompter.calls[0]
    assert choices == [NO_SCOPE, "api", "cli", "web", "deps", CUSTOM_SCOPE]
    assert git.requested == 50


def test_resolve_scope_no_scope_and_custom(scripted_prompter):
    prompter = scripted_prompter(choose=[NO_SCOPE, CUSTOM_SCOPE], input=["Payments"])
    builder = make_builder(prompter, known_scopes=frozenset({"api"}))
    assert builder.resolve_scope() is None
    assert builder.resolve_scope() == "payments"


def test_resolve_scope_free_text_without_suggestions(scripted_prompter):
    prompter = scripted_prompter(input=[""])
    builder = make_builder(prompter, git=FakeGit(error=GitError("boom")))
    assert builder.resolve_scope() is None


def test_resolve_scope_non_interactive(scripted_prompter):
    assert make_builder(scripted_prompter(), interactive=False).resolve_scope() is None


def test_resolve_breaking(scripted_prompter):
    builder = make_builder(scripted_prompter(confirm=[True]))
    assert builder.resolve_breaking(False) is False
    assert builder.resolve_breaking() is True
    assert make_builder(scripted_prompter(), interactive=False).resolve_breaking() is False


def test_resolve_summary_prompts_with_bound(scripted_prompter):
    seen = {}

    class Prompter(scripted_prompter):
        def input(self, prompt, value="", char_limit=None):
            seen["limit"] = char_limit
            seen["prompt"] = prompt
            return super().input(prompt)

    builder = make_builder(Prompter(input=["", "handle timeout"]))
    summary = builder.resolve_summary(CommitType.FIX, "api", True)
    assert summary == "handle timeout"
    assert seen["limit"] == 50 - len("fix(api)!: ")
    assert "fix(api)!: " in seen["prompt"]


def test_resolve_summary_too_long_is_only_a_warning(scripted_prompter, caplog):
    logger = logging.getLogger("conventional_commit.builder")
    logger.propagate = True
    try:
        with caplog.at_level(logging.WARNING, logger="conventional_commit.builder"):
            summary = make_builder(scripted_prompter()).resolve_summary(
                CommitType.FEATURE, explicit="x" * 60
            )
    finally:
        logger.propagate = False
    assert summary == "x" * 60
    assert any("recommended maximum" in r.getMessage() for r in caplog.records)


def test_resolve_description(scripted_prompter):
    builder = make_builder(scripted_prompter(write=["  \n"]))
    assert builder.resolve_description("Line one\nLine two\n") == "Line one\nLine two"
    assert builder.resolve_description("") is None
    assert builder.resolve_description() is None
    assert make_builder(scripted_prompter(), interactive=False).resolve_description() is None


def test_build_footers_fixed_order(scripted_prompter):
    builder = make_builder(scripted_prompter(input=["the API changed"]))
    footers = builder.build_footers(
        breaking=True,
        explicit_footer="Reviewed-by: Sam",
        ticket="#42",
        co_authors=["A <a@example.com>", "B <b@example.com>"],
    )
    assert footers == [
        "BREAKING CHANGE: the API changed",
        "Reviewed-by: Sam",
        "Refs: #42",
        "Co-authored-by: A <a@example.com>",
        "Co-authored-by: B <b@example.com>",
    ]


def test_build_footers_empty_breaking_text_is_omitted(scripted_prompter):
    builder = make_builder(scripted_prompter(input=[""]))
    assert builder.build_footers(breaking=True, ticket="7") == ["Refs: #7"]


def test_build_footers_breaking_footer_disabled(scripted_prompter):
    builder = make_builder(scripted_prompter(), breaking_change_footer_enabled=False)
    assert builder.build_footers(breaking=True, ticket="7") == ["Refs: #7"]


def test_build_footers_offers_free_form_footer_once(scripted_prompter):
    prompter = scripted_prompter(confirm=[True], input=["Reviewed-by", "Sam"])
    assert make_builder(prompter).build_footers() == ["Reviewed-by: Sam"]

    prompter = scripted_prompter(confirm=[False])
    assert make_builder(prompter).build_footers() == []


def test_end_to_end_fix_breaking_with_ticket(scripted_prompter):
    builder = make_builder(scripted_prompter(input=[""]), interactive=False)
    fields = builder.build(type="fix", scope="api", breaking=True, summary="handle timeout", ticket="42")
    message = builder.format(fields)

    assert message.splitlines()[0] == "fix(api)!: handle timeout"
    assert "Refs: #42" in message.splitlines()
    assert builder.validate(message) == []


def test_build_with_template_defaults(scripted_prompter):
    templates = MappingProxyType({
        "readme": MappingProxyType({"type": "docs", "scope": "Readme", "summary": "update readme"}),
    })
    builder = make_builder(scripted_prompter(), interactive=False, templates=templates)
    fields = builder.build(template="readme")
    assert builder.format(fields) == "docs(readme): update readme"

    fields = builder.build(template="readme", summary="add badges")
    assert builder.format(fields) == "docs(readme): add badges"

    with pytest.raises(InvalidInputError):
        builder.build(template="missing")


def test_build_interactive_pipeline(scripted_prompter):
    prompter = scripted_prompter(
        choose=[lambda header, choices: choices[0], CUSTOM_SCOPE],
        input=["Parser", "support footers", "multi-line values changed"],
        confirm=[True],
        write=["Footers may now span lines."],
    )
    builder = make_builder(prompter, known_scopes=frozenset({"cli"}), emoji_enabled=True)
    fields = builder.build()
    message = builder.format(fields)

    assert message == (
        f"{CommitType.FEATURE.emoji} feat(parser)!: support footers\n"
        "\n"
        "Footers may now span lines.\n"
        "\n"
        "BREAKING CHANGE: multi-line values changed"
    )
    assert builder.validate(message) == []


def test_flag_mode_breaking_still_asks_for_footer_text(scripted_prompter):
    prompter = scripted_prompter(input=["timeouts are now in seconds"])
    builder = make_builder(prompter, interactive=False)
    fields = builder.build(type="fix", scope="api", breaking=True, summary="handle timeout")
    assert fields.footers == ["BREAKING CHANGE: timeouts are now in seconds"]
    assert [call[0] for call in prompter.calls] == ["input"]


def test_summary_bound_counts_emoji_glyph(scripted_prompter, caplog):
    seen = {}

    class Prompter(scripted_prompter):
        def input(self, prompt, value="", char_limit=None):
            seen["limit"] = char_limit
            return super().input(prompt)

    emoji_prefix = f"{CommitType.FEATURE.emoji} feat: "
    builder = make_builder(Prompter(input=["y" * (50 - len(emoji_prefix) + 1)]), emoji_enabled=True)

    logger = logging.getLogger("conventional_commit.builder")
    logger.propagate = True
    try:
        with caplog.at_level(logging.WARNING, logger="conventional_commit.builder"):
            summary = builder.resolve_summary(CommitType.FEATURE)
    finally:
        logger.propagate = False

    assert seen["limit"] == 50 - len(emoji_prefix)
    message = builder.format(CommitFields(type=CommitType.FEATURE, summary=summary))
    assert [v.kind for v in builder.validate(message)] == ["HeaderExceedsRecommended"]
    assert any("recommended maximum" in r.getMessage() for r in caplog.records)
