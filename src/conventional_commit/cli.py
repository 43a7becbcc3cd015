"""
Command line interface for the conventional_commit tool.

This module defines the ``main`` function used as the entry point of
the ``ccommit`` command. It checks the required executables and the
repository, loads the layered configuration, plans which changes to
stage, builds and lints the commit message, asks for confirmation, and
finally stages and commits through Git. Exit codes follow the table in
the project documentation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import click

from conventional_commit import __version__
from conventional_commit.builder import CommitMessageBuilder, InvalidInputError
from conventional_commit.config.loader import Configuration, load_config
from conventional_commit.detection.type_detector import auto_detect_type
from conventional_commit.message.commit_type import CommitType
from conventional_commit.message.validator import Violation
from conventional_commit.prompts.prompter import (
    MissingDependencyError,
    PromptCancelled,
    Prompter,
    create_prompter,
    require_executable,
)
from conventional_commit.vcs.git_client import GitClient, GitError

# Module-level logger with a null handler; propagation is switched on in
# configure_logging once the root handlers exist.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INVALID_USAGE = 2

STAGE_ALL = "Add all (git add --all)"
STAGE_SELECT = "Select files"
STAGE_SKIP = "Skip staging"


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}", err=False)


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}", err=False)


def print_warning(message: str, indent: int = 0):
    """Print a warning message."""
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}", err=False)


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def print_message_box(message: str, width: int = 72):
    """Print the commit message inside a box, one line per row."""
    inner = max([width] + [len(line) for line in message.splitlines()])
    click.echo(f"\n┌{'─' * (inner + 2)}┐")
    for line in message.splitlines():
        click.echo(f"│ {line.ljust(inner)} │")
    click.echo(f"└{'─' * (inner + 2)}┘")


def print_violations(violations: Sequence[Violation]):
    if not violations:
        print_success("Message follows the Conventional Commits format")
        return
    for violation in violations:
        print_warning(f"{violation.kind}: {violation.message}")


def configure_logging(verbose: bool) -> None:
    """Configure the root logger and let the package loggers reach it.

    ``force=True`` reconfigures handlers on repeated invocations, which
    matters for tests running the command several times.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    for name in list(logging.root.manager.loggerDict):
        if name == "conventional_commit" or name.startswith("conventional_commit."):
            logging.getLogger(name).propagate = True


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

@dataclass
class StagingPlan:
    """What to stage right before committing."""

    stage_all: bool = False
    files: List[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.stage_all and not self.files

    def planned_files(self, client: GitClient) -> List[str]:
        if self.stage_all:
            return [change.path for change in client.get_unstaged_changes()]
        return list(self.files)

    def execute(self, client: GitClient) -> None:
        if self.stage_all:
            client.stage_all()
        elif self.files:
            client.stage_files(self.files)


def plan_staging(client: GitClient, prompter: Prompter, config: Configuration, no_stage: bool) -> StagingPlan:
    """Decide which unstaged changes will be staged.

    Nothing is staged here; the plan runs after the user confirmed.
    """
    if no_stage:
        return StagingPlan()
    changes = client.get_unstaged_changes()
    if not changes:
        return StagingPlan()

    print_info(f"{len(changes)} file{'s' if len(changes) != 1 else ''} with unstaged changes")
    for change in changes[:5]:
        print_info(f"{change.status} {change.path}", indent=1)
    if len(changes) > 5:
        print_info(f"... and {len(changes) - 5} more", indent=1)

    if config.auto_stage:
        print_info("auto_stage is enabled - all changes will be staged")
        return StagingPlan(stage_all=True)

    choice = prompter.choose("Changes to stage:", [STAGE_ALL, STAGE_SELECT, STAGE_SKIP])
    if choice == STAGE_ALL:
        return StagingPlan(stage_all=True)
    if choice == STAGE_SELECT:
        selected = prompter.choose_many("Select files to stage:", [c.path for c in changes])
        return StagingPlan(files=selected)
    return StagingPlan()


def detect_type(client: GitClient, plan: StagingPlan) -> CommitType:
    """Run the auto detection on staged plus planned changes."""
    files = client.get_staged_files()
    diff = client.get_diff(cached=True)
    planned = [f for f in plan.planned_files(client) if f not in files]
    if planned:
        files += planned
        diff += client.get_diff(planned)
    detected = auto_detect_type(files, diff)
    logger.debug("Auto-detected commit type '%s' from %d file(s)", detected.tag, len(files))
    return detected


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--type", "commit_type", metavar="TYPE", help=f"Commit type ({', '.join(CommitType.tags())}).")
@click.option("--scope", help="Commit scope.")
@click.option("-m", "--message", "--summary", "summary", help="Summary line of the commit.")
@click.option("--description", help="Longer description (commit body).")
@click.option("--confirm", is_flag=True, help="Commit without asking for confirmation.")
@click.option("--prompt", "force_prompt", is_flag=True, help="Prompt for every field not given as a flag.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.option("--footer", help="Footer line, e.g. 'Reviewed-by: Jane'.")
@click.option("--breaking", type=click.Choice(["yes", "no"], case_sensitive=False), default=None,
              help="Mark the commit as a breaking change (default: no); asks for the BREAKING CHANGE footer text.")
@click.option("--dry-run", is_flag=True, help="Print the message without staging or committing.")
@click.option("--no-stage", is_flag=True, help="Do not offer to stage changes.")
@click.option("--auto", "auto", is_flag=True, help="Detect the commit type from the staged changes.")
@click.option("--template", help="Use a template from the configuration.")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Extra configuration file with the highest precedence.")
@click.option("--emoji", is_flag=True, help="Prefix the header with the type's emoji.")
@click.option("--ticket", help="Ticket number referenced in a 'Refs: #<ticket>' footer.")
@click.option("--co-author", "co_authors", multiple=True, help="Co-author ('Name <email>'); repeatable.")
@click.option("--amend", is_flag=True, help="Amend the previous commit.")
@click.option("--gpg-sign", is_flag=True, help="GPG-sign the commit.")
@click.version_option(version=__version__, prog_name="ccommit")
def main(
    commit_type: Optional[str],
    scope: Optional[str],
    summary: Optional[str],
    description: Optional[str],
    confirm: bool,
    force_prompt: bool,
    verbose: bool,
    footer: Optional[str],
    breaking: Optional[str],
    dry_run: bool,
    no_stage: bool,
    auto: bool,
    template: Optional[str],
    config_path: Optional[Path],
    emoji: bool,
    ticket: Optional[str],
    co_authors: Sequence[str],
    amend: bool,
    gpg_sign: bool,
) -> None:
    """Write a Conventional Commits message and commit it.

    Fields not given as options are asked for interactively.
    """
    configure_logging(verbose)
    ctx = click.get_current_context(silent=True)

    try:
        # Dependency and repository checks run before any side effect
        try:
            require_executable("git")
        except MissingDependencyError as exc:
            print_error(str(exc))
            raise click.exceptions.Exit(EXIT_FAILURE)

        repo_root = GitClient.find_repo_root(Path.cwd())
        if repo_root is None:
            print_error("Current directory is not inside a Git repository.")
            raise click.exceptions.Exit(EXIT_FAILURE)
        logger.debug("Repository root: %s", repo_root)

        config = load_config(repo_root, config_path)
        if emoji:
            config = config.with_overrides(emoji_enabled=True)

        try:
            prompter = create_prompter(config.prompter)
        except MissingDependencyError as exc:
            print_error(str(exc))
            raise click.exceptions.Exit(EXIT_FAILURE)

        client = GitClient(repo_root)
        interactive = force_prompt or not (commit_type or summary or template)
        builder = CommitMessageBuilder(config, prompter, git=client, interactive=interactive)

        try:
            plan = plan_staging(client, prompter, config, no_stage)
            detected = None
            if auto and not commit_type:
                detected = detect_type(client, plan)
                print_info(f"Detected commit type: {click.style(detected.tag, fg='cyan', bold=True)}")

            fields = builder.build(
                type=commit_type,
                scope=scope,
                breaking=None if breaking is None else breaking.lower() == "yes",
                summary=summary,
                description=description,
                footer=footer,
                ticket=ticket,
                co_authors=co_authors,
                template=template,
                detected_type=detected,
            )
        except InvalidInputError as exc:
            print_error(str(exc))
            raise click.exceptions.Exit(EXIT_INVALID_USAGE)
        except GitError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_FAILURE)

        message = builder.format(fields)
        print_message_box(message, width=config.max_line_length)
        print_violations(builder.validate(message))

        if dry_run:
            print_info("Dry run - nothing was staged or committed")
            raise click.exceptions.Exit(EXIT_SUCCESS)

        if not (confirm or config.confirm_by_default):
            if not prompter.confirm("Commit changes?", default=True):
                print_warning("Commit aborted; nothing was staged or committed")
                raise click.exceptions.Exit(EXIT_SUCCESS)

        # Staging is not rolled back when the commit itself fails
        try:
            if not plan.empty:
                plan.execute(client)
                print_success("Staged changes")
            client.commit(message, amend=amend, gpg_sign=gpg_sign)
        except GitError as exc:
            print_error(f"Commit failed: {exc}")
            raise click.exceptions.Exit(EXIT_FAILURE)

        print_success("Amended commit" if amend else "Committed")
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except (PromptCancelled, KeyboardInterrupt):
        click.echo("")
        print_warning("Cancelled")
        ctx.exit(EXIT_SUCCESS)
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_FAILURE)
