"""
Interactive prompt collaborators.

The builder only needs a narrow capability: pick one or several options
from a list, read a line or a block of text, and ask a yes/no question.
:class:`ClickPrompter` implements it on top of ``click.prompt`` and
works in any terminal; :class:`GumPrompter` drives the external ``gum``
tool for a richer TUI. A cancelled prompt always surfaces as
:class:`PromptCancelled`.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import List, Optional, Sequence

import click


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# gum exits with 130 when the user presses Ctrl+C or Esc
GUM_CANCELLED = 130


class PromptCancelled(Exception):
    """Raised when the user aborts an interactive prompt."""

    pass


class MissingDependencyError(Exception):
    """Raised when a required external executable is not installed."""

    pass


def require_executable(name: str) -> str:
    """Return the full path of ``name`` or raise :class:`MissingDependencyError`."""
    path = shutil.which(name)
    if path is None:
        raise MissingDependencyError(f"Required executable '{name}' was not found on PATH")
    return path


class Prompter:
    """Interface of the interactive collaborator used by the builder."""

    def choose(self, header: str, choices: Sequence[str]) -> str:
        raise NotImplementedError

    def choose_many(self, header: str, choices: Sequence[str]) -> List[str]:
        raise NotImplementedError

    def input(self, prompt: str, value: str = "", char_limit: Optional[int] = None) -> str:
        raise NotImplementedError

    def write(self, prompt: str) -> str:
        raise NotImplementedError

    def confirm(self, question: str, default: bool = False) -> bool:
        raise NotImplementedError


class ClickPrompter(Prompter):
    """Prompter reading from the terminal through click."""

    def _ask(self, text: str, **kwargs):
        try:
            return click.prompt(text, **kwargs)
        except click.Abort as exc:
            raise PromptCancelled() from exc

    def _show_choices(self, header: str, choices: Sequence[str]) -> None:
        click.echo(f"\n{header}")
        for idx, choice in enumerate(choices, start=1):
            click.echo(f"  {idx:>2}) {choice}")

    def choose(self, header: str, choices: Sequence[str]) -> str:
        self._show_choices(header, choices)
        index = self._ask(
            "   Choose",
            type=click.IntRange(1, len(choices)),
            default=1,
            show_default=True,
        )
        return choices[index - 1]

    def choose_many(self, header: str, choices: Sequence[str]) -> List[str]:
        """Let the user pick several options as comma-separated numbers."""
        self._show_choices(header, choices)
        while True:
            raw = self._ask("   Choose (comma separated, empty for none)", default="", show_default=False)
            picked: List[str] = []
            try:
                for token in raw.replace(",", " ").split():
                    index = int(token)
                    if not 1 <= index <= len(choices):
                        raise ValueError(token)
                    if choices[index - 1] not in picked:
                        picked.append(choices[index - 1])
            except ValueError:
                click.echo(f"   Please enter numbers between 1 and {len(choices)}.")
                continue
            return picked

    def input(self, prompt: str, value: str = "", char_limit: Optional[int] = None) -> str:
        """Read one line; answers longer than ``char_limit`` are asked again."""
        if char_limit is not None:
            prompt = f"{prompt} (max {char_limit} chars)"
        while True:
            answer = self._ask(f"   {prompt}", default=value, show_default=bool(value)).strip()
            if char_limit is None or len(answer) <= char_limit:
                return answer
            click.echo(f"   {len(answer)} characters entered; please keep it to {char_limit}.")

    def write(self, prompt: str) -> str:
        """Read several lines until a line containing only a period."""
        click.echo(f"\n   {prompt}")
        click.echo("   End with a line containing only a period (.)")
        lines: List[str] = []
        while True:
            line = self._ask("  ", default="", show_default=False)
            if line.strip() == ".":
                break
            lines.append(line)
        return "\n".join(lines).strip()

    def confirm(self, question: str, default: bool = False) -> bool:
        try:
            return click.confirm(f"   {question}", default=default)
        except click.Abort as exc:
            raise PromptCancelled() from exc


class GumPrompter(Prompter):
    """Prompter driving the ``gum`` executable.

    The TUI is drawn on the terminal through stderr while the answer is
    read from stdout.
    """

    def __init__(self, executable: str = "gum") -> None:
        self.executable = executable

    def _gum(self, args: List[str]) -> subprocess.CompletedProcess:
        cmd = [self.executable] + args
        logger.debug("Executing gum command: %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, stdout=subprocess.PIPE, text=True, encoding="utf-8", errors="replace")
        except FileNotFoundError as exc:
            raise MissingDependencyError(f"Required executable '{self.executable}' was not found") from exc
        except KeyboardInterrupt as exc:
            raise PromptCancelled() from exc
        if result.returncode == GUM_CANCELLED:
            raise PromptCancelled()
        return result

    def choose(self, header: str, choices: Sequence[str]) -> str:
        result = self._gum(["choose", "--header", header] + list(choices))
        if result.returncode != 0 or not result.stdout.strip():
            raise PromptCancelled()
        return result.stdout.rstrip("\n")

    def choose_many(self, header: str, choices: Sequence[str]) -> List[str]:
        result = self._gum(["choose", "--no-limit", "--header", header] + list(choices))
        return [line for line in result.stdout.splitlines() if line.strip()]

    def input(self, prompt: str, value: str = "", char_limit: Optional[int] = None) -> str:
        args = ["input", "--placeholder", prompt]
        if value:
            args += ["--value", value]
        if char_limit is not None:
            args += ["--char-limit", str(max(char_limit, 1))]
        return self._gum(args).stdout.strip()

    def write(self, prompt: str) -> str:
        return self._gum(["write", "--placeholder", prompt]).stdout.strip()

    def confirm(self, question: str, default: bool = False) -> bool:
        args = ["confirm", question]
        if not default:
            args.append("--default=false")
        return self._gum(args).returncode == 0


def create_prompter(kind: str) -> Prompter:
    """Return the prompter named in the configuration (``click`` or ``gum``)."""
    if kind == "gum":
        return GumPrompter(require_executable("gum"))
    return ClickPrompter()
