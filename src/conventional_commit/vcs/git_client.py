"""
Git client implementation for conventional_commit.

This module wraps the Git operations the commit builder needs: locating
the repository root, reading status, history and diffs, staging, and
creating the commit. Every command is run as an argument list, never
through a shell, and errors are raised as :class:`GitError` so that unit
tests can mock :meth:`GitClient._run` easily.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs reach the root once the CLI configures logging.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


@dataclass
class FileChange:
    """Representation of a single unstaged change in the repository."""

    path: str
    status: str  # e.g. 'M' modified, 'D' deleted, 'R' renamed


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Return the top-level directory of the repository containing ``start``.

        Returns ``None`` when ``start`` is not inside a Git work tree or
        the ``git`` executable cannot be run.
        """
        try:
            result = subprocess.run(
                ["git", "rev-parse", "--show-toplevel"],
                cwd=start,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            logger.debug("Could not run git in %s: %s", start, exc)
            return None
        if result.returncode != 0 or not result.stdout.strip():
            return None
        return Path(result.stdout.strip())

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True, input: Optional[str] = None) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                input=input,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            logger.error("Failed to execute git: %s", exc)
            raise GitError(f"Failed to execute git: {exc}") from exc

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip() or f"git {args[0]} failed")
        return result

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------
    def get_unstaged_changes(self) -> List[FileChange]:
        """Return tracked files with changes not yet staged.

        Uses ``git status --porcelain -z --untracked-files=no`` so paths
        come back verbatim instead of C-quoted. Entries whose work-tree
        column is blank are already fully staged and skipped. A rename
        record is followed by a separate record holding the original path.
        """
        result = self._run(["status", "--porcelain", "-z", "--untracked-files=no"])
        records = result.stdout.split("\0")
        changes = []
        idx = 0
        while idx < len(records):
            record = records[idx]
            idx += 1
            if len(record) < 4:
                continue
            index_status, worktree_status = record[0], record[1]
            if index_status in "RC" or worktree_status in "RC":
                # skip the original path of a rename or copy
                idx += 1
            if worktree_status == " ":
                continue
            changes.append(FileChange(path=record[3:], status=worktree_status))
        return changes

    def get_recent_summaries(self, count: int = 50) -> List[str]:
        """Return the summary lines of the ``count`` most recent commits.

        An empty repository without commits yields an empty list.
        """
        result = self._run(["log", "-n", str(count), "--pretty=format:%s"], check=False)
        if result.returncode != 0:
            logger.debug("git log failed (no commits yet?): %s", result.stderr.strip())
            return []
        return [line for line in result.stdout.splitlines() if line.strip()]

    def get_staged_files(self) -> List[str]:
        result = self._run(["diff", "--cached", "--name-only", "-z"])
        return [path for path in result.stdout.split("\0") if path]

    def get_diff(self, files: Optional[List[str]] = None, cached: bool = False) -> str:
        """Return the unified diff of the work tree or, with ``cached``, of the index.

        Parameters
        ----------
        files : Optional[List[str]]
            Restrict the diff to these paths.
        cached : bool
            Diff the index against HEAD instead of the work tree against the index.
        """
        args = ["diff"]
        if cached:
            args.append("--cached")
        if files:
            args += ["--"] + list(files)
        return self._run(args).stdout

    # ------------------------------------------------------------------
    # Staging and committing
    # ------------------------------------------------------------------
    def stage_all(self) -> None:
        """Stage every change to tracked and untracked files."""
        self._run(["add", "--all"])

    def stage_files(self, files: List[str]) -> None:
        """Stage the given files; deletions are staged as well."""
        if not files:
            return
        self._run(["add", "--all", "--"] + list(files))

    def commit(self, message: str, amend: bool = False, gpg_sign: bool = False) -> None:
        """Create a commit with the given message.

        The message is passed on standard input so multi-line messages
        need no quoting. If the commit fails, a GitError is raised.
        """
        args = ["commit", "--file=-"]
        if amend:
            args.append("--amend")
        if gpg_sign:
            args.append("--gpg-sign")
        self._run(args, input=message)
