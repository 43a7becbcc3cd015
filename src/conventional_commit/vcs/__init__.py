"""
Version control integration.

Contains the Git client used to locate the repository, read history and
diffs, stage changes, and create the commit.
"""

from .git_client import FileChange, GitClient, GitError  # noqa: F401
