"""
Interactive prompt collaborators.

See :mod:`conventional_commit.prompts.prompter` for the click and gum
implementations.
"""

from .prompter import (  # noqa: F401
    ClickPrompter,
    GumPrompter,
    MissingDependencyError,
    PromptCancelled,
    Prompter,
    create_prompter,
    require_executable,
)
