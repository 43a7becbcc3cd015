"""
Commit message model, formatting and linting.

The modules in this package are pure: they never prompt and never run
``git``, so they can be unit tested without any collaborator. See
:mod:`conventional_commit.message.formatter` and
:mod:`conventional_commit.message.validator` for details.
"""

from .commit_type import CommitType  # noqa: F401
from .fields import CommitFields  # noqa: F401
from .formatter import format_message, format_scope  # noqa: F401
from .validator import Violation, validate  # noqa: F401
