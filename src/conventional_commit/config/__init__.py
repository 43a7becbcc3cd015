"""
Configuration loading for conventional_commit.

Provides the immutable :class:`Configuration` and the layered loader.
See :mod:`conventional_commit.config.loader` for implementation details.
"""

from .loader import ConfigError, Configuration, load_config  # noqa: F401
