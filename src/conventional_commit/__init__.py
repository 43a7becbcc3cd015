"""
Top-level package for conventional_commit.

This package exposes the main CLI entry point via the
``conventional_commit.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "0.3.0"
