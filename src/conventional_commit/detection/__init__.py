"""
Commit type detection.

This package infers a Conventional Commit type from the staged changes.
See :mod:`conventional_commit.detection.type_detector` for details.
"""

from .type_detector import auto_detect_type  # noqa: F401
