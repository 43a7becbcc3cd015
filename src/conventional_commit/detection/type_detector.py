"""
Heuristics for inferring a commit type from the staged changes.

The detector looks at the staged file paths first and only falls back
to the diff text when no path rule matches. It is intentionally simple
and deterministic so that it can be unit tested without a repository.
Rules are evaluated in a fixed order and the first match wins.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Iterable, List

from conventional_commit.message.commit_type import CommitType

DOC_EXTENSIONS = {".md", ".rst", ".txt", ".adoc"}
STYLE_EXTENSIONS = {".css", ".scss", ".sass", ".less", ".styl"}
BUILD_MANIFESTS = {
    "Dockerfile",
    "Makefile",
    "CMakeLists.txt",
    "build.sh",
    "build.gradle",
    "build.gradle.kts",
    "Cargo.toml",
    "Cargo.lock",
    "docker-compose.yml",
    "docker-compose.yaml",
    "docker-bake.hcl",
    "go.mod",
    "package.json",
    "package-lock.json",
    "pom.xml",
    "pyproject.toml",
    "requirements.txt",
    "setup.cfg",
    "setup.py",
}
CI_FILES = {".gitlab-ci.yml", ".travis.yml", "Jenkinsfile", "azure-pipelines.yml"}
CI_DIRECTORIES = (".github/workflows/", ".circleci/")

TEST_NAME_RE = re.compile(r"(^test_.+|.+_test\.[^.]+$|.+\.(test|spec)\.[^.]+$)")
BUG_KEYWORD_RE = re.compile(r"\b(bug|error|issue|problem|crash|exception)", re.IGNORECASE)


def _is_doc(path: PurePosixPath) -> bool:
    # requirements.txt and CMakeLists.txt are manifests, not prose
    return path.suffix.lower() in DOC_EXTENSIONS and path.name not in BUILD_MANIFESTS


def _is_test(path: PurePosixPath) -> bool:
    if any(part in {"test", "tests", "__tests__"} for part in path.parts[:-1]):
        return True
    return bool(TEST_NAME_RE.match(path.name))


def _is_ci(path: PurePosixPath) -> bool:
    posix = path.as_posix()
    if any(posix.startswith(d) or f"/{d}" in posix for d in CI_DIRECTORIES):
        return True
    return path.name in CI_FILES


def _is_style(path: PurePosixPath) -> bool:
    return path.suffix.lower() in STYLE_EXTENSIONS


def _is_build(path: PurePosixPath) -> bool:
    return path.name in BUILD_MANIFESTS or path.name.startswith("Dockerfile.")


def auto_detect_type(staged_files: Iterable[str], staged_diff: str = "") -> CommitType:
    """Infer a :class:`CommitType` from staged paths and diff text.

    Parameters
    ----------
    staged_files : Iterable[str]
        Paths relative to the repository root.
    staged_diff : str
        Unified diff of the staged changes.

    Returns
    -------
    CommitType
        ``docs`` when every file is documentation, ``test`` when any file
        is a test, ``ci`` when any file is CI configuration, ``style`` when
        every file is a stylesheet, ``build`` when any file is a build
        manifest, ``fix`` when the diff mentions a bug keyword, and
        ``feat`` otherwise.
    """
    paths: List[PurePosixPath] = [PurePosixPath(f.replace("\\", "/")) for f in staged_files if f]

    if paths:
        if all(_is_doc(p) for p in paths):
            return CommitType.DOCS
        if any(_is_test(p) for p in paths):
            return CommitType.TEST
        if any(_is_ci(p) for p in paths):
            return CommitType.CI_CONFIG
        if all(_is_style(p) for p in paths):
            return CommitType.STYLE
        if any(_is_build(p) for p in paths):
            return CommitType.BUILD_CONFIG
    if staged_diff and BUG_KEYWORD_RE.search(staged_diff):
        return CommitType.FIX
    return CommitType.FEATURE
