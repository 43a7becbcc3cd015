"""
Configuration loader for conventional_commit.

Settings are merged from four layers in increasing precedence:

1. built-in defaults,
2. the user-global file ``~/.config/ccommit/config.json``,
3. the project file ``.ccommit.json`` in the repository root,
4. an explicit file passed with ``--config``.

A later layer overwrites the keys it defines. Missing files are skipped
silently. A file that cannot be read, is not valid JSON, or holds values
of the wrong type is skipped as a whole with a warning; loading never
fails because of a configuration file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional

from conventional_commit.message.commit_type import CommitType
from conventional_commit.message.formatter import SCOPE_CASES


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings when the CLI has
# not configured logging yet. The CLI re-enables propagation once the
# root handlers exist.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


CONFIG_FILE_NAME = "config.json"
PROJECT_CONFIG_NAME = ".ccommit.json"
PROMPTERS = ("click", "gum")
TEMPLATE_KEYS = {"type", "scope", "breaking", "summary", "description"}


class ConfigError(Exception):
    """Raised when a single configuration layer is unreadable or invalid."""

    pass


@dataclass(frozen=True)
class Configuration:
    """Immutable settings for one invocation."""

    emoji_enabled: bool = False
    auto_stage: bool = False
    confirm_by_default: bool = False
    max_summary_length: int = 50
    max_line_length: int = 72
    known_scopes: FrozenSet[str] = frozenset()
    templates: Mapping[str, Mapping[str, Any]] = field(default_factory=lambda: MappingProxyType({}))
    breaking_change_footer_enabled: bool = True
    scope_case: str = "lowercase"
    prompter: str = "click"

    def with_overrides(self, **changes: Any) -> "Configuration":
        """Return a copy with ``changes`` applied (used for CLI flags)."""
        return replace(self, **changes)


_BOOL_KEYS = {"emoji_enabled", "auto_stage", "confirm_by_default", "breaking_change_footer_enabled"}
_INT_KEYS = {"max_summary_length", "max_line_length"}


def _get_config_directory() -> Path:
    """Return the directory holding the user-global configuration file."""
    return Path.home() / ".config" / "ccommit"


def _validate_template(name: str, template: Any) -> Dict[str, Any]:
    if not isinstance(template, dict):
        raise ConfigError(f"template '{name}' must be an object")
    unknown = set(template) - TEMPLATE_KEYS
    if unknown:
        raise ConfigError(f"template '{name}' has unknown keys: {', '.join(sorted(unknown))}")
    if "type" in template:
        try:
            CommitType.from_tag(template["type"])
        except ValueError as exc:
            raise ConfigError(f"template '{name}': {exc}") from exc
    if "breaking" in template and not isinstance(template["breaking"], bool):
        raise ConfigError(f"template '{name}': 'breaking' must be a boolean")
    for key in ("scope", "summary", "description"):
        if key in template and not isinstance(template[key], str):
            raise ConfigError(f"template '{name}': '{key}' must be a string")
    return dict(template)


def _validate_layer(data: Any) -> Dict[str, Any]:
    """Check the types of a parsed layer and convert it to field values.

    Unknown keys are ignored with a debug message.
    """
    if not isinstance(data, dict):
        raise ConfigError("top-level value must be an object")

    known = {f.name for f in fields(Configuration)}
    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.debug("Ignoring unknown configuration key '%s'", key)
            continue
        if key in _BOOL_KEYS:
            if not isinstance(value, bool):
                raise ConfigError(f"'{key}' must be a boolean")
        elif key in _INT_KEYS:
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"'{key}' must be a positive integer")
        elif key == "known_scopes":
            if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
                raise ConfigError("'known_scopes' must be a list of strings")
            value = frozenset(s.strip() for s in value if s.strip())
        elif key == "templates":
            if not isinstance(value, dict):
                raise ConfigError("'templates' must be an object")
            value = MappingProxyType({
                name: MappingProxyType(_validate_template(name, tpl)) for name, tpl in value.items()
            })
        elif key == "scope_case":
            if value not in SCOPE_CASES:
                raise ConfigError(f"'scope_case' must be one of: {', '.join(SCOPE_CASES)}")
        elif key == "prompter":
            if value not in PROMPTERS:
                raise ConfigError(f"'prompter' must be one of: {', '.join(PROMPTERS)}")
        values[key] = value
    return values


def read_layer(path: Path) -> Optional[Dict[str, Any]]:
    """Read one configuration file.

    Returns ``None`` when the file does not exist.

    Raises
    ------
    ConfigError
        If the file is unreadable, malformed, or holds invalid values.
    """
    if not path.is_file():
        logger.debug("Configuration file '%s' not found; skipping", path)
        return None
    try:
        content = path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Failed to read or parse {path}: {exc}") from exc
    try:
        return _validate_layer(data)
    except ConfigError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc


def config_paths(repo_root: Optional[Path] = None, explicit: Optional[Path] = None) -> list:
    """Return the configuration files in increasing precedence."""
    paths = [_get_config_directory() / CONFIG_FILE_NAME]
    if repo_root is not None:
        paths.append(repo_root / PROJECT_CONFIG_NAME)
    if explicit is not None:
        paths.append(explicit)
    return paths


def load_config(repo_root: Optional[Path] = None, explicit: Optional[Path] = None) -> Configuration:
    """Merge every configuration layer and return the result.

    Parameters
    ----------
    repo_root : Optional[Path]
        Repository root used to locate the project file.
    explicit : Optional[Path]
        File passed with ``--config``; it wins over every other layer.

    Returns
    -------
    Configuration
        The merged, immutable configuration.
    """
    merged: Dict[str, Any] = {}
    for path in config_paths(repo_root, explicit):
        try:
            layer = read_layer(path)
        except ConfigError as exc:
            logger.warning("%s; skipping this configuration layer", exc)
            continue
        if layer is None:
            continue
        logger.debug("Loaded configuration layer: %s", path)
        merged.update(layer)

    config = Configuration(**merged)
    logger.debug("Effective configuration: %s", config)
    return config
