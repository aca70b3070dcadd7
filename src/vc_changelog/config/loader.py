"""
Configuration loader for vc_changelog.

Settings may be provided in an optional JSON file named
``.changelog_config.json`` located in the project root. The file holds
a single object whose keys mirror the command line options:

``regexForSemVerTag``
    Pattern a tag name must fully match to mark a release.
``jsonChangeLogFormatFilePath``
    Path of a template file overriding the built-in template.
``gitFilePath``
    Repository root override.
``mainBranch``
    Branch or ref whose history is walked.
``outputFile``
    Destination of the rendered Markdown.

If the file is malformed, or a value has the wrong type, a
:class:`ConfigError` is raised. A missing default file simply yields the
built-in defaults.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Pattern

from vc_changelog.grouping.release_grouper import DEFAULT_TAG_PATTERN

logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings or logging errors in
# environments where the root logger may be closed. Propagation is turned
# back on by the CLI once it has configured logging.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


CONFIG_FILE_NAME = ".changelog_config.json"
GIT_ROOT_ENV_VAR = "CHANGELOG_GIT_ROOT"
DEFAULT_OUTPUT_FILE = Path("build") / "CHANGELOG.md"

# JSON key -> ChangelogConfig attribute
_KEY_MAP = {
    "regexForSemVerTag": "tag_pattern",
    "jsonChangeLogFormatFilePath": "template_path",
    "gitFilePath": "git_path",
    "mainBranch": "main_branch",
    "outputFile": "output_file",
}
_PATH_FIELDS = {"template_path", "git_path", "output_file"}


class ConfigError(Exception):
    """Raised when the configuration or the template file is missing or invalid."""

    pass


@dataclass(frozen=True)
class ChangelogConfig:
    """Settings for a single changelog run.

    Attributes
    ----------
    tag_pattern : str
        Regular expression a tag's short name must fully match to be
        treated as a release boundary.
    template_path : Optional[Path]
        Template JSON file; ``None`` selects the built-in template.
    git_path : Optional[Path]
        Repository root override.
    main_branch : Optional[str]
        Ref whose history is walked; ``None`` walks ``HEAD``.
    output_file : Path
        Destination of the rendered Markdown.
    """

    tag_pattern: str = DEFAULT_TAG_PATTERN
    template_path: Optional[Path] = None
    git_path: Optional[Path] = None
    main_branch: Optional[str] = None
    output_file: Path = DEFAULT_OUTPUT_FILE

    def compiled_tag_pattern(self) -> Pattern[str]:
        """Compile :attr:`tag_pattern`, raising :class:`ConfigError` if invalid."""
        try:
            return re.compile(self.tag_pattern)
        except re.error as exc:
            raise ConfigError(f"Invalid tag pattern {self.tag_pattern!r}: {exc}") from exc

    def with_overrides(self, **overrides: Any) -> "ChangelogConfig":
        """Return a copy with every non-``None`` override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)

    def resolve_paths(self, project_root: Path) -> "ChangelogConfig":
        """Return a copy with relative paths anchored at ``project_root``."""
        values: Dict[str, Any] = {}
        for name in _PATH_FIELDS:
            path = getattr(self, name)
            if path is not None and not Path(path).is_absolute():
                values[name] = project_root / path
        return replace(self, **values)


def _from_mapping(data: Mapping[str, Any], source: Path) -> ChangelogConfig:
    values: Dict[str, Any] = {}
    for key, value in data.items():
        attribute = _KEY_MAP.get(key)
        if attribute is None:
            logger.debug("Ignoring unknown configuration key '%s' in %s", key, source)
            continue
        if value is None:
            continue
        if not isinstance(value, str):
            raise ConfigError(f"'{key}' must be a string")
        values[attribute] = Path(value) if attribute in _PATH_FIELDS else value
    return ChangelogConfig(**values)


def load_config(project_root: Path, config_path: Optional[Path] = None) -> ChangelogConfig:
    """Load the changelog configuration for ``project_root``.

    Parameters
    ----------
    project_root : Path
        Directory holding the optional ``.changelog_config.json``.
    config_path : Optional[Path]
        Explicit configuration file. Unlike the default file it must exist.

    Returns
    -------
    ChangelogConfig
        The loaded settings, with defaults for every absent key.

    Raises
    ------
    ConfigError
        If an explicit file is missing, or any file is unreadable,
        malformed or carries a value of the wrong type.
    """
    explicit = config_path is not None
    path = config_path if config_path is not None else project_root / CONFIG_FILE_NAME

    if not path.exists():
        if explicit:
            logger.error("Configuration file '%s' does not exist", path)
            raise ConfigError(f"Missing configuration file: {path}")
        logger.debug("No configuration file at %s; using defaults", path)
        return ChangelogConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a JSON object")

    config = _from_mapping(data, path)
    logger.debug("Loaded configuration from %s: %s", path, config)
    return config


def git_root_override(config: ChangelogConfig) -> Optional[Path]:
    """Return the explicitly requested repository root, if any.

    The ``CHANGELOG_GIT_ROOT`` environment variable takes precedence over
    the configured ``gitFilePath``.
    """
    env_root = os.environ.get(GIT_ROOT_ENV_VAR)
    if env_root:
        logger.info("Using git root from %s", GIT_ROOT_ENV_VAR)
        return Path(env_root)
    if config.git_path is not None:
        logger.info("Using configured git root")
        return config.git_path
    return None
