"""
Configuration loading for vc_changelog.

Provides the :class:`ChangelogConfig` settings object and a loader for
the optional ``.changelog_config.json`` file in the project root. See
:mod:`vc_changelog.config.loader` for implementation details.
"""

from .loader import ChangelogConfig, ConfigError, git_root_override, load_config  # noqa: F401
