"""
Changelog templates.

A template is a JSON object with the optional sections ``title``,
``introduction`` and ``eachVersion``::

    {
      "title": {"attr": "H1", "text": "Change Log", "breakAfter": "horizontalRule"},
      "introduction": {"attr": "bold", "text": "...", "breakAfter": "newLine"},
      "eachVersion": {
        "tag": {"attr": "H2", "breakAfter": "newLine"},
        "feat": {
          "title": {"attr": "H3", "text": "Features Added", "breakAfter": "newLine"},
          "each": {
            "description": {"attr": "bold", "breakAfter": "newLine"},
            "body": {"attr": "bullet", "breakAfter": "newLine"},
            "footer": {"attr": "para", "breakAfter": "newLine"}
          }
        },
        "fix": {...},
        "change": {...}
      }
    }
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from vc_changelog.config.loader import ConfigError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


Template = Dict[str, Any]


def _category(title: str) -> Dict[str, Any]:
    return {
        "title": {"attr": "H3", "text": title, "breakAfter": "newLine"},
        "each": {
            "description": {"attr": "bold", "breakAfter": "newLine"},
            "body": {"attr": "bullet", "breakAfter": "newLine"},
            "footer": {"attr": "para", "breakAfter": "newLine"},
        },
    }


DEFAULT_TEMPLATE: Template = {
    "title": {"attr": "H1", "text": "Change Log", "breakAfter": "horizontalRule"},
    "introduction": {"attr": "bold", "breakAfter": "newLine"},
    "eachVersion": {
        "tag": {"attr": "H2", "breakAfter": "newLine"},
        "feat": _category("Features Added"),
        "fix": _category("Bugs Addressed"),
        "change": _category("Existing Feature Modifications"),
    },
}


def default_template() -> Template:
    """Return a fresh copy of the built-in template."""
    return copy.deepcopy(DEFAULT_TEMPLATE)


def load_template(path: Optional[Path]) -> Template:
    """Load a template from ``path``, or the built-in one when ``path`` is ``None``.

    Raises
    ------
    ConfigError
        If the file is missing, unreadable, not valid JSON or does not
        hold a JSON object.
    """
    if path is None:
        return default_template()

    if not path.is_file():
        logger.error("Template file '%s' does not exist", path)
        raise ConfigError(f"Missing changelog template file: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse template file: %s", exc)
        raise ConfigError(f"Invalid JSON in {path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Template {path.name} must contain a JSON object")

    logger.debug("Loaded changelog template from %s", path)
    return data
