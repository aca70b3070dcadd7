"""
Markdown rendering of release buckets.

:mod:`vc_changelog.rendering.template` holds the built-in template and
the template loader; :mod:`vc_changelog.rendering.renderer` interprets
a template against the bucketed commits.
"""

from .renderer import ChangelogRenderer, render_changelog  # noqa: F401
from .template import DEFAULT_TEMPLATE, default_template, load_template  # noqa: F401
