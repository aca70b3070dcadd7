"""
Top-level package for vc_changelog.

This package derives a Markdown changelog from a Git history written in
the Conventional Commits style. The command line entry point lives in
``vc_changelog.cli``.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
