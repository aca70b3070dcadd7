"""
Command line interface for the vc_changelog tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``makechangelog`` command. It orchestrates
configuration loading, repository detection, history retrieval and
writing the rendered changelog. All parsing, grouping and rendering is
delegated to :mod:`vc_changelog.pipeline`; nothing is written unless
the whole changelog rendered successfully.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import click

from vc_changelog import __version__
from vc_changelog.config.loader import ChangelogConfig, ConfigError, git_root_override, load_config
from vc_changelog.pipeline import make_changelog
from vc_changelog.rendering.template import load_template
from vc_changelog.vcs.git_client import GitClient, GitError

# Create a module-level logger. Attach a null handler and disable
# propagation until the CLI configures logging in ``_configure_logging``.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_step(step_num: int, total_steps: int, message: str):
    """Print a step indicator."""
    click.echo(f"\n{'='*60}")
    click.echo(f"Step {step_num}/{total_steps}: {message}")
    click.echo(f"{'='*60}")


def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}", err=False)


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}", err=False)


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def _configure_logging(verbose: bool) -> None:
    """Configure root logging and let the package loggers reach it."""
    # force=True reconfigures handlers on repeated invocations (tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    for name in list(logging.Logger.manager.loggerDict):
        if name == "vc_changelog" or name.startswith("vc_changelog."):
            logging.getLogger(name).propagate = True


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def locate_repository(project_dir: Path, config: ChangelogConfig) -> Path:
    """Return the repository root to read history from.

    The ``CHANGELOG_GIT_ROOT`` environment variable wins over the
    configured ``gitFilePath``; without either, the repository enclosing
    ``project_dir`` is used.

    Raises
    ------
    SystemExit
        With code EXIT_NO_REPO if no repository is found.
    """
    override = git_root_override(config)
    if override is not None:
        if not GitClient.is_repo(override):
            print_error(f"Configured git root is not a Git repository: {override}")
            raise SystemExit(EXIT_NO_REPO)
        return override

    repo_root = GitClient.find_repo_root(project_dir)
    if repo_root is None:
        print_error("No Git repository found in the project directory or its parents.")
        raise SystemExit(EXIT_NO_REPO)
    return repo_root


def write_changelog(output_file: Path, content: str) -> None:
    """Replace ``output_file`` with ``content`` as UTF-8.

    The text is written to a temporary file beside the target which is then
    renamed over it, so a failed write leaves any previous file untouched.
    """
    output_file.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=output_file.parent,
        prefix=f".{output_file.name}.",
        suffix=".tmp",
        delete=False,
    )
    try:
        with handle:
            handle.write(content)
        os.replace(handle.name, output_file)
    except BaseException:
        Path(handle.name).unlink(missing_ok=True)
        raise


@click.command()
@click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root (defaults to the current directory). Relative paths from the configuration file are anchored here.",
)
@click.option("--config", "config_path", type=click.Path(resolve_path=True, path_type=Path), help="JSON configuration file.")
@click.option("--regex", "regex_for_semver_tag", help="Pattern a tag must match to mark a release.")
@click.option("--template", "template_path", type=click.Path(resolve_path=True, path_type=Path), help="JSON changelog template file.")
@click.option("--git-path", type=click.Path(resolve_path=True, path_type=Path), help="Git repository root override.")
@click.option("--branch", "main_branch", help="Branch or ref whose history is walked (defaults to HEAD).")
@click.option("--output", "output_file", type=click.Path(dir_okay=False, resolve_path=True, path_type=Path), help="Destination Markdown file.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="makechangelog")
def main(
    project_dir: Optional[Path],
    config_path: Optional[Path],
    regex_for_semver_tag: Optional[str],
    template_path: Optional[Path],
    git_path: Optional[Path],
    main_branch: Optional[str],
    output_file: Optional[Path],
    verbose: bool,
) -> None:
    """Generate a Markdown change log from Conventional Commit history."""
    _configure_logging(verbose)

    total_steps = 4
    current_step = 0

    try:
        project_root = (project_dir or Path.cwd()).resolve()

        # Step 1: Load configuration and template
        current_step += 1
        print_step(current_step, total_steps, "Loading Configuration")

        try:
            config = load_config(project_root, config_path).with_overrides(
                tag_pattern=regex_for_semver_tag,
                template_path=template_path,
                git_path=git_path,
                main_branch=main_branch,
                output_file=output_file,
            ).resolve_paths(project_root)  # option paths are already absolute
            tag_pattern = config.compiled_tag_pattern()
            template = load_template(config.template_path)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        print_success("Configuration loaded successfully")
        print_info(f"Release tag pattern: {config.tag_pattern}", indent=1)
        print_info(f"Template: {config.template_path or 'built-in'}", indent=1)

        # Step 2: Detect repository
        current_step += 1
        print_step(current_step, total_steps, "Detecting Repository")

        try:
            repo_root = locate_repository(project_root, config)
        except SystemExit:
            raise click.exceptions.Exit(EXIT_NO_REPO)
        print_success(f"Found Git repository at: {repo_root}")

        # Step 3: Read history
        current_step += 1
        print_step(current_step, total_steps, "Reading History")

        ref = config.main_branch or "HEAD"
        try:
            client = GitClient(repo_root)
            tag_map = client.get_tag_map()
            raw_commits = client.iter_commits(ref)
        except GitError as exc:
            print_error(f"VCS error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        print_success(f"Read {len(raw_commits)} commit{'s' if len(raw_commits) != 1 else ''} from {ref}")
        print_info(f"Tagged commits: {len(tag_map)}", indent=1)

        # Step 4: Render and write
        current_step += 1
        print_step(current_step, total_steps, "Writing Change Log")

        content = make_changelog(raw_commits, tag_map, tag_pattern, template)
        try:
            write_changelog(config.output_file, content)
        except OSError as exc:
            print_error(f"Could not write {config.output_file}: {exc}")
            raise click.exceptions.Exit(EXIT_GENERIC_ERROR)

        print_success(f"Change log written to {config.output_file}")
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)
