import os

import pytest


@pytest.fixture(autouse=True)
def isolate_git_root_env(monkeypatch):
    """Keep a developer's CHANGELOG_GIT_ROOT from leaking into the tests.

    The variable overrides repository detection in the CLI, so every test
    starts without it.
    """
    if "CHANGELOG_GIT_ROOT" in os.environ:
        monkeypatch.delenv("CHANGELOG_GIT_ROOT")
    yield
