"""Shared fixtures for saferenv tests.

Provides sample environments, engines built from the default rule set,
and isolation of the process environment and root logger.
"""
from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping

import pytest

from saferenv.filtering import FilterEngine, build_rules

# ---------------------------------------------------------------------------
# Common environments used across tests
# ---------------------------------------------------------------------------
SAMPLE_ENV: dict[str, str] = {
    "API_TOKEN": "t1",
    "SHELL": "/bin/bash",
    "LOG_LEVEL": "debug",
}


@pytest.fixture()
def sample_env() -> dict[str, str]:
    return dict(SAMPLE_ENV)


@pytest.fixture()
def default_engine() -> FilterEngine:
    """A FilterEngine with only the built-in rules."""
    return FilterEngine(build_rules())


@pytest.fixture()
def ignore_engine() -> FilterEngine:
    """A FilterEngine with only the built-in rules, starting from nothing."""
    return FilterEngine(build_rules(), ignore_environment=True)


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------
@pytest.fixture()
def clean_environ(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Replace the process environment with a small, known one.

    The original environment is restored by ``monkeypatch`` afterwards.
    """
    for key in list(os.environ):
        monkeypatch.delenv(key)
    env = {
        "PATH": "/usr/bin:/bin",
        "HOME": "/home/tester",
        "GITHUB_TOKEN": "ghp_example",
        "DB_PASSWORD": "hunter2",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


PYTEST_VARS: frozenset[str] = frozenset({"PYTEST_CURRENT_TEST"})


def _without_pytest_vars(env: Mapping[str, str]) -> dict[str, str]:
    return {k: v for k, v in env.items() if k not in PYTEST_VARS}


@pytest.fixture()
def environ_without_pytest() -> Callable[..., dict[str, str]]:
    """Return a helper that snapshots an environment minus pytest's own vars.

    pytest sets ``PYTEST_CURRENT_TEST`` after fixtures run, so it shows up
    in ``os.environ`` even after ``clean_environ`` emptied it.  Called with
    no argument the helper snapshots ``os.environ``.
    """

    def _snapshot(env: Mapping[str, str] | None = None) -> dict[str, str]:
        return _without_pytest_vars(os.environ if env is None else env)

    return _snapshot


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo ``logging.basicConfig(force=True)`` calls made by the CLI."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers and type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)
