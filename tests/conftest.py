"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration and the ``backend``
fixture that runs one test body against both propagation backends. Fixtures
here are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import logging
import os
from types import ModuleType

import pytest

from tests.helpers import AbortCalled
from trycatch.abort import set_abort_hook
from trycatch.backends import jump, value
from trycatch.config import reset_config_cache

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_trycatch_env(monkeypatch, tmp_path):
    """Clear TRYCATCH_* variables and point config files at empty locations."""
    for key in list(os.environ.keys()):
        if key.startswith("TRYCATCH_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("TRYCATCH_PYPROJECT_PATH", str(tmp_path / "pyproject.toml"))
    monkeypatch.setenv("TRYCATCH_CONFIG_HOME", str(tmp_path / "trycatch.toml"))


@pytest.fixture(autouse=True)
def fresh_process_state():
    """Reset cached configuration and the abort hook around every test."""
    reset_config_cache()
    set_abort_hook(None)
    yield
    reset_config_cache()
    set_abort_hook(None)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_library_logs():
    """Keep library debug logging out of test output unless asked for."""
    logging.getLogger("trycatch").setLevel(logging.WARNING)


# =============================================================================
# Backends
# =============================================================================


@pytest.fixture(params=[value, jump], ids=lambda m: m.NAME)
def backend(request) -> ModuleType:
    """Each propagation backend in turn (not autouse)."""
    return request.param


@pytest.fixture
def recording_abort():
    """Install an abort hook that records the payload and raises AbortCalled."""
    calls: list[object] = []

    def hook(error):
        calls.append(error)
        raise AbortCalled(error)

    set_abort_hook(hook)
    return calls
