# src/trycatch/config/utils.py

"""Configuration utilities shared by the loaders and the resolver.

Pure helpers that can be imported without creating circular dependencies:
path resolution, environment constants and error-type import.
"""

from __future__ import annotations

import importlib
import os
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Callable

# --- Constants ---

ENV_PREFIX = "TRYCATCH_"

CONFIG_HOME_VAR = "TRYCATCH_CONFIG_HOME"
PYPROJECT_PATH_VAR = "TRYCATCH_PYPROJECT_PATH"
PROFILE_VAR = "TRYCATCH_PROFILE"
DEBUG_CONFIG_VAR = "TRYCATCH_DEBUG_CONFIG"

# --- Path Utilities ---


def get_config_path(path_type: Literal["project", "home"]) -> Path:
    """Get configuration file path with environment override support.

    Falls back to a cwd-based path for the "home" type when ``Path.home()``
    cannot be resolved.
    """
    specs: dict[str, tuple[str, Callable[[], Path]]] = {
        "project": (
            PYPROJECT_PATH_VAR,
            lambda: Path.cwd() / "pyproject.toml",
        ),
        "home": (
            CONFIG_HOME_VAR,
            lambda: Path.home() / ".config" / "trycatch.toml",
        ),
    }
    env_var, default_factory = specs[path_type]
    if override := os.environ.get(env_var):
        return Path(override)
    try:
        return default_factory()
    except RuntimeError:
        if path_type == "home":
            return Path.cwd() / "trycatch.toml"
        raise


def get_pyproject_path() -> Path:
    """Return path to project pyproject.toml."""
    return get_config_path("project")


def get_home_config_path() -> Path:
    """Return path to user's home-level config TOML."""
    return get_config_path("home")


# --- Environment Utilities ---


def get_effective_profile() -> str | None:
    """Return the profile selected through the environment, if any."""
    return os.environ.get(PROFILE_VAR) or None


def field_spec_hint(field: str) -> str:
    """Return a compact hint for setting a config field via env or files."""
    env_key = f"{ENV_PREFIX}{field.upper()}"
    return (
        f"Set {env_key} or [tool.trycatch] {field} in pyproject.toml "
        "(or ~/.config/trycatch.toml)."
    )


def should_emit_debug() -> bool:
    """Return True when debug audit is enabled via environment."""
    return os.environ.get(DEBUG_CONFIG_VAR, "").strip().lower() in {
        "1",
        "true",
        "yes",
        "on",
    }


# --- Error type import ---


def import_dotted(path: str) -> object:
    """Import ``package.module.Name`` (or ``package.module:Name``) and return it.

    Raises:
        ImportError: If the module cannot be imported.
        AttributeError: If the module has no such attribute.
        ValueError: If *path* has no module part.
    """
    module_name, sep, attr = path.replace(":", ".").rpartition(".")
    if not sep or not module_name or not attr:
        raise ValueError(f"expected 'module.Name', got {path!r}")
    module = importlib.import_module(module_name)
    return getattr(module, attr)
