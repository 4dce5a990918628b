# src/trycatch/config/loaders.py

"""Configuration loaders for environment and files.

Pure data loading functions: each returns a plain dictionary that the core
resolver merges and validates. No validation happens here.
"""

from __future__ import annotations

import os
import tomllib
from typing import TYPE_CHECKING, Any

from . import utils

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

CONFIG_TOOL_NAME = "trycatch"

# Meta/control variables that steer resolution but aren't config fields
META_ENV_FIELDS = {"profile", "pyproject_path", "config_home", "debug_config"}


def _coerce_bool(v: str) -> bool:
    """Convert string to boolean using common conventions."""
    return v.strip().lower() in {"1", "true", "yes", "on"}


# --- Environment Loading ---


def load_env() -> Mapping[str, Any]:
    """Load configuration from ``TRYCATCH_*`` environment variables.

    Boolean schema fields are coerced from their string form; everything else
    is passed through for the schema to validate. Meta variables (profile,
    file paths, debug toggle) are skipped.
    """
    from .core import Settings  # local import to keep loaders import-light

    config: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(utils.ENV_PREFIX):
            continue
        field_name = key[len(utils.ENV_PREFIX) :].lower()
        if field_name in META_ENV_FIELDS:
            continue
        info = Settings.model_fields.get(field_name)
        if info is not None and info.annotation is bool:
            config[field_name] = _coerce_bool(value)
        else:
            config[field_name] = value.strip()
    return config


# --- File loading helpers ---


def _read_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file, returning an empty dict when it is missing or invalid."""
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _extract_tables(data: dict[str, Any], profile: str | None) -> dict[str, Any]:
    """Extract ``[tool.trycatch]`` and overlay ``[tool.trycatch.profiles.<profile>]``."""
    section = data.get("tool", {}).get(CONFIG_TOOL_NAME, {})
    base_config = {k: v for k, v in section.items() if k != "profiles"}
    if profile:
        base_config.update(section.get("profiles", {}).get(profile, {}))
    return base_config


def list_profiles() -> list[str]:
    """List profile names available in home and project TOML files."""
    names: set[str] = set()
    for path in (utils.get_pyproject_path(), utils.get_home_config_path()):
        data = _read_toml(path)
        profiles = data.get("tool", {}).get(CONFIG_TOOL_NAME, {}).get("profiles", {})
        names.update(name for name in profiles if isinstance(name, str) and name)
    return sorted(names)


def load_pyproject(profile: str | None = None) -> Mapping[str, Any]:
    """Load ``[tool.trycatch]`` from the project's pyproject.toml."""
    return _extract_tables(_read_toml(utils.get_pyproject_path()), profile)


def load_home(profile: str | None = None) -> Mapping[str, Any]:
    """Load ``[tool.trycatch]`` from the user's home config file."""
    return _extract_tables(_read_toml(utils.get_home_config_path()), profile)
