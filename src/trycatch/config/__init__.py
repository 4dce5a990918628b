# src/trycatch/config/__init__.py

"""Configuration management for trycatch.

Resolve once, freeze, then read: configuration is resolved from defaults,
``~/.config/trycatch.toml``, ``[tool.trycatch]`` in pyproject.toml,
``TRYCATCH_*`` environment variables and programmatic overrides into an
immutable ``FrozenConfig``.
"""

# ruff: noqa: I001

from .core import (
    FieldOrigin,
    FrozenConfig,
    Origin,
    Settings,
    SourceMap,
    audit_lines,
    audit_text,
    config_scope,
    current_config,
    reset_config_cache,
    resolve_config,
    to_dict,
)
from .loaders import list_profiles
from .utils import field_spec_hint

__all__ = [  # noqa: RUF022
    # Main public API
    "resolve_config",
    "current_config",
    "config_scope",
    "reset_config_cache",
    "FrozenConfig",
    # Schema and audit
    "Settings",
    "Origin",
    "FieldOrigin",
    "SourceMap",
    "audit_lines",
    "audit_text",
    "to_dict",
    "field_spec_hint",
    "list_profiles",
]
