# src/trycatch/config/core.py

"""Core configuration schema and resolution.

Configuration is resolved once into an immutable ``FrozenConfig``:

- ``Settings`` is the single source of truth for fields, defaults and
  validation.
- ``resolve_config`` merges defaults < home < project < env < overrides and
  optionally returns the origin of every field.
- ``config_scope`` sets an ambient configuration for the current context.
"""

from __future__ import annotations

from contextlib import contextmanager
import contextvars
from dataclasses import dataclass
from enum import Enum
from functools import cache
import logging
from typing import TYPE_CHECKING, Any, Literal, overload
import warnings

from pydantic import BaseModel, Field, ValidationError, field_validator

from trycatch.errors import ConfigurationError

from .utils import import_dotted, should_emit_debug

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping

log = logging.getLogger(__name__)

BackendName = Literal["value", "jump"]
AbortAction = Literal["abort", "exit", "raise"]

# --- Schema (Pydantic wall) ---


class Settings(BaseModel):
    """Pydantic schema for configuration validation and defaults."""

    backend: BackendName = Field(default="value")
    # Dotted path of the single error payload type used by every Result.
    error_type: str = Field(default="builtins.object", min_length=1)
    abort_action: AbortAction = Field(default="abort")
    strict_types: bool = Field(default=True)

    model_config = {"extra": "allow"}

    @field_validator("backend", "abort_action", mode="before")
    @classmethod
    def normalize_choice(cls, v: Any) -> Any:
        """Accept surrounding whitespace and any casing for enumerated fields."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("error_type", mode="before")
    @classmethod
    def normalize_error_type(cls, v: Any) -> Any:
        """Accept a class object as well as its dotted path."""
        if isinstance(v, type):
            return f"{v.__module__}.{v.__qualname__}"
        if isinstance(v, str):
            return v.strip()
        return v


@cache
def _default_settings() -> dict[str, Any]:
    return Settings().model_dump()


# --- Immutable runtime payload ---


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable, validated configuration."""

    backend: BackendName
    error_type: str
    abort_action: AbortAction
    strict_types: bool
    extra: Mapping[str, Any]

    def error_class(self) -> type:
        """Import and return the configured error payload type."""
        return _import_error_type(self.error_type)


@cache
def _import_error_type(path: str) -> type:
    try:
        obj = import_dotted(path)
    except (ImportError, AttributeError, ValueError) as e:
        raise ConfigurationError(
            f"Cannot import error_type {path!r}: {e}",
            hint="Use a dotted path such as 'builtins.object' or 'myapp.errors.Error'.",
        ) from e
    if not isinstance(obj, type):
        raise ConfigurationError(f"error_type {path!r} is not a class")
    return obj


# --- Audit types ---


class Origin(str, Enum):
    """Source origin for configuration field values."""

    DEFAULT = "default"
    HOME = "home"
    PROJECT = "project"
    ENV = "env"
    OVERRIDES = "overrides"


@dataclass(frozen=True)
class FieldOrigin:
    """Tracks the origin of a configuration field value."""

    origin: Origin
    env_key: str | None = None
    file: str | None = None


SourceMap = dict[str, FieldOrigin]


# --- Ambient scope ---

_AMBIENT: contextvars.ContextVar[FrozenConfig | None] = contextvars.ContextVar(
    "trycatch_ambient_config", default=None
)

_DOTENV_LOADED: bool = False


@contextmanager
def config_scope(
    cfg_or_overrides: Mapping[str, Any] | FrozenConfig | None = None,
    *,
    profile: str | None = None,
    **overrides: object,
) -> Generator[FrozenConfig]:
    """Run a block with a specific configuration for the current context.

    Example:
        with config_scope(abort_action="raise"):
            force_unwrap(failing())  # raises ForceUnwrapError
    """
    if isinstance(cfg_or_overrides, FrozenConfig):
        cfg = cfg_or_overrides
    else:
        combined_overrides = {**(cfg_or_overrides or {}), **overrides}
        cfg = resolve_config(overrides=combined_overrides, profile=profile)

    token = _AMBIENT.set(cfg)
    try:
        yield cfg
    finally:
        _AMBIENT.reset(token)


@cache
def _resolved_default() -> FrozenConfig:
    cfg = resolve_config()
    log.debug("Resolved configuration: %s", cfg)
    return cfg


def current_config() -> FrozenConfig:
    """Return the ambient configuration, or the process-wide resolved one."""
    cfg = _AMBIENT.get()
    if cfg is not None:
        return cfg
    return _resolved_default()


def reset_config_cache() -> None:
    """Forget the cached process-wide configuration (re-read on next use)."""
    _resolved_default.cache_clear()
    _import_error_type.cache_clear()


def _try_load_dotenv() -> None:
    """Load a ``.env`` file once through python-dotenv."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    from dotenv import load_dotenv

    load_dotenv()
    _DOTENV_LOADED = True


# --- Public resolution API ---


@overload
def resolve_config(
    overrides: Mapping[str, Any] | None = ...,
    profile: str | None = ...,
    *,
    explain: Literal[True],
) -> tuple[FrozenConfig, SourceMap]: ...


@overload
def resolve_config(
    overrides: Mapping[str, Any] | None = ...,
    profile: str | None = ...,
    *,
    explain: Literal[False] = ...,
) -> FrozenConfig: ...


def resolve_config(
    overrides: Mapping[str, Any] | None = None,
    profile: str | None = None,
    *,
    explain: bool = False,
) -> FrozenConfig | tuple[FrozenConfig, SourceMap]:
    """Resolve configuration from all sources into a FrozenConfig.

    Precedence: defaults < home < project < env < overrides.

    Args:
        overrides: Programmatic configuration overrides.
        profile: Profile name to overlay from the TOML files.
        explain: If True, also return the origin of every field.

    Raises:
        ConfigurationError: If validation fails.
    """
    _try_load_dotenv()

    from . import utils as _utils
    from .loaders import load_env, load_home, load_pyproject

    effective_profile = (
        profile if profile is not None else _utils.get_effective_profile()
    )

    merged, sources = _resolve_layers(
        overrides=overrides or {},
        env=load_env(),
        project=load_pyproject(profile=effective_profile),
        home=load_home(profile=effective_profile),
    )

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "")
        if msg.startswith("Value error, "):
            msg = msg[13:]
        raise ConfigurationError(
            f"Configuration validation failed: {field}: {msg}",
            hint=_utils.field_spec_hint(field) if field else None,
        ) from e

    frozen = _freeze(settings, merged)
    if not explain and should_emit_debug():
        warnings.warn(
            "trycatch config audit\n" + audit_text(frozen, sources),
            stacklevel=2,
        )
    return (frozen, sources) if explain else frozen


# --- Internal helpers ---


def _freeze(settings: Settings, merged: Mapping[str, Any]) -> FrozenConfig:
    known_fields = set(Settings.model_fields.keys())
    extra = {k: v for k, v in merged.items() if k not in known_fields}
    for name in extra:
        warnings.warn(
            f"Configuration: unknown field '{name}' is ignored",
            UserWarning,
            stacklevel=4,
        )
    return FrozenConfig(
        backend=settings.backend,
        error_type=settings.error_type,
        abort_action=settings.abort_action,
        strict_types=settings.strict_types,
        extra=extra,
    )


def _resolve_layers(
    *,
    overrides: Mapping[str, Any],
    env: Mapping[str, Any],
    project: Mapping[str, Any],
    home: Mapping[str, Any],
) -> tuple[dict[str, Any], SourceMap]:
    """Merge layers with last-wins precedence while recording origins."""
    from .utils import ENV_PREFIX, get_home_config_path, get_pyproject_path

    layers = [
        (Origin.HOME, home),
        (Origin.PROJECT, project),
        (Origin.ENV, env),
        (Origin.OVERRIDES, overrides),
    ]

    out: dict[str, Any] = dict(_default_settings())
    src: SourceMap = {k: FieldOrigin(origin=Origin.DEFAULT) for k in out}

    for origin, payload in layers:
        for k, v in payload.items():
            out[k] = v
            if origin is Origin.ENV:
                src[k] = FieldOrigin(origin, env_key=f"{ENV_PREFIX}{k.upper()}")
            elif origin is Origin.PROJECT:
                src[k] = FieldOrigin(origin, file=str(get_pyproject_path()))
            elif origin is Origin.HOME:
                src[k] = FieldOrigin(origin, file=str(get_home_config_path()))
            else:
                src[k] = FieldOrigin(origin)

    return out, src


# --- Audit helpers ---


def _origin_label(where: FieldOrigin) -> str:
    match where.origin:
        case Origin.ENV:
            return f"env:{where.env_key}"
        case Origin.PROJECT | Origin.HOME:
            return f"file:{where.file}"
        case _:
            return str(where.origin.value)


def audit_lines(cfg: FrozenConfig, sources: SourceMap) -> list[str]:
    """Produce one ``field: origin`` line per known field, then extras."""
    lines = [
        f"{field}: {_origin_label(sources[field])}"
        for field in Settings.model_fields
        if field in sources
    ]
    lines.extend(
        f"{k}: {_origin_label(sources[k])}" for k in sorted(cfg.extra) if k in sources
    )
    return lines


def audit_text(cfg: FrozenConfig, sources: SourceMap) -> str:
    """Format the audit as a single printable string."""
    return "\n".join(audit_lines(cfg, sources))


def to_dict(cfg: FrozenConfig) -> dict[str, Any]:
    """Plain dict view of a FrozenConfig for structured logging."""
    return {
        "backend": cfg.backend,
        "error_type": cfg.error_type,
        "abort_action": cfg.abort_action,
        "strict_types": cfg.strict_types,
        "extra": dict(cfg.extra),
    }


# --- Minimal CLI entrypoint ---


def main(argv: list[str] | None = None) -> int:
    """``trycatch-config show|audit``."""
    import argparse
    import json
    import sys

    parser = argparse.ArgumentParser("trycatch-config")
    sub = parser.add_subparsers(dest="cmd", required=True)
    sub.add_parser("show")
    sub.add_parser("audit")
    args = parser.parse_args(argv)

    if args.cmd == "show":
        cfg = resolve_config()
        sys.stdout.write(json.dumps(to_dict(cfg), indent=2) + "\n")
    else:
        cfg, src = resolve_config(explain=True)
        sys.stdout.write(audit_text(cfg, src) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
