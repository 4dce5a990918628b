"""Propagation backends.

Both modules expose the same operator names (``ok``, ``throw``,
``propagate``, ``try_catch``, ...) with the same observable behavior through
``try_catch``; they differ only in how an error travels to its handler.
"""

from __future__ import annotations

from types import ModuleType

from trycatch.errors import ConfigurationError

from . import jump, value

BACKENDS: dict[str, ModuleType] = {
    value.NAME: value,
    jump.NAME: jump,
}


def load_backend(name: str) -> ModuleType:
    """Return the backend module registered under *name*."""
    try:
        return BACKENDS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown backend {name!r}",
            hint=f"Choose one of: {', '.join(sorted(BACKENDS))}.",
        ) from None


__all__ = ["BACKENDS", "jump", "load_backend", "value"]
