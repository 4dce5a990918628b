"""Backend selection.

The active backend is the configured ``backend`` (``TRYCATCH_BACKEND``,
``[tool.trycatch] backend``, ...) unless a ``backend_scope`` overrides it for
the current context. Pick one backend per program: functions decorated with
``result_context`` are bound to the backend active at decoration time.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
import logging
from types import ModuleType
from typing import TYPE_CHECKING

from trycatch.backends import load_backend
from trycatch.config import current_config

if TYPE_CHECKING:
    from collections.abc import Iterator

log = logging.getLogger(__name__)

__all__ = ["backend_name", "backend_scope", "get_backend"]

_override: ContextVar[ModuleType | None] = ContextVar(
    "trycatch_backend_override", default=None
)


def get_backend() -> ModuleType:
    """Return the backend module active in the current context."""
    backend = _override.get()
    if backend is not None:
        return backend
    return load_backend(current_config().backend)


def backend_name() -> str:
    """Name of the active backend (``"value"`` or ``"jump"``)."""
    return get_backend().NAME


@contextmanager
def backend_scope(name: str) -> Iterator[ModuleType]:
    """Use backend *name* for the duration of the block in this context."""
    backend = load_backend(name)
    log.debug("Entering %s backend scope", name)
    token = _override.set(backend)
    try:
        yield backend
    finally:
        _override.reset(token)
