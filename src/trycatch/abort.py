"""Abort hook invoked by ``force_unwrap`` on a failed Result.

The hook is a process-wide terminal action. It receives the error payload and
must never return: the default aborts the process, the configurable
alternatives exit with :data:`ABORT_EXIT_CODE` or raise
:class:`~trycatch.errors.ForceUnwrapError`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
import logging
import os
import sys
import threading
from typing import Any, Literal, NoReturn

from trycatch.errors import HINTS, AbortHookReturnedError, ForceUnwrapError

log = logging.getLogger(__name__)

__all__ = [
    "ABORT_EXIT_CODE",
    "AbortHook",
    "abort_hook_scope",
    "get_abort_hook",
    "hook_for_action",
    "invoke_abort",
    "set_abort_hook",
]

AbortHook = Callable[[Any], Any]
AbortAction = Literal["abort", "exit", "raise"]

# Same status a shell reports for a process killed by SIGABRT.
ABORT_EXIT_CODE = 134


def _abort(error: Any) -> NoReturn:  # noqa: ARG001
    os.abort()


def _exit(error: Any) -> NoReturn:  # noqa: ARG001
    sys.exit(ABORT_EXIT_CODE)


def _raise(error: Any) -> NoReturn:
    raise ForceUnwrapError(error)


_ACTIONS: dict[str, AbortHook] = {
    "abort": _abort,
    "exit": _exit,
    "raise": _raise,
}

_lock = threading.Lock()
_hook: AbortHook | None = None


def hook_for_action(action: AbortAction) -> AbortHook:
    """Return the built-in hook for a configured ``abort_action``."""
    return _ACTIONS[action]


def get_abort_hook() -> AbortHook:
    """Return the active hook, falling back to the configured action."""
    if _hook is not None:
        return _hook
    from trycatch.config import current_config

    return hook_for_action(current_config().abort_action)


def set_abort_hook(hook: AbortHook | None) -> AbortHook | None:
    """Install *hook* process-wide and return the previously installed one.

    Passing ``None`` reverts to the configured ``abort_action``.
    """
    global _hook
    if hook is not None and not callable(hook):
        raise TypeError(f"abort hook must be callable, got {type(hook).__name__}")
    with _lock:
        previous, _hook = _hook, hook
    return previous


@contextmanager
def abort_hook_scope(hook: AbortHook) -> Iterator[AbortHook]:
    """Temporarily install *hook*, restoring the previous one on exit."""
    previous = set_abort_hook(hook)
    try:
        yield hook
    finally:
        set_abort_hook(previous)


def invoke_abort(error: Any) -> NoReturn:
    """Run the abort hook for *error*; never returns."""
    hook = get_abort_hook()
    log.critical("force_unwrap on failed Result, aborting: %r", error)
    hook(error)
    raise AbortHookReturnedError(
        f"abort hook {getattr(hook, '__name__', hook)!r} returned",
        hint=HINTS["abort_hook_returned"],
    )
