"""Jump-based propagation backend.

Functions return plain values. ``throw`` transfers the payload straight to
the innermost ``try_catch`` on the same thread, skipping every frame in
between. None of those frames has to check or forward anything, so
``propagate`` and ``force_unwrap`` reduce to returning their argument.

A ``result_context`` wrapper still passes each returned value through its
home Result type's ``success``, so values are stored and type-checked the
same way under either backend.

The catch point and the error slot are ``ContextVar``s: every thread starts
with neither set, and asyncio tasks see a copy of their parent's context.
``try_catch`` saves and restores the catch point around the evaluated
expression, so catch scopes nest. The payload itself travels on the jump,
so a throw from inside ``Context.run`` still delivers it.

A ``throw`` with no enclosing ``try_catch`` on the current thread is a
precondition violation and raises :class:`~trycatch.errors.UncaughtThrowError`.
"""

from __future__ import annotations

from contextvars import ContextVar
import functools
import logging
import threading
from typing import TYPE_CHECKING, Any, NoReturn

from trycatch.config import current_config
from trycatch.errors import HINTS, ResultTypeError, UncaughtThrowError
from trycatch.registry import (
    VOID,
    AlwaysErrorResult,
    result,
    result_const_ptr,
    result_ptr,
)

from ._common import check_callables, check_payload

if TYPE_CHECKING:
    from collections.abc import Callable

    from trycatch.registry import Result

log = logging.getLogger(__name__)

NAME = "jump"

__all__ = [
    "CatchPoint",
    "catch_depth",
    "convert_always_error",
    "convert_error",
    "force_unwrap",
    "ok",
    "ok_void",
    "propagate",
    "result_context",
    "result_context_always_error",
    "result_context_const_ptr",
    "result_context_ptr",
    "throw",
    "throw_always_error",
    "try_catch",
]


class CatchPoint:
    """Resumption target established by one ``try_catch`` call."""

    __slots__ = ("depth", "parent", "thread_id")

    def __init__(self, parent: CatchPoint | None) -> None:
        self.parent = parent
        self.depth = 1 if parent is None else parent.depth + 1
        self.thread_id = threading.get_ident()

    def __repr__(self) -> str:
        return f"CatchPoint(depth={self.depth})"


_catch_point: ContextVar[CatchPoint | None] = ContextVar(
    "trycatch_catch_point", default=None
)
_error_slot: ContextVar[Any] = ContextVar("trycatch_error_slot", default=None)


class _Jump(BaseException):
    """Carries control from ``throw`` to the catch point it targets."""

    __slots__ = ("error", "target")

    def __init__(self, target: CatchPoint, error: Any) -> None:
        self.target = target
        self.error = error
        super().__init__()


def _current_point() -> CatchPoint | None:
    point = _catch_point.get()
    # A context copied into another thread does not carry its catch points.
    if point is None or point.thread_id != threading.get_ident():
        return None
    return point


def catch_depth() -> int:
    """Number of ``try_catch`` scopes active in the current context."""
    point = _current_point()
    return 0 if point is None else point.depth


# --- Home type declaration ---


def _bind[**P](home: type[Result[Any]], fn: Callable[P, Any]) -> Callable[P, Any]:
    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
        out = fn(*args, **kwargs)
        # Store the value as the home Result would; AlwaysErrorResult rejects it.
        return home.success(out, strict=current_config().strict_types).value

    wrapper.__result_type__ = home  # type: ignore[attr-defined]
    return wrapper


def result_context(tp: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Store the decorated function's return values the way ``result(tp)`` does.

    Raises:
        UnregisteredTypeError: At decoration time if *tp* was never declared.
    """
    return functools.partial(_bind, result(tp))


def result_context_ptr(tp: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    return functools.partial(_bind, result_ptr(tp))


def result_context_const_ptr(
    tp: Any,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    return functools.partial(_bind, result_const_ptr(tp))


def result_context_always_error(fn: Callable[..., Any]) -> Callable[..., Any]:
    return _bind(AlwaysErrorResult, fn)


# --- Construction ---


def ok(value: Any) -> Any:
    return value


def ok_void() -> Any:
    return VOID


# --- Throwing and conversion ---


def throw(error: Any) -> NoReturn:
    """Store *error* and jump to the innermost catch point of this thread."""
    check_payload(error)
    target = _current_point()
    if target is None:
        log.debug("throw(%r) with no catch point in this context", error)
        raise UncaughtThrowError(
            f"throw({error!r}) outside any try_catch", hint=HINTS["uncaught_throw"]
        )
    _error_slot.set(error)
    raise _Jump(target, error)


def _always_error_payload(expr: Any, op: str) -> Any:
    if not isinstance(expr, AlwaysErrorResult):
        raise ResultTypeError(
            f"{op}(): always-error expression returned {type(expr).__name__} "
            "instead of throwing"
        )
    return expr.error


def throw_always_error(expr: Any) -> NoReturn:
    throw(_always_error_payload(expr, "throw_always_error"))


def convert_error(error: Any) -> NoReturn:
    """Throw *error*; there is no Result to convert into under this backend."""
    throw(error)


def convert_always_error(expr: Any) -> NoReturn:
    throw(_always_error_payload(expr, "convert_always_error"))


# --- Propagation ---


def propagate(expr: Any) -> Any:
    return expr


def force_unwrap(expr: Any) -> Any:
    return expr


def try_catch(
    expr: Callable[[], Any],
    on_success: Callable[[Any], Any],
    on_failure: Callable[[Any], Any],
) -> Any:
    """Establish a catch point, evaluate ``expr()`` and dispatch to one branch.

    The previous catch point is restored before either branch runs, so a
    throw from inside a branch reaches the enclosing ``try_catch``.
    """
    check_callables(expr=expr, on_success=on_success, on_failure=on_failure)
    point = CatchPoint(_current_point())
    token = _catch_point.set(point)
    caught: _Jump | None = None
    try:
        value = expr()
    except _Jump as jump:
        if jump.target is not point:
            raise
        caught = jump
    finally:
        _catch_point.reset(token)

    if caught is not None:
        _error_slot.set(None)
        return on_failure(caught.error)
    return on_success(value)
