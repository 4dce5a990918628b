"""Value-based propagation backend.

Functions that can fail return a ``Result`` explicitly. Each such function is
decorated with ``@result_context(T)``, which makes ``T``'s Result class its
*home type*. ``throw`` and a failing ``propagate`` leave the enclosing home
function early: they raise a private signal that the nearest
``result_context`` wrapper turns into a failed home Result. Nothing crosses
more than one home function; callers further up must propagate again.

Example:
    @result_context(int)
    def parse(text: str) -> Result[int]:
        if not text.isdigit():
            throw("not a number")
        return ok(int(text))

    @result_context(int)
    def parse_plus_five(text: str) -> Result[int]:
        return ok(propagate(parse(text)) + 5)
"""

from __future__ import annotations

from contextvars import ContextVar
import functools
from typing import TYPE_CHECKING, Any, NoReturn

from trycatch.abort import invoke_abort
from trycatch.config import current_config
from trycatch.errors import HINTS, NoResultContextError, ResultTypeError
from trycatch.registry import (
    VOID,
    AlwaysErrorResult,
    Result,
    VoidResult,
    result,
    result_const_ptr,
    result_ptr,
)

from ._common import check_always_error, check_callables, check_payload, check_result

if TYPE_CHECKING:
    from collections.abc import Callable

NAME = "value"

__all__ = [
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

_home: ContextVar[type[Result[Any]] | None] = ContextVar(
    "trycatch_home_result", default=None
)


class _EarlyReturn(BaseException):
    """Leaves the enclosing home function with a failed Result.

    Derives from BaseException so ``except Exception`` in user code between
    the raise and the home wrapper cannot swallow it.
    """

    __slots__ = ("error",)

    def __init__(self, error: Any) -> None:
        self.error = error
        super().__init__()


def _home_type() -> type[Result[Any]]:
    home = _home.get()
    if home is None:
        raise NoResultContextError(
            "no enclosing result_context", hint=HINTS["no_result_context"]
        )
    return home


# --- Home type declaration ---


def _bind[**P](home: type[Result[Any]], fn: Callable[P, Any]) -> Callable[P, Any]:
    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
        token = _home.set(home)
        try:
            out = fn(*args, **kwargs)
        except _EarlyReturn as early:
            return home.failure(early.error)
        finally:
            _home.reset(token)
        if type(out) is not home:
            raise ResultTypeError(
                f"{fn.__qualname__} must return {home.__name__}, "
                f"got {type(out).__name__}",
                hint="Wrap success values with ok(...).",
            )
        return out

    wrapper.__result_type__ = home  # type: ignore[attr-defined]
    return wrapper


def result_context(tp: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Declare that the decorated function returns ``result(tp)``.

    Raises:
        UnregisteredTypeError: At decoration time if *tp* was never declared.
    """
    home = result(tp)
    return functools.partial(_bind, home)


def result_context_ptr(tp: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Declare that the decorated function returns ``result_ptr(tp)``."""
    home = result_ptr(tp)
    return functools.partial(_bind, home)


def result_context_const_ptr(
    tp: Any,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Declare that the decorated function returns ``result_const_ptr(tp)``."""
    home = result_const_ptr(tp)
    return functools.partial(_bind, home)


def result_context_always_error(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Declare that the decorated function can only fail."""
    return _bind(AlwaysErrorResult, fn)


# --- Construction ---


def ok(value: Any) -> Result[Any]:
    """Wrap *value* in the home Result type with no error."""
    return _home_type().success(value, strict=current_config().strict_types)


def ok_void() -> Result[Any]:
    """Return a successful void Result."""
    return VoidResult.success(VOID)


# --- Throwing and conversion ---


def throw(error: Any) -> NoReturn:
    """Return early from the home function with a Result carrying *error*."""
    check_payload(error)
    _home_type()
    raise _EarlyReturn(error)


def throw_always_error(expr: AlwaysErrorResult) -> NoReturn:
    """Return early with the payload of an always-error Result."""
    throw(check_always_error(expr, "throw_always_error").error)


def convert_error(error: Any) -> Result[Any]:
    """Build a failed home Result from a raw payload (for ``return``)."""
    check_payload(error)
    return _home_type().failure(error)


def convert_always_error(expr: AlwaysErrorResult) -> Result[Any]:
    """Re-home the payload of an always-error Result (for ``return``)."""
    return _home_type().failure(check_always_error(expr, "convert_always_error").error)


# --- Propagation ---


def propagate(expr: Result[Any]) -> Any:
    """Return the success value of *expr*, or leave the home function with its error."""
    _home_type()
    res = check_result(expr, "propagate")
    if res.error is not None:
        raise _EarlyReturn(res.error)
    return res.value


def force_unwrap(expr: Result[Any]) -> Any:
    """Return the success value of *expr*, or run the abort hook."""
    res = check_result(expr, "force_unwrap")
    if res.error is not None:
        invoke_abort(res.error)
    return res.value


def try_catch(
    expr: Callable[[], Result[Any]],
    on_success: Callable[[Any], Any],
    on_failure: Callable[[Any], Any],
) -> Any:
    """Evaluate ``expr()`` and dispatch to exactly one branch.

    Returns whatever the chosen branch returns.
    """
    check_callables(expr=expr, on_success=on_success, on_failure=on_failure)
    res = check_result(expr(), "try_catch")
    if res.error is not None:
        return on_failure(res.error)
    return on_success(res.value)
