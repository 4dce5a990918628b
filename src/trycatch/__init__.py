"""trycatch: Result-based error propagation with two interchangeable backends.

Public API:
    - result_context(T) and friends: declare a function's home Result type
    - ok() / ok_void() / throw(): build successes and failures
    - propagate() / force_unwrap(): extract values, forwarding or aborting on error
    - convert_error() / convert_always_error(): re-home an error payload
    - try_catch(): the single place where error handling ends
    - declare_result(T): register a success type before first use

The operators forward to the active backend (``value`` by default, ``jump``
when configured); see :mod:`trycatch.selector`.

Example:
    from trycatch import ok, propagate, result_context, throw, try_catch

    @result_context(int)
    def half(n: int):
        if n % 2:
            throw("odd")
        return ok(n // 2)

    @result_context(int)
    def quarter(n: int):
        return ok(propagate(half(propagate(half(n)))))

    try_catch(lambda: quarter(12), lambda v: v, lambda e: -1)  # 3
    try_catch(lambda: quarter(6), lambda v: v, lambda e: -1)   # -1
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, NoReturn

from trycatch.abort import abort_hook_scope, get_abort_hook, set_abort_hook
from trycatch.config import config_scope, current_config, resolve_config
from trycatch.errors import (
    AbortHookReturnedError,
    ConfigurationError,
    ErrorPayloadError,
    ForceUnwrapError,
    NoResultContextError,
    RegistrationError,
    ResultTypeError,
    TryCatchError,
    UncaughtThrowError,
    UnregisteredTypeError,
)
from trycatch.registry import (
    VOID,
    AlwaysErrorResult,
    ConstRef,
    Result,
    ResultKind,
    VoidResult,
    declare_result,
    declare_result_const_ptr,
    declare_result_ptr,
    deref,
    result,
    result_const_ptr,
    result_ptr,
)
from trycatch.selector import backend_name, backend_scope, get_backend

if TYPE_CHECKING:
    from collections.abc import Callable

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("trycatch")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("trycatch").addHandler(logging.NullHandler())


def result_context(tp: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Declare that the decorated function's home type is ``result(tp)``."""
    return get_backend().result_context(tp)


def result_context_ptr(tp: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Declare that the decorated function's home type is ``result_ptr(tp)``."""
    return get_backend().result_context_ptr(tp)


def result_context_const_ptr(
    tp: Any,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Declare that the decorated function's home type is ``result_const_ptr(tp)``."""
    return get_backend().result_context_const_ptr(tp)


def result_context_always_error(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Declare that the decorated function can only fail."""
    return get_backend().result_context_always_error(fn)


def ok(value: Any) -> Any:
    return get_backend().ok(value)


def ok_void() -> Any:
    return get_backend().ok_void()


def throw(error: Any) -> NoReturn:
    get_backend().throw(error)
    raise AssertionError("unreachable")  # pragma: no cover


def throw_always_error(expr: Any) -> NoReturn:
    get_backend().throw_always_error(expr)
    raise AssertionError("unreachable")  # pragma: no cover


def convert_error(error: Any) -> Any:
    return get_backend().convert_error(error)


def convert_always_error(expr: Any) -> Any:
    return get_backend().convert_always_error(expr)


def propagate(expr: Any) -> Any:
    return get_backend().propagate(expr)


def force_unwrap(expr: Any) -> Any:
    return get_backend().force_unwrap(expr)


def try_catch(
    expr: Callable[[], Any],
    on_success: Callable[[Any], Any],
    on_failure: Callable[[Any], Any],
) -> Any:
    """Evaluate ``expr()``; run ``on_success(value)`` or ``on_failure(error)``."""
    return get_backend().try_catch(expr, on_success, on_failure)


__all__ = [  # noqa: RUF022
    # Operators
    "result_context",
    "result_context_ptr",
    "result_context_const_ptr",
    "result_context_always_error",
    "ok",
    "ok_void",
    "throw",
    "throw_always_error",
    "convert_error",
    "convert_always_error",
    "propagate",
    "force_unwrap",
    "try_catch",
    # Registry
    "Result",
    "ResultKind",
    "AlwaysErrorResult",
    "VoidResult",
    "VOID",
    "ConstRef",
    "deref",
    "declare_result",
    "declare_result_ptr",
    "declare_result_const_ptr",
    "result",
    "result_ptr",
    "result_const_ptr",
    # Backend selection and configuration
    "get_backend",
    "backend_name",
    "backend_scope",
    "config_scope",
    "current_config",
    "resolve_config",
    # Abort hook
    "get_abort_hook",
    "set_abort_hook",
    "abort_hook_scope",
    # Errors
    "TryCatchError",
    "ConfigurationError",
    "RegistrationError",
    "UnregisteredTypeError",
    "ResultTypeError",
    "ErrorPayloadError",
    "NoResultContextError",
    "UncaughtThrowError",
    "ForceUnwrapError",
    "AbortHookReturnedError",
]
