"""Checks shared by both propagation backends."""

from __future__ import annotations

from typing import Any

from trycatch.config import current_config
from trycatch.errors import HINTS, ErrorPayloadError, ResultTypeError
from trycatch.registry import AlwaysErrorResult, Result


def check_payload(error: Any) -> Any:
    """Validate a payload about to be thrown and return it unchanged."""
    if error is None:
        raise ErrorPayloadError("cannot throw None", hint=HINTS["none_payload"])
    cfg = current_config()
    error_cls = cfg.error_class()
    if error_cls is not object and not isinstance(error, error_cls):
        raise ErrorPayloadError(
            f"error payload must be {cfg.error_type}, got {type(error).__name__}"
        )
    return error


def check_result(expr: Any, op: str) -> Result[Any]:
    if not isinstance(expr, Result):
        raise ResultTypeError(
            f"{op}() expects a Result, got {type(expr).__name__}",
            hint="Call a function decorated with @result_context(...).",
        )
    return expr


def check_always_error(expr: Any, op: str) -> AlwaysErrorResult:
    if not isinstance(expr, AlwaysErrorResult):
        raise ResultTypeError(
            f"{op}() expects an AlwaysErrorResult, got {type(expr).__name__}"
        )
    return expr


def check_callables(**fns: Any) -> None:
    for name, fn in fns.items():
        if not callable(fn):
            raise TypeError(f"{name} must be callable, got {type(fn).__name__}")
