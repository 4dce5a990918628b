"""Test helpers (small, reusable doubles and programs).

``build_program`` defines one small program against a backend module so the
same source can be exercised with either backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType, SimpleNamespace
from typing import Any

from trycatch.registry import (
    declare_result,
    declare_result_const_ptr,
    declare_result_ptr,
)


class AbortCalled(BaseException):
    """Raised by the recording abort hook so force_unwrap never returns."""

    def __init__(self, error: Any):
        self.error = error
        super().__init__(error)


@dataclass
class Point:
    x: int = 0
    y: int = 0


declare_result(Point)
declare_result_ptr(Point)
declare_result_const_ptr(Point)


def observe(backend: ModuleType, thunk: Any) -> tuple[str, Any]:
    """Run *thunk* under try_catch and report which branch ran and with what."""
    return backend.try_catch(
        thunk,
        lambda value: ("ok", value),
        lambda error: ("err", error),
    )


def build_program(b: ModuleType) -> SimpleNamespace:
    """Define the reference program with backend *b*'s operators."""

    @b.result_context(int)
    def return_int_result(value: int, should_fail: bool):
        if should_fail:
            b.throw("Error")
        return b.ok(value)

    @b.result_context(int)
    def return_int_plus_5_result(value: int, should_fail: bool):
        result = b.propagate(return_int_result(value, should_fail))
        return b.ok(result + 5)

    @b.result_context(float)
    def return_double_plus_int_plus_5_result(d: float, i: int, should_fail: bool):
        int_result = b.propagate(return_int_plus_5_result(i, should_fail))
        return b.ok(d + int_result)

    def return_int(i: int, should_fail: bool) -> int:
        return b.try_catch(
            lambda: return_int_result(i, should_fail),
            lambda value: value,
            lambda error: -1,
        )

    def return_int_catching_adding_7(i: int, should_fail: bool) -> int:
        return b.try_catch(
            lambda: return_int_result(i, should_fail),
            lambda value: value + 7,
            lambda error: -1,
        )

    @b.result_context(None)
    def return_void_result(should_fail: bool):
        if should_fail:
            b.throw("Error")
        return b.ok_void()

    @b.result_context_always_error
    def always_throw_error():
        b.throw("Error")

    def catch_always_throw_error() -> str:
        return b.try_catch(
            always_throw_error,
            lambda value: "success",
            lambda error: f"failure:{error}",
        )

    @b.result_context(Point)
    def create_point(x: int, y: int, should_fail: bool):
        if should_fail:
            b.throw("Error")
        return b.ok(Point(x, y))

    @b.result_context_ptr(Point)
    def create_point_on_heap(x: int, y: int, should_fail: bool):
        if should_fail:
            b.throw("Error")
        return b.ok(Point(x, y))

    @b.result_context(int)
    def chain(depth: int, error: Any):
        """Fail with *error* after *depth* nested propagating calls."""
        if depth == 0:
            b.throw(error)
        return b.ok(b.propagate(chain(depth - 1, error)) + 1)

    @b.result_context(int)
    def count_up(depth: int, start: int):
        if depth == 0:
            return b.ok(start)
        return b.ok(b.propagate(count_up(depth - 1, start)) + 1)

    return SimpleNamespace(
        return_int_result=return_int_result,
        return_int_plus_5_result=return_int_plus_5_result,
        return_double_plus_int_plus_5_result=return_double_plus_int_plus_5_result,
        return_int=return_int,
        return_int_catching_adding_7=return_int_catching_adding_7,
        return_void_result=return_void_result,
        always_throw_error=always_throw_error,
        catch_always_throw_error=catch_always_throw_error,
        create_point=create_point,
        create_point_on_heap=create_point_on_heap,
        chain=chain,
        count_up=count_up,
    )
