"""Result type registry.

Every success type used with the propagation operators must be declared once,
the way a concrete instantiation of a template would be. Declaring ``T``
produces a dedicated ``Result`` subclass (``IntResult``, ``PointPtrResult``,
...) that knows its success type, its storage kind and the sentinel value it
exposes when it carries an error.

Three storage kinds exist per success type:

- ``VALUE``: the success value is stored by value (shallow copy) and a failed
  Result exposes the type's zero value.
- ``PTR``: the success value is stored by reference and a failed Result
  exposes ``None``.
- ``CONST_PTR``: like ``PTR`` but the stored value is a read-only
  :class:`ConstRef` view.

Declarations are idempotent and live for the life of the process.
"""

from __future__ import annotations

import copy
import dataclasses
from enum import Enum
import logging
import threading
from typing import TYPE_CHECKING, Any, ClassVar, Final, Self

from trycatch.errors import (
    HINTS,
    RegistrationError,
    ResultTypeError,
    UnregisteredTypeError,
)

if TYPE_CHECKING:
    from collections.abc import Callable

log = logging.getLogger(__name__)

__all__ = [
    "VOID",
    "AlwaysErrorResult",
    "ConstRef",
    "Result",
    "ResultKind",
    "VoidResult",
    "declare_result",
    "declare_result_const_ptr",
    "declare_result_ptr",
    "deref",
    "is_registered",
    "registered_types",
    "result",
    "result_const_ptr",
    "result_ptr",
]


class ResultKind(str, Enum):
    """Storage kind of a registered Result class."""

    VALUE = "value"
    PTR = "ptr"
    CONST_PTR = "const_ptr"
    ALWAYS_ERROR = "always_error"


class _Void:
    """Zero-sized success marker for void results."""

    __slots__ = ()
    _instance: ClassVar[_Void | None] = None

    def __new__(cls) -> _Void:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "VOID"

    def __reduce__(self) -> str:
        return "VOID"

    def __copy__(self) -> _Void:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Void:
        return self


VOID: Final = _Void()

# Values of these types cannot be mutated, so a const view adds nothing.
_IMMUTABLE_TYPES = (int, float, complex, bool, str, bytes, tuple, frozenset, _Void)


class ConstRef:
    """Read-only view over a referenced object.

    Reads (attributes, items, iteration, comparison) go to the target; any
    attempt to assign or delete through the view raises ``TypeError``.
    """

    __slots__ = ("_target",)

    def __init__(self, target: Any) -> None:
        object.__setattr__(self, "_target", target)

    def __getattr__(self, name: str) -> Any:
        return getattr(object.__getattribute__(self, "_target"), name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise TypeError(f"cannot assign attribute {name!r} through a const reference")

    def __delattr__(self, name: str) -> None:
        raise TypeError(f"cannot delete attribute {name!r} through a const reference")

    def __getitem__(self, key: Any) -> Any:
        return object.__getattribute__(self, "_target")[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        raise TypeError("cannot assign items through a const reference")

    def __delitem__(self, key: Any) -> None:
        raise TypeError("cannot delete items through a const reference")

    def __iter__(self) -> Any:
        return iter(object.__getattribute__(self, "_target"))

    def __len__(self) -> int:
        return len(object.__getattribute__(self, "_target"))

    def __contains__(self, item: Any) -> bool:
        return item in object.__getattribute__(self, "_target")

    def __eq__(self, other: object) -> bool:
        return object.__getattribute__(self, "_target") == deref(other)

    def __hash__(self) -> int:
        return hash(object.__getattribute__(self, "_target"))

    def __repr__(self) -> str:
        return f"ConstRef({object.__getattribute__(self, '_target')!r})"


def deref(obj: Any) -> Any:
    """Return the object behind a :class:`ConstRef`, or *obj* unchanged."""
    if isinstance(obj, ConstRef):
        return object.__getattribute__(obj, "_target")
    return obj


# --- Result containers ---


@dataclasses.dataclass(frozen=True, slots=True)
class Result[T]:
    """Tagged container holding a success value or an error payload.

    ``error is None`` means success. Consumers must check ``error`` first:
    on failure ``value`` only holds the sentinel of the registered type.
    """

    value: T
    error: Any = None

    success_type: ClassVar[type] = object
    kind: ClassVar[ResultKind] = ResultKind.VALUE
    _zero: ClassVar[Callable[[], Any]] = staticmethod(lambda: None)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_err(self) -> bool:
        return self.error is not None

    @classmethod
    def sentinel(cls) -> Any:
        """Return the success value exposed by a failed Result of this class."""
        return cls._zero()

    @classmethod
    def success(cls, value: Any, *, strict: bool = True) -> Self:
        """Wrap *value* with no error, storing it according to ``kind``."""
        if strict:
            value = _check_success(cls, value)
        if cls.kind is ResultKind.VALUE:
            value = copy.copy(value)
        elif cls.kind is ResultKind.CONST_PTR and not (
            value is None or isinstance(value, (ConstRef, *_IMMUTABLE_TYPES))
        ):
            value = ConstRef(value)
        return cls(value=value, error=None)

    @classmethod
    def failure(cls, error: Any) -> Self:
        """Return a Result carrying *error* and the sentinel success value."""
        return cls(value=cls.sentinel(), error=error)


class AlwaysErrorResult(Result[_Void]):
    """Result with no success channel, for operations that can only fail."""

    __slots__ = ()

    success_type: ClassVar[type] = _Void
    kind: ClassVar[ResultKind] = ResultKind.ALWAYS_ERROR
    _zero = staticmethod(lambda: VOID)

    @classmethod
    def success(cls, value: Any, *, strict: bool = True) -> Self:
        raise ResultTypeError(
            "AlwaysErrorResult has no success channel",
            hint="Return convert_error(...) or throw() instead.",
        )


def _check_success(cls: type[Result[Any]], value: Any) -> Any:
    tp = cls.success_type
    if tp is object:
        return value
    if tp is _Void:
        if value is not VOID:
            raise ResultTypeError(f"{cls.__name__} only accepts VOID, got {value!r}")
        return value
    if value is None and cls.kind in (ResultKind.PTR, ResultKind.CONST_PTR):
        return value
    if isinstance(value, tp):
        return value
    # Numeric promotion: float accepts int, complex accepts int and float.
    if tp is float and isinstance(value, int):
        return float(value)
    if tp is complex and isinstance(value, (int, float)):
        return complex(value)
    if cls.kind is ResultKind.CONST_PTR and isinstance(deref(value), tp):
        return value
    raise ResultTypeError(
        f"{cls.__name__} expects a {tp.__name__} success value, "
        f"got {type(value).__name__}"
    )


# --- Registry ---

_REGISTRY: dict[tuple[type, ResultKind], type[Result[Any]]] = {}
_ZERO_SOURCES: dict[type, Any] = {}
_LOCK = threading.Lock()

_SUFFIXES = {
    ResultKind.VALUE: "",
    ResultKind.PTR: "Ptr",
    ResultKind.CONST_PTR: "ConstPtr",
}


def _normalize(tp: Any) -> type:
    if tp is None or tp is type(None):
        return _Void
    if not isinstance(tp, type):
        raise RegistrationError(
            f"Result success types must be classes, got {tp!r}",
            hint="Use the runtime class (e.g. list) rather than a typing alias.",
        )
    return tp


def _class_name(tp: type, kind: ResultKind) -> str:
    if tp is _Void:
        base = "Void"
    else:
        base = tp.__name__[:1].upper() + tp.__name__[1:]
    return f"{base}{_SUFFIXES[kind]}Result"


def _default_zero(tp: type) -> Callable[[], Any]:
    if tp is _Void:
        return lambda: VOID
    try:
        tp()
    except Exception:
        return lambda: None
    return tp


def _declare(
    tp: Any, kind: ResultKind, zero: Callable[[], Any] | None = None
) -> type[Result[Any]]:
    norm = _normalize(tp)
    if norm is _Void and kind is not ResultKind.VALUE:
        raise RegistrationError("void results have no pointer forms")
    key = (norm, kind)
    with _LOCK:
        existing = _REGISTRY.get(key)
        if existing is not None:
            if zero is not None and _ZERO_SOURCES.get(norm) is not zero:
                raise RegistrationError(
                    f"{existing.__name__} is already declared with a different zero"
                )
            return existing

        if kind is ResultKind.VALUE:
            factory = zero if zero is not None else _default_zero(norm)
            if zero is not None:
                _ZERO_SOURCES[norm] = zero
        else:
            factory = lambda: None  # noqa: E731

        cls = type(
            _class_name(norm, kind),
            (Result,),
            {
                "__slots__": (),
                "__module__": __name__,
                "success_type": norm,
                "kind": kind,
                "_zero": staticmethod(factory),
            },
        )
        _REGISTRY[key] = cls
    log.debug("Declared %s for %s", cls.__name__, norm.__name__)
    return cls


def declare_result(
    tp: Any, *, zero: Callable[[], Any] | None = None
) -> type[Result[Any]]:
    """Declare the by-value Result class for *tp* and return it.

    Args:
        tp: Success type. ``None`` declares the void result.
        zero: Factory for the sentinel value of failed Results. Defaults to
            ``tp()`` when that works without arguments, else ``None``.

    Raises:
        RegistrationError: If *tp* is already declared with another ``zero``.
    """
    return _declare(tp, ResultKind.VALUE, zero)


def declare_result_ptr(tp: Any) -> type[Result[Any]]:
    """Declare the by-reference Result class for *tp*."""
    return _declare(tp, ResultKind.PTR)


def declare_result_const_ptr(tp: Any) -> type[Result[Any]]:
    """Declare the read-only reference Result class for *tp*."""
    return _declare(tp, ResultKind.CONST_PTR)


def _lookup(tp: Any, kind: ResultKind) -> type[Result[Any]]:
    norm = _normalize(tp)
    cls = _REGISTRY.get((norm, kind))
    if cls is None:
        label = "void" if norm is _Void else norm.__name__
        raise UnregisteredTypeError(
            f"No {kind.value} Result declared for {label}",
            hint=HINTS["unregistered_type"],
        )
    return cls


def result(tp: Any) -> type[Result[Any]]:
    """Return the declared by-value Result class for *tp*."""
    return _lookup(tp, ResultKind.VALUE)


def result_ptr(tp: Any) -> type[Result[Any]]:
    """Return the declared by-reference Result class for *tp*."""
    return _lookup(tp, ResultKind.PTR)


def result_const_ptr(tp: Any) -> type[Result[Any]]:
    """Return the declared read-only reference Result class for *tp*."""
    return _lookup(tp, ResultKind.CONST_PTR)


def is_registered(tp: Any, kind: ResultKind = ResultKind.VALUE) -> bool:
    """Return True if *tp* has a Result class of the given kind."""
    try:
        _lookup(tp, kind)
    except UnregisteredTypeError:
        return False
    return True


def registered_types() -> list[str]:
    """Names of all declared Result classes, sorted."""
    return sorted(cls.__name__ for cls in _REGISTRY.values())


# --- Default declarations ---

for _tp in (int, float, complex, bool, str, bytes):
    declare_result(_tp)
    declare_result_ptr(_tp)
    declare_result_const_ptr(_tp)
declare_result(None)
declare_result_ptr(object)
declare_result_const_ptr(object)
del _tp

VoidResult: Final = result(None)
