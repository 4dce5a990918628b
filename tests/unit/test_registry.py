"""Unit tests for the Result type registry."""

from __future__ import annotations

import copy
from dataclasses import FrozenInstanceError, dataclass, field
import pickle

import pytest

from tests.helpers import Point
from trycatch.errors import RegistrationError, ResultTypeError, UnregisteredTypeError
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
    is_registered,
    registered_types,
    result,
    result_const_ptr,
    result_ptr,
)

pytestmark = pytest.mark.unit


class Unregistered:
    pass


@dataclass
class Bag:
    items: list[int] = field(default_factory=list)


declare_result(Bag)
declare_result_ptr(Bag)
declare_result_const_ptr(Bag)


class TestDeclarations:
    @pytest.mark.parametrize("tp", [int, float, complex, bool, str, bytes])
    def test_primitives_are_preregistered_in_all_forms(self, tp):
        assert result(tp).kind is ResultKind.VALUE
        assert result_ptr(tp).kind is ResultKind.PTR
        assert result_const_ptr(tp).kind is ResultKind.CONST_PTR

    def test_void_and_untyped_pointer_are_preregistered(self):
        assert result(None) is VoidResult
        assert is_registered(object, ResultKind.PTR)
        assert is_registered(object, ResultKind.CONST_PTR)

    def test_declaration_is_idempotent(self):
        assert declare_result(Point) is declare_result(Point)
        assert declare_result(Point) is result(Point)
        assert declare_result_ptr(Point) is result_ptr(Point)

    def test_forms_are_distinct_classes(self):
        assert result(int) is not result_ptr(int)
        assert result_ptr(int) is not result_const_ptr(int)
        assert issubclass(result(int), Result)

    def test_class_names_follow_the_success_type(self):
        assert result(int).__name__ == "IntResult"
        assert result_ptr(Point).__name__ == "PointPtrResult"
        assert result_const_ptr(str).__name__ == "StrConstPtrResult"
        assert VoidResult.__name__ == "VoidResult"
        assert "PointResult" in registered_types()

    def test_unregistered_lookup_fails(self):
        with pytest.raises(UnregisteredTypeError) as exc:
            result(Unregistered)
        assert "declare_result" in str(exc.value)
        assert not is_registered(Unregistered)

    def test_pointer_form_needs_its_own_declaration(self):
        class OnlyByValue:
            pass

        declare_result(OnlyByValue)
        with pytest.raises(UnregisteredTypeError):
            result_ptr(OnlyByValue)

    def test_conflicting_zero_is_rejected(self):
        class Gauge:
            pass

        declare_result(Gauge, zero=lambda: "first")
        with pytest.raises(RegistrationError):
            declare_result(Gauge, zero=lambda: "second")

    def test_void_has_no_pointer_forms(self):
        with pytest.raises(RegistrationError):
            declare_result_ptr(None)

    def test_non_class_types_are_rejected(self):
        with pytest.raises(RegistrationError):
            declare_result(int | None)


class TestResultValues:
    def test_success_has_no_error(self):
        res = result(int).success(10)

        assert res.value == 10
        assert res.error is None
        assert res.is_ok and not res.is_err

    def test_failure_exposes_zero_sentinel(self):
        res = result(int).failure("Error")

        assert res.value == 0
        assert res.error == "Error"
        assert res.is_err

    def test_failed_struct_is_zero_initialized(self):
        res = result(Point).failure("Error")

        assert res.value == Point(0, 0)

    def test_failed_pointer_is_none(self):
        res = result_ptr(Point).failure("Error")

        assert res.value is None
        assert res.error == "Error"

    def test_custom_zero_factory(self):
        class Temperature:
            def __init__(self, kelvin: float) -> None:
                self.kelvin = kelvin

        cls = declare_result(Temperature, zero=lambda: Temperature(0.0))

        assert cls.failure("cold").value.kelvin == 0.0

    def test_type_without_default_constructor_falls_back_to_none(self):
        class NeedsArgs:
            def __init__(self, required: int) -> None:
                self.required = required

        assert declare_result(NeedsArgs).failure("x").value is None

    def test_value_kind_copies_while_pointer_kind_shares(self):
        point = Point(1, 2)

        by_value = result(Point).success(point)
        by_ref = result_ptr(Point).success(point)

        assert by_value.value == point and by_value.value is not point
        assert by_ref.value is point

    def test_const_pointer_is_read_only(self):
        bag = Bag([1, 2])

        res = result_const_ptr(Bag).success(bag)

        assert isinstance(res.value, ConstRef)
        assert res.value.items == [1, 2]
        assert res.value == bag
        assert deref(res.value) is bag
        with pytest.raises(TypeError):
            res.value.items = []

    def test_const_pointer_leaves_immutables_alone(self):
        assert result_const_ptr(str).success("text").value == "text"

    def test_results_are_frozen(self):
        res = result(int).success(1)

        with pytest.raises(FrozenInstanceError):
            res.value = 2  # type: ignore[misc]

    def test_results_compare_by_class_and_fields(self):
        assert result(int).success(1) == result(int).success(1)
        assert result(int).success(1) != result_ptr(int).success(1)


class TestSuccessTypeChecks:
    def test_wrong_type_is_rejected(self):
        with pytest.raises(ResultTypeError):
            result(int).success("ten")

    def test_float_accepts_int(self):
        res = result(float).success(3)

        assert res.value == 3.0
        assert isinstance(res.value, float)

    def test_complex_accepts_reals(self):
        assert result(complex).success(2.5).value == complex(2.5)

    def test_pointer_kinds_accept_none(self):
        assert result_ptr(Point).success(None).value is None

    def test_untyped_pointer_accepts_anything(self):
        marker = object()

        assert result_ptr(object).success(marker).value is marker

    def test_checks_can_be_disabled(self):
        assert result(int).success("ten", strict=False).value == "ten"

    def test_void_only_accepts_void(self):
        assert VoidResult.success(VOID).value is VOID
        with pytest.raises(ResultTypeError):
            VoidResult.success(None)


class TestVoidAndAlwaysError:
    def test_void_marker_is_a_falsy_singleton(self):
        assert not VOID
        assert copy.copy(VOID) is VOID
        assert copy.deepcopy(VOID) is VOID
        assert pickle.loads(pickle.dumps(VOID)) is VOID
        assert repr(VOID) == "VOID"

    def test_always_error_has_no_success_channel(self):
        with pytest.raises(ResultTypeError):
            AlwaysErrorResult.success(VOID)

    def test_always_error_failure(self):
        res = AlwaysErrorResult.failure("Error")

        assert res.value is VOID
        assert res.error == "Error"
        assert res.kind is ResultKind.ALWAYS_ERROR
