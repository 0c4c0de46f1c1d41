"""Unit tests for parameter resolution."""

from __future__ import annotations

import pytest

from restful.core.errors import HttpError
from restful.params import MISSING
from restful.params import FieldOptions
from restful.params import Predicate
from restful.params import PredicateWithArg
from restful.params import Transform
from restful.params import TransformWithArgs
from restful.params import field_options
from restful.params import resolve_field
from restful.params import resolve_fields
from restful.validators import is_int
from restful.validators import to_int


class Recorder:
    """Callable that records its arguments and returns a fixed result."""

    def __init__(self, result) -> None:
        self.result = result
        self.calls: list[tuple] = []

    def __call__(self, *args):
        self.calls.append(args)
        return self.result


def test_missing_required_value_raises_configured_error() -> None:
    error = HttpError("name is required", 422)
    options = FieldOptions(required=True, error=error, default="ignored")

    with pytest.raises(HttpError) as excinfo:
        resolve_field(MISSING, options)

    assert excinfo.value is error


def test_missing_required_value_without_error_raises_generic_400() -> None:
    with pytest.raises(HttpError) as excinfo:
        resolve_field(MISSING, FieldOptions(required=True))

    assert excinfo.value.status_code == 400
    assert excinfo.value.message == "invalid parameter format"


def test_default_errors_are_fresh_instances() -> None:
    options = FieldOptions(required=True)
    errors = []
    for _ in range(2):
        with pytest.raises(HttpError) as excinfo:
            resolve_field(MISSING, options)
        errors.append(excinfo.value)

    assert errors[0] is not errors[1]


def test_missing_optional_value_returns_default_without_validating() -> None:
    validator = Recorder(False)
    transform = Recorder("converted")
    default = object()
    options = FieldOptions(default=default, validator=Predicate(validator), coerce=Transform(transform))

    assert resolve_field(MISSING, options) is default
    assert validator.calls == []
    assert transform.calls == []


def test_missing_optional_value_without_default_stays_missing() -> None:
    assert resolve_field(MISSING, FieldOptions()) is MISSING


def test_none_is_a_present_value() -> None:
    validator = Recorder(True)
    options = FieldOptions(default="fallback", validator=Predicate(validator))

    assert resolve_field(None, options) is None
    assert validator.calls == [(None,)]


def test_required_none_fails_validation_instead_of_counting_as_missing() -> None:
    error = HttpError("size must be an integer", 400)
    options = FieldOptions(required=True, error=error, validator=Predicate(is_int))

    with pytest.raises(HttpError) as excinfo:
        resolve_field(None, options)

    assert excinfo.value is error
    assert resolve_field(None, FieldOptions(required=True)) is None


def test_resolve_fields_keeps_explicit_none() -> None:
    result = resolve_fields({"color": None}, {"color": FieldOptions(default="blue")})

    assert result == {"color": None}


def test_missing_marker_is_falsy_singleton() -> None:
    import copy

    assert not MISSING
    assert copy.deepcopy(MISSING) is MISSING
    assert repr(MISSING) == "MISSING"


def test_failed_validation_raises_and_skips_coercion() -> None:
    error = HttpError("bad", 400)
    transform = Recorder("converted")
    options = FieldOptions(error=error, validator=Predicate(lambda value: False), coerce=Transform(transform))

    with pytest.raises(HttpError) as excinfo:
        resolve_field("x", options)

    assert excinfo.value is error
    assert transform.calls == []


def test_validator_with_argument_receives_it() -> None:
    validator = Recorder(True)
    options = FieldOptions(validator=PredicateWithArg(validator, {"min": 1}))

    assert resolve_field("5", options) == "5"
    assert validator.calls == [("5", {"min": 1})]


def test_value_without_coercion_is_returned_unchanged() -> None:
    value = ["a", "b"]

    assert resolve_field(value, FieldOptions(validator=Predicate(lambda v: True))) is value


def test_coercion_result_is_returned() -> None:
    options = FieldOptions(validator=PredicateWithArg(is_int, {"min": 1}), coerce=Transform(to_int))

    assert resolve_field("42", options) == 42


def test_coercion_with_extra_arguments() -> None:
    transform = Recorder(255)
    options = FieldOptions(coerce=TransformWithArgs(transform, 16))

    assert resolve_field("ff", options) == 255
    assert transform.calls == [("ff", 16)]


def test_coercion_errors_propagate_unchanged() -> None:
    options = FieldOptions(coerce=Transform(int))

    with pytest.raises(ValueError):
        resolve_field("not-a-number", options)


def test_error_must_be_structured() -> None:
    with pytest.raises(TypeError):
        FieldOptions(error=ValueError("plain"))  # type: ignore[arg-type]


def test_plain_callables_are_rejected_as_validators() -> None:
    with pytest.raises(TypeError):
        FieldOptions(validator=lambda value: True)  # type: ignore[arg-type]


def test_mapping_options_are_normalized() -> None:
    options = field_options({"required": True, "default": 3})

    assert options == FieldOptions(required=True, default=3)
    assert field_options(None) == FieldOptions()


def test_resolve_fields_without_options_copies_source() -> None:
    source = {"a": "1", "b": ["x"]}

    result = resolve_fields(source, {})

    assert result == source
    assert result is not source
    assert result["b"] is source["b"]


def test_resolve_fields_overwrites_listed_fields_only() -> None:
    source = {"limit": "10", "name": "widget"}
    fields = {
        "limit": FieldOptions(coerce=Transform(to_int)),
        "page": FieldOptions(default=1),
        "offset": FieldOptions(),
    }

    result = resolve_fields(source, fields)

    assert result == {"limit": 10, "name": "widget", "page": 1, "offset": MISSING}
    assert source == {"limit": "10", "name": "widget"}


def test_resolve_fields_raises_for_missing_required_field() -> None:
    with pytest.raises(HttpError):
        resolve_fields({}, {"name": {"required": True}})


def test_lookalike_exception_is_not_structured() -> None:
    class Impostor(Exception):
        def __init__(self) -> None:
            super().__init__("type")
            self.message = "type"
            self.status_code = 400

    with pytest.raises(TypeError):
        FieldOptions(error=Impostor())  # type: ignore[arg-type]
