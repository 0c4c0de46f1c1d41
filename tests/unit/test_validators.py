"""Unit tests for primitive parameter predicates and transforms."""

from __future__ import annotations

import pytest

from restful.validators import is_boolean
from restful.validators import is_int
from restful.validators import to_boolean
from restful.validators import to_int


@pytest.mark.parametrize("value", ["0", "7", "-3", "+12", "01", "007", "-05", 5])
def test_is_int_accepts_integer_literals(value) -> None:
    assert is_int(value)


@pytest.mark.parametrize("value", ["", "1.5", "abc", " 1", "5\n", "1_000", True, None, 2.0])
def test_is_int_rejects_other_values(value) -> None:
    assert not is_int(value)


def test_is_int_leading_zeroes_can_be_refused() -> None:
    assert not is_int("01", {"allow_leading_zeroes": False})
    assert not is_int("-007", {"allow_leading_zeroes": False})
    assert is_int("0", {"allow_leading_zeroes": False})
    assert is_int("10", {"allow_leading_zeroes": False, "min": 1})


def test_is_int_bounds_apply_to_padded_literals() -> None:
    assert is_int("02", {"min": 1})
    assert not is_int("00", {"min": 1})
    assert to_int("02") == 2


def test_is_int_applies_bounds() -> None:
    assert not is_int("0", {"min": 1})
    assert is_int("1", {"min": 1})
    assert is_int("10", {"min": 1, "max": 10})
    assert not is_int("11", {"min": 1, "max": 10})


@pytest.mark.parametrize("value", ["true", "false", "1", "0", True, False])
def test_is_boolean_accepts_boolean_literals(value) -> None:
    assert is_boolean(value)


@pytest.mark.parametrize("value", ["TRUE", "yes", "", 1, None])
def test_is_boolean_rejects_other_values(value) -> None:
    assert not is_boolean(value)


def test_to_boolean_loose_and_strict() -> None:
    assert to_boolean("true") is True
    assert to_boolean("yes") is True
    assert to_boolean("false") is False
    assert to_boolean("0") is False
    assert to_boolean("") is False
    assert to_boolean("yes", strict=True) is False
    assert to_boolean("1", strict=True) is True
    assert to_boolean(False) is False


def test_to_int_parses_literals() -> None:
    assert to_int("42") == 42
    assert to_int("ff", 16) == 255
    assert to_int(9) == 9
    with pytest.raises(ValueError):
        to_int("nine")
