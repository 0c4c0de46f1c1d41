"""Extraction, validation and coercion of request parameters."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from typing import Union

from restful.core.errors import HttpError
from restful.core.errors import default_http_error


class _Missing:
    """Marker for a key absent from its source map."""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict) -> _Missing:
        return self

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class Predicate:
    """Validator called as ``fn(value)``."""

    fn: Callable[[Any], bool]

    def check(self, value: Any) -> bool:
        return bool(self.fn(value))


@dataclass(frozen=True)
class PredicateWithArg:
    """Validator called as ``fn(value, arg)``."""

    fn: Callable[[Any, Any], bool]
    arg: Any

    def check(self, value: Any) -> bool:
        return bool(self.fn(value, self.arg))


@dataclass(frozen=True)
class Transform:
    """Coercion called as ``fn(value)``."""

    fn: Callable[[Any], Any]

    def apply(self, value: Any) -> Any:
        return self.fn(value)


class TransformWithArgs:
    """Coercion called as ``fn(value, *args)``."""

    __slots__ = ("fn", "args")

    def __init__(self, fn: Callable[..., Any], *args: Any) -> None:
        self.fn = fn
        self.args = args

    def apply(self, value: Any) -> Any:
        return self.fn(value, *self.args)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransformWithArgs):
            return NotImplemented
        return self.fn == other.fn and self.args == other.args

    def __hash__(self) -> int:
        return hash((self.fn, self.args))

    def __repr__(self) -> str:
        return f"TransformWithArgs({self.fn!r}, *{self.args!r})"


Validator = Union[Predicate, PredicateWithArg]
Coercion = Union[Transform, TransformWithArgs]


@dataclass(frozen=True)
class FieldOptions:
    """How one named parameter is read.

    ``error`` is raised for a missing required value and for a failed
    validation; when left unset a fresh generic 400 error is raised instead.
    ``coerce`` converts the validated raw value. ``default`` is returned for
    an absent optional value and stays ``MISSING`` unless set.
    """

    required: bool = False
    error: HttpError | None = None
    default: Any = MISSING
    validator: Validator | None = None
    coerce: Coercion | None = None

    def __post_init__(self) -> None:
        if self.error is not None and not isinstance(self.error, HttpError):
            raise TypeError("FieldOptions.error must be an HttpError")
        if self.validator is not None and not isinstance(self.validator, (Predicate, PredicateWithArg)):
            raise TypeError("FieldOptions.validator must be a Predicate or PredicateWithArg")
        if self.coerce is not None and not isinstance(self.coerce, (Transform, TransformWithArgs)):
            raise TypeError("FieldOptions.coerce must be a Transform or TransformWithArgs")

    def failure(self) -> HttpError:
        return self.error if self.error is not None else default_http_error()


FieldSpec = Union[FieldOptions, Mapping[str, Any], None]


def field_options(options: FieldSpec) -> FieldOptions:
    """Normalize a ``FieldOptions``, a mapping of its keywords, or ``None``."""
    if options is None:
        return FieldOptions()
    if isinstance(options, FieldOptions):
        return options
    return FieldOptions(**options)


def is_absent(value: Any) -> bool:
    """Return whether ``value`` stands for a key the source did not contain.

    ``None`` is a present value (a JSON ``null``), not an absent one.
    """
    return value is MISSING


def resolve_field(raw_value: Any = MISSING, options: FieldSpec = None) -> Any:
    """Validate and coerce one raw parameter value.

    ``raw_value`` is ``MISSING`` when the key is absent from its source. An
    absent optional value resolves to the field's default, itself ``MISSING``
    unless set. Raises the field's error when a required value is absent or
    when the validator rejects the value. Errors raised by the coercion
    propagate as is.
    """
    opts = field_options(options)

    if is_absent(raw_value):
        if opts.required:
            raise opts.failure()
        return opts.default

    if opts.validator is not None and not opts.validator.check(raw_value):
        raise opts.failure()

    if opts.coerce is None:
        return raw_value
    return opts.coerce.apply(raw_value)


def resolve_fields(source: Mapping[str, Any], fields: Mapping[str, FieldSpec]) -> dict[str, Any]:
    """Resolve every field in ``fields`` over a shallow copy of ``source``.

    Keys of ``source`` without options pass through untouched.
    """
    values = dict(source)
    for name, options in fields.items():
        values[name] = resolve_field(source.get(name, MISSING), options)
    return values
