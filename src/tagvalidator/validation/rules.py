"""Built-in validation rules.

Each rule inspects the field type at compile time and returns a check
specialized for it, so an inapplicable rule (``regexp`` on an ``int``) is
detected once per type instead of once per value.
"""

import functools
import re
from typing import Any, Callable

from ..errors import BadParameterError, ErrorKind, UnsupportedTypeError
from .base import Check, Reporter, Rule
from .types import NUMERIC_KINDS, SIZED_KINDS, Kind, TypeInfo, describe, is_callable_type

UUID_PATTERN = "(?i)^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"

_ABSENT_KINDS = frozenset({Kind.OPTIONAL, Kind.DYNAMIC, Kind.NONE})


def _unsupported(rule: str, info: TypeInfo) -> UnsupportedTypeError:
    return UnsupportedTypeError(f"{rule} is not a valid rule for type {info}")


def as_int(param: str) -> int:
    """Parse an integer parameter; ``0x``/``0o``/``0b`` prefixes are allowed."""
    try:
        return int(param, 0)
    except ValueError:
        pass
    try:
        # int(..., 0) refuses leading zeros such as "010"
        return int(param, 10)
    except ValueError:
        raise BadParameterError(f"invalid param {param!r}, should be an integer") from None


def as_float(param: str) -> float:
    try:
        return float(param)
    except ValueError:
        raise BadParameterError(f"invalid param {param!r}, should be a float") from None


def _measured(rule: str, info: TypeInfo, param: str) -> tuple[Callable[[Any], Any], Any]:
    """Measure function and parsed bound for the numeric rules.

    Sized kinds are measured by ``len``, numbers by their value.
    """
    if info.kind in SIZED_KINDS:
        return len, as_int(param)
    if info.kind is Kind.INTEGER:
        return _identity, as_int(param)
    if info.kind is Kind.FLOAT:
        return _identity, as_float(param)
    raise _unsupported(rule, info)


def _identity(value: Any) -> Any:
    return value


def _zero_test(kind: Kind) -> Callable[[Any], bool] | None:
    """Predicate telling a zero value of ``kind`` apart, if the kind has one."""
    if kind in SIZED_KINDS:
        return _is_empty
    if kind in NUMERIC_KINDS or kind is Kind.BOOLEAN:
        return _is_falsy
    return None


def _is_empty(value: Any) -> bool:
    return len(value) == 0


def _is_falsy(value: Any) -> bool:
    return not value


@functools.lru_cache(maxsize=256)
def _runtime_zero_test(cls: type) -> Callable[[Any], bool] | None:
    return _zero_test(describe(cls).kind)


class NonzeroRule(Rule):
    """Value differs from its type's zero value (``""``, ``0``, ``False``, empty, ``None``)."""

    @property
    def name(self) -> str:
        return "nonzero"

    def compile(self, info: TypeInfo, param: str) -> Check:
        if info.kind is Kind.DYNAMIC:
            return _dynamic_nonzero
        if info.kind in _ABSENT_KINDS:
            def check(value: Any, reporter: Reporter) -> None:
                if value is None:
                    reporter.report(ErrorKind.ZERO_VALUE)
            return check

        is_zero = _zero_test(info.kind)
        if is_zero is None:
            raise _unsupported(self.name, info)

        def check(value: Any, reporter: Reporter) -> None:
            if is_zero(value):
                reporter.report(ErrorKind.ZERO_VALUE)
        return check


def _dynamic_nonzero(value: Any, reporter: Reporter) -> None:
    # zero value of the type held at run time; types without one always pass
    if value is None:
        reporter.report(ErrorKind.ZERO_VALUE)
        return
    is_zero = _runtime_zero_test(type(value))
    if is_zero is not None and is_zero(value):
        reporter.report(ErrorKind.ZERO_VALUE)


class RequiredRule(Rule):
    """Value is present. Only optional and dynamic values can be absent."""

    @property
    def name(self) -> str:
        return "required"

    def compile(self, info: TypeInfo, param: str) -> Check:
        if is_callable_type(info):
            raise _unsupported(self.name, info)
        if info.kind not in _ABSENT_KINDS:
            return _always_valid

        def check(value: Any, reporter: Reporter) -> None:
            if value is None:
                reporter.report(ErrorKind.REQUIRED)
        return check


def _always_valid(value: Any, reporter: Reporter) -> None:
    pass


class LenRule(Rule):
    """Length (strings, collections) or value (numbers) equals the parameter."""

    @property
    def name(self) -> str:
        return "len"

    def compile(self, info: TypeInfo, param: str) -> Check:
        measure, expected = _measured(self.name, info, param)

        def check(value: Any, reporter: Reporter) -> None:
            if measure(value) != expected:
                reporter.report(ErrorKind.LEN)
        return check


class MinRule(Rule):
    """Length or value is at least the parameter."""

    @property
    def name(self) -> str:
        return "min"

    def compile(self, info: TypeInfo, param: str) -> Check:
        measure, bound = _measured(self.name, info, param)

        def check(value: Any, reporter: Reporter) -> None:
            if measure(value) < bound:
                reporter.report(ErrorKind.MIN)
        return check


class MaxRule(Rule):
    """Length or value is at most the parameter."""

    @property
    def name(self) -> str:
        return "max"

    def compile(self, info: TypeInfo, param: str) -> Check:
        measure, bound = _measured(self.name, info, param)

        def check(value: Any, reporter: Reporter) -> None:
            if measure(value) > bound:
                reporter.report(ErrorKind.MAX)
        return check


def _pattern_check(rule: str, info: TypeInfo, pattern: str) -> Check:
    if info.kind is not Kind.STRING:
        raise _unsupported(rule, info)
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise BadParameterError(f"invalid regular expression {pattern!r}: {e}") from None

    def check(value: Any, reporter: Reporter) -> None:
        if compiled.search(value) is None:
            reporter.report(ErrorKind.REGEXP)
    return check


class RegexpRule(Rule):
    """String matches the regular expression given as parameter (unanchored search)."""

    @property
    def name(self) -> str:
        return "regexp"

    def compile(self, info: TypeInfo, param: str) -> Check:
        return _pattern_check(self.name, info, param)


class UUIDRule(Rule):
    """String is an RFC 4122 UUID, any letter case."""

    @property
    def name(self) -> str:
        return "uuid"

    def compile(self, info: TypeInfo, param: str) -> Check:
        return _pattern_check(self.name, info, UUID_PATTERN)


class _CoordinateRule(Rule):
    """Float, or string holding a float, within ``[-limit, limit]`` degrees."""

    label = ""
    limit = 0.0
    kind = ErrorKind.CUSTOM

    @property
    def name(self) -> str:
        return self.label

    def compile(self, info: TypeInfo, param: str) -> Check:
        if info.kind is Kind.FLOAT:
            return self._range_check
        if info.kind is Kind.STRING:
            return self._text_check
        raise _unsupported(self.name, info)

    def _range_check(self, value: Any, reporter: Reporter) -> None:
        # written so that NaN is out of range
        if not -self.limit <= value <= self.limit:
            reporter.report(
                self.kind,
                f"{self.kind.value}: {value} is outside [-{self.limit:g}, {self.limit:g}]",
            )

    def _text_check(self, value: Any, reporter: Reporter) -> None:
        try:
            parsed = float(value)
        except ValueError:
            reporter.report(ErrorKind.BAD_FORMAT, f"invalid {self.label} format: {value!r}")
            return
        self._range_check(parsed, reporter)


class LatitudeRule(_CoordinateRule):
    """Float, or string holding a float, within [-90, 90]."""

    label = "latitude"
    limit = 90.0
    kind = ErrorKind.LATITUDE


class LongitudeRule(_CoordinateRule):
    """Float, or string holding a float, within [-180, 180]."""

    label = "longitude"
    limit = 180.0
    kind = ErrorKind.LONGITUDE


BUILTIN_RULES: tuple[Rule, ...] = (
    NonzeroRule(),
    LenRule(),
    MinRule(),
    MaxRule(),
    RegexpRule(),
    UUIDRule(),
    RequiredRule(),
    LatitudeRule(),
    LongitudeRule(),
)
