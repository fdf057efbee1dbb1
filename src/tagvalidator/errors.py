"""Error taxonomy for tagvalidator.

Two families live here:

- ``ValidationErrors`` and ``Violation``: data-quality findings collected while
  walking a value. These are returned, never raised by the library itself.
- ``RuleCompileError`` and its subclasses: a tag or rule that cannot be
  applied to a field. They are raised while compiling and turned into
  per-path violations when the value is validated.

``ConfigurationError`` is the only tagvalidator exception raised to the caller, and
only during setup (registering rules, choosing a tag name).
"""

from dataclasses import dataclass
from enum import Enum

# Rule name recorded for structural failures: unknown rule, bad parameter,
# unsupported type, value of the wrong type.
INVALID_RULE = "invalid"


class ErrorKind(str, Enum):
    """Classification of a single violation."""
    ZERO_VALUE = "zero value"
    MIN = "less than min"
    MAX = "greater than max"
    LEN = "invalid length"
    REGEXP = "regular expression mismatch"
    UNSUPPORTED = "unsupported type"
    BAD_PARAMETER = "bad parameter"
    UNKNOWN_TAG = "unknown tag"
    INVALID = "invalid value"
    REQUIRED = "required"
    LATITUDE = "invalid latitude"
    LONGITUDE = "invalid longitude"
    BAD_FORMAT = "bad format"
    CUSTOM = "custom"

    @property
    def structural(self) -> bool:
        """Whether the kind points at the tag or the type rather than the data."""
        return self in _STRUCTURAL_KINDS


_STRUCTURAL_KINDS = frozenset({
    ErrorKind.UNSUPPORTED,
    ErrorKind.BAD_PARAMETER,
    ErrorKind.UNKNOWN_TAG,
})


class TagValidatorError(Exception):
    """Base class for every tagvalidator exception."""


class ConfigurationError(TagValidatorError):
    """Raised for setup mistakes: empty rule names, missing rules, duplicates."""


class RuleCompileError(TagValidatorError):
    """A rule cannot be bound to a field type or parameter."""
    kind = ErrorKind.INVALID


class TagParseError(RuleCompileError):
    """Malformed tag segment, e.g. an empty rule name."""
    kind = ErrorKind.UNKNOWN_TAG


class UnknownRuleError(TagParseError):
    """Tag references a rule name that is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown tag: {name!r}")


class BadParameterError(RuleCompileError):
    """The rule accepts the type but not the parameter."""
    kind = ErrorKind.BAD_PARAMETER


class UnsupportedTypeError(RuleCompileError):
    """The rule is meaningless for the field's type."""
    kind = ErrorKind.UNSUPPORTED


@dataclass(frozen=True)
class Violation:
    """A single failed rule at a single path."""
    path: str
    rule: str
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "rule": self.rule,
            "kind": self.kind.name.lower(),
            "message": self.message,
        }


class ValidationErrors(TagValidatorError):
    """All violations found in one validation pass, keyed by path.

    Returned by ``Validator.validate`` and ``Validator.valid`` when something
    failed. It is an exception so callers can ``raise`` it directly.
    """

    def __init__(self, errors: dict[str, list[Violation]]):
        self.errors = errors
        super().__init__("; ".join(str(v) for v in self.violations()))

    def __len__(self) -> int:
        return len(self.errors)

    def __contains__(self, path: object) -> bool:
        return path in self.errors

    def fields(self) -> list[str]:
        """Paths with at least one violation, in the order they were first hit."""
        return list(self.errors)

    def errors_at(self, path: str) -> list[Violation]:
        """Violations recorded at ``path`` (empty if none)."""
        return list(self.errors.get(path, ()))

    def violations(self) -> list[Violation]:
        return [v for found in self.errors.values() for v in found]

    def has(self, path: str, kind: ErrorKind) -> bool:
        return any(v.kind == kind for v in self.errors.get(path, ()))

    def is_zero_value(self, path: str) -> bool:
        return self.has(path, ErrorKind.ZERO_VALUE)

    def is_min(self, path: str) -> bool:
        return self.has(path, ErrorKind.MIN)

    def is_max(self, path: str) -> bool:
        return self.has(path, ErrorKind.MAX)

    def is_len(self, path: str) -> bool:
        return self.has(path, ErrorKind.LEN)

    def is_regexp(self, path: str) -> bool:
        return self.has(path, ErrorKind.REGEXP)

    def is_unsupported(self, path: str) -> bool:
        return self.has(path, ErrorKind.UNSUPPORTED)

    def is_bad_parameter(self, path: str) -> bool:
        return self.has(path, ErrorKind.BAD_PARAMETER)

    def is_unknown_tag(self, path: str) -> bool:
        return self.has(path, ErrorKind.UNKNOWN_TAG)

    def is_invalid(self, path: str) -> bool:
        return self.has(path, ErrorKind.INVALID)

    def is_bad_format(self, path: str) -> bool:
        return self.has(path, ErrorKind.BAD_FORMAT)

    def is_required(self, path: str) -> bool:
        return self.has(path, ErrorKind.REQUIRED)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            path: [v.to_dict() for v in found]
            for path, found in self.errors.items()
        }
