"""Unit tests for the error model."""

import pytest

from tagvalidator.errors import (
    BadParameterError,
    ErrorKind,
    RuleCompileError,
    TagParseError,
    TagValidatorError,
    UnknownRuleError,
    UnsupportedTypeError,
    ValidationErrors,
    Violation,
)


@pytest.fixture
def errors():
    return ValidationErrors({
        "A": [Violation("A", "nonzero", ErrorKind.ZERO_VALUE, "zero value")],
        "B": [
            Violation("B", "len", ErrorKind.LEN, "invalid length"),
            Violation("B", "min", ErrorKind.MIN, "less than min"),
        ],
    })


class TestViolation:
    """Test single violations."""

    def test_str(self):
        assert str(Violation("Sub.C", "min", ErrorKind.MIN, "less than min")) == "Sub.C: less than min"

    def test_str_at_root(self):
        assert str(Violation("", "nonzero", ErrorKind.ZERO_VALUE, "zero value")) == "zero value"

    def test_to_dict(self):
        data = Violation("A", "nonzero", ErrorKind.ZERO_VALUE, "zero value").to_dict()
        assert data == {"path": "A", "rule": "nonzero", "kind": "zero_value", "message": "zero value"}


class TestValidationErrors:
    """Test the path-keyed result."""

    def test_fields_in_order(self, errors):
        assert errors.fields() == ["A", "B"]
        assert len(errors) == 2
        assert "B" in errors
        assert "C" not in errors

    def test_errors_at(self, errors):
        assert [v.rule for v in errors.errors_at("B")] == ["len", "min"]
        assert errors.errors_at("missing") == []

    def test_predicates(self, errors):
        assert errors.is_zero_value("A")
        assert errors.is_len("B")
        assert errors.is_min("B")
        assert not errors.is_max("B")
        assert not errors.is_zero_value("B")
        assert errors.has("B", ErrorKind.MIN)
        assert not errors.is_bad_format("B")

    def test_violations_flattened(self, errors):
        assert [v.path for v in errors.violations()] == ["A", "B", "B"]

    def test_message(self, errors):
        assert str(errors) == "A: zero value; B: invalid length; B: less than min"

    def test_to_dict(self, errors):
        data = errors.to_dict()
        assert list(data) == ["A", "B"]
        assert data["B"][1]["kind"] == "min"

    def test_can_be_raised(self, errors):
        with pytest.raises(TagValidatorError):
            raise errors


class TestExceptions:
    """Test the exception hierarchy."""

    @pytest.mark.parametrize("exc,kind", [
        (TagParseError, ErrorKind.UNKNOWN_TAG),
        (UnknownRuleError, ErrorKind.UNKNOWN_TAG),
        (BadParameterError, ErrorKind.BAD_PARAMETER),
        (UnsupportedTypeError, ErrorKind.UNSUPPORTED),
    ])
    def test_kinds(self, exc, kind):
        assert issubclass(exc, RuleCompileError)
        assert exc.kind is kind

    def test_unknown_rule_message(self):
        assert str(UnknownRuleError("foo")) == "unknown tag: 'foo'"

    def test_structural_kinds(self):
        assert ErrorKind.UNKNOWN_TAG.structural
        assert ErrorKind.BAD_PARAMETER.structural
        assert ErrorKind.UNSUPPORTED.structural
        assert not ErrorKind.INVALID.structural
        assert not ErrorKind.MIN.structural
        assert not ErrorKind.BAD_FORMAT.structural
