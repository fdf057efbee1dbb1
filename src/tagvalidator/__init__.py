"""tagvalidator - declarative validation of in-memory values.

Fields of dataclasses and pydantic models carry short rule tags such as
``nonzero``, ``min=10`` or ``regexp=^a.*b$``; ``validate`` walks a value and
reports every violation under the path where it occurred.

    @dataclass
    class NewUserRequest:
        username: str = field(metadata={"validate": "min=3,max=40,regexp=^[a-zA-Z]*$"})
        age: int = field(default=0, metadata={"validate": "min=18"})

    errors = tagvalidator.validate(NewUserRequest("jo", 17))

The module-level helpers share ``default_validator``. Its rule set is never
changed by them; create a ``Validator`` of your own to register custom rules.
"""

__version__ = "0.1.0"
__author__ = "tagvalidator contributors"
__description__ = "Declarative tag-based validation for Python values"

from typing import Any

from tagvalidator.errors import (
    ConfigurationError,
    ErrorKind,
    TagValidatorError,
    ValidationErrors,
    Violation,
)
from tagvalidator.validation import FunctionRule, Rule, TypeInfo, Validator

default_validator = Validator()


def new() -> Validator:
    """Validator with the default tag name and the built-in rules."""
    return Validator.new()


def validate(value: Any) -> ValidationErrors | None:
    """Validate ``value`` with the default validator."""
    return default_validator.validate(value)


def valid(value: Any, tag: str) -> ValidationErrors | None:
    """Apply ``tag`` to a bare value with the default validator."""
    return default_validator.valid(value, tag)


def with_tag_name(tag_name: str) -> Validator:
    """Copy of the default validator reading ``tag_name`` instead of ``validate``."""
    return default_validator.with_tag_name(tag_name)


__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "Validator",
    "Rule",
    "FunctionRule",
    "TypeInfo",
    "ErrorKind",
    "Violation",
    "ValidationErrors",
    "TagValidatorError",
    "ConfigurationError",
    "default_validator",
    "new",
    "validate",
    "valid",
    "with_tag_name",
]
