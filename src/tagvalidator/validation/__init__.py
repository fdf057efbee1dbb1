"""Validation engine for tagvalidator.

Tags are parsed into rules, rules are bound to field types, and each type is
compiled once into a routine that walks values of that type.
"""

from .base import Check, FunctionRule, Reporter, Rule
from .cache import ForwardRoutine, ValidatorCache
from .compiler import TypeCompiler
from .framework import DEFAULT_JSON_TAG, DEFAULT_TAG_NAME, Validator
from .parser import RuleSpec, is_skip, parse_tag, split_tag
from .registry import RuleRegistry, default_registry
from .rules import (
    BUILTIN_RULES,
    LatitudeRule,
    LenRule,
    LongitudeRule,
    MaxRule,
    MinRule,
    NonzeroRule,
    RegexpRule,
    RequiredRule,
    UUIDRule,
)
from .types import Kind, TypeInfo, describe

__all__ = [
    "Validator",
    "DEFAULT_TAG_NAME",
    "DEFAULT_JSON_TAG",
    "Rule",
    "FunctionRule",
    "Check",
    "Reporter",
    "RuleRegistry",
    "default_registry",
    "RuleSpec",
    "parse_tag",
    "split_tag",
    "is_skip",
    "TypeCompiler",
    "ValidatorCache",
    "ForwardRoutine",
    "Kind",
    "TypeInfo",
    "describe",
    "BUILTIN_RULES",
    "NonzeroRule",
    "LenRule",
    "MinRule",
    "MaxRule",
    "RegexpRule",
    "UUIDRule",
    "RequiredRule",
    "LatitudeRule",
    "LongitudeRule",
]
