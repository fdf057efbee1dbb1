"""Validator facade.

A ``Validator`` owns a tag name, a rule registry and a cache of compiled
routines. ``validate`` walks a whole value (dataclasses, pydantic models,
containers) following the tags on struct fields; ``valid`` applies a tag to a
single bare value.
"""

import logging
from typing import TYPE_CHECKING, Any, Callable

from ..diagnostics import ErrorCollector
from ..errors import INVALID_RULE, ConfigurationError, ErrorKind, ValidationErrors, Violation
from .base import Check, Rule
from .cache import ValidatorCache
from .compiler import TypeCompiler
from .parser import is_skip
from .registry import RuleRegistry, default_registry
from .types import TypeInfo, is_struct

if TYPE_CHECKING:
    from ..config import TagValidatorConfig, ValidatorConfig

logger = logging.getLogger(__name__)

DEFAULT_TAG_NAME = "validate"
DEFAULT_JSON_TAG = "json"


class Validator:
    """Validates values against the rules in their field tags.

    Instances are safe to share between threads once configured. ``add_rule``
    and ``remove_rule`` are setup operations and reset the compiled cache.
    """

    def __init__(self, tag_name: str = DEFAULT_TAG_NAME, json_tag: str = DEFAULT_JSON_TAG,
                 registry: RuleRegistry | None = None):
        if not tag_name or not tag_name.strip():
            raise ConfigurationError("tag name cannot be empty")
        if not json_tag or not json_tag.strip():
            raise ConfigurationError("json tag name cannot be empty")
        self.tag_name = tag_name
        self.json_tag = json_tag
        self._registry = registry.copy() if registry is not None else default_registry()
        self._reset()

    @classmethod
    def new(cls) -> "Validator":
        """Validator with the default tag name and the built-in rules."""
        return cls()

    @classmethod
    def from_config(cls, config: "TagValidatorConfig | ValidatorConfig") -> "Validator":
        settings = getattr(config, "validator", config)
        return cls(tag_name=settings.tag_name, json_tag=settings.json_tag)

    def _reset(self) -> None:
        self._cache = ValidatorCache()
        self._compiler = TypeCompiler(self._registry, self._cache, self.tag_name, self.json_tag)

    @property
    def cache(self) -> ValidatorCache:
        return self._cache

    @property
    def rule_names(self) -> list[str]:
        return self._registry.names()

    def rule(self, name: str) -> Rule | None:
        """Rule registered under ``name``, if any."""
        return self._registry.lookup(name)

    def with_tag_name(self, tag_name: str) -> "Validator":
        """New validator reading ``tag_name``; this one is left untouched."""
        return Validator(tag_name, self.json_tag, self._registry)

    def add_rule(self, name: str, rule: Rule | Callable[[TypeInfo, str], Check]) -> None:
        """Register a custom rule on this validator only.

        Raises:
            ConfigurationError: Empty name, missing rule, or name already taken
        """
        self._registry.register(name, rule)
        logger.debug(f"Added rule {name} to validator reading tag {self.tag_name!r}")
        self._reset()

    def remove_rule(self, name: str) -> None:
        self._registry.unregister(name)
        self._reset()

    def validate(self, value: Any) -> ValidationErrors | None:
        """Validate ``value`` recursively.

        A value nested deeper than the interpreter's recursion limit (usually
        a cyclic object graph) adds an ``INVALID`` violation at the root to
        the violations found before giving up.

        Returns:
            None when valid, otherwise every violation keyed by path
        """
        collector = ErrorCollector()
        routine = self._compiler.type_routine(type(value))
        try:
            routine(value, collector)
        except RecursionError:
            logger.warning(f"Gave up validating {type(value).__name__}: nested too deeply")
            collector.unwind()
            collector.record(INVALID_RULE, ErrorKind.INVALID, "invalid value: nested too deeply to validate")
        return collector.finalize()

    def valid(self, value: Any, tag: str) -> ValidationErrors | None:
        """Apply ``tag`` to a bare value. Struct values are refused.

        The tag ``-`` applies nothing, whatever the value.

        Returns:
            None when valid, otherwise the violations under the empty path
        """
        if is_skip(tag):
            return None
        if is_struct(type(value)):
            return ValidationErrors({"": [Violation(
                "", INVALID_RULE, ErrorKind.UNSUPPORTED, "unsupported: use validate for structs",
            )]})
        collector = ErrorCollector()
        routine = self._compiler.rules_routine(type(value), tag)
        routine(value, collector)
        return collector.finalize()

    def __repr__(self) -> str:
        return f"Validator(tag_name={self.tag_name!r}, rules={len(self._registry)})"
