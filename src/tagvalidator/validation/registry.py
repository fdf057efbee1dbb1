"""Rule registry: maps tag names to rules.

A registry belongs to exactly one ``Validator``. Deriving a validator copies
the registry, so registrations made afterwards never leak between instances.
"""

import logging
from collections.abc import Iterator, Mapping
from typing import Callable

from ..errors import ConfigurationError
from .base import Check, FunctionRule, Rule
from .types import TypeInfo

logger = logging.getLogger(__name__)


class RuleRegistry:
    """Name to rule mapping.

    Registering a name twice is refused: replacing a rule means removing it
    first, which makes overrides explicit.
    """

    def __init__(self, rules: Mapping[str, Rule] | None = None):
        self._rules: dict[str, Rule] = dict(rules or {})

    def register(self, name: str, rule: Rule | Callable[[TypeInfo, str], Check]) -> None:
        """Register ``rule`` under ``name``.

        Raises:
            ConfigurationError: Empty name, missing rule, or name already taken
        """
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError("rule name cannot be empty")
        if name != name.strip() or any(c in name for c in ",="):
            raise ConfigurationError(f"rule name {name!r} cannot contain spaces, ',' or '='")
        if rule is None:
            raise ConfigurationError(f"rule {name!r} cannot be None")
        if not isinstance(rule, Rule):
            if not callable(rule):
                raise ConfigurationError(f"rule {name!r} must be a Rule or a callable, got {type(rule).__name__}")
            rule = FunctionRule(name, rule)
        if name in self._rules:
            raise ConfigurationError(f"rule {name!r} is already registered")

        self._rules[name] = rule
        logger.debug(f"Registered rule: {name}")

    def unregister(self, name: str) -> Rule:
        """Remove and return the rule registered under ``name``."""
        try:
            rule = self._rules.pop(name)
        except KeyError:
            raise ConfigurationError(f"rule {name!r} is not registered") from None
        logger.debug(f"Unregistered rule: {name}")
        return rule

    def lookup(self, name: str) -> Rule | None:
        return self._rules.get(name)

    def copy(self) -> "RuleRegistry":
        """Independent registry with the same rules."""
        return RuleRegistry(self._rules)

    def names(self) -> list[str]:
        return list(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


def default_registry() -> RuleRegistry:
    """Registry holding every built-in rule under its own name."""
    from .rules import BUILTIN_RULES

    registry = RuleRegistry()
    for rule in BUILTIN_RULES:
        registry.register(rule.name, rule)
    return registry
