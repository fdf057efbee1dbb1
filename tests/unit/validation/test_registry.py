"""Unit tests for the rule registry."""

import pytest

from tagvalidator.errors import ConfigurationError
from tagvalidator.validation.base import FunctionRule
from tagvalidator.validation.registry import RuleRegistry, default_registry
from tagvalidator.validation.rules import MinRule


def always_ok(info, param):
    def check(value, reporter):
        pass
    return check


class TestRuleRegistry:
    """Test registering and looking up rules."""

    def test_default_registry_has_builtins(self):
        registry = default_registry()

        assert registry.names() == [
            "nonzero", "len", "min", "max", "regexp", "uuid", "required", "latitude", "longitude",
        ]
        assert isinstance(registry.lookup("min"), MinRule)

    def test_register_function_wraps_it(self):
        registry = RuleRegistry()
        registry.register("ok", always_ok)

        rule = registry.lookup("ok")
        assert isinstance(rule, FunctionRule)
        assert rule.name == "ok"
        assert "ok" in registry
        assert len(registry) == 1
        assert list(registry) == ["ok"]

    def test_register_rule_under_other_name(self):
        registry = RuleRegistry()
        registry.register("at_least", MinRule())

        assert isinstance(registry.lookup("at_least"), MinRule)
        assert registry.lookup("min") is None

    def test_duplicate_is_rejected(self):
        registry = default_registry()

        with pytest.raises(ConfigurationError, match="already registered"):
            registry.register("min", always_ok)

        assert isinstance(registry.lookup("min"), MinRule)

    def test_replace_after_unregister(self):
        registry = default_registry()
        removed = registry.unregister("min")
        registry.register("min", always_ok)

        assert isinstance(removed, MinRule)
        assert isinstance(registry.lookup("min"), FunctionRule)

    def test_unregister_missing(self):
        with pytest.raises(ConfigurationError):
            RuleRegistry().unregister("nope")

    @pytest.mark.parametrize("name", ["", "   ", " min", "a,b", "a=b", None])
    def test_invalid_names(self, name):
        with pytest.raises(ConfigurationError):
            RuleRegistry().register(name, always_ok)

    @pytest.mark.parametrize("rule", [None, 42, "min"])
    def test_invalid_rules(self, rule):
        with pytest.raises(ConfigurationError):
            RuleRegistry().register("custom", rule)

    def test_copy_is_independent(self):
        original = default_registry()
        copied = original.copy()
        copied.register("ok", always_ok)
        copied.unregister("min")

        assert "ok" not in original
        assert "min" in original
        assert "min" not in copied
