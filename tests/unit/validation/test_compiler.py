"""Unit tests for routine compilation."""

from dataclasses import dataclass, field
from typing import Optional

import pytest

from tagvalidator.diagnostics import ErrorCollector
from tagvalidator.validation.cache import ForwardRoutine, ValidatorCache
from tagvalidator.validation.compiler import TypeCompiler, noop
from tagvalidator.validation.registry import default_registry


@dataclass
class Link:
    label: str = field(default="", metadata={"validate": "nonzero"})
    next: Optional["Link"] = None


@pytest.fixture
def compiler():
    return TypeCompiler(default_registry(), ValidatorCache(), "validate", "json")


class TestTypeCompiler:
    """Test routines and steps built by the compiler."""

    @pytest.mark.parametrize("tag", ["-", " - ", "", "  "])
    def test_skip_and_empty_tags_compile_to_noop(self, compiler, tag):
        assert compiler.rules_routine(str, tag) is noop
        assert len(compiler.cache) == 0

    def test_nothing_to_do(self, compiler):
        assert compiler.step(int) is None
        assert compiler.step(list[str]) is None

    def test_self_reference_patched_with_real_routine(self, compiler):
        """Test that a step built during its own type's compilation ends up calling the real routine."""
        steps = []

        def real(value, collector):
            pass

        def build():
            steps.append(compiler.step(Optional[Link]))
            assert isinstance(steps[0].descend, ForwardRoutine)
            return real

        compiler.cache.get_or_compile(("type", Link), build)

        assert steps[0].descend is real

    def test_compiled_struct_is_cached(self, compiler):
        routine = compiler.type_routine(Link)

        assert compiler.step(Optional[Link]).descend is routine

    def test_optional_none_skips_descent(self, compiler):
        collector = ErrorCollector()

        compiler.step(Optional[Link]).run(None, collector)

        assert collector.finalize() is None

    def test_step_descends(self, compiler):
        collector = ErrorCollector()
        collector.push_field("head")

        compiler.step(Link).run(Link("", next=Link("")), collector)
        collector.pop()

        errors = collector.finalize()
        assert errors.fields() == ["head.label", "head.next.label"]
