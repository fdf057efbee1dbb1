"""Compilation of type hints into validation routines.

A routine is a callable ``routine(value, collector)``. For every type hint
the compiler builds, once, a routine that descends into the value's structure
(struct fields, sequence items, mapping keys and values, the present value of
an optional, the concrete value behind a dynamic hint). For every
``(type hint, tag)`` pair it builds, once, a routine running the tag's rules.
Both are memoized in the ``ValidatorCache``.

Rules that cannot be bound (unknown name, bad parameter, unsupported type)
are not raised: they become routines that record the problem at whatever
path the field is visited, so one bad tag never hides other findings.
"""

import logging
from typing import Any, Callable, Hashable

from ..diagnostics import ErrorCollector, PathSegment
from ..errors import INVALID_RULE, ErrorKind, RuleCompileError, UnsupportedTypeError
from .base import Check, Reporter, Rule
from .cache import ForwardRoutine, Routine, ValidatorCache
from .parser import is_skip, parse_tag
from .registry import RuleRegistry
from .types import Kind, TypeInfo, describe, format_key, instance_check, struct_fields

logger = logging.getLogger(__name__)


def noop(value: Any, collector: Any) -> None:
    """Routine (and check) that never reports anything."""


def _failing_routine(error: RuleCompileError) -> Routine:
    message = str(error)

    def report_failure(value: Any, collector: ErrorCollector) -> None:
        collector.record(INVALID_RULE, error.kind, message)
    return report_failure


def _failing_check(error: RuleCompileError) -> Check:
    message = str(error)

    def report_failure(value: Any, reporter: Reporter) -> None:
        reporter.report(error.kind, message)
    return report_failure


def _present_only(check: Check) -> Check:
    def present_only(value: Any, reporter: Reporter) -> None:
        if value is not None:
            check(value, reporter)
    return present_only


class Step:
    """Work done on one child value: type guard, then rules, then descent.

    An optional child is descended into through its present type, so a
    ``None`` skips the descent without an extra routine in between.
    """

    __slots__ = ("is_instance", "expected", "rules", "descend", "optional")

    def __init__(self, is_instance: Callable[[Any], bool] | None, expected: str,
                 rules: Routine | None, descend: Routine | None, optional: bool):
        self.is_instance = is_instance
        self.expected = expected
        self.rules = rules
        self.descend = descend
        self.optional = optional

    def run(self, value: Any, collector: ErrorCollector) -> None:
        if self.is_instance is not None and not self.is_instance(value):
            collector.record(
                INVALID_RULE,
                ErrorKind.INVALID,
                f"invalid value: expected {self.expected}, got {type(value).__name__}",
            )
            return
        if self.rules is not None:
            self.rules(value, collector)
        if self.descend is not None and (value is not None or not self.optional):
            self.descend(value, collector)

    def _set_descend(self, routine: Routine) -> None:
        self.descend = None if routine is noop else routine


class TypeCompiler:
    """Builds and memoizes routines for one tag name and rule registry."""

    def __init__(self, registry: RuleRegistry, cache: ValidatorCache,
                 tag_name: str, json_tag: str):
        self.registry = registry
        self.cache = cache
        self.tag_name = tag_name
        self.json_tag = json_tag

    def type_routine(self, hint: Any) -> Routine:
        """Routine descending into values of ``hint``."""
        return self.cache.get_or_compile(
            ("type", hint), lambda: self._compile_type(describe(hint))
        )

    def rules_routine(self, hint: Any, tag: str) -> Routine:
        """Routine applying the rules of ``tag`` to a value of ``hint``.

        The tag ``-`` applies nothing.
        """
        if not tag.strip() or is_skip(tag):
            return noop
        return self.cache.get_or_compile(
            ("rules", hint, tag), lambda: self._compile_rules(describe(hint), tag)
        )

    def step(self, hint: Any, tag: str = "") -> Step | None:
        """Step for a child value declared as ``hint``; None when there is nothing to do."""
        info = describe(hint)
        optional = info.kind is Kind.OPTIONAL
        rules = self.rules_routine(hint, tag)
        descend = self.type_routine(info.elem if optional else hint)
        if rules is noop and descend is noop:
            return None

        step = Step(
            instance_check(info),
            str(info),
            None if rules is noop else rules,
            descend,
            optional,
        )
        if isinstance(descend, ForwardRoutine):
            # self-referential: call the real routine directly once it is built
            descend.on_resolve(step._set_descend)
        else:
            step._set_descend(descend)
        return step

    def _compile_type(self, info: TypeInfo) -> Routine:
        kind = info.kind
        if kind is Kind.STRUCT:
            return self._compile_struct(info)
        if kind is Kind.OPTIONAL:
            return self._compile_optional(info)
        if kind is Kind.SEQUENCE:
            return self._compile_sequence(info)
        if kind is Kind.MAPPING:
            return self._compile_mapping(info)
        if kind is Kind.DYNAMIC:
            return self._compile_dynamic(info)
        return noop

    def _compile_struct(self, info: TypeInfo) -> Routine:
        entries: list[tuple[str, PathSegment, Step]] = []
        for spec in struct_fields(info.origin, self.tag_name, self.json_tag):
            step = self.step(spec.hint, spec.tag)
            if step is not None:
                entries.append((spec.attr, PathSegment.field(spec.external), step))

        if not entries:
            return noop

        def validate_struct(value: Any, collector: ErrorCollector) -> None:
            for attr, segment, step in entries:
                collector.push(segment)
                try:
                    step.run(getattr(value, attr, None), collector)
                finally:
                    collector.pop()
        return validate_struct

    def _compile_optional(self, info: TypeInfo) -> Routine:
        step = self.step(info.elem)
        if step is None:
            return noop

        def validate_optional(value: Any, collector: ErrorCollector) -> None:
            if value is not None:
                step.run(value, collector)
        return validate_optional

    def _compile_sequence(self, info: TypeInfo) -> Routine:
        step = self.step(info.elem)
        if step is None:
            return noop

        def validate_sequence(value: Any, collector: ErrorCollector) -> None:
            for i, item in enumerate(value):
                collector.push_index(i)
                try:
                    step.run(item, collector)
                finally:
                    collector.pop()
        return validate_sequence

    def _compile_mapping(self, info: TypeInfo) -> Routine:
        key_step = self.step(info.key)
        value_step = self.step(info.value)
        if key_step is None and value_step is None:
            return noop

        def validate_mapping(value: Any, collector: ErrorCollector) -> None:
            for key, item in value.items():
                text = format_key(key)
                if key_step is not None:
                    collector.push_map_key(text)
                    try:
                        key_step.run(key, collector)
                    finally:
                        collector.pop()
                if value_step is not None:
                    collector.push_map_value(text)
                    try:
                        value_step.run(item, collector)
                    finally:
                        collector.pop()
        return validate_mapping

    def _compile_dynamic(self, info: TypeInfo) -> Routine:
        def validate_dynamic(value: Any, collector: ErrorCollector) -> None:
            if value is not None:
                self.type_routine(type(value))(value, collector)
        return validate_dynamic

    def _compile_rules(self, info: TypeInfo, tag: str) -> Routine:
        try:
            specs = parse_tag(tag, self.registry)
        except RuleCompileError as e:
            logger.debug(f"Tag {tag!r} on {info} rejected: {e}")
            return _failing_routine(e)

        checks: list[tuple[str, Check]] = []
        for spec in specs:
            rule = self.registry.lookup(spec.name)
            checks.append((spec.name, self._bind_or_fail(rule, info, spec.param)))

        if not checks:
            return noop

        def validate_rules(value: Any, collector: ErrorCollector) -> None:
            for name, check in checks:
                check(value, collector.reporter(name))
        return validate_rules

    def _bind_or_fail(self, rule: Rule, info: TypeInfo, param: str) -> Check:
        try:
            return self._bind(rule, info, param)
        except RuleCompileError as e:
            logger.debug(f"Rule {rule.name} cannot be bound to {info}: {e}")
            return _failing_check(e)

    def _bind(self, rule: Rule, info: TypeInfo, param: str) -> Check:
        """Bind ``rule`` to ``info``; rules not meant for optional or dynamic
        values are bound to the value they hold instead.
        """
        try:
            return rule.compile(info, param)
        except UnsupportedTypeError:
            if info.kind is Kind.OPTIONAL:
                return _present_only(self._bind(rule, describe(info.elem), param))
            if info.kind is Kind.DYNAMIC:
                return self._dynamic_check(rule, param)
            if info.kind is Kind.NONE:
                return noop
            raise

    def _dynamic_check(self, rule: Rule, param: str) -> Check:
        def dynamic_check(value: Any, reporter: Reporter) -> None:
            if value is None:
                return
            concrete = type(value)
            key: Hashable = ("bound", rule, param, concrete)
            check = self.cache.get_or_compile(
                key, lambda: self._bind_or_fail(rule, describe(concrete), param)
            )
            check(value, reporter)
        return dynamic_check
