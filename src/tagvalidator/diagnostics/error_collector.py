"""Path tracking and violation collection for a single validation pass.

The compiled routines push one path segment before descending into a child
value and pop it when they come back, so the current path is always the
location of the value being checked. Violations are grouped by the rendered
path at the moment they are recorded.
"""

import logging
from dataclasses import dataclass

from ..errors import INVALID_RULE, ErrorKind, ValidationErrors, Violation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathSegment:
    """One step from a parent value to a child value."""
    text: str
    is_field: bool = False

    @classmethod
    def field(cls, name: str) -> "PathSegment":
        return cls(name, is_field=True)

    @classmethod
    def index(cls, i: int) -> "PathSegment":
        return cls(f"[{i}]")

    @classmethod
    def map_key(cls, key: str) -> "PathSegment":
        return cls(f"[{key}](key)")

    @classmethod
    def map_value(cls, key: str) -> "PathSegment":
        return cls(f"[{key}](value)")


def render_path(segments: list[PathSegment]) -> str:
    """Join segments: fields with ``.``, brackets appended as-is."""
    parts: list[str] = []
    for segment in segments:
        if segment.is_field and parts:
            parts.append(".")
        parts.append(segment.text)
    return "".join(parts)


class RuleReporter:
    """Reports failures of one named rule into an ``ErrorCollector``."""

    __slots__ = ("_collector", "_rule")

    def __init__(self, collector: "ErrorCollector", rule: str):
        self._collector = collector
        self._rule = rule

    def report(self, kind: ErrorKind, message: str | None = None) -> None:
        rule = INVALID_RULE if kind.structural else self._rule
        self._collector.record(rule, kind, message)


class ErrorCollector:
    """Collects violations during one ``validate``/``valid`` call."""

    def __init__(self):
        self._segments: list[PathSegment] = []
        self._errors: dict[str, list[Violation]] = {}

    @property
    def path(self) -> str:
        return render_path(self._segments)

    def push(self, segment: PathSegment) -> None:
        self._segments.append(segment)

    def push_field(self, name: str) -> None:
        self._segments.append(PathSegment.field(name))

    def push_index(self, i: int) -> None:
        self._segments.append(PathSegment.index(i))

    def push_map_key(self, key: str) -> None:
        self._segments.append(PathSegment.map_key(key))

    def push_map_value(self, key: str) -> None:
        self._segments.append(PathSegment.map_value(key))

    def pop(self) -> PathSegment:
        return self._segments.pop()

    def unwind(self, depth: int = 0) -> None:
        """Drop segments above ``depth`` after an aborted descent."""
        if len(self._segments) > depth:
            logger.debug(f"Unwinding path {self.path} to depth {depth}")
            del self._segments[depth:]

    def reporter(self, rule: str) -> RuleReporter:
        return RuleReporter(self, rule)

    def record(self, rule: str, kind: ErrorKind, message: str | None = None) -> None:
        """Append a violation at the current path."""
        path = self.path
        violation = Violation(path, rule, kind, message or kind.value)
        self._errors.setdefault(path, []).append(violation)
        logger.debug(f"Recorded violation at {path or '<root>'}: {rule} ({kind.value})")

    def finalize(self) -> ValidationErrors | None:
        """None when nothing was recorded, otherwise every violation by path."""
        if self._segments:
            logger.warning(f"Finalizing with unbalanced path: {self.path}")
        if not self._errors:
            return None
        return ValidationErrors(self._errors)
