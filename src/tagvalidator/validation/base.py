"""Rule interface.

A rule is compiled once per (field type, parameter) pair. Compilation either
returns a ``Check`` bound to that type, or raises ``UnsupportedTypeError`` /
``BadParameterError`` so the problem is reported at every path using it.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Protocol

from ..errors import ErrorKind
from .types import TypeInfo


class Reporter(Protocol):
    """Receives the failures of one rule at the current path."""

    def report(self, kind: ErrorKind, message: str | None = None) -> None:
        ...


Check = Callable[[Any, Reporter], None]


class Rule(ABC):
    """Base class for validation rules."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name the rule is registered under by default."""
        pass

    @abstractmethod
    def compile(self, info: TypeInfo, param: str) -> Check:
        """Bind the rule to a field type and tag parameter.

        Args:
            info: Declared (or, for dynamic values, concrete) type of the value
            param: Text after ``=`` in the tag segment, empty if none

        Returns:
            Callable receiving the value and a reporter

        Raises:
            UnsupportedTypeError: The rule does not apply to ``info``
            BadParameterError: ``param`` is not acceptable for ``info``
        """
        pass


class FunctionRule(Rule):
    """Adapts a plain ``(info, param) -> Check`` function to ``Rule``."""

    def __init__(self, name: str, func: Callable[[TypeInfo, str], Check]):
        self._name = name
        self._func = func

    @property
    def name(self) -> str:
        return self._name

    def compile(self, info: TypeInfo, param: str) -> Check:
        return self._func(info, param)

    def __repr__(self) -> str:
        return f"FunctionRule({self._name!r}, {self._func!r})"
