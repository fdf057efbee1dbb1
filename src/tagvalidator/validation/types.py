"""Type inspection for the validation compiler.

``describe`` turns a type hint (``int``, ``list[Node]``, ``Optional[str]``,
a dataclass, a pydantic model ...) into a ``TypeInfo`` whose ``kind`` tells the
compiler how to descend into values of that type and tells rules which
checks make sense. ``struct_fields`` lists the validated fields of a struct
type together with their tags and external names.
"""

import collections.abc
import dataclasses
import logging
import types
import typing
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, ForwardRef, TypeVar, Union

from pydantic import BaseModel

logger = logging.getLogger(__name__)

NoneType = type(None)

SKIP_TAG = "-"


class Kind(str, Enum):
    """Categories of types the compiler distinguishes."""
    STRING = "string"
    BYTES = "bytes"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    STRUCT = "struct"
    OPTIONAL = "optional"
    DYNAMIC = "dynamic"
    NONE = "none"
    OTHER = "other"


NUMERIC_KINDS = frozenset({Kind.INTEGER, Kind.FLOAT})
SIZED_KINDS = frozenset({Kind.STRING, Kind.BYTES, Kind.SEQUENCE, Kind.MAPPING})

_RUNTIME_TYPES = {
    Kind.STRING: str,
    Kind.BYTES: (bytes, bytearray, memoryview),
    Kind.INTEGER: int,
    # PEP 484: an int is acceptable where a float is expected
    Kind.FLOAT: (int, float, Decimal),
    Kind.BOOLEAN: bool,
    Kind.MAPPING: collections.abc.Mapping,
}


@dataclass(frozen=True)
class TypeInfo:
    """Description of one type hint."""
    kind: Kind
    hint: Any
    origin: Any = None
    args: tuple = ()

    @property
    def elem(self) -> Any:
        """Element type of a sequence, or the present type of an optional."""
        return self.args[0] if self.args else Any

    @property
    def key(self) -> Any:
        return self.args[0] if self.args else Any

    @property
    def value(self) -> Any:
        return self.args[1] if len(self.args) > 1 else Any

    def __str__(self) -> str:
        return type_name(self.hint)


def type_name(hint: Any) -> str:
    if isinstance(hint, type) and not typing.get_args(hint):
        return hint.__qualname__
    return repr(hint).replace("typing.", "")


def is_struct(tp: Any) -> bool:
    """Dataclasses and pydantic models are validated field by field."""
    if not isinstance(tp, type):
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def is_callable_type(info: TypeInfo) -> bool:
    """Functions and other callables have no value to validate."""
    origin = info.origin
    return isinstance(origin, type) and issubclass(origin, collections.abc.Callable)


def describe(hint: Any) -> TypeInfo:
    """Classify ``hint`` into a ``TypeInfo``."""
    if hint is Any or hint is object:
        return TypeInfo(Kind.DYNAMIC, hint)
    if hint is None or hint is NoneType:
        return TypeInfo(Kind.NONE, hint, NoneType)
    if isinstance(hint, (str, ForwardRef, TypeVar)):
        # unresolved annotation: only the runtime value can tell
        return TypeInfo(Kind.DYNAMIC, hint)

    origin = typing.get_origin(hint)
    if origin is not None:
        return _describe_generic(hint, origin, typing.get_args(hint))

    if isinstance(hint, type):
        return _describe_class(hint)
    return TypeInfo(Kind.DYNAMIC, hint)


def _describe_generic(hint: Any, origin: Any, args: tuple) -> TypeInfo:
    if origin is typing.Annotated:
        return describe(args[0])
    if origin is Union or origin is types.UnionType:
        present = tuple(a for a in args if a is not NoneType)
        if len(present) < len(args):
            inner = present[0] if len(present) == 1 else Union[present]
            return TypeInfo(Kind.OPTIONAL, hint, origin, (inner,))
        return TypeInfo(Kind.DYNAMIC, hint, origin, args)
    if origin is typing.Literal:
        return TypeInfo(Kind.DYNAMIC, hint, origin, args)
    if not isinstance(origin, type):
        return TypeInfo(Kind.OTHER, hint, origin, args)

    if is_struct(origin):
        return TypeInfo(Kind.STRUCT, hint, origin, args)
    if issubclass(origin, collections.abc.Mapping):
        key, value = args if len(args) == 2 else (Any, Any)
        return TypeInfo(Kind.MAPPING, hint, origin, (key, value))
    if issubclass(origin, tuple):
        if len(args) == 2 and args[1] is Ellipsis:
            return TypeInfo(Kind.SEQUENCE, hint, origin, (args[0],))
        # fixed-shape tuples hold different types per position
        return TypeInfo(Kind.SEQUENCE, hint, origin, (Any,))
    if issubclass(origin, (str, bytes)):
        return _describe_class(origin)
    if issubclass(origin, collections.abc.Collection):
        return TypeInfo(Kind.SEQUENCE, hint, origin, (args[0] if args else Any,))
    return TypeInfo(Kind.OTHER, hint, origin, args)


def _describe_class(cls: type) -> TypeInfo:
    # bool before int: bool is an int subclass but has its own zero semantics
    if issubclass(cls, bool):
        return TypeInfo(Kind.BOOLEAN, cls, cls)
    if issubclass(cls, int):
        return TypeInfo(Kind.INTEGER, cls, cls)
    if issubclass(cls, (float, Decimal)):
        return TypeInfo(Kind.FLOAT, cls, cls)
    if issubclass(cls, str):
        return TypeInfo(Kind.STRING, cls, cls)
    if issubclass(cls, (bytes, bytearray, memoryview)):
        return TypeInfo(Kind.BYTES, cls, cls)
    if is_struct(cls):
        return TypeInfo(Kind.STRUCT, cls, cls)
    if issubclass(cls, collections.abc.Mapping):
        return TypeInfo(Kind.MAPPING, cls, cls, (Any, Any))
    if issubclass(cls, collections.abc.Collection):
        return TypeInfo(Kind.SEQUENCE, cls, cls, (Any,))
    return TypeInfo(Kind.OTHER, cls, cls)


def instance_check(info: TypeInfo) -> Callable[[Any], bool] | None:
    """Predicate telling whether a value can be treated as ``info``.

    Dataclasses do not enforce annotations, so a field declared ``int`` may
    hold anything at run time. Returns None when every value is acceptable.
    """
    kind = info.kind
    if kind is Kind.OPTIONAL:
        inner = instance_check(describe(info.elem))
        if inner is None:
            return None
        return lambda value: value is None or inner(value)
    if kind in _RUNTIME_TYPES:
        expected = _RUNTIME_TYPES[kind]
        return lambda value: isinstance(value, expected)
    if kind is Kind.SEQUENCE:
        return _is_collection
    if kind is Kind.STRUCT:
        cls = info.origin
        return lambda value: isinstance(value, cls)
    return None


def _is_collection(value: Any) -> bool:
    return isinstance(value, collections.abc.Collection) and not isinstance(
        value, (str, bytes, bytearray, collections.abc.Mapping)
    )


@dataclass(frozen=True)
class FieldSpec:
    """A struct field as seen by the compiler."""
    attr: str
    external: str
    tag: str
    hint: Any


def struct_fields(cls: type, tag_name: str, json_tag: str) -> list[FieldSpec]:
    """Validated fields of ``cls`` in declaration order.

    Fields tagged ``-`` are left out, as are fields with an empty tag whose
    serialization name is ``-``.
    """
    if issubclass(cls, BaseModel):
        raw = _model_fields(cls, tag_name)
    else:
        raw = _dataclass_fields(cls, tag_name, json_tag)

    specs = []
    for attr, tag, serialized, hint in raw:
        if attr.startswith("_"):
            continue
        tag = tag.strip()
        if tag == SKIP_TAG:
            continue
        if not tag and serialized == SKIP_TAG:
            continue
        external = attr
        if serialized and serialized != SKIP_TAG:
            external = serialized
        specs.append(FieldSpec(attr, external, tag, hint))
    return specs


def _dataclass_fields(cls: type, tag_name: str, json_tag: str):
    hints = _resolve_hints(cls)
    for f in dataclasses.fields(cls):
        serialized = f.metadata.get(json_tag, "") or ""
        # "name,omitempty" style options after the name are ignored
        serialized = serialized.split(",", 1)[0].strip()
        yield f.name, f.metadata.get(tag_name, "") or "", serialized, hints.get(f.name, f.type)


def _model_fields(cls: type[BaseModel], tag_name: str):
    for name, info in cls.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        serialized = SKIP_TAG if info.exclude is True else (
            info.serialization_alias or info.alias or ""
        )
        yield name, extra.get(tag_name, "") or "", serialized, info.annotation


def _resolve_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError) as e:
        logger.warning(f"Could not resolve type hints of {cls.__qualname__}, using raw annotations: {e}")
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(getattr(klass, "__annotations__", {}))
        return hints


def format_key(key: Any) -> str:
    """Textual form of a map key: ``str`` for scalars, ``{A:3 B:x}`` for structs."""
    cls = type(key)
    if dataclasses.is_dataclass(cls):
        names = [f.name for f in dataclasses.fields(cls)]
    elif isinstance(key, BaseModel):
        names = list(cls.model_fields)
    else:
        return str(key)
    inner = " ".join(f"{name}:{format_key(getattr(key, name))}" for name in names)
    return "{" + inner + "}"
