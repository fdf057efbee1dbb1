"""Tag parsing.

A tag is a comma separated list of ``name`` or ``name=param`` segments, e.g.
``nonzero,min=3,regexp=^a.*$``. A literal comma inside a parameter is written
``\\,``; a whole segment may also be wrapped in double quotes to keep its
commas. The tag ``-`` means "do not validate this field".
"""

from collections.abc import Container
from dataclasses import dataclass

from ..errors import TagParseError, UnknownRuleError
from .types import SKIP_TAG

ESCAPED_COMMA = "\\,"


@dataclass(frozen=True)
class RuleSpec:
    """One parsed tag segment."""
    name: str
    param: str = ""


def is_skip(tag: str) -> bool:
    return tag.strip() == SKIP_TAG


def split_tag(tag: str) -> list[str]:
    """Split ``tag`` on unescaped commas, un-escaping ``\\,`` in the segments."""
    segments: list[str] = []
    buf: list[str] = []
    quoted = False
    i = 0
    while i < len(tag):
        ch = tag[i]
        if quoted:
            if ch == '"':
                if tag[i + 1:i + 2] == '"':
                    buf.append('"')
                    i += 1
                else:
                    quoted = False
            else:
                buf.append(ch)
        elif ch == '"' and not "".join(buf).strip():
            buf.clear()
            quoted = True
        elif tag.startswith(ESCAPED_COMMA, i):
            buf.append(",")
            i += 1
        elif ch == ",":
            segments.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
        i += 1

    if quoted:
        raise TagParseError(f"unterminated quote in tag {tag!r}")
    segments.append("".join(buf))
    return segments


def parse_tag(tag: str, known: Container[str] | None = None) -> list[RuleSpec]:
    """Parse ``tag`` into rule specs, in declaration order.

    Args:
        tag: Raw tag string. Empty means no rules.
        known: Optional container of registered rule names; names not in it
            raise ``UnknownRuleError``.

    Raises:
        TagParseError: On a segment with an empty rule name.
    """
    if not tag.strip():
        return []

    specs = []
    for segment in split_tag(tag):
        name, sep, param = segment.partition("=")
        name = name.strip()
        if not name:
            raise TagParseError(f"empty rule name in tag {tag!r}")
        if known is not None and name not in known:
            raise UnknownRuleError(name)
        specs.append(RuleSpec(name, param.strip() if sep else ""))
    return specs
