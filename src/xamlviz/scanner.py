"""Lexical tag scanner for workflow XAML.

Finds open, close and self-closing tags in raw text without building a tree,
reporting the lines each tag starts and ends on. Comments, CDATA sections,
processing instructions and DOCTYPE declarations are skipped so tags inside
them are never reported.

Attribute values may be double- or single-quoted and may contain ``>``;
entity references in them are decoded, so values compare equal to what an
XML parser reports.

Thread Safety:
    scan_tags() is a pure generator. Safe to call from any thread.

"""

from __future__ import annotations

import bisect
import html
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto


class TagKind(Enum):
    """Kind of tag occurrence."""

    OPEN = auto()  # <Name ...>
    CLOSE = auto()  # </Name>
    SELF_CLOSING = auto()  # <Name ... />


@dataclass(frozen=True, slots=True)
class Tag:
    """One tag occurrence in source text.

    Attributes:
        name: Local name with any namespace prefix stripped
        full_name: Name as written, prefix included
        kind: Open, close or self-closing
        start_line: Line of the ``<`` (1-indexed)
        end_line: Line of the ``>`` (1-indexed)
        attributes: Attribute values keyed by name as written

    """

    name: str
    full_name: str
    kind: TagKind
    start_line: int
    end_line: int
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def prefix(self) -> str | None:
        """Namespace prefix as written, if any."""
        prefix, sep, _ = self.full_name.rpartition(":")
        return prefix if sep else None


_NAME = r"[A-Za-z_][\w:.\-]*"
_ATTRIBUTE_VALUE = r"""(?:"[^"]*"|'[^']*')"""

_MARKUP = re.compile(
    rf"""
    <!--.*?-->
    | <!\[CDATA\[.*?\]\]>
    | <\?.*?\?>
    | <![^>]*>
    | <(?P<close>/?)(?P<name>{_NAME})
      (?P<attrs>(?:\s+{_NAME}\s*=\s*{_ATTRIBUTE_VALUE})*)
      \s*(?P<self>/?)>
    """,
    re.DOTALL | re.VERBOSE,
)

_ATTRIBUTE = re.compile(rf"""({_NAME})\s*=\s*("([^"]*)"|'([^']*)')""")
_WHITESPACE = re.compile(r"\r\n|[\r\n\t]")


def scan_tags(source: str) -> Iterator[Tag]:
    """Yield every tag in source in document order.

    Args:
        source: Raw workflow text

    Yields:
        Tag for each open, close and self-closing tag.
    """
    line_starts = [0]
    line_starts.extend(match.end() for match in re.finditer("\n", source))

    for match in _MARKUP.finditer(source):
        full_name = match.group("name")
        if full_name is None:
            # comment, CDATA, processing instruction or declaration
            continue

        if match.group("close"):
            kind = TagKind.CLOSE
        elif match.group("self"):
            kind = TagKind.SELF_CLOSING
        else:
            kind = TagKind.OPEN

        yield Tag(
            name=full_name.rpartition(":")[2],
            full_name=full_name,
            kind=kind,
            start_line=bisect.bisect_right(line_starts, match.start()),
            end_line=bisect.bisect_right(line_starts, match.end() - 1),
            attributes=_parse_attributes(match.group("attrs")),
        )


def _parse_attributes(text: str) -> dict[str, str]:
    attributes: dict[str, str] = {}
    for match in _ATTRIBUTE.finditer(text):
        raw = match.group(3) if match.group(3) is not None else match.group(4)
        # XML attribute-value normalization: literal whitespace becomes a space
        attributes[match.group(1)] = html.unescape(_WHITESPACE.sub(" ", raw))
    return attributes


__all__ = [
    "Tag",
    "TagKind",
    "scan_tags",
]
