"""Bidirectional index between activity keys and source line ranges.

build_line_index() re-scans the raw text at the tag level (xamlviz.scanner)
instead of reusing the parsed tree, because the tree keeps no formatting.
Both passes classify elements with the same VocabularyConfig and number
activities with a fresh OccurrenceCounter in document order, so a key from
the index names the same activity as the key a tree walk derives
(xamlviz.visitor.iter_keyed).

Overlap rule: a line inside several spans maps to the innermost one. Spans
that share a line without nesting (siblings on one line) give it to the
later one, the last registered.

Thread Safety:
    build_line_index() is pure. LineIndex is frozen and safe to share.

"""

from __future__ import annotations

from dataclasses import dataclass, field

from xamlviz.config import VocabularyConfig, get_config
from xamlviz.keys import OccurrenceCounter, build_key
from xamlviz.scanner import Tag, TagKind, scan_tags
from xamlviz.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class LineRange:
    """Inclusive 1-based line span occupied by one activity's markup."""

    node_key: str
    display_name: str
    type: str
    start_line: int
    end_line: int

    def __contains__(self, line: object) -> bool:
        return isinstance(line, int) and self.start_line <= line <= self.end_line


@dataclass(frozen=True, slots=True)
class LineIndex:
    """Node key to line range, and line to node key."""

    key_to_range: dict[str, LineRange] = field(default_factory=dict)
    line_to_key: dict[int, str] = field(default_factory=dict)

    def range_for(self, key: str) -> LineRange | None:
        return self.key_to_range.get(key)

    def key_at(self, line: int) -> str | None:
        return self.line_to_key.get(line)

    def range_at(self, line: int) -> LineRange | None:
        """Range of the innermost activity covering ``line``."""
        key = self.line_to_key.get(line)
        return self.key_to_range.get(key) if key is not None else None

    def __contains__(self, key: object) -> bool:
        return key in self.key_to_range

    def __len__(self) -> int:
        return len(self.key_to_range)


@dataclass(slots=True)
class _OpenTag:
    tag: Tag
    key: str | None  # None when the element is not an activity
    blocked: bool  # descendants are never activities
    depth: int


class _IndexBuilder:
    """Single-use accumulator for one scan."""

    __slots__ = (
        "_config",
        "_counter",
        "_depth",
        "_key_to_range",
        "_line_to_key",
        "_seen_root",
        "_stack",
    )

    def __init__(self, config: VocabularyConfig) -> None:
        self._config = config
        self._counter = OccurrenceCounter()
        self._key_to_range: dict[str, LineRange] = {}
        self._line_to_key: dict[int, str] = {}
        self._depth: dict[str, int] = {}
        self._stack: list[_OpenTag] = []
        self._seen_root = False

    def feed(self, tag: Tag) -> None:
        if tag.kind is TagKind.CLOSE:
            self._close(tag)
            return

        key, blocked = self._classify(tag)
        if tag.kind is TagKind.SELF_CLOSING:
            if key is not None:
                self._register(key, tag, tag.start_line, tag.end_line, len(self._stack))
        else:
            self._stack.append(
                _OpenTag(tag=tag, key=key, blocked=blocked, depth=len(self._stack))
            )

    def build(self) -> LineIndex:
        return LineIndex(key_to_range=self._key_to_range, line_to_key=self._line_to_key)

    def _classify(self, tag: Tag) -> tuple[str | None, bool]:
        """Return (activity key or None, whether descendants are blocked)."""
        if not self._seen_root:
            self._seen_root = True
            return self._key(tag), False

        if self._stack and self._stack[-1].blocked:
            return None, True
        if self._config.is_metadata(tag.name, tag.prefix):
            return None, True
        if "." in tag.name:
            absorbed = tag.name.split(".")[1] in self._config.absorbed_properties
            return None, absorbed
        if self._config.is_wrapper(tag.name):
            return None, False
        return self._key(tag), False

    def _key(self, tag: Tag) -> str:
        display_name = tag.attributes.get("DisplayName") or tag.name
        return build_key(
            tag.name,
            display_name,
            tag.attributes.get(self._config.id_ref_attribute),
            self._counter,
        )

    def _close(self, tag: Tag) -> None:
        for position in range(len(self._stack) - 1, -1, -1):
            if self._stack[position].tag.name == tag.name:
                opened = self._stack.pop(position)
                if opened.key is not None:
                    self._register(
                        opened.key, opened.tag, opened.tag.start_line, tag.end_line, opened.depth
                    )
                return
        # unmatched close tag: ignored

    def _register(
        self, key: str, tag: Tag, start_line: int, end_line: int, depth: int
    ) -> None:
        """Record a span; it takes every line not held by a deeper element."""
        previous = self._key_to_range.get(key)
        if previous is not None:
            logger.debug(
                "Node key collision for %r (lines %d-%d replaced by %d-%d)",
                key,
                previous.start_line,
                previous.end_line,
                start_line,
                end_line,
            )
            for line in range(previous.start_line, previous.end_line + 1):
                if self._line_to_key.get(line) == key:
                    del self._line_to_key[line]

        span = LineRange(
            node_key=key,
            display_name=tag.attributes.get("DisplayName") or tag.name,
            type=tag.name,
            start_line=start_line,
            end_line=end_line,
        )
        self._key_to_range[key] = span
        self._depth[key] = depth

        # Lines held by a deeper element stay with it; an owner at the same
        # depth or shallower is replaced
        for line in range(start_line, end_line + 1):
            owner = self._line_to_key.get(line)
            if owner is not None and self._depth[owner] > depth:
                continue
            self._line_to_key[line] = key


def build_line_index(source: str, *, config: VocabularyConfig | None = None) -> LineIndex:
    """Build the key/line index for one workflow text.

    Args:
        source: Raw workflow text (the same text given to parse())
        config: Vocabulary override (defaults to the active ContextVar config)

    Returns:
        LineIndex; empty for empty text. Malformed markup never raises:
        unmatched close tags are ignored and unclosed open tags get no span.

    Example:
        >>> index = build_line_index('<Sequence DisplayName="Main">\\n</Sequence>')
        >>> index.range_for("Sequence_Main_0").end_line
        2
    """
    builder = _IndexBuilder(config or get_config())
    if source:
        for tag in scan_tags(source):
            builder.feed(tag)
    return builder.build()


__all__ = [
    "LineIndex",
    "LineRange",
    "build_line_index",
]
