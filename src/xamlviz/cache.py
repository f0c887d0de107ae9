"""Parse cache keyed by workflow fingerprint and vocabulary.

Reviewing a change usually means parsing the same revision several times:
once per diff it takes part in and again when the view is reopened. A
ParseCache maps (content_hash, config_hash) to the ParsedDocument so each
revision is parsed once per vocabulary.

Example:
    >>> from xamlviz import parse, DictParseCache
    >>> cache = DictParseCache()
    >>> first = parse(text, cache=cache)
    >>> parse(text, cache=cache) is first
    True
"""

from __future__ import annotations

from dataclasses import fields
from typing import TYPE_CHECKING, Protocol

from xamlviz.utils.hashing import fingerprint, hash_parts

if TYPE_CHECKING:
    from xamlviz.config import VocabularyConfig
    from xamlviz.nodes import ParsedDocument


class ParseCache(Protocol):
    """Anything with dict-like get/put over (content_hash, config_hash).

    ParsedDocument is frozen, so one cached instance may be handed to any
    number of callers. Implementations shared between threads must lock.
    """

    def get(self, content_hash: str, config_hash: str) -> ParsedDocument | None: ...

    def put(self, content_hash: str, config_hash: str, doc: ParsedDocument) -> None: ...


class DictParseCache:
    """Unbounded in-process ParseCache. Not thread-safe."""

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], ParsedDocument] = {}

    def get(self, content_hash: str, config_hash: str) -> ParsedDocument | None:
        return self._entries.get((content_hash, config_hash))

    def put(self, content_hash: str, config_hash: str, doc: ParsedDocument) -> None:
        self._entries[(content_hash, config_hash)] = doc

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def hash_content(source: str) -> str:
    """Cache key for workflow text. CRLF and LF checkouts share a key."""
    return fingerprint(source)


def hash_config(config: VocabularyConfig) -> str:
    """Cache key for a vocabulary.

    Set-valued fields are sorted, so configs that compare equal hash equal
    whatever order their sets iterate in.
    """
    parts = []
    for f in fields(config):
        value = getattr(config, f.name)
        if isinstance(value, frozenset):
            value = sorted(value)
        parts.append(f"{f.name}={value!r}")
    return hash_parts(parts)


__all__ = [
    "DictParseCache",
    "ParseCache",
    "hash_config",
    "hash_content",
]
