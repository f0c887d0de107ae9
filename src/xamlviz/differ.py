"""Structural diff between two parsed workflows.

Compares two ParsedDocuments produced by independent parse() calls. Roots
are always paired. Below the root, children of each paired node are matched
by ``{display_name}_{sibling_index}`` within that one parent; a child of one
version is never compared with a node under a different parent.

Matching is positional, not content-based. Inserting, removing or
reordering a sibling shifts the keys of the siblings after it, which shows
up as a mix of added, removed and modified entries.

Example:
    from xamlviz import diff_documents, parse

    result = diff_documents(parse(before_text), parse(after_text))
    for entry in result.modified:
        for change in entry.property_changes:
            print(entry.node.display_name, change.property_name)

Thread Safety:
    diff_documents() is pure. DiffResult and its entries are frozen.

"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import asdict, dataclass, is_dataclass
from enum import Enum
from typing import Any

from xamlviz.config import VocabularyConfig, get_config
from xamlviz.nodes import ActivityNode, ParsedDocument
from xamlviz.utils.logger import get_logger

logger = get_logger(__name__)

SCREENSHOT_PROPERTY = "InformativeScreenshot"


class DiffKind(Enum):
    """Classification of a diff entry."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


@dataclass(frozen=True, slots=True)
class PropertyChange:
    """One property whose value differs between versions.

    ``before`` or ``after`` is None when the property is absent on that side.
    """

    property_name: str
    before: Any
    after: Any


@dataclass(frozen=True, slots=True)
class DiffEntry:
    """One added, removed or modified activity.

    For MODIFIED entries ``node`` is the after version and ``counterpart``
    the before version. ADDED and REMOVED entries have no counterpart.
    """

    kind: DiffKind
    node: ActivityNode
    counterpart: ActivityNode | None = None
    property_changes: tuple[PropertyChange, ...] = ()


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Activities added, removed and modified between two versions."""

    added: tuple[DiffEntry, ...] = ()
    removed: tuple[DiffEntry, ...] = ()
    modified: tuple[DiffEntry, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.modified)

    def entries(self) -> Iterator[DiffEntry]:
        """All entries: added, then removed, then modified."""
        yield from self.added
        yield from self.removed
        yield from self.modified

    def __len__(self) -> int:
        return len(self.added) + len(self.removed) + len(self.modified)


def diff_documents(
    before: ParsedDocument,
    after: ParsedDocument,
    *,
    config: VocabularyConfig | None = None,
) -> DiffResult:
    """Diff two parsed workflows.

    Args:
        before: Parsed older version
        after: Parsed newer version
        config: Vocabulary override (defaults to the active ContextVar config)

    Returns:
        DiffResult. Empty when both documents parse to the same tree.
    """
    differ = _TreeDiffer(config or get_config())
    differ.compare(before.root, after.root)
    logger.debug(
        "Diff: %d added, %d removed, %d modified",
        len(differ.added),
        len(differ.removed),
        len(differ.modified),
    )
    return DiffResult(
        added=tuple(differ.added),
        removed=tuple(differ.removed),
        modified=tuple(differ.modified),
    )


class _TreeDiffer:
    """Accumulates entries for one diff_documents() call."""

    __slots__ = ("_ignored_prefixes", "added", "removed", "modified")

    def __init__(self, config: VocabularyConfig) -> None:
        self._ignored_prefixes = config.ignored_property_prefixes
        self.added: list[DiffEntry] = []
        self.removed: list[DiffEntry] = []
        self.modified: list[DiffEntry] = []

    def compare(self, before: ActivityNode, after: ActivityNode) -> None:
        before_children = _sibling_map(before.children)
        after_children = _sibling_map(after.children)

        for key, node in after_children.items():
            if key not in before_children:
                self.added.append(DiffEntry(kind=DiffKind.ADDED, node=node))

        for key, node in before_children.items():
            if key not in after_children:
                self.removed.append(DiffEntry(kind=DiffKind.REMOVED, node=node))

        for key, before_node in before_children.items():
            after_node = after_children.get(key)
            if after_node is None:
                continue
            changes = self.property_changes(before_node, after_node)
            if changes:
                self.modified.append(
                    DiffEntry(
                        kind=DiffKind.MODIFIED,
                        node=after_node,
                        counterpart=before_node,
                        property_changes=changes,
                    )
                )
            self.compare(before_node, after_node)

    def property_changes(
        self, before: ActivityNode, after: ActivityNode
    ) -> tuple[PropertyChange, ...]:
        changes: list[PropertyChange] = []

        names = list(before.properties)
        names.extend(name for name in after.properties if name not in before.properties)

        for name in names:
            if name.startswith(self._ignored_prefixes):
                continue
            old = before.properties.get(name)
            new = after.properties.get(name)
            if not values_equal(old, new):
                changes.append(PropertyChange(property_name=name, before=old, after=new))

        if before.screenshot != after.screenshot:
            changes.append(
                PropertyChange(
                    property_name=SCREENSHOT_PROPERTY,
                    before=before.screenshot,
                    after=after.screenshot,
                )
            )
        return tuple(changes)


def _sibling_map(children: tuple[ActivityNode, ...]) -> dict[str, ActivityNode]:
    siblings: dict[str, ActivityNode] = {}
    for index, child in enumerate(children):
        siblings[f"{child.display_name}_{index}"] = child
    return siblings


def values_equal(first: Any, second: Any) -> bool:
    """Compare two property values.

    None (absent) equals only None. Strings compare directly; structured
    values compare by canonical JSON, so key order matters.
    """
    if first is None or second is None:
        return first is None and second is None
    if isinstance(first, str) and isinstance(second, str):
        return first == second
    return canonical_json(first) == canonical_json(second)


def canonical_json(value: Any) -> str:
    """Order-preserving JSON text of a property value."""
    return json.dumps(value, default=_json_default, ensure_ascii=False)


def _json_default(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


__all__ = [
    "DiffEntry",
    "DiffKind",
    "DiffResult",
    "PropertyChange",
    "canonical_json",
    "diff_documents",
    "values_equal",
]
