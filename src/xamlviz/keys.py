"""Node key derivation shared by the line indexer and tree walkers.

A node key identifies one activity within a single pass over a workflow.
When the designer stored a persistent id (``sap2010:WorkflowViewState.IdRef``)
that id is the key. Otherwise the key is synthesized as::

    {type}_{display_name}_{occurrence}

where ``occurrence`` counts the earlier elements of the same pass that share
the ``(type, display_name)`` pair. Two passes agree on keys only if both
create a fresh OccurrenceCounter and visit activities in document order.

Synthesized keys are positional. Reordering or renaming same-type,
same-name siblings shifts the keys of the siblings after them.

Thread Safety:
    build_key() is pure apart from advancing the counter it is given.
    OccurrenceCounter instances belong to one pass and must not be shared.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from xamlviz.config import VocabularyConfig, get_config

if TYPE_CHECKING:
    from xamlviz.nodes import ActivityNode


class OccurrenceCounter:
    """Per-pass counter of ``(type, display_name)`` occurrences."""

    __slots__ = ("_counts",)

    def __init__(self) -> None:
        self._counts: dict[tuple[str, str], int] = {}

    def next(self, type_name: str, display_name: str) -> int:
        """Return the occurrence index for this pair and advance it."""
        pair = (type_name, display_name)
        index = self._counts.get(pair, 0)
        self._counts[pair] = index + 1
        return index

    def peek(self, type_name: str, display_name: str) -> int:
        """Return the index the next call to next() would produce."""
        return self._counts.get((type_name, display_name), 0)


def build_key(
    type_name: str,
    display_name: str,
    id_ref: str | None,
    counter: OccurrenceCounter,
) -> str:
    """Derive the node key for one activity.

    The counter advances even when ``id_ref`` is used, so that a persistent
    id on one element does not shift the synthesized keys of later ones.

    Args:
        type_name: Element local name
        display_name: DisplayName, or the type when absent
        id_ref: Persistent designer id, if any
        counter: Counter of the current pass

    Returns:
        The persistent id when present, else ``type_displayName_index``
    """
    index = counter.next(type_name, display_name)
    if id_ref:
        return id_ref
    return f"{type_name}_{display_name}_{index}"


def node_key(
    node: ActivityNode,
    counter: OccurrenceCounter,
    *,
    config: VocabularyConfig | None = None,
) -> str:
    """Derive the key for a parsed ActivityNode.

    ``config`` names the persistent id attribute; pass the one given to
    build_line_index() so both passes agree. Defaults to the active config.
    """
    id_ref = node.properties.get((config or get_config()).id_ref_attribute)
    return build_key(
        node.type,
        node.display_name,
        id_ref if isinstance(id_ref, str) else None,
        counter,
    )


__all__ = [
    "OccurrenceCounter",
    "build_key",
    "node_key",
]
