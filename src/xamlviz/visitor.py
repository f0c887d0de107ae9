"""Activity tree walking for xamlviz.

Provides pre-order iteration, the keyed walk that assigns node keys the way
a renderer does while drawing the tree, a visitor base class dispatching on
activity type, and an immutable transform for rewriting frozen trees.

Pairing tree nodes with their source lines:

    doc = parse(text)
    index = build_line_index(text)
    for key, node in iter_keyed(doc):
        span = index.range_for(key)

Collecting every LogMessage:

    class LogCollector(BaseVisitor[None]):
        def __init__(self) -> None:
            self.messages: list[ActivityNode] = []

        def visit_log_message(self, node: ActivityNode) -> None:
            self.messages.append(node)

Thread Safety:
    Visitors may accumulate state; create one per thread. iter_activities,
    iter_keyed and transform are pure.

"""

import dataclasses
import re
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

from xamlviz.config import VocabularyConfig
from xamlviz.keys import OccurrenceCounter, node_key
from xamlviz.nodes import ActivityNode, ParsedDocument

T = TypeVar("T")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def iter_activities(root: ActivityNode | ParsedDocument) -> Iterator[ActivityNode]:
    """Yield every activity in document order (parent before children)."""
    node = root.root if isinstance(root, ParsedDocument) else root
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def iter_keyed(
    root: ActivityNode | ParsedDocument,
    *,
    config: VocabularyConfig | None = None,
) -> Iterator[tuple[str, ActivityNode]]:
    """Yield (node key, activity) in document order.

    Uses a fresh OccurrenceCounter, so keys match those of
    build_line_index() over the same text and with the same ``config``.
    """
    counter = OccurrenceCounter()
    for node in iter_activities(root):
        yield node_key(node, counter, config=config), node


def find_by_key(
    root: ActivityNode | ParsedDocument,
    key: str,
    *,
    config: VocabularyConfig | None = None,
) -> ActivityNode | None:
    """Return the activity with the given node key, or None.

    When keys collide, the last activity carrying the key wins, matching
    the line index.
    """
    found = None
    for candidate, node in iter_keyed(root, config=config):
        if candidate == key:
            found = node
    return found


def visit_name(activity_type: str) -> str:
    """Visitor method name for an activity type.

    >>> visit_name("InvokeWorkflowFile")
    'visit_invoke_workflow_file'
    >>> visit_name("NApplicationCard")
    'visit_n_application_card'
    """
    return "visit_" + _CAMEL_BOUNDARY.sub("_", activity_type).lower()


class BaseVisitor(Generic[T]):
    """Base activity visitor with type-based dispatch.

    Subclass and define ``visit_<snake_case_type>`` methods for the activity
    types you care about (``visit_sequence``, ``visit_n_click``...).
    Unhandled types fall through to ``visit_default``. Children are walked
    automatically after the ``visit_*`` call.

    Type parameter ``T`` is the return type of visit methods (use ``None``
    for side-effect-only visitors).

    """

    def visit(self, node: ActivityNode) -> T:
        """Dispatch to the matching ``visit_*`` method, then walk children."""
        handler = getattr(self, visit_name(node.type), None)
        result = handler(node) if callable(handler) else self.visit_default(node)
        for child in node.children:
            self.visit(child)
        return result

    def visit_default(self, node: ActivityNode) -> T:
        """Called for activity types without a specific ``visit_*`` method.

        Override this for catch-all behavior. Default returns None
        (suitable for ``BaseVisitor[None]``).

        """
        return None  # type: ignore[return-value]


def transform(
    doc: ParsedDocument, fn: Callable[[ActivityNode], ActivityNode | None]
) -> ParsedDocument:
    """Apply a function to every activity, returning a new document.

    ``fn`` is called bottom-up: children are transformed first, then the
    parent is transformed with its new children.

    Return ``None`` from ``fn`` to remove an activity. The root cannot be
    removed; returning None for it raises TypeError.

    Args:
        doc: The document to transform.
        fn: Function that receives an activity and returns a (possibly new)
            activity, or None to remove it.

    Returns:
        A new ParsedDocument; variables and parameters are carried over.

    """
    root = _transform_node(doc.root, fn)
    if root is None:
        msg = "transform fn must return an ActivityNode for the root (cannot remove root)"
        raise TypeError(msg)
    return dataclasses.replace(doc, root=root)


def _transform_node(
    node: ActivityNode, fn: Callable[[ActivityNode], ActivityNode | None]
) -> ActivityNode | None:
    children = tuple(
        result for child in node.children if (result := _transform_node(child, fn)) is not None
    )
    if children != node.children:
        node = dataclasses.replace(node, children=children)
    return fn(node)


__all__ = [
    "BaseVisitor",
    "find_by_key",
    "iter_activities",
    "iter_keyed",
    "transform",
    "visit_name",
]
