"""
xamlviz — Workflow XAML parsing, line mapping and structural diff

Turns UiPath-style workflow XAML into a typed activity tree, maps activities
to the source lines they occupy, and diffs two versions of a workflow.
Zero runtime dependencies.

Quick Start:
    >>> from xamlviz import parse, build_line_index
    >>> doc = parse(text)
    >>> doc.root.children[0].display_name
    'Main Sequence'
    >>> index = build_line_index(text)
    >>> index.key_at(12)
    'Sequence_Main Sequence_0'

    >>> # Or compare two revisions in one call
    >>> from xamlviz import compare
    >>> result = compare(before_text, after_text)
    >>> [entry.node.display_name for entry in result.diff.modified]
    ['Assign']

Custom Vocabulary:
    >>> from xamlviz import Visualizer, VocabularyConfig
    >>> config = VocabularyConfig.from_dict({"wrapper_names": ["ActivityAction", "ActivityFunc"]})
    >>> viz = Visualizer(config=config)
    >>> doc = viz.parse(text)
"""

from dataclasses import dataclass

from xamlviz.cache import DictParseCache, ParseCache, hash_config, hash_content
from xamlviz.config import (
    VocabularyConfig,
    config_context,
    get_config,
    reset_config,
    set_config,
)
from xamlviz.differ import (
    DiffEntry,
    DiffKind,
    DiffResult,
    PropertyChange,
    diff_documents,
)
from xamlviz.errors import MalformedDocumentError, XamlVizError
from xamlviz.keys import OccurrenceCounter, build_key, node_key
from xamlviz.line_index import LineIndex, LineRange, build_line_index
from xamlviz.nodes import (
    ActivityNode,
    ArgumentDirection,
    AssignOperation,
    Parameter,
    ParsedDocument,
    PropertyValue,
    Variable,
)
from xamlviz.parser import WorkflowParser
from xamlviz.profiling import RunAccumulator, get_run_accumulator, profiled_run
from xamlviz.properties import categorize_changes, is_hidden_property, sub_properties
from xamlviz.serialization import from_dict, from_json, to_dict, to_json
from xamlviz.visitor import BaseVisitor, find_by_key, iter_activities, iter_keyed, transform
from xamlviz.word_diff import TextPart, common_parts

__version__ = "0.1.0"


def parse(
    source: str,
    *,
    source_file: str | None = None,
    config: VocabularyConfig | None = None,
    cache: ParseCache | None = None,
) -> ParsedDocument:
    """Parse workflow XAML into a typed activity tree.

    Args:
        source: Workflow XAML text
        source_file: Optional source file path for error messages
        config: Vocabulary override (defaults to the active ContextVar config)
        cache: Optional content-addressed parse cache. When provided, checks
            cache before parsing; on miss, parses and stores result. For
            parallel parsing, use a thread-safe cache implementation.

    Returns:
        ParsedDocument

    Raises:
        MalformedDocumentError: If the text is blank or not well-formed XML.

    Example:
        >>> doc = parse('<Sequence DisplayName="Main"><Delay /></Sequence>')
        >>> doc.root.children[0].type
        'Delay'
    """
    config = config or get_config()
    acc = get_run_accumulator()

    content_hash = config_hash = ""
    if cache is not None:
        content_hash = hash_content(source)
        config_hash = hash_config(config)
        cached = cache.get(content_hash, config_hash)
        if cached is not None:
            if acc is not None:
                acc.record_parse(len(source), _count_activities(cached), cached=True)
            return cached

    doc = WorkflowParser(source, source_file=source_file, config=config).parse()

    if cache is not None:
        cache.put(content_hash, config_hash, doc)

    # Record profiling metrics if accumulator is active
    if acc is not None:
        acc.record_parse(len(source), _count_activities(doc))

    return doc


def index(source: str, *, config: VocabularyConfig | None = None) -> LineIndex:
    """Build the line index for ``source``, recording profiling metrics."""
    line_index = build_line_index(source, config=config)
    acc = get_run_accumulator()
    if acc is not None:
        acc.record_index(len(line_index))
    return line_index


def diff(
    before: ParsedDocument,
    after: ParsedDocument,
    *,
    config: VocabularyConfig | None = None,
) -> DiffResult:
    """Diff two parsed documents, recording profiling metrics."""
    result = diff_documents(before, after, config=config)
    acc = get_run_accumulator()
    if acc is not None:
        acc.record_diff(len(result))
    return result


def _count_activities(doc: ParsedDocument) -> int:
    return sum(1 for _ in iter_activities(doc))


@dataclass(frozen=True, slots=True)
class Comparison:
    """Both parsed revisions, their line indices and the diff between them."""

    before: ParsedDocument
    after: ParsedDocument
    before_index: LineIndex
    after_index: LineIndex
    diff: DiffResult


class Visualizer:
    """High-level processor bundling a vocabulary and an optional cache.

    Usage:
        >>> viz = Visualizer()
        >>> result = viz.compare(before_text, after_text)
        >>> len(result.diff)
        1

        >>> # Reuse parses across comparisons
        >>> viz = Visualizer(cache=DictParseCache())
        >>> viz.compare(rev1, rev2)
        >>> viz.compare(rev2, rev3)  # rev2 is not parsed again

    Thread Safety:
        Holds only an immutable config. Safe to use from several threads
        as long as the cache given to it is.

    """

    __slots__ = ("_cache", "_config")

    def __init__(
        self,
        *,
        config: VocabularyConfig | None = None,
        cache: ParseCache | None = None,
    ) -> None:
        """Initialize the visualizer.

        Args:
            config: Vocabulary to use (defaults to the config active at
                construction time)
            cache: Optional parse cache shared by every call
        """
        self._config = config or get_config()
        self._cache = cache

    @property
    def config(self) -> VocabularyConfig:
        return self._config

    def parse(self, source: str, *, source_file: str | None = None) -> ParsedDocument:
        return parse(source, source_file=source_file, config=self._config, cache=self._cache)

    def index(self, source: str) -> LineIndex:
        return index(source, config=self._config)

    def diff(self, before: ParsedDocument, after: ParsedDocument) -> DiffResult:
        return diff(before, after, config=self._config)

    def compare(
        self,
        before: str,
        after: str,
        *,
        before_file: str | None = None,
        after_file: str | None = None,
    ) -> Comparison:
        """Parse and index both revisions and diff them.

        Walk the result with ``iter_keyed(doc, config=viz.config)`` to get
        keys that agree with the indices.

        Raises:
            MalformedDocumentError: If either revision is malformed.
        """
        before_doc = self.parse(before, source_file=before_file)
        after_doc = self.parse(after, source_file=after_file)
        return Comparison(
            before=before_doc,
            after=after_doc,
            before_index=self.index(before),
            after_index=self.index(after),
            diff=self.diff(before_doc, after_doc),
        )


def compare(
    before: str,
    after: str,
    *,
    config: VocabularyConfig | None = None,
    cache: ParseCache | None = None,
) -> Comparison:
    """Compare two workflow revisions with a throwaway Visualizer."""
    return Visualizer(config=config, cache=cache).compare(before, after)


__all__ = [
    # Main API
    "parse",
    "index",
    "diff",
    "compare",
    "Visualizer",
    "Comparison",
    "WorkflowParser",
    "build_line_index",
    "diff_documents",
    "common_parts",
    "TextPart",
    # Cache
    "DictParseCache",
    "ParseCache",
    "hash_config",
    "hash_content",
    # Configuration
    "VocabularyConfig",
    "config_context",
    "get_config",
    "reset_config",
    "set_config",
    # Errors
    "XamlVizError",
    "MalformedDocumentError",
    # Tree
    "ActivityNode",
    "ArgumentDirection",
    "AssignOperation",
    "Parameter",
    "ParsedDocument",
    "PropertyValue",
    "Variable",
    # Keys and lines
    "OccurrenceCounter",
    "build_key",
    "node_key",
    "LineIndex",
    "LineRange",
    # Diff
    "DiffEntry",
    "DiffKind",
    "DiffResult",
    "PropertyChange",
    # Presentation helpers
    "categorize_changes",
    "is_hidden_property",
    "sub_properties",
    # Profiling
    "RunAccumulator",
    "get_run_accumulator",
    "profiled_run",
    # Serialization
    "from_dict",
    "from_json",
    "to_dict",
    "to_json",
    # Visitor
    "BaseVisitor",
    "find_by_key",
    "iter_activities",
    "iter_keyed",
    "transform",
    # Version
    "__version__",
]
