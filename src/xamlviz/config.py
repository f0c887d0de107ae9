"""ContextVar-based vocabulary configuration for xamlviz.

The parser, line indexer and differ classify elements and properties by
fixed lookup tables that track one vendor's element vocabulary. Those tables
live here as data so they can be kept current without touching the
algorithms. Unlisted element kinds are treated as activities.

Thread Safety:
    The active vocabulary lives in a ContextVar. Threads and asyncio tasks
    each see their own value; set_config() in one never leaks into another.

Usage:
    from xamlviz.config import VocabularyConfig, config_context

    extra = VocabularyConfig.from_dict({"wrapper_names": ["ActivityAction", "ActivityFunc"]})
    with config_context(extra):
        doc = parse(text)

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, fields
from typing import Any

DEFAULT_METADATA_NAMES = frozenset(
    {
        "WorkflowViewStateService.ViewState",
        "Dictionary",
        "Boolean",
        "String",
        "Property",
        "Variable",
        "InArgument",
        "OutArgument",
        "InOutArgument",
        "DelegateInArgument",
        "DelegateOutArgument",
        "AssignOperation",
        "TargetApp",
        "TargetAnchorable",
        "Target",
    }
)

# Designer, presentation and collection namespaces
DEFAULT_METADATA_PREFIXES = frozenset({"sap", "sap2010", "scg", "sco", "x"})

DEFAULT_WRAPPER_NAMES = frozenset({"ActivityAction", "ActivityAction.Argument"})

# Searched in order for an InformativeScreenshot attribute
DEFAULT_TARGET_NAMES = ("TargetApp", "TargetAnchorable", "Target")

DEFAULT_ABSORBED_PROPERTIES = frozenset({"AssignOperations"})

DEFAULT_HIDDEN_PROPERTY_PREFIXES = ("sap:", "sap2010:", "xmlns", "mc:", "mva:")


@dataclass(frozen=True, slots=True)
class VocabularyConfig:
    """Immutable element and property vocabulary.

    Attributes:
        metadata_names: Local names of non-activity bookkeeping elements
        metadata_prefixes: Namespace prefixes whose elements are never activities
        wrapper_names: Grouping elements that are transparent to the tree
        target_names: Target/anchor elements searched for a screenshot
        absorbed_properties: Property names folded into an assignment list
            instead of having their children spliced into the tree
        id_ref_attribute: Persistent designer id used as the node key
        ignored_property_prefixes: Property names skipped when diffing
        hidden_property_prefixes: Property names presentation layers hide
        word_diff_lookahead: Resynchronisation window of common_parts()

    """

    metadata_names: frozenset[str] = DEFAULT_METADATA_NAMES
    metadata_prefixes: frozenset[str] = DEFAULT_METADATA_PREFIXES
    wrapper_names: frozenset[str] = DEFAULT_WRAPPER_NAMES
    target_names: tuple[str, ...] = DEFAULT_TARGET_NAMES
    absorbed_properties: frozenset[str] = DEFAULT_ABSORBED_PROPERTIES
    id_ref_attribute: str = "sap2010:WorkflowViewState.IdRef"
    ignored_property_prefixes: tuple[str, ...] = ("sap:",)
    hidden_property_prefixes: tuple[str, ...] = DEFAULT_HIDDEN_PROPERTY_PREFIXES
    word_diff_lookahead: int = 10

    def is_metadata(self, local_name: str, prefix: str | None) -> bool:
        """True if an element is designer/structural bookkeeping."""
        if prefix is not None and prefix in self.metadata_prefixes:
            return True
        return local_name in self.metadata_names

    def is_wrapper(self, local_name: str) -> bool:
        return local_name in self.wrapper_names

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "VocabularyConfig":
        """Create VocabularyConfig from dictionary.

        Useful when the vocabulary is kept in a JSON or TOML file next to
        the host application. Unknown keys are silently ignored. Lists are
        converted to the frozenset or tuple the field expects.

        Args:
            config_dict: Mapping of VocabularyConfig field names to values

        Returns:
            New VocabularyConfig instance with values from dict.

        Example:
            >>> config = VocabularyConfig.from_dict({
            ...     "metadata_prefixes": ["sap", "x"],
            ...     "retired_option": True,
            ... })
            >>> sorted(config.metadata_prefixes)
            ['sap', 'x']

        """
        defaults = {f.name: f.default for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in config_dict.items():
            if key not in defaults:
                continue
            default = defaults[key]
            if isinstance(default, frozenset):
                value = frozenset(value)
            elif isinstance(default, tuple):
                value = tuple(value)
            kwargs[key] = value
        return cls(**kwargs)


_DEFAULT_CONFIG: VocabularyConfig = VocabularyConfig()

_config: ContextVar[VocabularyConfig] = ContextVar(
    "vocabulary_config",
    default=_DEFAULT_CONFIG,
)


def get_config() -> VocabularyConfig:
    """Get current vocabulary configuration (thread-local)."""
    return _config.get()


def set_config(config: VocabularyConfig) -> None:
    """Make ``config`` the vocabulary of the current context until reset."""
    _config.set(config)


def reset_config() -> None:
    """Reset to the default vocabulary."""
    _config.set(_DEFAULT_CONFIG)


@contextmanager
def config_context(config: VocabularyConfig) -> Iterator[None]:
    """Use ``config`` inside the ``with`` block, restoring the previous one on exit.

    Blocks nest, and the previous vocabulary is restored when the block
    raises.
    """
    token = _config.set(config)
    try:
        yield
    finally:
        _config.reset(token)


__all__ = [
    "VocabularyConfig",
    "config_context",
    "get_config",
    "reset_config",
    "set_config",
]
