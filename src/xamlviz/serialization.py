"""JSON round-trip for xamlviz results.

Converts parsed documents, diff results and line indices to/from
JSON-compatible dicts. Useful for:
- Handing results to a webview or browser script
- Caching parsed workflows between review sessions
- Snapshot fixtures in tests

Output keeps insertion order (no key sorting) because activity properties
are an ordered mapping; the order is already deterministic for a given
input text.

Example:
    from xamlviz import parse
    from xamlviz.serialization import to_json, from_json

    doc = parse(text)
    restored = from_json(to_json(doc))
    assert doc == restored

Thread Safety:
    Stateless; the type registry is never mutated after import.

"""

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from xamlviz.differ import DiffEntry, DiffKind, DiffResult, PropertyChange
from xamlviz.line_index import LineIndex, LineRange
from xamlviz.nodes import (
    ActivityNode,
    ArgumentDirection,
    AssignOperation,
    Parameter,
    ParsedDocument,
    Variable,
)

# Registry of type names to classes for deserialization
_TYPES: dict[str, type] = {
    "ParsedDocument": ParsedDocument,
    "ActivityNode": ActivityNode,
    "AssignOperation": AssignOperation,
    "Variable": Variable,
    "Parameter": Parameter,
    "DiffResult": DiffResult,
    "DiffEntry": DiffEntry,
    "PropertyChange": PropertyChange,
    "LineIndex": LineIndex,
    "LineRange": LineRange,
}

# Fields holding enum members, serialized by value
_ENUM_FIELDS: dict[str, type[Enum]] = {
    "direction": ArgumentDirection,
    "kind": DiffKind,
}


def to_dict(obj: Any) -> dict[str, Any]:
    """Convert a result object to a JSON-compatible dict.

    Includes a ``_type`` discriminator field for deserialization.

    Args:
        obj: ParsedDocument, ActivityNode, DiffResult, LineIndex or any of
            their component types.

    Returns:
        Dict with ``_type`` and all fields.

    """
    result: dict[str, Any] = {"_type": type(obj).__name__}
    for f in fields(obj):
        result[f.name] = _serialize_value(getattr(obj, f.name))
    return result


def _serialize_value(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return to_dict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (tuple, list)):
        return [_serialize_value(item) for item in value]
    if isinstance(value, dict):
        # JSON object keys must be strings (LineIndex.line_to_key has ints)
        return {str(key): _serialize_value(item) for key, item in value.items()}
    # Primitives: str, int, bool, None
    return value


def from_dict(data: dict[str, Any]) -> Any:
    """Reconstruct a typed result object from a dict.

    Args:
        data: Dict with ``_type`` and fields (as produced by to_dict).

    Returns:
        Frozen dataclass instance.

    Raises:
        ValueError: If ``_type`` is missing or unknown.

    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized object"
        raise ValueError(msg)

    cls = _TYPES.get(type_name)
    if cls is None:
        msg = f"Unknown type: {type_name!r}"
        raise ValueError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        raw = data[f.name]
        if f.name in _ENUM_FIELDS:
            kwargs[f.name] = _ENUM_FIELDS[f.name](raw)
        elif f.name == "line_to_key":
            kwargs[f.name] = {int(line): key for line, key in raw.items()}
        elif f.name in ("properties", "key_to_range"):
            kwargs[f.name] = {key: _deserialize_value(item) for key, item in raw.items()}
        else:
            kwargs[f.name] = _deserialize_value(raw)

    return cls(**kwargs)


def _deserialize_value(value: Any, *, in_structure: bool = False) -> Any:
    """Deserialize one field value.

    Lists become tuples, except inside structured property objects, which
    are plain dicts and keep their lists.
    """
    if isinstance(value, dict):
        if value.get("_type") is not None:
            return from_dict(value)
        return {key: _deserialize_value(item, in_structure=True) for key, item in value.items()}
    if isinstance(value, list):
        items = [_deserialize_value(item, in_structure=in_structure) for item in value]
        return items if in_structure else tuple(items)
    return value


def to_json(obj: Any, *, indent: int | None = None) -> str:
    """Serialize a result object to a JSON string.

    Args:
        obj: Object accepted by to_dict().
        indent: JSON indentation level (None for compact).

    Returns:
        JSON string.

    """
    return json.dumps(to_dict(obj), indent=indent, ensure_ascii=False)


def from_json(data: str) -> Any:
    """Deserialize a result object from a JSON string.

    Raises:
        ValueError: If the JSON doesn't carry a known ``_type``.

    """
    raw = json.loads(data)
    if not isinstance(raw, dict):
        msg = f"Expected a JSON object, got {type(raw).__name__}"
        raise ValueError(msg)
    return from_dict(raw)


__all__ = [
    "from_dict",
    "from_json",
    "to_dict",
    "to_json",
]
