"""Typed workflow tree for xamlviz.

All tree types are frozen dataclasses with slots for:
- Immutability: safe sharing across threads
- Memory efficiency: __slots__ reduces memory footprint
- Pattern matching: match statements work naturally

Structure:
ParsedDocument
├── root: ActivityNode
│   └── children: ActivityNode, ...
├── variables: Variable, ...
└── parameters: Parameter, ...

Property values are one of:
- str: attribute values and plain-text property elements
- dict: structured objects built from complex property elements
- tuple[AssignOperation, ...]: the aggregate assignment list of MultipleAssign
- None: a property element with no extractable value

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias


@dataclass(frozen=True, slots=True)
class AssignOperation:
    """One ``target = expression`` pair of a MultipleAssign activity."""

    target: str
    expression: str


PropertyValue: TypeAlias = str | dict[str, Any] | tuple[AssignOperation, ...] | None


@dataclass(frozen=True, slots=True)
class ActivityNode:
    """One workflow step or container.

    ``id`` is unique within a single parse and means nothing across parses.
    Use the key builder (xamlviz.keys) to correlate nodes between passes.

    """

    id: str
    type: str
    display_name: str
    namespace_prefix: str | None = None
    properties: dict[str, PropertyValue] = field(default_factory=dict)
    children: tuple["ActivityNode", ...] = ()
    annotation: str | None = None
    screenshot: str | None = None


class ArgumentDirection(Enum):
    """Direction of a workflow argument."""

    IN = "In"
    OUT = "Out"
    IN_OUT = "InOut"


@dataclass(frozen=True, slots=True)
class Variable:
    """Variable declared on a scope (``<Variable x:TypeArguments=... />``)."""

    name: str
    type: str
    default: str | None = None


@dataclass(frozen=True, slots=True)
class Parameter:
    """Workflow argument declared under ``x:Members``."""

    name: str
    direction: ArgumentDirection
    data_type: str


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    """Root aggregate returned by parse()."""

    root: ActivityNode
    variables: tuple[Variable, ...] = ()
    parameters: tuple[Parameter, ...] = ()
