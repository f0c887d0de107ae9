"""Workflow parser producing a typed activity tree.

Parses XAML text with ElementTree and walks the element tree from the root,
classifying each element as one of:

- metadata: designer/structural bookkeeping, dropped with its subtree
- property element (``Owner.Property``): transparent; its activities are
  spliced into the parent, otherwise it becomes a property value
- wrapper (``ActivityAction``): transparent; its activities are spliced
- activity: everything else, emitted as an ActivityNode

Classification tables come from the active VocabularyConfig. The line
indexer applies the same rules lexically, so the two passes see the same
activities in the same order.

Thread Safety:
- WorkflowParser instances are single-use; create one per parse
- Node ids are numbered per instance, never shared between calls
- The resulting ParsedDocument is immutable and thread-safe

"""

from __future__ import annotations

import io
import re
import xml.etree.ElementTree as ET
from typing import Any

from xamlviz.config import VocabularyConfig, get_config
from xamlviz.errors import MalformedDocumentError
from xamlviz.nodes import (
    ActivityNode,
    ArgumentDirection,
    AssignOperation,
    Parameter,
    ParsedDocument,
    PropertyValue,
    Variable,
)
from xamlviz.scanner import TagKind, scan_tags
from xamlviz.utils.logger import get_logger

logger = get_logger(__name__)

XAML_NS = "http://schemas.microsoft.com/winfx/2006/xaml"
XML_NS = "http://www.w3.org/XML/1998/namespace"

DISPLAY_NAME_ATTRIBUTE = "DisplayName"
SCREENSHOT_ATTRIBUTE = "InformativeScreenshot"
ANNOTATION_ATTRIBUTE = "sap2010:Annotation.AnnotationText"

# Attributes consumed by dedicated ActivityNode fields
RESERVED_ATTRIBUTES = frozenset(
    {DISPLAY_NAME_ATTRIBUTE, SCREENSHOT_ATTRIBUTE, ANNOTATION_ATTRIBUTE}
)

VIEW_STATE_NAMES = frozenset(
    {"WorkflowViewStateService.ViewState", "WorkflowViewStateService"}
)

_ARGUMENT_TYPE = re.compile(r"(In|Out|InOut)Argument\((.+)\)")


class WorkflowParser:
    """Single-use parser for one workflow document.

    Usage:
        >>> parser = WorkflowParser('<Sequence DisplayName="Main" />')
        >>> doc = parser.parse()
        >>> doc.root.display_name
        'Main'

    """

    __slots__ = (
        "_source",
        "_source_file",
        "_config",
        # namespace URI -> first declared prefix
        "_prefixes",
        # element -> prefix it was written with
        "_written",
        "_next_id",
    )

    def __init__(
        self,
        source: str,
        source_file: str | None = None,
        config: VocabularyConfig | None = None,
    ) -> None:
        """Initialize parser with source text.

        Args:
            source: Workflow XAML text
            source_file: Optional source file path for error messages
            config: Vocabulary to classify elements with (defaults to the
                active ContextVar config)
        """
        self._source = source
        self._source_file = source_file
        self._config = config or get_config()
        self._prefixes: dict[str, str] = {XML_NS: "xml"}
        self._written: dict[ET.Element, str | None] = {}
        self._next_id = 0

    def parse(self) -> ParsedDocument:
        """Parse the source into a ParsedDocument.

        Raises:
            MalformedDocumentError: If the text is blank, not well-formed,
                or has no root element.
        """
        root = self._load()
        logger.debug("Parsing workflow root <%s>", root.tag)

        variables = tuple(self._find_variables(root))
        parameters = tuple(self._find_parameters(root))
        root_activity = self._parse_activity(root)

        logger.debug(
            "Parsed %d activities, %d variables, %d parameters",
            self._next_id,
            len(variables),
            len(parameters),
        )
        return ParsedDocument(
            root=root_activity,
            variables=variables,
            parameters=parameters,
        )

    # -- Loading ---------------------------------------------------------------

    def _load(self) -> ET.Element:
        if not self._source or not self._source.strip():
            raise MalformedDocumentError(
                "Workflow text is empty", source_file=self._source_file
            )

        started: list[ET.Element] = []
        try:
            events = ET.iterparse(
                io.StringIO(self._source.lstrip("\ufeff")),
                events=("start-ns", "start"),
            )
            for event, item in events:
                if event == "start-ns":
                    prefix, uri = item
                    self._prefixes.setdefault(uri, prefix)
                else:
                    started.append(item)
        except ET.ParseError as exc:
            lineno, col = exc.position
            raise MalformedDocumentError(
                f"Workflow is not well-formed XML: {exc}",
                lineno=lineno,
                col_offset=col,
                source_file=self._source_file,
            ) from exc

        if not started:
            raise MalformedDocumentError(
                "Workflow has no root element", source_file=self._source_file
            )
        self._record_written_prefixes(started)
        return started[0]

    def _record_written_prefixes(self, started: list[ET.Element]) -> None:
        """Pair elements with the prefixes the tag scanner saw, in document order.

        ElementTree keeps only namespace URIs, so a URI bound to two prefixes
        would otherwise classify every element by the first one.
        """
        written = [
            tag.prefix for tag in scan_tags(self._source) if tag.kind is not TagKind.CLOSE
        ]
        if len(written) != len(started):
            logger.debug(
                "Tag scan found %d elements, XML parser %d; using declared prefixes",
                len(written),
                len(started),
            )
            return
        self._written = dict(zip(started, written, strict=True))

    # -- Names -----------------------------------------------------------------

    def _split(self, tag: str) -> tuple[str, str | None]:
        """Split an ElementTree tag into (local name, declared prefix)."""
        if tag.startswith("{"):
            uri, _, local = tag[1:].partition("}")
            return local, self._prefixes.get(uri) or None
        return tag, None

    def _name(self, element: ET.Element) -> tuple[str, str | None]:
        """(local name, prefix as written) of an element."""
        local, declared = self._split(element.tag)
        return local, self._written.get(element, declared)

    def _attributes(self, element: ET.Element) -> dict[str, str]:
        """Element attributes keyed by their qualified ``prefix:local`` name."""
        attrs: dict[str, str] = {}
        for name, value in element.attrib.items():
            local, prefix = self._split(name)
            attrs[f"{prefix}:{local}" if prefix else local] = value
        return attrs

    # -- Activities ------------------------------------------------------------

    def _parse_activity(self, element: ET.Element) -> ActivityNode:
        node_id = f"activity-{self._next_id}"
        self._next_id += 1

        local, prefix = self._name(element)
        attrs = self._attributes(element)
        display_name = attrs.get(DISPLAY_NAME_ATTRIBUTE) or local

        properties: dict[str, PropertyValue] = {
            name: value for name, value in attrs.items() if name not in RESERVED_ATTRIBUTES
        }
        children: list[ActivityNode] = []

        for child in element:
            child_local, child_prefix = self._name(child)
            if self._config.is_metadata(child_local, child_prefix):
                continue
            if "." in child_local:
                prop_name = child_local.split(".")[1]
                if prop_name in self._config.absorbed_properties:
                    properties[prop_name] = self._assign_operations(child)
                    continue
                # Activities inside are spliced as children and the element
                # is still recorded as a property value
                children.extend(self._collect_activities(child))
                properties[prop_name] = self._property_value(child)
                continue
            if self._config.is_wrapper(child_local):
                children.extend(self._collect_activities(child))
                continue
            children.append(self._parse_activity(child))

        return ActivityNode(
            id=node_id,
            type=local,
            display_name=display_name,
            namespace_prefix=prefix,
            properties=properties,
            children=tuple(children),
            annotation=attrs.get(ANNOTATION_ATTRIBUTE) or self._annotation(element),
            screenshot=attrs.get(SCREENSHOT_ATTRIBUTE) or self._target_screenshot(element),
        )

    def _collect_activities(self, container: ET.Element) -> list[ActivityNode]:
        """Activities inside a transparent container, in document order."""
        found: list[ActivityNode] = []
        for child in container:
            local, prefix = self._name(child)
            if self._config.is_metadata(local, prefix):
                continue
            if "." in local:
                if local.split(".")[1] in self._config.absorbed_properties:
                    continue
                found.extend(self._collect_activities(child))
            elif self._config.is_wrapper(local):
                found.extend(self._collect_activities(child))
            else:
                found.append(self._parse_activity(child))
        return found

    # -- Property values -------------------------------------------------------

    def _property_value(self, element: ET.Element) -> PropertyValue:
        text = _text_content(element)
        if text:
            return text

        children = list(element)
        if len(children) != 1:
            return None

        child = children[0]
        local, _ = self._split(child.tag)
        # In/Out argument wrappers carry the expression as text
        if "Argument" in local:
            return _text_content(child)
        return self._element_to_object(child)

    def _text_value(self, element: ET.Element) -> str:
        value = self._property_value(element)
        return value if isinstance(value, str) else ""

    def _element_to_object(self, element: ET.Element) -> dict[str, Any]:
        local, _ = self._split(element.tag)
        obj: dict[str, Any] = {"type": local}
        obj.update(self._attributes(element))

        children = list(element)
        if children:
            obj["children"] = [self._element_to_object(child) for child in children]
        else:
            text = _text_content(element)
            if text:
                obj["value"] = text
        return obj

    def _assign_operations(self, element: ET.Element) -> tuple[AssignOperation, ...]:
        """Collect AssignOperation entries, looking through list wrappers."""
        operations: list[AssignOperation] = []
        for child in element:
            local, _ = self._split(child.tag)
            if local != "AssignOperation":
                operations.extend(self._assign_operations(child))
                continue
            target = ""
            expression = ""
            for part in child:
                part_local, _ = self._split(part.tag)
                if part_local.endswith(".To"):
                    target = self._text_value(part)
                elif part_local.endswith(".Value"):
                    expression = self._text_value(part)
            attrs = self._attributes(child)
            operations.append(
                AssignOperation(
                    target=target or attrs.get("To", ""),
                    expression=expression or attrs.get("Value", ""),
                )
            )
        return tuple(operations)

    # -- Annotations and screenshots -------------------------------------------

    def _annotation(self, element: ET.Element) -> str | None:
        key_attr = f"{{{XAML_NS}}}Key"
        for child in element:
            if self._split(child.tag)[0] not in VIEW_STATE_NAMES:
                continue
            for dictionary in child:
                if self._split(dictionary.tag)[0] != "Dictionary":
                    continue
                for entry in dictionary:
                    if (
                        self._split(entry.tag)[0] == "String"
                        and entry.get(key_attr) == "Annotation"
                    ):
                        return _text_content(entry)
        return None

    def _target_screenshot(self, element: ET.Element) -> str | None:
        for child in element:
            if "." not in self._split(child.tag)[0]:
                continue
            for inner in child:
                if self._split(inner.tag)[0] not in self._config.target_names:
                    continue
                screenshot = inner.get(SCREENSHOT_ATTRIBUTE)
                if screenshot:
                    return screenshot
        return None

    # -- Declarations ----------------------------------------------------------

    def _find_variables(self, root: ET.Element) -> list[Variable]:
        type_attr = f"{{{XAML_NS}}}TypeArguments"
        variables: list[Variable] = []
        for element in root.iter():
            var_type = element.get(type_attr)
            name = element.get("Name")
            if not var_type or not name:
                continue
            variables.append(
                Variable(name=name, type=var_type, default=self._variable_default(element))
            )
        return variables

    def _variable_default(self, element: ET.Element) -> str | None:
        for child in element:
            local, _ = self._split(child.tag)
            if local == "Default" or local.endswith(".Default"):
                return _text_content(child)
        return element.get("Default")

    def _find_parameters(self, root: ET.Element) -> list[Parameter]:
        parameters: list[Parameter] = []
        for element in root.iter(f"{{{XAML_NS}}}Property"):
            name = element.get("Name")
            type_string = element.get("Type")
            if not name or not type_string:
                continue
            match = _ARGUMENT_TYPE.search(type_string)
            if match is None:
                continue
            parameters.append(
                Parameter(
                    name=name,
                    direction=ArgumentDirection(match.group(1)),
                    data_type=match.group(2),
                )
            )
        return parameters


def _text_content(element: ET.Element) -> str:
    return "".join(element.itertext()).strip()


__all__ = [
    "WorkflowParser",
]
