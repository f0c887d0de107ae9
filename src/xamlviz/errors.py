"""Exception classes for xamlviz.

Only MalformedDocumentError aborts a call. Every other irregularity in a
workflow (unknown element kinds, unmatched closing tags, missing optional
attributes) is absorbed with a fallback instead of raising.
"""

from __future__ import annotations


class XamlVizError(Exception):
    """Root of the xamlviz exception hierarchy."""


class MalformedDocumentError(XamlVizError):
    """Workflow text is not well-formed XML or has no usable root element.

    Raised by parse() for empty or blank input as well as for XML syntax
    errors. When the XML parser reports a position it is kept on the
    exception and prefixed to the message, compiler style::

        Main.xaml:12:4 mismatched tag

    Attributes:
        message: The bare description, without location
        lineno: 1-based line of the error, if known
        col_offset: Column reported by the XML parser, if known
        source_file: Workflow path passed to parse(), if any
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file
        location = self.location
        super().__init__(f"{location} {message}" if location else message)

    @property
    def location(self) -> str:
        """``file:line:col`` with absent parts left out ("" if none known)."""
        parts: list[str] = []
        if self.source_file:
            parts.append(self.source_file)
        if self.lineno is not None:
            parts.append(str(self.lineno))
            if self.col_offset is not None:
                parts.append(str(self.col_offset))
        return ":".join(parts)
