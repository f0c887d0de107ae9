"""Error-path tests.

Tests that exercise error construction and formatting, and the fallbacks
used for irregular but well-formed input.
"""

import pytest

from xamlviz import build_line_index, parse
from xamlviz.errors import MalformedDocumentError, XamlVizError

# =========================================================================
# MalformedDocumentError construction and formatting
# =========================================================================


class TestMalformedDocumentErrorFormatting:
    """Verify MalformedDocumentError produces well-formatted messages."""

    def test_message_only(self) -> None:
        err = MalformedDocumentError("bad workflow")
        assert str(err) == "bad workflow"
        assert err.lineno is None
        assert err.col_offset is None
        assert err.source_file is None

    def test_with_line_number(self) -> None:
        err = MalformedDocumentError("bad syntax", lineno=42)
        assert str(err) == "42 bad syntax"

    def test_with_line_and_column(self) -> None:
        err = MalformedDocumentError("mismatched tag", lineno=10, col_offset=5)
        assert str(err) == "10:5 mismatched tag"

    def test_with_source_file(self) -> None:
        err = MalformedDocumentError("error", lineno=1, col_offset=1, source_file="Main.xaml")
        assert str(err) == "Main.xaml:1:1 error"

    def test_source_file_only(self) -> None:
        err = MalformedDocumentError("empty", source_file="Main.xaml")
        assert str(err) == "Main.xaml empty"

    def test_is_xamlviz_error(self) -> None:
        assert isinstance(MalformedDocumentError("x"), XamlVizError)

    def test_location_property(self) -> None:
        err = MalformedDocumentError("x", lineno=3, col_offset=7, source_file="A.xaml")
        assert err.location == "A.xaml:3:7"
        assert err.message == "x"

    def test_column_without_line_ignored(self) -> None:
        err = MalformedDocumentError("x", col_offset=7)
        assert err.location == ""
        assert str(err) == "x"


# =========================================================================
# Graceful degradation
# =========================================================================


class TestGracefulDegradation:
    """Irregular but well-formed input never raises."""

    def test_missing_display_names(self) -> None:
        doc = parse("<Flowchart><FlowStep><Delay /></FlowStep></Flowchart>")
        assert [n.display_name for n in doc.root.children] == ["FlowStep"]

    def test_index_of_malformed_text_does_not_raise(self) -> None:
        index = build_line_index("<Sequence>\n<Assign>\n</Sequence>\n</Extra>")
        assert "Sequence_Sequence_0" in index

    def test_index_of_plain_text(self) -> None:
        assert len(build_line_index("not xml at all")) == 0

    def test_parse_reports_position(self) -> None:
        with pytest.raises(MalformedDocumentError) as exc_info:
            parse("<Sequence>\n  <Assign To='x' To='y' />\n</Sequence>")
        assert exc_info.value.lineno == 2
        assert str(exc_info.value).startswith("2:")

    def test_catch_as_base_class(self) -> None:
        with pytest.raises(XamlVizError):
            parse("")
