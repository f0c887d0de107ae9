"""Tests for xamlviz.scanner — lexical tag scanning."""

from hypothesis import given, settings
from hypothesis import strategies as st

from xamlviz.scanner import TagKind, scan_tags


class TestTagKinds:
    def test_open_close_self_closing(self) -> None:
        tags = list(scan_tags("<A>\n  <B />\n</A>"))
        assert [(tag.name, tag.kind) for tag in tags] == [
            ("A", TagKind.OPEN),
            ("B", TagKind.SELF_CLOSING),
            ("A", TagKind.CLOSE),
        ]

    def test_line_numbers(self) -> None:
        tags = list(scan_tags("<A>\n  <B />\n</A>"))
        assert [(tag.start_line, tag.end_line) for tag in tags] == [(1, 1), (2, 2), (3, 3)]

    def test_multi_line_tag(self) -> None:
        (tag,) = list(scan_tags('<Assign\n  DisplayName="x"\n  To="y" />'))
        assert tag.start_line == 1
        assert tag.end_line == 3
        assert tag.attributes == {"DisplayName": "x", "To": "y"}

    def test_prefix_stripped_but_kept(self) -> None:
        (tag,) = list(scan_tags("<ui:LogMessage />"))
        assert tag.name == "LogMessage"
        assert tag.full_name == "ui:LogMessage"
        assert tag.prefix == "ui"

    def test_no_prefix(self) -> None:
        (tag,) = list(scan_tags("<Sequence.Variables>"))
        assert tag.name == "Sequence.Variables"
        assert tag.prefix is None


class TestAttributes:
    def test_single_and_double_quotes(self) -> None:
        (tag,) = list(scan_tags("""<A x="1" y='2' />"""))
        assert tag.attributes == {"x": "1", "y": "2"}

    def test_gt_inside_value(self) -> None:
        (tag,) = list(scan_tags('<If Condition="a > b" DisplayName="Check" />'))
        assert tag.kind is TagKind.SELF_CLOSING
        assert tag.attributes["Condition"] == "a > b"
        assert tag.attributes["DisplayName"] == "Check"

    def test_entities_decoded(self) -> None:
        (tag,) = list(scan_tags('<If Condition="[a &lt; b &amp;&amp; c]" />'))
        assert tag.attributes["Condition"] == "[a < b && c]"

    def test_qualified_attribute_names(self) -> None:
        (tag,) = list(scan_tags('<A sap2010:WorkflowViewState.IdRef="A_1" />'))
        assert tag.attributes == {"sap2010:WorkflowViewState.IdRef": "A_1"}

    def test_literal_newline_normalized(self) -> None:
        (tag,) = list(scan_tags('<A Text="one\ntwo" />'))
        assert tag.attributes["Text"] == "one two"


class TestSkippedMarkup:
    def test_comment(self) -> None:
        tags = list(scan_tags("<A><!-- <B /> --></A>"))
        assert [tag.name for tag in tags] == ["A", "A"]

    def test_multi_line_comment_keeps_line_numbers(self) -> None:
        tags = list(scan_tags("<!--\n<B>\n-->\n<A />"))
        assert [(tag.name, tag.start_line) for tag in tags] == [("A", 4)]

    def test_cdata(self) -> None:
        tags = list(scan_tags("<A><![CDATA[<B>]]></A>"))
        assert [tag.name for tag in tags] == ["A", "A"]

    def test_processing_instruction_and_doctype(self) -> None:
        tags = list(scan_tags('<?xml version="1.0"?>\n<!DOCTYPE A>\n<A />'))
        assert [(tag.name, tag.start_line) for tag in tags] == [("A", 3)]

    def test_empty_source(self) -> None:
        assert list(scan_tags("")) == []


_names = st.sampled_from(["Sequence", "Assign", "ui:LogMessage", "If.Then", "Delay"])


class TestScannerProperties:
    @given(names=st.lists(_names, max_size=20), gaps=st.lists(st.integers(0, 3), max_size=20))
    @settings(max_examples=100)
    def test_self_closing_tags_found_on_their_lines(
        self, names: list[str], gaps: list[int]
    ) -> None:
        """Every self-closing tag is reported once, on the line it is written."""
        lines: list[str] = []
        expected: list[tuple[str, int]] = []
        for position, name in enumerate(names):
            gap = gaps[position] if position < len(gaps) else 0
            lines.extend([""] * gap)
            lines.append(f'<{name} DisplayName="n{position}" />')
            expected.append((name, len(lines)))

        tags = list(scan_tags("\n".join(lines)))
        assert [(tag.full_name, tag.start_line) for tag in tags] == expected
        assert all(tag.kind is TagKind.SELF_CLOSING for tag in tags)
