"""Tests for xamlviz.differ — structural diff of two workflows."""

import logging
from typing import Any

from hypothesis import given, settings
from hypothesis import strategies as st

from xamlviz import parse
from xamlviz.config import VocabularyConfig
from xamlviz.differ import (
    DiffKind,
    DiffResult,
    PropertyChange,
    canonical_json,
    diff_documents,
    values_equal,
)
from xamlviz.nodes import ActivityNode, AssignOperation, ParsedDocument

SAP = 'xmlns:sap="http://schemas.microsoft.com/netfx/2009/xaml/activities/presentation"'


def _diff(before: str, after: str) -> DiffResult:
    return diff_documents(parse(before), parse(after))


def _node(type_name: str, display_name: str, **properties: Any) -> ActivityNode:
    return ActivityNode(id="n", type=type_name, display_name=display_name, properties=properties)


class TestSelfDiff:
    def test_simple_example(self) -> None:
        text = '<Sequence DisplayName="Main"><Assign DisplayName="Set x" /></Sequence>'
        result = _diff(text, text)
        assert result == DiffResult()
        assert result.is_empty
        assert len(result) == 0

    def test_fixtures(self, main_xaml: str, automation_xaml: str) -> None:
        assert _diff(main_xaml, main_xaml).is_empty
        assert _diff(automation_xaml, automation_xaml).is_empty


class TestModified:
    def test_property_change(self) -> None:
        before = '<Sequence DisplayName="Main"><Assign DisplayName="Set x" To="x" /></Sequence>'
        after = '<Sequence DisplayName="Main"><Assign DisplayName="Set x" To="y" /></Sequence>'
        result = _diff(before, after)
        assert result.added == ()
        assert result.removed == ()
        (entry,) = result.modified
        assert entry.kind is DiffKind.MODIFIED
        assert entry.property_changes == (
            PropertyChange(property_name="To", before="x", after="y"),
        )
        assert entry.node.properties["To"] == "y"
        assert entry.counterpart is not None
        assert entry.counterpart.properties["To"] == "x"

    def test_property_added_and_removed(self) -> None:
        result = _diff("<S><A Old='1' /></S>", "<S><A New='2' /></S>")
        (entry,) = result.modified
        assert entry.property_changes == (
            PropertyChange("Old", "1", None),
            PropertyChange("New", None, "2"),
        )

    def test_root_properties_not_compared(self) -> None:
        # roots are paired; only their children are diffed
        assert _diff("<S Mode='a' />", "<S Mode='b' />").is_empty

    def test_nested_change_found(self, main_xaml: str) -> None:
        after = main_xaml.replace('Level="Info"', 'Level="Warn"')
        result = _diff(main_xaml, after)
        branch, log = result.modified
        assert log.node.display_name == "Log Greeting"
        assert log.property_changes == (PropertyChange("Level", "Info", "Warn"),)
        # The If holding it reports its Then property as changed too
        assert branch.node.display_name == "Check Counter"
        (change,) = branch.property_changes
        assert change.property_name == "Then"
        assert change.before["Level"] == "Info"
        assert change.after["Level"] == "Warn"

    def test_element_property_change(self, main_xaml: str) -> None:
        after = main_xaml.replace("[greeting]</OutArgument>", "[message]</OutArgument>")
        (entry,) = _diff(main_xaml, after).modified
        assert entry.property_changes == (PropertyChange("To", "[greeting]", "[message]"),)

    def test_sap_prefix_ignored(self) -> None:
        before = f"<S {SAP}><A sap:VirtualizedContainerService.HintSize='200,100' /></S>"
        after = f"<S {SAP}><A sap:VirtualizedContainerService.HintSize='300,100' /></S>"
        assert _diff(before, after).is_empty

    def test_ignored_prefixes_from_config(self) -> None:
        before = parse("<S><A Noise='1' /></S>")
        after = parse("<S><A Noise='2' /></S>")
        config = VocabularyConfig(ignored_property_prefixes=("Noise",))
        assert diff_documents(before, after, config=config).is_empty
        assert not diff_documents(before, after).is_empty

    def test_screenshot_pseudo_property(self) -> None:
        before = "<S><Click InformativeScreenshot='a.png' /></S>"
        after = "<S><Click InformativeScreenshot='b.png' /></S>"
        (entry,) = _diff(before, after).modified
        assert entry.property_changes == (
            PropertyChange("InformativeScreenshot", "a.png", "b.png"),
        )

    def test_none_equals_absent(self) -> None:
        assert _diff("<S><C><C.Text /></C></S>", "<S><C /></S>").is_empty

    def test_assign_operations_change(self, automation_xaml: str) -> None:
        after = automation_xaml.replace('"one"', '"two"')
        (entry,) = _diff(automation_xaml, after).modified
        (change,) = entry.property_changes
        assert change.property_name == "AssignOperations"
        assert change.after[0] == AssignOperation("[a]", '"two"')


class TestAddedRemoved:
    def test_appended_leaf(self) -> None:
        result = _diff("<S><A /></S>", "<S><A /><B /></S>")
        assert len(result.added) == 1
        assert result.added[0].node.type == "B"
        assert result.added[0].kind is DiffKind.ADDED
        assert result.added[0].counterpart is None
        assert result.removed == ()
        assert result.modified == ()

    def test_removed_leaf(self) -> None:
        result = _diff("<S><A /><B /></S>", "<S><A /></S>")
        (entry,) = result.removed
        assert entry.kind is DiffKind.REMOVED
        assert entry.node.type == "B"

    def test_insertion_shifts_siblings(self) -> None:
        result = _diff("<S><A /><B /></S>", "<S><N /><A /><B /></S>")
        assert [e.node.type for e in result.added] == ["N", "A", "B"]
        assert [e.node.type for e in result.removed] == ["A", "B"]

    def test_subtree_added_as_one_entry(self) -> None:
        result = _diff("<S />", "<S><Seq><A /><B /></Seq></S>")
        (entry,) = result.added
        assert len(entry.node.children) == 2

    def test_pairing_is_within_parent(self) -> None:
        before = "<S><P DisplayName='one'><A /></P><P DisplayName='two' /></S>"
        after = "<S><P DisplayName='one' /><P DisplayName='two'><A /></P></S>"
        result = _diff(before, after)
        assert [e.node.type for e in result.added] == ["A"]
        assert [e.node.type for e in result.removed] == ["A"]
        assert result.modified == ()

    def test_entries_order(self) -> None:
        result = _diff("<S><A X='1' /><B /></S>", "<S><A X='2' /><C /></S>")
        assert [e.kind for e in result.entries()] == [
            DiffKind.ADDED,
            DiffKind.REMOVED,
            DiffKind.MODIFIED,
        ]
        assert len(result) == 3

    def test_logs_summary(self, caplog) -> None:  # type: ignore[no-untyped-def]
        with caplog.at_level(logging.DEBUG, logger="xamlviz"):
            _diff("<S />", "<S><A /></S>")
        assert "1 added, 0 removed, 0 modified" in caplog.text


class TestValuesEqual:
    def test_strings(self) -> None:
        assert values_equal("a", "a")
        assert not values_equal("a", "b")

    def test_none(self) -> None:
        assert values_equal(None, None)
        assert not values_equal(None, "")
        assert not values_equal({}, None)

    def test_structured_order_sensitive(self) -> None:
        assert values_equal({"a": "1", "b": "2"}, {"a": "1", "b": "2"})
        assert not values_equal({"a": "1", "b": "2"}, {"b": "2", "a": "1"})

    def test_assign_operations(self) -> None:
        ops = (AssignOperation("[a]", "1"),)
        assert values_equal(ops, (AssignOperation("[a]", "1"),))
        assert not values_equal(ops, (AssignOperation("[a]", "2"),))

    def test_canonical_json(self) -> None:
        assert canonical_json((AssignOperation("[a]", "1"),)) == (
            '[{"target": "[a]", "expression": "1"}]'
        )


class TestStructuredNodes:
    def test_dict_reorder_is_a_change(self) -> None:
        before = ParsedDocument(
            root=ActivityNode(
                id="r",
                type="S",
                display_name="S",
                children=(_node("A", "A", Target={"type": "T", "x": "1", "y": "2"}),),
            )
        )
        after = ParsedDocument(
            root=ActivityNode(
                id="r",
                type="S",
                display_name="S",
                children=(_node("A", "A", Target={"type": "T", "y": "2", "x": "1"}),),
            )
        )
        (entry,) = diff_documents(before, after).modified
        assert entry.property_changes[0].property_name == "Target"


_leaf_types = st.sampled_from(["Assign", "Delay", "LogMessage", "Click"])


class TestDiffProperties:
    @given(leaves=st.lists(_leaf_types, max_size=8), extra=_leaf_types)
    @settings(max_examples=100)
    def test_appending_one_leaf_adds_one(self, leaves: list[str], extra: str) -> None:
        before = "<Sequence>" + "".join(f"<{t} />" for t in leaves) + "</Sequence>"
        after = before.replace("</Sequence>", f"<{extra} /></Sequence>")
        result = _diff(before, after)
        assert len(result.added) == 1
        assert result.added[0].node.type == extra
        assert result.removed == ()
        assert result.modified == ()

    @given(leaves=st.lists(_leaf_types, max_size=8))
    @settings(max_examples=100)
    def test_self_diff_empty(self, leaves: list[str]) -> None:
        body = "".join(f"<{t} Value='{i}' />" for i, t in enumerate(leaves))
        text = f"<Sequence>{body}</Sequence>"
        assert _diff(text, text).is_empty
