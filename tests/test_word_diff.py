"""Tests for xamlviz.word_diff — common run highlighting."""

from hypothesis import given, settings
from hypothesis import strategies as st

from xamlviz.config import VocabularyConfig, config_context
from xamlviz.word_diff import TextPart, common_parts


def _pairs(parts: list[TextPart]) -> list[tuple[str, bool]]:
    return [(part.value, part.is_common) for part in parts]


class TestCommonParts:
    def test_substitution(self) -> None:
        assert _pairs(common_parts("[x + 1]", "[x + 2]")) == [
            ("[x + ", True),
            ("1", False),
            ("]", True),
        ]

    def test_identical(self) -> None:
        assert _pairs(common_parts("Hello", "Hello")) == [("Hello", True)]

    def test_empty_a(self) -> None:
        assert common_parts("", "anything") == []

    def test_empty_b(self) -> None:
        assert _pairs(common_parts("abc", "")) == [("abc", False)]

    def test_insertion_in_a(self) -> None:
        assert _pairs(common_parts("abXcd", "abcd")) == [("ab", True), ("X", False), ("cd", True)]

    def test_deletion_from_a_merges_runs(self) -> None:
        assert _pairs(common_parts("abcd", "abXcd")) == [("abcd", True)]

    def test_both_directions(self) -> None:
        before, after = '"Hello " + name', '"Hi " + name'
        assert "".join(p.value for p in common_parts(before, after)) == before
        assert "".join(p.value for p in common_parts(after, before)) == after

    def test_no_resync_within_window(self) -> None:
        a = "a" + "x" * 20 + "b"
        b = "a" + "y" * 20 + "b"
        assert _pairs(common_parts(a, b)) == [("a", True), ("x" * 20 + "b", False)]

    def test_wider_window(self) -> None:
        a = "a" + "x" * 20 + "b"
        b = "a" + "y" * 20 + "b"
        expected = [("a", True), ("x" * 20, False), ("b", True)]
        assert _pairs(common_parts(a, b, lookahead=25)) == expected

    def test_window_from_config(self) -> None:
        a = "a" + "x" * 20 + "b"
        b = "a" + "y" * 20 + "b"
        with config_context(VocabularyConfig(word_diff_lookahead=25)):
            parts = common_parts(a, b)
        assert _pairs(parts)[-1] == ("b", True)

    def test_single_character_substitution(self) -> None:
        assert _pairs(common_parts("aXb", "aYb")) == [("a", True), ("X", False), ("b", True)]


_text = st.text(alphabet="abc xyz[]+", max_size=40)


class TestCommonPartsProperties:
    @given(a=_text, b=_text)
    @settings(max_examples=300)
    def test_reconstructs_a(self, a: str, b: str) -> None:
        assert "".join(part.value for part in common_parts(a, b)) == a

    @given(a=_text, b=_text)
    @settings(max_examples=300)
    def test_runs_alternate(self, a: str, b: str) -> None:
        parts = common_parts(a, b)
        assert all(part.value for part in parts)
        for first, second in zip(parts, parts[1:]):
            assert first.is_common != second.is_common

    @given(a=_text)
    @settings(max_examples=100)
    def test_identity_is_one_common_run(self, a: str) -> None:
        parts = common_parts(a, a)
        if a:
            assert parts == [TextPart(a, True)]
        else:
            assert parts == []

    @given(a=_text, b=_text)
    @settings(max_examples=200)
    def test_common_text_is_subsequence_of_b(self, a: str, b: str) -> None:
        common = "".join(part.value for part in common_parts(a, b) if part.is_common)
        remaining = iter(b)
        assert all(char in remaining for char in common)
