"""Tests for xamlviz.profiling — run profiling API."""

from xamlviz import DictParseCache, compare, parse
from xamlviz.profiling import RunAccumulator, get_run_accumulator, profiled_run


class TestGetRunAccumulator:
    def test_returns_none_when_disabled(self) -> None:
        assert get_run_accumulator() is None

    def test_returns_none_outside_context(self) -> None:
        with profiled_run():
            pass
        assert get_run_accumulator() is None


class TestProfiledRun:
    def test_yields_accumulator(self) -> None:
        with profiled_run() as acc:
            assert isinstance(acc, RunAccumulator)

    def test_accumulator_available_inside_context(self) -> None:
        with profiled_run() as acc:
            assert get_run_accumulator() is acc

    def test_nested_runs_shadow_outer(self) -> None:
        with profiled_run() as outer:
            with profiled_run() as inner:
                parse("<Sequence />")
            assert get_run_accumulator() is outer
        assert inner.parse_calls == 1
        assert outer.parse_calls == 0

    def test_records_parse_call(self, main_xaml: str) -> None:
        with profiled_run() as acc:
            parse(main_xaml)
        assert acc.parse_calls == 1
        assert acc.source_length == len(main_xaml)
        assert acc.node_count == 6

    def test_records_cache_hits(self) -> None:
        cache = DictParseCache()
        with profiled_run() as acc:
            parse("<Sequence />", cache=cache)
            parse("<Sequence />", cache=cache)
        assert acc.parse_calls == 2
        assert acc.cache_hits == 1

    def test_records_compare(self, main_xaml: str) -> None:
        after = main_xaml.replace('Level="Info"', 'Level="Warn"')
        with profiled_run() as acc:
            compare(main_xaml, after)
        assert acc.parse_calls == 2
        assert acc.index_calls == 2
        assert acc.indexed_ranges == 12
        assert acc.diff_calls == 1
        assert acc.diff_entries == 2

    def test_total_duration_positive(self) -> None:
        with profiled_run() as acc:
            parse("<Sequence><Delay /></Sequence>")
        assert acc.total_duration_ms > 0


class TestSummary:
    def test_empty_summary(self) -> None:
        summary = RunAccumulator().summary()
        assert summary["parse_calls"] == 0
        assert summary["source_length"] == 0
        assert summary["node_count"] == 0
        assert summary["diff_entries"] == 0

    def test_summary_keys(self) -> None:
        with profiled_run() as acc:
            parse("<Sequence />")
        assert set(acc.summary()) == {
            "total_ms",
            "source_length",
            "node_count",
            "parse_calls",
            "cache_hits",
            "index_calls",
            "indexed_ranges",
            "diff_calls",
            "diff_entries",
        }
