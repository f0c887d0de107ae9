"""Opt-in run metrics for parse, index and diff.

Inside ``profiled_run()`` the top-level API functions report to a
RunAccumulator held in a ContextVar. Outside it, get_run_accumulator()
returns None and the API skips recording entirely.

Example:
    from xamlviz import compare
    from xamlviz.profiling import profiled_run

    with profiled_run() as metrics:
        compare(before, after)
    metrics.summary()
    # {"total_ms": 3.1, "parse_calls": 2, "index_calls": 2, "diff_calls": 1, ...}

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, dataclass, field
from time import perf_counter
from typing import Any


@dataclass
class RunAccumulator:
    """Counters for one profiled block.

    ``parse_calls`` includes parses served by a cache; ``cache_hits`` counts
    those alone. ``source_length`` and ``node_count`` add up over every
    parse, cached or not.
    """

    start_time: float = field(default_factory=perf_counter)
    source_length: int = 0
    node_count: int = 0
    parse_calls: int = 0
    cache_hits: int = 0
    index_calls: int = 0
    indexed_ranges: int = 0
    diff_calls: int = 0
    diff_entries: int = 0

    def record_parse(self, source_length: int, node_count: int, *, cached: bool = False) -> None:
        self.parse_calls += 1
        if cached:
            self.cache_hits += 1
        self.source_length += source_length
        self.node_count += node_count

    def record_index(self, range_count: int) -> None:
        self.index_calls += 1
        self.indexed_ranges += range_count

    def record_diff(self, entry_count: int) -> None:
        self.diff_calls += 1
        self.diff_entries += entry_count

    @property
    def total_duration_ms(self) -> float:
        """Milliseconds since the accumulator was created."""
        return (perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        """Counters plus ``total_ms``, rounded to two decimals."""
        counters = asdict(self)
        del counters["start_time"]
        return {"total_ms": round(self.total_duration_ms, 2), **counters}


_current: ContextVar[RunAccumulator | None] = ContextVar("xamlviz_run", default=None)


def get_run_accumulator() -> RunAccumulator | None:
    """The accumulator of the innermost active profiled_run(), if any."""
    return _current.get()


@contextmanager
def profiled_run() -> Iterator[RunAccumulator]:
    """Collect metrics for the calls made inside the ``with`` block.

    Blocks nest; the inner accumulator shadows the outer one until it exits.
    """
    acc = RunAccumulator()
    token = _current.set(acc)
    try:
        yield acc
    finally:
        _current.reset(token)


__all__ = [
    "RunAccumulator",
    "get_run_accumulator",
    "profiled_run",
]
