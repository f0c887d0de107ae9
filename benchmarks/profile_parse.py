"""cProfile wrapper for xamlviz parse, index and diff.

Run with:
    python -m cProfile -o profile.prof benchmarks/profile_parse.py
    python -m snakeviz profile.prof

Or for direct profiling:
    python benchmarks/profile_parse.py
"""

from __future__ import annotations

import cProfile
import io
import pstats
import sys
from pathlib import Path


def get_corpus() -> list[str]:
    """Load the sample workflows used by the test suite."""
    fixtures = Path(__file__).parent.parent / "tests" / "fixtures"
    sources = [path.read_text(encoding="utf-8") for path in sorted(fixtures.glob("*.xaml"))]
    if not sources:
        raise FileNotFoundError(f"No sample workflows found in {fixtures}")
    return sources


def run_corpus(iterations: int = 200) -> None:
    """Compare every sample workflow with an edited copy of itself."""
    from xamlviz import compare

    sources = get_corpus()
    edited = [source.replace('DisplayName="', 'DisplayName="Edited ', 1) for source in sources]

    for _ in range(iterations):
        for before, after in zip(sources, edited):
            compare(before, after)


def main() -> None:
    """Run profiling and print results."""
    from xamlviz.profiling import profiled_run

    print("xamlviz Profiling")
    print("=" * 60)
    print(f"Python {sys.version.split()[0]}")

    iterations = 200
    print(f"\nComparing sample workflows {iterations}x...")

    profiler = cProfile.Profile()
    with profiled_run() as metrics:
        profiler.enable()
        run_corpus(iterations)
        profiler.disable()

    print(metrics.summary())

    for title, key in (
        ("TOP 30 FUNCTIONS BY CUMULATIVE TIME", pstats.SortKey.CUMULATIVE),
        ("TOP 30 FUNCTIONS BY TOTAL (SELF) TIME", pstats.SortKey.TIME),
    ):
        print("\n" + "=" * 60)
        print(title)
        print("=" * 60 + "\n")

        s = io.StringIO()
        ps = pstats.Stats(profiler, stream=s).sort_stats(key)
        ps.print_stats(30)
        print(s.getvalue())


if __name__ == "__main__":
    main()
