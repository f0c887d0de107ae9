"""Character-run diff used to highlight changed property values.

common_parts(a, b) splits ``a`` into runs shared with ``b`` and runs that
are not. It is a greedy scanner, not a minimal edit script: on a mismatch
it looks at most ``lookahead`` characters ahead for one of three ways to
resynchronise and takes the smallest skip:

1. skip the same count on both sides (substitution)
2. skip on ``a`` only (text inserted in ``a``)
3. skip on ``b`` only (text deleted from ``a``)

On equal skips the order above is the preference. If nothing
resynchronises inside the window, the rest of ``a`` is one differing run.

Render both sides by calling it twice::

    before_parts = common_parts(before, after)
    after_parts = common_parts(after, before)

"""

from __future__ import annotations

from dataclasses import dataclass

from xamlviz.config import get_config


@dataclass(frozen=True, slots=True)
class TextPart:
    """A run of ``a``; ``is_common`` when the run also appears in ``b``."""

    value: str
    is_common: bool


def common_parts(a: str, b: str, *, lookahead: int | None = None) -> list[TextPart]:
    """Split ``a`` into runs common with ``b`` and runs that differ.

    Args:
        a: String to split
        b: String to compare against
        lookahead: Resynchronisation window (defaults to the active config)

    Returns:
        Runs in order; adjacent runs never share ``is_common``, and
        ``"".join(p.value for p in parts) == a``. Empty for empty ``a``.

    Example:
        >>> [(p.value, p.is_common) for p in common_parts("[x + 1]", "[x + 2]")]
        [('[x + ', True), ('1', False), (']', True)]
    """
    window = get_config().word_diff_lookahead if lookahead is None else lookahead
    parts: list[TextPart] = []
    i = j = 0

    while i < len(a):
        start = i
        while i < len(a) and j < len(b) and a[i] == b[j]:
            i += 1
            j += 1
        if i > start:
            _append(parts, a[start:i], True)
        if i >= len(a):
            break

        skip = None if j >= len(b) else _resync(a, i, b, j, window)
        if skip is None:
            _append(parts, a[i:], False)
            break

        skip_a, skip_b = skip
        if skip_a:
            _append(parts, a[i : i + skip_a], False)
        i += skip_a
        j += skip_b

    return parts


def _resync(a: str, i: int, b: str, j: int, window: int) -> tuple[int, int] | None:
    """Smallest (skip_a, skip_b) after which a[i] == b[j] again."""
    for k in range(1, window + 1):
        if i + k < len(a) and j + k < len(b) and a[i + k] == b[j + k]:
            return k, k
        if i + k < len(a) and a[i + k] == b[j]:
            return k, 0
        if j + k < len(b) and a[i] == b[j + k]:
            return 0, k
    return None


def _append(parts: list[TextPart], value: str, is_common: bool) -> None:
    if parts and parts[-1].is_common == is_common:
        parts[-1] = TextPart(parts[-1].value + value, is_common)
    else:
        parts.append(TextPart(value, is_common))


__all__ = [
    "TextPart",
    "common_parts",
]
