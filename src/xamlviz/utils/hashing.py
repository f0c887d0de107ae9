"""Fingerprints for parse cache keys.

Workflow files saved by the designer on Windows carry CRLF line endings and
are often checked out with LF elsewhere. XML parsing folds both to LF, so
fingerprint() can fold them too and let both checkouts share a cache entry.

Example:
    >>> fingerprint("<Sequence />\r\n") == fingerprint("<Sequence />\n")
    True
"""

import hashlib
from collections.abc import Iterable

# Unit separator: cannot appear in a config repr or a workflow file name
_PART_SEPARATOR = "\x1f"


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def hash_str(text: str, truncate: int | None = None, algorithm: str = "sha256") -> str:
    """Hex digest of ``text`` encoded as UTF-8, cut to ``truncate`` chars."""
    digest = hashlib.new(algorithm, text.encode("utf-8")).hexdigest()
    return digest if truncate is None else digest[:truncate]


def fingerprint(source: str, *, fold_newlines: bool = True) -> str:
    """SHA-256 digest of workflow text, ignoring line-ending style by default."""
    return hash_str(normalize_newlines(source) if fold_newlines else source)


def hash_parts(parts: Iterable[str]) -> str:
    """Digest of an ordered sequence of strings.

    The parts are joined with a separator that never occurs inside them, so
    ``["ab", "c"]`` and ``["a", "bc"]`` hash differently.
    """
    return hash_str(_PART_SEPARATOR.join(parts))
