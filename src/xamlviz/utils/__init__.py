"""Shared helpers for xamlviz.

- logger: get_logger with the package prefix
- hashing: fingerprints for parse cache keys
"""

from xamlviz.utils.hashing import fingerprint, hash_parts, hash_str, normalize_newlines
from xamlviz.utils.logger import get_logger

__all__ = [
    "fingerprint",
    "get_logger",
    "hash_parts",
    "hash_str",
    "normalize_newlines",
]
