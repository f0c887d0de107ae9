"""Package-scoped loggers.

Every xamlviz module logs under the ``xamlviz`` namespace so a host can
silence or raise the whole library with one ``logging.getLogger("xamlviz")``
call. No handlers are installed here.
"""

from __future__ import annotations

import logging

_ROOT = "xamlviz"


def get_logger(name: str) -> logging.Logger:
    """Return the stdlib logger for ``name`` under the ``xamlviz`` namespace.

    >>> get_logger("line_index").name
    'xamlviz.line_index'
    >>> get_logger("xamlviz.differ").name
    'xamlviz.differ'
    """
    if name != _ROOT and not name.startswith(_ROOT + "."):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)
