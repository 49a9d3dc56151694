"""
Context types and the merge rule applied after every entry.

A run carries two independent mappings:

    ctx        the success-path state.  Each STEP sees the latest one and
               may return a partial update.
    error_ctx  the recovery-path state.  Empty at start, extended only by
               FAIL / FAILFAST handlers (or seeded by a failed sub-pipeline).

Both are treated as immutable: ``merge`` always builds a new dict, so a
snapshot handed to a callback never changes underneath it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

Context = dict[str, Any]
ErrorContext = dict[str, Any]


def merge(old: Mapping[str, Any], update: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Shallow-merge ``update`` on top of ``old``.

    Keys present in ``update`` always win, even when their value is None.
    Keys only in ``old`` are carried over.  Nested values are replaced,
    never merged recursively.  A None update returns ``old`` unchanged.
    """
    if update is None:
        return old if isinstance(old, dict) else dict(old)
    return {**old, **update}
