"""
Composition: turn a whole pipeline into a single STEP of another one.

The adapter runs the inner pipeline to completion and hands its Outcome back
wrapped in a NestedOutcome.  The outer engine unwraps it: a success merges
the inner ctx into the outer ctx, a failure starts the outer recovery chain
with the inner error and error context.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

from riel.pipeline.result import NestedOutcome, Outcome, nest


class Runnable(Protocol):
    name: str

    async def run(self, ctx: Mapping[str, Any] | None = None) -> Outcome: ...


ComposedStep = Callable[[Mapping[str, Any]], Awaitable[NestedOutcome]]


def to_step(pipeline: Runnable) -> ComposedStep:
    """Return an async STEP callback that runs ``pipeline`` on the given ctx."""

    async def composed(ctx: Mapping[str, Any]) -> NestedOutcome:
        return nest(await pipeline.run(ctx))

    composed.__name__ = composed.__qualname__ = f"{pipeline.name}.to_step"
    return composed
