"""
Pipeline: the fluent builder users register entries on.

Builder methods mutate this instance in place and return it, so calls chain::

    outcome = await (
        pipeline("signup")
        .step(validate)
        .step(create_account)
        .fail(log_failure)
        .fail_fast(notify)
        .run({"email": "a@b.c"})
    )

A built pipeline holds no per-run state and may be run any number of times,
concurrently or nested inside other pipelines via ``to_step``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from riel.core.constants import StepKind
from riel.pipeline.compose import ComposedStep, to_step
from riel.pipeline.engine import ExecutionEngine
from riel.pipeline.registry import StepCallback, StepEntry, StepRegistry
from riel.pipeline.result import Outcome


class Pipeline:
    """Ordered STEP / FAIL / FAILFAST entries plus the engine that runs them."""

    def __init__(self, name: str | None = None, *, log_step_events: bool | None = None) -> None:
        self.name = name or "pipeline"
        self._registry = StepRegistry()
        self._engine = ExecutionEngine(
            self._registry,
            name=self.name,
            log_step_events=log_step_events,
        )

    # ─── Builder ───────────────────────────────────────

    def step(self, callback: StepCallback, *, name: str | None = None) -> Pipeline:
        """
        Register a STEP.

        ``callback(ctx)`` may be sync or async and returns a partial ctx
        update, None, or the result of another pipeline's ``to_step``.
        """
        return self._register(callback, StepKind.STEP, name)

    def fail(self, callback: StepCallback, *, name: str | None = None) -> Pipeline:
        """
        Register a FAIL handler.

        ``callback(error, error_ctx, ctx)`` returns a partial error_ctx
        update or None.  Recovery continues with the next handler.
        """
        return self._register(callback, StepKind.FAIL, name)

    def fail_fast(self, callback: StepCallback, *, name: str | None = None) -> Pipeline:
        """Register a FAILFAST handler: like ``fail`` but ends the recovery chain."""
        return self._register(callback, StepKind.FAILFAST, name)

    def _register(self, callback: StepCallback, kind: StepKind, name: str | None) -> Pipeline:
        self._registry.append(StepEntry.create(callback, kind, name))
        return self

    # ─── Execution ─────────────────────────────────────

    async def run(self, ctx: Mapping[str, Any] | None = None) -> Outcome:
        """Execute all entries against ``ctx`` and return the Outcome."""
        return await self._engine.run(ctx)

    def run_sync(self, ctx: Mapping[str, Any] | None = None) -> Outcome:
        """
        Blocking wrapper around ``run`` for callers without an event loop.

        Raises:
            RuntimeError: called while an event loop is running.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.run(ctx))
        raise RuntimeError("run_sync() cannot be called from a running event loop; await run() instead")

    def to_step(self) -> ComposedStep:
        """Return a STEP callback that runs this pipeline as one step."""
        return to_step(self)

    # ─── Introspection ─────────────────────────────────

    @property
    def entries(self) -> tuple[StepEntry, ...]:
        return self._registry.entries()

    def __len__(self) -> int:
        return len(self._registry)

    def __repr__(self) -> str:
        return f"Pipeline(name={self.name!r}, entries={len(self)})"


def pipeline(name: str | None = None) -> Pipeline:
    """Create an empty pipeline."""
    return Pipeline(name)
