"""
ExecutionEngine: drives one pipeline run over a StepRegistry.

Responsibilities:
    - Execute STEP entries in order while the run is healthy (NORMAL)
    - Capture the first STEP failure and switch to RECOVERY for good
    - Execute FAIL / FAILFAST handlers in order, stopping after a FAILFAST
    - Unwrap outcomes of composed sub-pipelines
    - Return exactly one Outcome per run

Every call to ``run`` allocates its own state, so one engine (and the
registry behind it) can serve any number of concurrent runs.
"""

from __future__ import annotations

import inspect
import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from riel.core.config import settings
from riel.core.constants import RECOVERY_KINDS, EngineMode, StepKind, StepReturnKind
from riel.core.logging import get_logger
from riel.pipeline.context import Context, ErrorContext, merge
from riel.pipeline.errors import InvalidStepReturnError
from riel.pipeline.registry import StepEntry, StepRegistry
from riel.pipeline.result import Failure, NestedOutcome, Outcome, Success, failure, success, unreachable


@dataclass
class RunState:
    """Mutable state local to a single run."""

    execution_id: str
    ctx: Context
    error_ctx: ErrorContext = field(default_factory=dict)
    error: BaseException | None = None
    failed: bool = False
    cursor: int = 0
    mode: EngineMode = EngineMode.NORMAL
    # Mode the run was in when it reached DONE.
    final_mode: EngineMode | None = None
    outcome: Outcome | None = None

    def enter_recovery(self, error: BaseException, error_ctx: ErrorContext | None = None) -> None:
        self.failed = True
        self.error = error
        self.error_ctx = dict(error_ctx) if error_ctx is not None else {}
        self.mode = EngineMode.RECOVERY

    def finish(self, outcome: Outcome) -> None:
        self.outcome = outcome
        self.final_mode = self.mode
        self.mode = EngineMode.DONE

    def failure(self) -> Failure:
        if self.error is None:
            raise unreachable(execution_id=self.execution_id, mode=self.mode)
        return failure(self.error, self.error_ctx)


def classify_step_return(value: Any) -> StepReturnKind:
    """
    Decide how a STEP return value is applied.

    Raises:
        InvalidStepReturnError: value is not None, a mapping or a NestedOutcome.
    """
    if value is None:
        return StepReturnKind.NO_UPDATE
    if isinstance(value, NestedOutcome):
        return StepReturnKind.NESTED_OUTCOME
    if isinstance(value, Mapping):
        return StepReturnKind.CONTEXT_UPDATE
    raise InvalidStepReturnError(
        f"Step returned unsupported value of type {type(value).__name__}; "
        "expected a mapping, None or a nested pipeline outcome",
        returned=value,
    )


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class ExecutionEngine:
    """
    Runs the entries of a StepRegistry against an initial context.

    Usage::

        engine = ExecutionEngine(registry, name="checkout")
        outcome = await engine.run({"cart_id": "c-1"})
        if outcome.ok:
            print(outcome.ctx)
    """

    def __init__(
        self,
        registry: StepRegistry,
        *,
        name: str = "pipeline",
        log_step_events: bool | None = None,
    ) -> None:
        self.registry = registry
        self.name = name
        self.log_step_events = settings.LOG_STEP_EVENTS if log_step_events is None else log_step_events
        self.logger = get_logger("riel.engine")

    async def run(self, initial_ctx: Mapping[str, Any] | None = None) -> Outcome:
        """
        Execute the registry once and return its Outcome.

        Exceptions raised by STEP callbacks end up in ``Failure.error``.
        Exceptions raised by FAIL / FAILFAST callbacks propagate unchanged.
        """
        state = RunState(execution_id=str(uuid.uuid4()), ctx=dict(initial_ctx or {}))
        log = self.logger.bind(
            execution_id=state.execution_id,
            pipeline=self.name,
            total_entries=len(self.registry),
        )
        started = time.perf_counter()
        log.debug("Pipeline run started")

        while state.mode is not EngineMode.DONE:
            if state.mode is EngineMode.NORMAL:
                await self._advance_normal(state, log)
            else:
                await self._advance_recovery(state, log)

        if state.outcome is None:
            raise unreachable(execution_id=state.execution_id, mode=state.mode)

        log.info(
            "Pipeline run finished",
            ok=state.outcome.ok,
            mode=state.final_mode,
            duration_ms=_elapsed_ms(started),
        )
        return state.outcome

    # ─── NORMAL ────────────────────────────────────────

    async def _advance_normal(self, state: RunState, log: structlog.stdlib.BoundLogger) -> None:
        index = self.registry.next_index(state.cursor, (StepKind.STEP,))
        if index is None:
            state.finish(success(state.ctx))
            return

        state.cursor = index
        entry = self.registry[index]
        started = time.perf_counter()

        try:
            returned = await _resolve(entry.callback(state.ctx))
            kind = classify_step_return(returned)
        except Exception as exc:
            self._log_entry(log, entry, index, started, status="FAILED")
            log.warning(
                "Step failed, entering recovery",
                entry_index=index,
                entry_name=entry.name,
                error=repr(exc),
            )
            state.enter_recovery(exc)
            state.cursor += 1
            return

        if kind is StepReturnKind.CONTEXT_UPDATE:
            state.ctx = merge(state.ctx, returned)
        elif kind is StepReturnKind.NESTED_OUTCOME:
            self._apply_nested(state, returned.outcome, entry, index, log)

        status = "FAILED" if state.failed else "COMPLETED"
        self._log_entry(log, entry, index, started, status=status)
        state.cursor += 1

    def _apply_nested(
        self,
        state: RunState,
        outcome: Outcome,
        entry: StepEntry,
        index: int,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        if isinstance(outcome, Success):
            state.ctx = merge(state.ctx, outcome.ctx)
            return

        log.warning(
            "Nested pipeline failed, entering recovery",
            entry_index=index,
            entry_name=entry.name,
            error=repr(outcome.error),
        )
        # The sub-pipeline's error context replaces ours; it does not merge.
        state.enter_recovery(outcome.error, outcome.error_ctx)

    # ─── RECOVERY ──────────────────────────────────────

    async def _advance_recovery(self, state: RunState, log: structlog.stdlib.BoundLogger) -> None:
        index = self.registry.next_index(state.cursor, RECOVERY_KINDS)
        if index is None:
            self._log_skipped(log, state.cursor, len(self.registry))
            state.finish(state.failure())
            return

        self._log_skipped(log, state.cursor, index)
        state.cursor = index
        entry = self.registry[index]
        started = time.perf_counter()

        try:
            returned = await _resolve(entry.callback(state.error, state.error_ctx, state.ctx))
        except Exception:
            log.exception(
                "Recovery handler raised, aborting run",
                entry_index=index,
                entry_kind=entry.kind,
                entry_name=entry.name,
            )
            raise

        if returned is not None:
            if not isinstance(returned, Mapping):
                raise InvalidStepReturnError(
                    f"Handler returned unsupported value of type {type(returned).__name__}; "
                    "expected a mapping or None",
                    execution_id=state.execution_id,
                    step_name=entry.name,
                    returned=returned,
                )
            state.error_ctx = merge(state.error_ctx, returned)

        self._log_entry(log, entry, index, started, status="COMPLETED")

        if entry.kind is StepKind.FAILFAST:
            state.finish(state.failure())
            return

        state.cursor += 1

    # ─── Logging helpers ───────────────────────────────

    def _log_entry(
        self,
        log: structlog.stdlib.BoundLogger,
        entry: StepEntry,
        index: int,
        started: float,
        *,
        status: str,
    ) -> None:
        if not self.log_step_events:
            return
        log.debug(
            "Entry executed",
            entry_index=index,
            entry_kind=entry.kind,
            entry_name=entry.name,
            status=status,
            duration_ms=_elapsed_ms(started),
        )

    def _log_skipped(self, log: structlog.stdlib.BoundLogger, start: int, stop: int) -> None:
        if not self.log_step_events:
            return
        for index in range(start, stop):
            entry = self.registry[index]
            if entry.kind is StepKind.STEP:
                log.debug(
                    "Step skipped after failure",
                    entry_index=index,
                    entry_name=entry.name,
                )


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
