"""
Outcome types produced once per run.

    Success(ctx)               run reached the end of the registry
    Failure(error, error_ctx)  a STEP failed; recovery chain has finished

``NestedOutcome`` wraps an Outcome returned from a composed sub-pipeline
(see ``Pipeline.to_step``).  The engine matches on it explicitly; it is
never part of the public wire shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from riel.pipeline.context import Context, ErrorContext
from riel.pipeline.errors import EngineInvariantError


@dataclass(frozen=True)
class Success:
    """Successful run: the final context."""

    ctx: Context = field(default_factory=dict)

    @property
    def ok(self) -> Literal[True]:
        return True

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the ``{"ok": true, "value": {"ctx": ...}}`` shape."""
        return {"ok": True, "value": {"ctx": self.ctx}}


@dataclass(frozen=True)
class Failure:
    """Failed run: the first step error and the accumulated error context."""

    error: BaseException
    error_ctx: ErrorContext = field(default_factory=dict)

    @property
    def ok(self) -> Literal[False]:
        return False

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the ``{"ok": false, "error": {...}}`` shape."""
        return {
            "ok": False,
            "error": {"error": self.error, "errorCtx": self.error_ctx},
        }


Outcome = Success | Failure


@dataclass(frozen=True)
class NestedOutcome:
    """Outcome of a sub-pipeline, returned by a composed step."""

    outcome: Outcome

    @property
    def ok(self) -> bool:
        return self.outcome.ok


# ─── Builders ──────────────────────────────────────────

def success(ctx: Context) -> Success:
    return Success(ctx=ctx)


def failure(error: BaseException, error_ctx: ErrorContext) -> Failure:
    return Failure(error=error, error_ctx=error_ctx)


def nest(outcome: Outcome) -> NestedOutcome:
    return NestedOutcome(outcome=outcome)


def unreachable(*, execution_id: str | None = None, mode: str | None = None) -> EngineInvariantError:
    """Build the error raised when the run loop exits without a terminal state."""
    return EngineInvariantError(
        "unreachable: pipeline run loop exited without reaching DONE",
        execution_id=execution_id,
        details={"mode": mode},
    )
