"""
Exception hierarchy for the pipeline engine.

All engine exceptions inherit from PipelineError so callers can catch
broadly or narrowly as needed.  Each exception carries structured
context (entry name, execution ID, etc.) for logging/debugging.

Exceptions raised by user callbacks are never wrapped: a STEP failure is
captured as-is into the failure Outcome, and a FAIL/FAILFAST failure
propagates out of ``Pipeline.run`` unchanged.
"""

from __future__ import annotations

from typing import Any


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        execution_id: str | None = None,
        step_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.execution_id = execution_id
        self.step_name = step_name
        self.details = details or {}
        super().__init__(message)


class InvalidStepReturnError(PipelineError):
    """A callback returned something other than a mapping, None or a nested outcome."""

    def __init__(
        self,
        message: str,
        *,
        returned: Any = None,
        **kwargs: Any,
    ) -> None:
        self.returned = returned
        super().__init__(message, **kwargs)


class EngineInvariantError(PipelineError):
    """The run loop exited without reaching a terminal state.  Always a bug."""
    pass
