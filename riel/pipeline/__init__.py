"""
Pipeline engine: sequential steps with a fail / fail_fast recovery chain.

A pipeline threads a context dict through its STEP entries.  The first
exception raised by a step switches the run into recovery, where only FAIL
and FAILFAST handlers run and build up a separate error context.  Each run
ends in exactly one Outcome: Success(ctx) or Failure(error, error_ctx).
"""

from riel.pipeline.builder import Pipeline, pipeline
from riel.pipeline.context import Context, ErrorContext, merge
from riel.pipeline.engine import ExecutionEngine
from riel.pipeline.errors import EngineInvariantError, InvalidStepReturnError, PipelineError
from riel.pipeline.registry import StepEntry, StepRegistry
from riel.pipeline.result import Failure, NestedOutcome, Outcome, Success

__all__ = [
    "Context",
    "EngineInvariantError",
    "ErrorContext",
    "ExecutionEngine",
    "Failure",
    "InvalidStepReturnError",
    "NestedOutcome",
    "Outcome",
    "Pipeline",
    "PipelineError",
    "StepEntry",
    "StepRegistry",
    "Success",
    "merge",
    "pipeline",
]
