"""riel: a sequential async pipeline executor with a fail / fail_fast recovery chain."""

import logging

from riel.core.constants import StepKind
from riel.pipeline import (
    EngineInvariantError,
    Failure,
    InvalidStepReturnError,
    NestedOutcome,
    Outcome,
    Pipeline,
    PipelineError,
    Success,
    merge,
    pipeline,
)

__version__ = "0.1.0"

logging.getLogger("riel").addHandler(logging.NullHandler())

__all__ = [
    "EngineInvariantError",
    "Failure",
    "InvalidStepReturnError",
    "NestedOutcome",
    "Outcome",
    "Pipeline",
    "PipelineError",
    "StepKind",
    "Success",
    "merge",
    "pipeline",
]
