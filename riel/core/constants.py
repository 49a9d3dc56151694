"""Shared constants and enums used across the engine."""

from enum import StrEnum


class StepKind(StrEnum):
    """Kind tag of a registered pipeline entry."""

    STEP = "STEP"
    FAIL = "FAIL"
    FAILFAST = "FAILFAST"


class EngineMode(StrEnum):
    """State of a single pipeline execution."""

    NORMAL = "NORMAL"
    RECOVERY = "RECOVERY"
    DONE = "DONE"


# Entry kinds scanned together once a run has entered recovery.
RECOVERY_KINDS: frozenset[StepKind] = frozenset({StepKind.FAIL, StepKind.FAILFAST})


class StepReturnKind(StrEnum):
    """How the engine interprets the value a STEP callback returned."""

    CONTEXT_UPDATE = "CONTEXT_UPDATE"
    NO_UPDATE = "NO_UPDATE"
    NESTED_OUTCOME = "NESTED_OUTCOME"
