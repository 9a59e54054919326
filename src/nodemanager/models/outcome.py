"""Stage outcome model for the application pipeline."""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class OutcomeKind(str, Enum):
    """How a pipeline stage finished."""

    OK = "ok"
    PARTIAL = "partial"
    FATAL = "fatal"


class StageOutcome(BaseModel):
    """Result of a single pipeline stage.

    OK carries no errors, PARTIAL carries one error per failing device and lets
    the pipeline continue, FATAL carries exactly one error and stops it.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    stage: str = Field(..., description="Stage name, used in log lines")
    kind: OutcomeKind = Field(..., description="Ok, partial or fatal")
    errors: List[Exception] = Field(default_factory=list)

    @classmethod
    def ok(cls, stage: str) -> "StageOutcome":
        return cls(stage=stage, kind=OutcomeKind.OK)

    @classmethod
    def partial(cls, stage: str, errors: List[Exception]) -> "StageOutcome":
        """Per-device errors; an empty list is the same as OK."""
        if not errors:
            return cls.ok(stage)
        return cls(stage=stage, kind=OutcomeKind.PARTIAL, errors=list(errors))

    @classmethod
    def fatal(cls, stage: str, error: Exception) -> "StageOutcome":
        return cls(stage=stage, kind=OutcomeKind.FATAL, errors=[error])

    @property
    def is_fatal(self) -> bool:
        return self.kind == OutcomeKind.FATAL


def fold_outcomes(outcomes: List[StageOutcome]) -> List[Exception]:
    """Concatenate errors left to right; a fatal outcome replaces them all.

    Args:
        outcomes: Stage outcomes in pipeline order

    Returns:
        The fatal error alone if any stage was fatal, otherwise every partial
        error in stage order
    """
    errors: List[Exception] = []
    for outcome in outcomes:
        if outcome.is_fatal:
            return list(outcome.errors)
        errors.extend(outcome.errors)
    return errors
