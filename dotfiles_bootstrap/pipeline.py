from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import AbstractSet, List, Protocol, Sequence, Tuple

from .config import RunConfig
from .lib.command import CommandError
from .logging_utils import SUCCESS

logger = logging.getLogger(__name__)


class Status(str, enum.Enum):
    SUCCEEDED = "succeeded"
    WARNED = "warned"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class StepOutcome:
    status: Status
    message: str = ""

    @classmethod
    def succeeded(cls, message: str = "") -> "StepOutcome":
        return cls(Status.SUCCEEDED, message)

    @classmethod
    def warned(cls, message: str) -> "StepOutcome":
        return cls(Status.WARNED, message)

    @classmethod
    def failed(cls, message: str) -> "StepOutcome":
        return cls(Status.FAILED, message)

    @classmethod
    def skipped(cls) -> "StepOutcome":
        return cls(Status.SKIPPED)


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, cfg: RunConfig) -> StepOutcome:
        ...


class StepFailed(RuntimeError):
    def __init__(self, step_id: str, reason: str) -> None:
        self.step_id = step_id
        self.reason = reason
        super().__init__(f"Step failed: {step_id}: {reason}")


@dataclass
class PipelineResult:
    outcomes: List[Tuple[str, StepOutcome]] = field(default_factory=list)

    @property
    def ran_steps(self) -> List[str]:
        return [s for s, o in self.outcomes if o.status is not Status.SKIPPED]

    @property
    def skipped_steps(self) -> List[str]:
        return [s for s, o in self.outcomes if o.status is Status.SKIPPED]

    @property
    def warnings(self) -> List[Tuple[str, str]]:
        return [(s, o.message) for s, o in self.outcomes if o.status is Status.WARNED]


def should_run(step_id: str, only: AbstractSet[str], skip: AbstractSet[str]) -> bool:
    """Selection policy: --skip is checked first, so it wins over --only."""

    if step_id in skip:
        return False
    if only and step_id not in only:
        return False
    return True


def run_pipeline(cfg: RunConfig, steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order, stopping at the first fatal outcome."""

    result = PipelineResult()

    for step in steps:
        if not should_run(step.step_id, cfg.only, cfg.skip):
            logger.info("Skipping step: %s", step.step_id)
            result.outcomes.append((step.step_id, StepOutcome.skipped()))
            continue

        logger.info("Running step: %s", step.step_id)
        try:
            outcome = step.run(cfg)
        except CommandError as e:
            outcome = StepOutcome.failed(str(e))

        result.outcomes.append((step.step_id, outcome))

        if outcome.status is Status.FAILED:
            raise StepFailed(step.step_id, outcome.message)
        if outcome.status is Status.WARNED:
            logger.warning("%s", outcome.message)
        elif outcome.message:
            logger.info("%s", outcome.message, extra=SUCCESS)
        logger.info("Step completed: %s", step.step_id, extra=SUCCESS)

    return result
