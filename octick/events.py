"""Per-tick step reports."""

import enum
from dataclasses import dataclass
from typing import Optional

from octick.decode import DecodedInstruction
from octick.errors import Chip8Error


class StepStatus(enum.Enum):
    EXECUTED = "executed"  # instruction ran to completion
    WAITING = "waiting"    # blocking instruction parked or still unsatisfied
    RESUMED = "resumed"    # pending instruction completed this step
    FAILED = "failed"


@dataclass(frozen=True)
class StepEvent:
    """Outcome of a single tick."""
    pc: int
    instruction: Optional[DecodedInstruction]
    status: StepStatus
    error: Optional[Chip8Error] = None
