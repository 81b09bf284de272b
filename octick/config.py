"""Machine configuration."""

import enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from octick.constants import TIMER_RATE_HZ


class ErrorPolicy(str, enum.Enum):
    """What the scheduler does after a failed step."""
    HALT = "halt"    # set the halted flag, pc unchanged
    SKIP = "skip"    # step over the faulting instruction
    RAISE = "raise"  # re-raise to the caller, state unchanged


class SystemConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    delay_timer: int = Field(0, ge=0, le=255)
    sound_timer: int = Field(0, ge=0, le=255)
    error_policy: ErrorPolicy = ErrorPolicy.HALT
    modern_mode: bool = True
    seed: int = 0
    timer_rate_hz: int = Field(TIMER_RATE_HZ, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    trace: bool = False
