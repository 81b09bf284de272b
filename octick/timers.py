"""Real-time decay of the delay and sound timers."""

import jax.numpy as jnp
from octick.constants import TIMER_RATE_HZ
from octick.state import MachineState

# Absorbs float rounding when elapsed times sum to an exact interval boundary
_EPSILON = 1e-9


def decay_timers(state: MachineState, count: int) -> MachineState:
    """Decrement both timers `count` times, flooring at zero."""
    if count <= 0:
        return state
    return state.replace(
        delay_timer=jnp.uint8(max(0, int(state.delay_timer) - count)),
        sound_timer=jnp.uint8(max(0, int(state.sound_timer) - count)),
    )


class TimerSubsystem:
    """Converts elapsed wall-clock time into fixed-rate timer decrements.

    Time is accumulated in units of 1/rate_hz milliseconds so that one decay
    interval is exactly 1000 units. The remainder after each interval carries
    over, which keeps decay accurate when ticks arrive at irregular intervals.
    """

    def __init__(self, rate_hz: int = TIMER_RATE_HZ):
        if rate_hz <= 0:
            raise ValueError(f"Timer rate must be positive, got {rate_hz}")
        self.rate_hz = rate_hz
        self._accumulated = 0.0

    @property
    def interval_ms(self) -> float:
        return 1000.0 / self.rate_hz

    @property
    def pending_ms(self) -> float:
        """Time accumulated towards the next decrement."""
        return self._accumulated / self.rate_hz

    def reset(self):
        self._accumulated = 0.0

    def advance(self, elapsed_ms: float) -> int:
        """Account for elapsed time, returning the number of whole intervals."""
        if elapsed_ms < 0:
            raise ValueError(f"Elapsed time cannot be negative, got {elapsed_ms}")
        self._accumulated += elapsed_ms * self.rate_hz
        count = int((self._accumulated + _EPSILON) // 1000.0)
        self._accumulated = max(self._accumulated - count * 1000.0, 0.0)
        return count

    def update(self, state: MachineState, elapsed_ms: float) -> MachineState:
        return decay_timers(state, self.advance(elapsed_ms))
