"""Stepped CHIP-8 system: fetch, decode, execute and timer accounting per tick."""

from typing import Iterable, Optional

import jax
import jax.numpy as jnp
import numpy as np

from octick.config import ErrorPolicy, SystemConfig
from octick.constants import WORD_MASK
from octick.decode import DecodedInstruction, decode
from octick.emulator import execute, fetch
from octick.errors import Chip8Error
from octick.events import StepEvent, StepStatus
from octick.instructions.misc import resolve_wait_for_key
from octick.logging import ConsoleLogger, StepCallback, TraceCallback
from octick.rom import read_rom
from octick.state import MachineState, create_state, load_program, set_key
from octick.timers import TimerSubsystem


class System:
    """Owns the machine state and advances it one instruction per tick.

    The scheduler is a two-state machine. While idle, each tick fetches,
    decodes and executes the instruction at pc. A blocking instruction
    (LD Vx, K) is parked as pending with pc unchanged; while pending, each
    tick only re-checks its completion predicate against the keypad.

    Failed steps leave the state exactly as it was before the step, then the
    configured ErrorPolicy is applied.
    """

    def __init__(
        self,
        config: Optional[SystemConfig] = None,
        callbacks: Iterable[StepCallback] = (),
        logger: Optional[ConsoleLogger] = None,
    ):
        self.config = config or SystemConfig()
        self.logger = logger or ConsoleLogger(log_level=self.config.log_level)
        self.callbacks = list(callbacks)
        if self.config.trace:
            trace_logger = self.logger
            if trace_logger.log_level != "DEBUG":
                trace_logger = ConsoleLogger(name="Octick.trace", log_level="DEBUG")
            self.callbacks.append(TraceCallback(trace_logger))
        self.timers = TimerSubsystem(self.config.timer_rate_hz)
        self.reset()

    def reset(self):
        """Return to power-on state, discarding any loaded program."""
        self.state: MachineState = create_state(
            jax.random.PRNGKey(self.config.seed),
            delay_timer=self.config.delay_timer,
            sound_timer=self.config.sound_timer,
            modern_mode=self.config.modern_mode,
        )
        self.pending: Optional[DecodedInstruction] = None
        self.dirty = False
        self.timers.reset()

    def load_rom(self, data: bytes):
        self.state = load_program(self.state, data)
        self.logger.debug(f"Loaded {len(data)} program bytes")

    def load_rom_file(self, filename: str):
        self.load_rom(read_rom(filename))
        self.logger.info(f"Loaded ROM {filename}")

    def set_key(self, key: int, pressed: bool):
        self.state = set_key(self.state, key, pressed)

    def press_key(self, key: int):
        self.set_key(key, True)

    def release_key(self, key: int):
        self.set_key(key, False)

    @property
    def halted(self) -> bool:
        return bool(self.state.halted)

    @property
    def waiting(self) -> bool:
        return self.pending is not None

    @property
    def frame(self) -> np.ndarray:
        """Read-only (64, 32) boolean framebuffer."""
        return np.asarray(self.state.display)

    def consume_frame(self) -> np.ndarray:
        """Return the framebuffer and clear the dirty flag."""
        self.dirty = False
        return self.frame

    def tick(self, elapsed_ms: float) -> StepEvent:
        """Run one fetch-or-poll cycle and one timer accounting pass."""
        if elapsed_ms < 0:
            raise ValueError(f"Elapsed time cannot be negative, got {elapsed_ms}")
        if self.pending is None:
            event = self._step()
        else:
            event = self._poll()

        self.state = self.timers.update(self.state, elapsed_ms)

        for callback in self.callbacks:
            callback.on_step(event, self.state)

        if event.error is not None and self.config.error_policy is ErrorPolicy.RAISE:
            raise event.error
        return event

    def _step(self) -> StepEvent:
        pc = int(self.state.pc)
        instruction = None
        try:
            fetched, word = fetch(self.state)
            instruction = decode(word)
            if instruction.blocks:
                self.pending = instruction
                return StepEvent(pc, instruction, StepStatus.WAITING)
            self.state = execute(fetched, instruction)
        except Chip8Error as err:
            return self._fail(pc, instruction, err)

        if instruction.draws:
            self.dirty = True
        return StepEvent(pc, instruction, StepStatus.EXECUTED)

    def _poll(self) -> StepEvent:
        pc = int(self.state.pc)
        instruction = self.pending
        resolved = resolve_wait_for_key(self.state, instruction)
        if resolved is None:
            return StepEvent(pc, instruction, StepStatus.WAITING)
        self.state = resolved
        self.pending = None
        return StepEvent(pc, instruction, StepStatus.RESUMED)

    def _fail(self, pc: int, instruction: Optional[DecodedInstruction], err: Chip8Error) -> StepEvent:
        if err.addr is None:
            err.addr = pc
        policy = self.config.error_policy
        self.logger.warning(f"{err.__class__.__name__} at {pc:03X}: {err.message} ({policy.value})")

        if policy is ErrorPolicy.HALT:
            self.state = self.state.replace(halted=True)
        elif policy is ErrorPolicy.SKIP:
            self.state = self.state.replace(pc=jnp.uint16((pc + 2) & WORD_MASK))
        return StepEvent(pc, instruction, StepStatus.FAILED, err)
