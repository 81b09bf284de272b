"""CHIP-8 machine state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from octick.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE,
    MEMORY_SIZE, NUM_REGISTERS, NUM_KEYS,
)
from octick.errors import OutOfRangeAccess


@dataclass(frozen=True)
class StackState:
    """Call stack of return addresses."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0

    @property
    def depth(self) -> int:
        return int(self.pointer)


class MachineState(PyTreeNode):
    """Complete register, memory, display and input state of the machine."""
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.uint16(PROGRAM_START))
    display: jnp.ndarray = field(
        default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)
    )
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.uint8(0))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.uint8(0))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.uint16(0))
    halted: bool = False
    modern_mode: bool = field(pytree_node=False, default=True)


def create_state(
    rng: jax.Array = None,
    delay_timer: int = 0,
    sound_timer: int = 0,
    modern_mode: bool = True,
) -> MachineState:
    """Create initial machine state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    state = MachineState(
        rng,
        delay_timer=jnp.uint8(delay_timer),
        sound_timer=jnp.uint8(sound_timer),
        modern_mode=modern_mode,
    )
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def check_range(address: int, length: int) -> None:
    """Raise OutOfRangeAccess unless [address, address + length) lies in memory."""
    if address < 0 or address + length > MEMORY_SIZE:
        raise OutOfRangeAccess(address, length)


def read_block(state: MachineState, address: int, length: int) -> jnp.ndarray:
    """Read `length` bytes starting at `address`."""
    address = int(address)
    check_range(address, length)
    return state.memory[address:address + length]


def write_block(state: MachineState, address: int, data) -> MachineState:
    """Write bytes starting at `address`."""
    address = int(address)
    values = jnp.asarray(data, dtype=jnp.uint8)
    check_range(address, values.shape[0])
    return state.replace(memory=state.memory.at[address:address + values.shape[0]].set(values))


def load_program(state: MachineState, data: bytes) -> MachineState:
    """Load program bytes into memory starting at 0x200."""
    return write_block(state, PROGRAM_START, list(data))


def set_key(state: MachineState, key: int, pressed: bool) -> MachineState:
    """Mark key 0x0-0xF as pressed or released."""
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key index must be in 0..{NUM_KEYS - 1}, got {key}")
    return state.replace(keypad=state.keypad.at[key].set(bool(pressed)))
