"""CHIP-8 miscellaneous instructions (Fxxx)."""

from typing import Optional

import jax.numpy as jnp
from octick.constants import FONT_START, GLYPH_SIZE, WORD_MASK
from octick.state import MachineState, read_block, write_block
from octick.decode import DecodedInstruction


def execute_get_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX1E - Add VX to I register, no flag."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & WORD_MASK
    return state.replace(I=jnp.uint16(new_i))


def execute_wait_for_key(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX0A - Wait for key press.

    Executing it has no effect. The scheduler parks the instruction and polls
    `resolve_wait_for_key` on later steps.
    """
    return state


def resolve_wait_for_key(
    state: MachineState, instruction: DecodedInstruction
) -> Optional[MachineState]:
    """Complete a pending FX0A once any key is down.

    Returns the state with VX set to the lowest pressed key and pc moved past
    the instruction, or None while no key is pressed.
    """
    if not bool(jnp.any(state.keypad)):
        return None
    pressed_key = int(jnp.argmax(state.keypad))
    return state.replace(
        V=state.V.at[instruction.x].set(pressed_key),
        pc=jnp.uint16((int(state.pc) + 2) & WORD_MASK),
    )


def execute_font_character(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = int(state.V[instruction.x]) & 0xF
    return state.replace(I=jnp.uint16(FONT_START + digit * GLYPH_SIZE))


def execute_bcd_conversion(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    digits = [value // 100, (value // 10) % 10, value % 10]
    return write_block(state, state.I, digits)


def execute_store_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX55 - Store V0 through VX inclusive in memory starting at I."""
    count = instruction.x + 1
    new_state = write_block(state, state.I, state.V[:count])

    if state.modern_mode:
        return new_state
    return new_state.replace(I=jnp.uint16((int(state.I) + count) & WORD_MASK))


def execute_load_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX65 - Load V0 through VX inclusive from memory starting at I."""
    count = instruction.x + 1
    values = read_block(state, state.I, count)
    new_V = state.V.at[:count].set(values)

    if state.modern_mode:
        return state.replace(V=new_V)
    return state.replace(V=new_V, I=jnp.uint16((int(state.I) + count) & WORD_MASK))
