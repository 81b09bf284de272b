"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from octick.constants import ADDRESS_MASK, WORD_MASK
from octick.state import MachineState
from octick.decode import DecodedInstruction
from octick.stack import push


def _skip(state: MachineState) -> MachineState:
    return state.replace(pc=jnp.uint16((int(state.pc) + 2) & WORD_MASK))


def execute_jump(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """1NNN - Jump to address NNN.

    A jump onto itself can never make progress and halts the machine.
    """
    # pc already points past the jump
    current = (int(state.pc) - 2) & WORD_MASK
    return state.replace(
        pc=jnp.uint16(instruction.nnn),
        halted=state.halted or instruction.nnn == current,
    )


def execute_call(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, int(state.pc)))
    return state.replace(pc=jnp.uint16(instruction.nnn))


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: MachineState, instruction: DecodedInstruction) -> MachineState:
        if condition_fn(state, instruction):
            return _skip(state)
        return state
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)

execute_skip_if_key = make_skip_instruction(
    lambda state, inst: bool(state.keypad[int(state.V[inst.x]) & 0xF])
)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: not bool(state.keypad[int(state.V[inst.x]) & 0xF])
)


def execute_jump_with_offset(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = (instruction.nnn + int(state.V[0])) & ADDRESS_MASK
    return state.replace(pc=jnp.uint16(jump_address))
