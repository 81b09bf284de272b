"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from octick.state import MachineState
from octick.decode import DecodedInstruction
from octick.display import clear_display
from octick.stack import pop


def no_op(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """0NNN - Machine code routine, ignored."""
    return state


def execute_clear_screen(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00E0 - Clear display."""
    return state.replace(display=clear_display(state.display))


def execute_return(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=jnp.uint16(address))
