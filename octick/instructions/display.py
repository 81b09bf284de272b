"""CHIP-8 display operations."""

from octick.constants import FLAG_REGISTER
from octick.state import MachineState, read_block
from octick.decode import DecodedInstruction
from octick.display import draw_sprite


def execute_display(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """DXYN - Draw N-row sprite from memory at I onto (VX, VY), VF = collision."""
    sprite = read_block(state, state.I, instruction.n)
    display, collision = draw_sprite(
        state.display, int(state.V[instruction.x]), int(state.V[instruction.y]), sprite
    )
    return state.replace(
        display=display,
        V=state.V.at[FLAG_REGISTER].set(int(collision)),
    )
