"""CHIP-8 ALU operations (8xxx)."""

from typing import Optional

from octick.constants import FLAG_REGISTER
from octick.state import MachineState
from octick.decode import DecodedInstruction, Opcode


def alu_set(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    return result & 0xFF, int(result > 0xFF)


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, flag set when no borrow."""
    return (vx - vy) & 0xFF, int(vx >= vy)


def alu_shift_right(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right: VX >>= 1."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, flag set when no borrow."""
    return (vy - vx) & 0xFF, int(vy >= vx)


def alu_shift_left(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XYE - Shift left: VX <<= 1."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


_OPERATIONS = {
    Opcode.LD_REG: alu_set,
    Opcode.OR: alu_or,
    Opcode.AND: alu_and,
    Opcode.XOR: alu_xor,
    Opcode.ADD_REG: alu_add,
    Opcode.SUB: alu_sub_xy,
    Opcode.SHR: alu_shift_right,
    Opcode.SUBN: alu_sub_yx,
    Opcode.SHL: alu_shift_left,
}


def execute_alu_operation(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """8XYN - ALU operations dispatcher."""
    vx = int(state.V[instruction.x])
    vy = int(state.V[instruction.y])

    # Legacy interpreters shift VY into VX
    if instruction.op in (Opcode.SHR, Opcode.SHL) and not state.modern_mode:
        vx = vy

    result, flag = _OPERATIONS[instruction.op](vx, vy)

    new_V = state.V.at[instruction.x].set(result)
    if flag is not None:
        new_V = new_V.at[FLAG_REGISTER].set(flag)
    return state.replace(V=new_V)
