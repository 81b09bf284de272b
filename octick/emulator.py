"""Main CHIP-8 execution engine."""

from typing import Union

import jax.numpy as jnp
from octick.constants import MEMORY_SIZE, WORD_MASK
from octick.state import MachineState, load_program
from octick.decode import DecodedInstruction, Opcode, decode
from octick.errors import OutOfRangeAccess
from octick.rom import read_rom
from octick.instructions.system import no_op, execute_clear_screen, execute_return
from octick.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key,
)
from octick.instructions.alu import execute_alu_operation
from octick.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from octick.instructions.display import execute_display
from octick.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers,
)

HANDLERS = {
    Opcode.CLS: execute_clear_screen,
    Opcode.RET: execute_return,
    Opcode.SYS: no_op,
    Opcode.JP: execute_jump,
    Opcode.CALL: execute_call,
    Opcode.SE_BYTE: execute_skip_if_equal_immediate,
    Opcode.SNE_BYTE: execute_skip_if_not_equal_immediate,
    Opcode.SE_REG: execute_skip_if_equal_register,
    Opcode.LD_BYTE: execute_set,
    Opcode.ADD_BYTE: execute_add,
    Opcode.LD_REG: execute_alu_operation,
    Opcode.OR: execute_alu_operation,
    Opcode.AND: execute_alu_operation,
    Opcode.XOR: execute_alu_operation,
    Opcode.ADD_REG: execute_alu_operation,
    Opcode.SUB: execute_alu_operation,
    Opcode.SHR: execute_alu_operation,
    Opcode.SUBN: execute_alu_operation,
    Opcode.SHL: execute_alu_operation,
    Opcode.SNE_REG: execute_skip_if_not_equal_register,
    Opcode.LD_I: execute_set_index,
    Opcode.JP_V0: execute_jump_with_offset,
    Opcode.RND: execute_random,
    Opcode.DRW: execute_display,
    Opcode.SKP: execute_skip_if_key,
    Opcode.SKNP: execute_skip_if_not_key,
    Opcode.LD_VX_DT: execute_get_delay_timer,
    Opcode.LD_VX_K: execute_wait_for_key,
    Opcode.LD_DT_VX: execute_set_delay_timer,
    Opcode.LD_ST_VX: execute_set_sound_timer,
    Opcode.ADD_I_VX: execute_add_to_index,
    Opcode.LD_F_VX: execute_font_character,
    Opcode.LD_B_VX: execute_bcd_conversion,
    Opcode.LD_MEM_VX: execute_store_registers,
    Opcode.LD_VX_MEM: execute_load_registers,
}

_missing = set(Opcode) - set(HANDLERS)
if _missing:
    raise RuntimeError(f"No handler for opcodes: {sorted(op.name for op in _missing)}")


def execute(state: MachineState, instruction: Union[int, DecodedInstruction]) -> MachineState:
    """Execute single CHIP-8 instruction.

    `state.pc` must already point past the instruction, as left by `fetch`.
    """
    if not isinstance(instruction, DecodedInstruction):
        instruction = decode(instruction)
    return HANDLERS[instruction.op](state, instruction)


def _pack_u16(high: int, low: int) -> int:
    """Pack two bytes into a big-endian word."""
    return (int(high) << 8) | int(low)


def fetch(state: MachineState) -> tuple[MachineState, int]:
    """Fetch next instruction from memory."""
    pc = int(state.pc)
    if pc + 1 >= MEMORY_SIZE:
        raise OutOfRangeAccess(pc, 2, addr=pc)
    instruction = _pack_u16(state.memory[pc], state.memory[pc + 1])
    return state.replace(pc=jnp.uint16((pc + 2) & WORD_MASK)), instruction


def load_rom(state: MachineState, filename: str) -> MachineState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    return load_program(state, read_rom(filename))
