"""CHIP-8 instruction decoding."""

import enum

from chex import dataclass

from octick.errors import UnsupportedOpcode


class Opcode(enum.Enum):
    """Every instruction kind, with its mnemonic template and operand fields."""

    def __init__(self, template: str, operands: tuple[str, ...]):
        self.template = template
        self.operands = operands

    CLS = ("CLS", ())
    RET = ("RET", ())
    SYS = ("SYS {nnn:03X}", ("nnn",))
    JP = ("JP {nnn:03X}", ("nnn",))
    CALL = ("CALL {nnn:03X}", ("nnn",))
    SE_BYTE = ("SE V{x:X}, {nn:02X}", ("x", "nn"))
    SNE_BYTE = ("SNE V{x:X}, {nn:02X}", ("x", "nn"))
    SE_REG = ("SE V{x:X}, V{y:X}", ("x", "y"))
    LD_BYTE = ("LD V{x:X}, {nn:02X}", ("x", "nn"))
    ADD_BYTE = ("ADD V{x:X}, {nn:02X}", ("x", "nn"))
    LD_REG = ("LD V{x:X}, V{y:X}", ("x", "y"))
    OR = ("OR V{x:X}, V{y:X}", ("x", "y"))
    AND = ("AND V{x:X}, V{y:X}", ("x", "y"))
    XOR = ("XOR V{x:X}, V{y:X}", ("x", "y"))
    ADD_REG = ("ADD V{x:X}, V{y:X}", ("x", "y"))
    SUB = ("SUB V{x:X}, V{y:X}", ("x", "y"))
    SHR = ("SHR V{x:X}, V{y:X}", ("x", "y"))
    SUBN = ("SUBN V{x:X}, V{y:X}", ("x", "y"))
    SHL = ("SHL V{x:X}, V{y:X}", ("x", "y"))
    SNE_REG = ("SNE V{x:X}, V{y:X}", ("x", "y"))
    LD_I = ("LD I, {nnn:03X}", ("nnn",))
    JP_V0 = ("JP V0, {nnn:03X}", ("nnn",))
    RND = ("RND V{x:X}, {nn:02X}", ("x", "nn"))
    DRW = ("DRW V{x:X}, V{y:X}, {n:X}", ("x", "y", "n"))
    SKP = ("SKP V{x:X}", ("x",))
    SKNP = ("SKNP V{x:X}", ("x",))
    LD_VX_DT = ("LD V{x:X}, DT", ("x",))
    LD_VX_K = ("LD V{x:X}, K", ("x",))
    LD_DT_VX = ("LD DT, V{x:X}", ("x",))
    LD_ST_VX = ("LD ST, V{x:X}", ("x",))
    ADD_I_VX = ("ADD I, V{x:X}", ("x",))
    LD_F_VX = ("LD F, V{x:X}", ("x",))
    LD_B_VX = ("LD B, V{x:X}", ("x",))
    LD_MEM_VX = ("LD [I], V{x:X}", ("x",))
    LD_VX_MEM = ("LD V{x:X}, [I]", ("x",))


# Families selected by the top nibble alone
_FAMILY = {
    0x1: Opcode.JP,
    0x2: Opcode.CALL,
    0x3: Opcode.SE_BYTE,
    0x4: Opcode.SNE_BYTE,
    0x6: Opcode.LD_BYTE,
    0x7: Opcode.ADD_BYTE,
    0x9: Opcode.SNE_REG,
    0xA: Opcode.LD_I,
    0xB: Opcode.JP_V0,
    0xC: Opcode.RND,
    0xD: Opcode.DRW,
}

# 8XYN, keyed on N
_ALU = {
    0x0: Opcode.LD_REG,
    0x1: Opcode.OR,
    0x2: Opcode.AND,
    0x3: Opcode.XOR,
    0x4: Opcode.ADD_REG,
    0x5: Opcode.SUB,
    0x6: Opcode.SHR,
    0x7: Opcode.SUBN,
    0xE: Opcode.SHL,
}

# EXNN, keyed on NN
_KEY = {
    0x9E: Opcode.SKP,
    0xA1: Opcode.SKNP,
}

# FXNN, keyed on NN
_MISC = {
    0x07: Opcode.LD_VX_DT,
    0x0A: Opcode.LD_VX_K,
    0x15: Opcode.LD_DT_VX,
    0x18: Opcode.LD_ST_VX,
    0x1E: Opcode.ADD_I_VX,
    0x29: Opcode.LD_F_VX,
    0x33: Opcode.LD_B_VX,
    0x55: Opcode.LD_MEM_VX,
    0x65: Opcode.LD_VX_MEM,
}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction.

    Only the operands listed by ``op.operands`` are populated, the rest are 0.
    """
    op: Opcode
    raw: int
    x: int = 0      # Second nibble (VX register)
    y: int = 0      # Third nibble (VY register)
    n: int = 0      # Fourth nibble (4-bit immediate)
    nn: int = 0     # Last byte (8-bit immediate)
    nnn: int = 0    # Last 12 bits (12-bit address)

    @property
    def blocks(self) -> bool:
        """Whether completion depends on input observed over later steps."""
        return self.op is Opcode.LD_VX_K

    @property
    def draws(self) -> bool:
        """Whether execution changes the framebuffer."""
        return self.op in (Opcode.DRW, Opcode.CLS)

    def __str__(self) -> str:
        return self.op.template.format(x=self.x, y=self.y, n=self.n, nn=self.nn, nnn=self.nnn)


def _select(word: int) -> Opcode:
    family = word >> 12
    x = (word & 0x0F00) >> 8
    n = word & 0x000F
    nn = word & 0x00FF

    if family == 0x0:
        if word == 0x00E0:
            return Opcode.CLS
        if word == 0x00EE:
            return Opcode.RET
        if x != 0:
            return Opcode.SYS
        raise UnsupportedOpcode(word)
    if family == 0x5:
        if n == 0:
            return Opcode.SE_REG
        raise UnsupportedOpcode(word)

    table, key = {
        0x8: (_ALU, n),
        0xE: (_KEY, nn),
        0xF: (_MISC, nn),
    }.get(family, (_FAMILY, family))
    if key not in table:
        raise UnsupportedOpcode(word)
    return table[key]


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction word, raising UnsupportedOpcode if no pattern matches."""
    instruction = int(instruction)
    if not 0 <= instruction <= 0xFFFF:
        raise ValueError(f"Instruction word must fit in 16 bits, got {instruction:#x}")
    op = _select(instruction)
    fields = {
        "x": (instruction & 0x0F00) >> 8,
        "y": (instruction & 0x00F0) >> 4,
        "n": instruction & 0x000F,
        "nn": instruction & 0x00FF,
        "nnn": instruction & 0x0FFF,
    }
    return DecodedInstruction(
        op=op,
        raw=instruction,
        **{name: fields[name] for name in op.operands},
    )
