"""Exceptions raised by the octick core."""

from typing import Optional


class Chip8Error(Exception):
    """Base exception for all machine errors."""

    def __init__(self, message: str, addr: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.addr = addr


class UnsupportedOpcode(Chip8Error):
    """Instruction word matches no known bit pattern."""

    def __init__(self, word: int, addr: Optional[int] = None):
        super().__init__(f"Unsupported opcode: {word:04X}", addr)
        self.word = word


class CallStackOverflow(Chip8Error):
    """CALL with every stack frame in use."""


class EmptyStackReturn(Chip8Error):
    """RET with no frame to return to."""


class OutOfRangeAccess(Chip8Error):
    """Memory access past the end of the address space."""

    def __init__(self, address: int, length: int = 1, addr: Optional[int] = None):
        super().__init__(
            f"Memory access out of range: {length} byte(s) at {address:#06x}", addr
        )
        self.address = address
        self.length = length


class RomError(Chip8Error):
    """ROM image could not be read or does not fit in memory."""
