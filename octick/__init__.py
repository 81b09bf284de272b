"""Stepped CHIP-8 virtual machine."""

from octick.state import MachineState, create_state, load_program, set_key
from octick.emulator import execute, load_rom, fetch
from octick.decode import DecodedInstruction, Opcode, decode
from octick.display import draw_sprite
from octick.timers import TimerSubsystem
from octick.config import ErrorPolicy, SystemConfig
from octick.events import StepEvent, StepStatus
from octick.system import System
from octick.errors import (
    Chip8Error, UnsupportedOpcode, CallStackOverflow, EmptyStackReturn,
    OutOfRangeAccess, RomError,
)
from octick.constants import *
from octick.rendering import display_to_rgb, display_to_text, create_color_scheme

__all__ = [
    "MachineState",
    "create_state",
    "load_program",
    "set_key",
    "fetch",
    "execute",
    "load_rom",
    "DecodedInstruction",
    "Opcode",
    "decode",
    "draw_sprite",
    "TimerSubsystem",
    "ErrorPolicy",
    "SystemConfig",
    "System",
    "StepEvent",
    "StepStatus",
    "Chip8Error",
    "UnsupportedOpcode",
    "CallStackOverflow",
    "EmptyStackReturn",
    "OutOfRangeAccess",
    "RomError",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "display_to_rgb",
    "display_to_text",
    "create_color_scheme",
]
