"""ROM image loading."""

import os

from octick.constants import MAX_PROGRAM_SIZE
from octick.errors import RomError


def read_rom(filename: str) -> bytes:
    """Read a ROM image, checking that it fits above 0x200."""
    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as err:
        raise RomError(f"Could not read ROM {filename!r}: {err.strerror or err}") from err

    if len(rom_data) > MAX_PROGRAM_SIZE:
        raise RomError(
            f"ROM {os.path.basename(filename)!r} is {len(rom_data)} bytes, "
            f"at most {MAX_PROGRAM_SIZE} fit in memory"
        )
    return rom_data
