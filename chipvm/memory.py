"""Addressable memory.

Memory map::

    0xFFF +----------------+ end of RAM
          |                |
          | program / data |
          |                |
    0x200 +----------------+ program start
          | reserved       |
    0x050 +----------------+
          | font glyphs    |
    0x000 +----------------+

``store`` is unchecked and ``load`` wraps past the end: operand widths keep
addresses in range for well-formed programs.
"""

from typing import Optional

import jax.numpy as jnp
import numpy as np
from flax.struct import PyTreeNode, field

from chipvm.constants import (
    FONT_DATA,
    FONT_START,
    MAX_ROM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
)
from chipvm.logging import ConsoleLogger


class Memory(PyTreeNode):
    """Flat byte store plus the size of the loaded ROM."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    rom_size: int = field(pytree_node=False, default=0)


def create_memory() -> Memory:
    """Create zeroed memory with the font glyphs loaded."""
    memory = Memory()
    return memory.replace(data=memory.data.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def load(memory: Memory, address: int) -> int:
    """Read one byte. Addresses past the end wrap to the start."""
    return int(np.asarray(memory.data)[address % MEMORY_SIZE])


def store(memory: Memory, address: int, value: int) -> Memory:
    """Write one byte."""
    return memory.replace(data=memory.data.at[address].set(value & 0xFF))


def reset(
    memory: Memory,
    rom: bytes,
    rom_size: int,
    logger: Optional[ConsoleLogger] = None,
) -> Memory:
    """Copy ROM bytes into the program region.

    The program region is zeroed first, so bytes past ``rom_size`` read as 0.
    A ROM larger than the program region is reported and truncated.
    """
    if rom_size > MAX_ROM_SIZE and logger is not None:
        logger.error(f"ROM size {rom_size} exceeds memory capacity of {MAX_ROM_SIZE} bytes, truncating")

    count = min(rom_size, len(rom), MAX_ROM_SIZE)
    rom_array = jnp.asarray(np.frombuffer(bytes(rom[:count]), dtype=np.uint8))

    data = memory.data.at[PROGRAM_START:].set(0)
    data = data.at[PROGRAM_START:PROGRAM_START + count].set(rom_array)
    return memory.replace(data=data, rom_size=count)
