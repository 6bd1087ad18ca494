"""Virtual machine architecture constants."""

import jax.numpy as jnp

# Memory map
MEMORY_SIZE = 4096
RESERVED_MEMORY_SIZE = 512
PROGRAM_START = RESERVED_MEMORY_SIZE
MAX_ROM_SIZE = MEMORY_SIZE - RESERVED_MEMORY_SIZE
ADDRESS_MASK = 0xFFF

# Registers and stack
V_REGISTERS_SIZE = 16
FLAG_REGISTER = 0xF
STACK_SIZE = 16
OPCODE_SIZE = 2

# Keypad
KEY_COUNT = 16

# Display
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
SCREEN_SIZE = SCREEN_WIDTH * SCREEN_HEIGHT
SPRITE_WIDTH = 8

# Frame cadence: 60 frames of 15 cycles is 900 instructions per second
FRAME_FREQUENCY = 60.0
FRAME_SIZE = 15

# FX1E sets VF once I passes this address
INDEX_OVERFLOW_THRESHOLD = 0x0F00

# Rendering defaults
SCALE_FACTOR = 20
FOREGROUND_COLOR = (65, 236, 157)
BACKGROUND_COLOR = (15, 15, 15)

# Number of segments shown after PC in trace dumps
SEGMENTS_AFTER_PROGRAM_COUNTER = 10

FONT_START = 0x000
FONT_GLYPH_SIZE = 5
FONT_DATA = jnp.array([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
], dtype=jnp.uint8)
