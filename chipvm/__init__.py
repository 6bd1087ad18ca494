"""CHIP-8 virtual machine."""

from chipvm.state import EmulatorState, ProcessorMode, create_state
from chipvm.emulator import advance, execute, fetch, load_rom, tick_timers
from chipvm.isa import INSTRUCTION_TYPES, Instruction, decode
from chipvm.constants import *
from chipvm.rendering import display_to_rgb, create_color_scheme

__all__ = [
    "EmulatorState",
    "ProcessorMode",
    "create_state",
    "fetch",
    "execute",
    "advance",
    "load_rom",
    "tick_timers",
    "INSTRUCTION_TYPES",
    "Instruction",
    "decode",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "display_to_rgb",
    "create_color_scheme",
]
