"""Miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp

from chipvm.constants import FONT_GLYPH_SIZE, FONT_START, INDEX_OVERFLOW_THRESHOLD
from chipvm.cycle import NEXT
from chipvm.isa import (
    AddToIndex,
    BcdConversion,
    FontCharacter,
    GetDelayTimer,
    LoadRegisters,
    SetDelayTimer,
    SetSoundTimer,
    StoreRegisters,
    WaitForKey,
)
from chipvm.instructions import Outcome, read_register, write_index, write_register
from chipvm.state import EmulatorState, ProcessorMode


def execute_get_delay_timer(state: EmulatorState, instruction: GetDelayTimer) -> Outcome:
    """FX07 - Set VX to delay timer value."""
    return write_register(state, instruction.x, int(state.delay_timer)), NEXT, None


def execute_set_delay_timer(state: EmulatorState, instruction: SetDelayTimer) -> Outcome:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=read_register(state, instruction.x)), NEXT, None


def execute_set_sound_timer(state: EmulatorState, instruction: SetSoundTimer) -> Outcome:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=read_register(state, instruction.x)), NEXT, None


def execute_add_to_index(state: EmulatorState, instruction: AddToIndex) -> Outcome:
    """FX1E - Add VX to I register.

    VF reports I passing 0x0F00, not the end of the 12-bit address space.
    """
    new_i = int(state.I) + read_register(state, instruction.x)
    return write_index(state, new_i), NEXT, int(new_i > INDEX_OVERFLOW_THRESHOLD)


def execute_wait_for_key(state: EmulatorState, instruction: WaitForKey) -> Outcome:
    """FX0A - Wait for key press.

    Only arms the wait; :func:`chipvm.emulator.advance` stores the key.
    """
    return state.replace(
        mode=int(ProcessorMode.AWAITING_KEY),
        key_target=instruction.x,
    ), NEXT, None


def execute_font_character(state: EmulatorState, instruction: FontCharacter) -> Outcome:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + read_register(state, instruction.x) * FONT_GLYPH_SIZE
    return write_index(state, font_address), NEXT, None


def execute_bcd_conversion(state: EmulatorState, instruction: BcdConversion) -> Outcome:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = read_register(state, instruction.x)
    digits = jnp.array([value // 100, (value % 100) // 10, value % 10], dtype=jnp.uint8)

    indices = int(state.I) + jnp.arange(3)
    data = state.memory.data.at[indices].set(digits)
    return state.replace(memory=state.memory.replace(data=data)), NEXT, None


def execute_store_registers(state: EmulatorState, instruction: StoreRegisters) -> Outcome:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = instruction.x + 1
    indices = int(state.I) + jnp.arange(count)
    data = state.memory.data.at[indices].set(state.V[:count])
    return state.replace(memory=state.memory.replace(data=data)), NEXT, None


def execute_load_registers(state: EmulatorState, instruction: LoadRegisters) -> Outcome:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    values = state.memory.data[int(state.I) + jnp.arange(count)]
    return state.replace(V=state.V.at[:count].set(values)), NEXT, None
