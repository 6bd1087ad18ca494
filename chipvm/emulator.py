"""Fetch-decode-execute engine.

The processor is a two-state machine:

=============  =================  ==========================================
state          key mask           cycle
=============  =================  ==========================================
RUNNING        any                fetch, decode, execute, apply PC effect;
                                  FX0A moves to AWAITING_KEY
AWAITING_KEY   zero               nothing
AWAITING_KEY   nonzero            lowest pressed key -> V[key_target];
                                  back to RUNNING, PC unchanged
=============  =================  ==========================================
"""

from typing import Callable, Optional, Union

from chipvm import isa
from chipvm import memory
from chipvm.constants import FLAG_REGISTER, OPCODE_SIZE
from chipvm.cycle import Fault, Jump, Skip
from chipvm.instructions import write_register
from chipvm.instructions.alu import execute_alu_operation
from chipvm.instructions.control_flow import (
    execute_call,
    execute_jump,
    execute_jump_with_offset,
    execute_skip_if_equal_immediate,
    execute_skip_if_equal_register,
    execute_skip_if_key,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_not_equal_register,
    execute_skip_if_not_key,
)
from chipvm.instructions.display import execute_display
from chipvm.instructions.memory import (
    execute_add,
    execute_copy,
    execute_random,
    execute_set,
    execute_set_index,
)
from chipvm.instructions.misc import (
    execute_add_to_index,
    execute_bcd_conversion,
    execute_font_character,
    execute_get_delay_timer,
    execute_load_registers,
    execute_set_delay_timer,
    execute_set_sound_timer,
    execute_store_registers,
    execute_wait_for_key,
)
from chipvm.instructions.system import (
    execute_clear_screen,
    execute_return,
    execute_sys_call,
    execute_unknown,
)
from chipvm.logging import ConsoleLogger
from chipvm.state import EmulatorState, ProcessorMode

HANDLERS = {
    isa.ClearScreen: execute_clear_screen,
    isa.Return: execute_return,
    isa.SysCall: execute_sys_call,
    isa.Jump: execute_jump,
    isa.Call: execute_call,
    isa.SkipIfEqualImmediate: execute_skip_if_equal_immediate,
    isa.SkipIfNotEqualImmediate: execute_skip_if_not_equal_immediate,
    isa.SkipIfEqualRegister: execute_skip_if_equal_register,
    isa.SkipIfNotEqualRegister: execute_skip_if_not_equal_register,
    isa.JumpWithOffset: execute_jump_with_offset,
    isa.SkipIfKey: execute_skip_if_key,
    isa.SkipIfNotKey: execute_skip_if_not_key,
    isa.SetImmediate: execute_set,
    isa.AddImmediate: execute_add,
    isa.SetIndex: execute_set_index,
    isa.Random: execute_random,
    isa.SetRegister: execute_copy,
    isa.Or: execute_alu_operation,
    isa.And: execute_alu_operation,
    isa.Xor: execute_alu_operation,
    isa.AddRegister: execute_alu_operation,
    isa.SubtractXY: execute_alu_operation,
    isa.ShiftRight: execute_alu_operation,
    isa.SubtractYX: execute_alu_operation,
    isa.ShiftLeft: execute_alu_operation,
    isa.Draw: execute_display,
    isa.WaitForKey: execute_wait_for_key,
    isa.GetDelayTimer: execute_get_delay_timer,
    isa.SetDelayTimer: execute_set_delay_timer,
    isa.SetSoundTimer: execute_set_sound_timer,
    isa.AddToIndex: execute_add_to_index,
    isa.FontCharacter: execute_font_character,
    isa.BcdConversion: execute_bcd_conversion,
    isa.StoreRegisters: execute_store_registers,
    isa.LoadRegisters: execute_load_registers,
    isa.Unknown: execute_unknown,
}


def _pack_u16(high: int, low: int) -> int:
    """Pack two bytes into a big-endian 16-bit word."""
    return (high << 8) | low


def fetch(state: EmulatorState) -> int:
    """Read the opcode at PC. PC itself moves only when the instruction completes."""
    pc = int(state.pc)
    return _pack_u16(memory.load(state.memory, pc), memory.load(state.memory, pc + 1))


def _set_pc(state: EmulatorState, address: int) -> EmulatorState:
    return state.replace(pc=address & 0xFFFF)


def execute(
    state: EmulatorState,
    instruction: Union[int, isa.Instruction],
    logger: Optional[ConsoleLogger] = None,
) -> EmulatorState:
    """Execute one instruction and apply its program counter effect.

    ``instruction`` may be a raw opcode or an already decoded variant.
    Faults are reported through ``logger`` and advance PC like :class:`Next`.
    """
    if not isinstance(instruction, isa.INSTRUCTION_TYPES):
        instruction = isa.decode(instruction)

    state, effect, flag = HANDLERS[type(instruction)](state, instruction)
    if flag is not None:
        state = write_register(state, FLAG_REGISTER, flag)

    pc = int(state.pc)
    if isinstance(effect, Jump):
        return _set_pc(state, effect.address)
    if isinstance(effect, Skip):
        return _set_pc(state, pc + 2 * OPCODE_SIZE)
    if isinstance(effect, Fault) and logger is not None:
        logger.error(f"{effect.message} at 0x{pc:04X}: {instruction}")
    return _set_pc(state, pc + OPCODE_SIZE)


def _lowest_key(key_mask: int) -> int:
    """Index of the lowest set bit."""
    return (key_mask & -key_mask).bit_length() - 1


Tracer = Callable[[EmulatorState, int, int, isa.Instruction], None]


def advance(
    state: EmulatorState,
    key_mask: int,
    logger: Optional[ConsoleLogger] = None,
    trace: Optional[Tracer] = None,
) -> EmulatorState:
    """Run one processor cycle with ``key_mask`` as the current keypad.

    ``trace`` is called as ``trace(state, address, opcode, instruction)``
    just before an instruction executes. Cycles spent waiting for a key
    execute nothing and are not traced.
    """
    key_mask = int(key_mask) & 0xFFFF
    state = state.replace(keypad=key_mask)

    if state.awaiting_key:
        if key_mask == 0:
            return state
        state = write_register(state, int(state.key_target), _lowest_key(key_mask))
        return state.replace(mode=int(ProcessorMode.RUNNING))

    opcode = fetch(state)
    instruction = isa.decode(opcode)
    if trace is not None:
        trace(state, int(state.pc), opcode, instruction)
    return execute(state, instruction, logger)


def load_rom(
    state: EmulatorState,
    rom: bytes,
    rom_size: Optional[int] = None,
    logger: Optional[ConsoleLogger] = None,
) -> EmulatorState:
    """Load ROM bytes at the program start."""
    if rom_size is None:
        rom_size = len(rom)
    return state.replace(memory=memory.reset(state.memory, rom, rom_size, logger))


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one, stopping at zero."""
    return state.replace(
        delay_timer=max(int(state.delay_timer) - 1, 0),
        sound_timer=max(int(state.sound_timer) - 1, 0),
    )
