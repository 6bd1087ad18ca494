"""Static disassembly and processor status dumps.

:meth:`Disassembler.reset` walks the ROM from the program start and
follows jumps, calls and skips to find which addresses hold code.
Everything it does not reach is shown as data. The text it builds is
only meant for DEBUG logging.
"""

from collections import deque
from typing import Optional

import numpy as np

from chipvm import isa
from chipvm.constants import (
    KEY_COUNT,
    OPCODE_SIZE,
    PROGRAM_START,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    SEGMENTS_AFTER_PROGRAM_COUNTER,
    STACK_SIZE,
    V_REGISTERS_SIZE,
)
from chipvm.logging import ConsoleLogger
from chipvm.state import EmulatorState

SECTION_WIDTH = 66

_SKIPS = (
    isa.SkipIfEqualImmediate,
    isa.SkipIfNotEqualImmediate,
    isa.SkipIfEqualRegister,
    isa.SkipIfNotEqualRegister,
    isa.SkipIfKey,
    isa.SkipIfNotKey,
)


def _section(title: str, body: str) -> str:
    header = f"- {title} ".ljust(SECTION_WIDTH, "-")
    return f"\n{header}\n{body}\n{'-' * SECTION_WIDTH}"


def _highlight(line: str, symbol: str) -> str:
    """Overwrite the end of a table row with ``symbol``."""
    end = line.rfind("|")
    return f"{line[:end - len(symbol) - 1]}{symbol} |{line[end + 1:]}"


def format_byte(address: int, byte: int) -> str:
    return f"| AD: 0x{address:04X}    | BYTE: 0x{byte:02X}    | BINARY: {byte:#010b}             |"


def format_opcode(address: int, opcode: int) -> str:
    decoded = str(isa.decode(opcode))
    return f"| AD: 0x{address:04X}    | OPCODE: {opcode:04X}  | DECODED: {decoded:20}  |"


def format_execute(address: int, opcode: int, instruction) -> str:
    """The executing opcode, marked as the program counter."""
    line = f"| AD: 0x{address:04X}    | OPCODE: {opcode:04X}  | DECODED: {str(instruction):20}  |"
    return _highlight(line, "* PC")


def format_screen(pixels) -> str:
    rows = np.asarray(pixels, dtype=np.bool_).reshape(SCREEN_HEIGHT, SCREEN_WIDTH)
    return "\n".join("|" + "".join("X" if cell else " " for cell in row) + "|" for row in rows)


def format_registers(registers) -> str:
    cells = [f"| V{i:X}: {int(registers[i]):02X}        " for i in range(V_REGISTERS_SIZE)]
    return "\n".join("".join(cells[i:i + 4]) + "|" for i in range(0, V_REGISTERS_SIZE, 4))


def format_keypad(key_mask: int) -> str:
    cells = [f"| K{i:X}: {(int(key_mask) >> i) & 1:X}         " for i in range(KEY_COUNT)]
    return "\n".join("".join(cells[i:i + 4]) + "|" for i in range(0, KEY_COUNT, 4))


def format_stack(entries) -> str:
    cells = [f"| SP{i:02}: 0x{int(entries[i]):04X}  " for i in range(STACK_SIZE)]
    return "\n".join("".join(cells[i:i + 4]) + "|" for i in range(0, STACK_SIZE, 4))


def format_processor(state: EmulatorState) -> str:
    return (
        f"| PC: 0x{int(state.pc):04X}    | I: 0x{int(state.I):04X}     "
        f"| SP: {state.stack.pointer:02}   | DT: {int(state.delay_timer):02}   "
        f"| ST: {int(state.sound_timer):02}   |"
    )


class Disassembler:
    """Reachable-code map of a ROM, with text renderers for logging."""

    def __init__(self, logger: Optional[ConsoleLogger] = None):
        self.logger = logger
        self.rom = b""
        self.rom_size = 0
        self.opcode_addresses = set()
        self.labels = set()

    def _in_rom(self, address: int) -> bool:
        return PROGRAM_START <= address < PROGRAM_START + self.rom_size

    def _opcode_at(self, address: int) -> int:
        offset = address - PROGRAM_START
        high = self.rom[offset] if offset < self.rom_size else 0
        low = self.rom[offset + 1] if offset + 1 < self.rom_size else 0
        return (high << 8) | low

    def reset(self, rom: bytes, rom_size: Optional[int] = None):
        """Forget the previous ROM and map the reachable code of ``rom``."""
        self.rom = bytes(rom)
        self.rom_size = len(self.rom) if rom_size is None else min(rom_size, len(self.rom))
        self.opcode_addresses = set()
        self.labels = set()

        segments = deque([PROGRAM_START])
        while segments:
            address = segments.popleft()
            while self._in_rom(address) and address not in self.opcode_addresses:
                self.opcode_addresses.add(address)
                instruction = isa.decode(self._opcode_at(address))

                if isinstance(instruction, isa.Return):
                    break
                if isinstance(instruction, isa.Jump):
                    self.labels.add(instruction.address)
                    address = instruction.address
                    continue
                if isinstance(instruction, isa.Call):
                    self.labels.add(instruction.address)
                    segments.append(address + OPCODE_SIZE)
                    address = instruction.address
                    continue
                if isinstance(instruction, isa.SetIndex):
                    self.labels.add(instruction.address)
                elif isinstance(instruction, _SKIPS):
                    segments.append(address + 2 * OPCODE_SIZE)
                elif isinstance(instruction, isa.JumpWithOffset) and self.logger is not None:
                    self.logger.error(
                        f"Cannot follow {instruction} at 0x{address:04X}: target depends on V0"
                    )
                address += OPCODE_SIZE

    def _segments(self, start: int = PROGRAM_START, limit: Optional[int] = None):
        """Yield ``(address, line)`` pairs, one per opcode or data byte."""
        address = start
        count = 0
        while self._in_rom(address) and (limit is None or count < limit):
            if address in self.opcode_addresses:
                line = format_opcode(address, self._opcode_at(address))
                step = OPCODE_SIZE
            else:
                line = format_byte(address, self.rom[address - PROGRAM_START])
                step = 1
            if address in self.labels:
                line = _highlight(line, f"* LB-{address:04X}")
            yield address, line
            address += step
            count += 1

    def format_raw_rom(self) -> str:
        body = "\n".join(
            format_byte(PROGRAM_START + offset, byte)
            for offset, byte in enumerate(self.rom[:self.rom_size])
        )
        return _section("raw rom", body)

    def format_disassembly(self) -> str:
        return _section("disassembled rom", "\n".join(line for _, line in self._segments()))

    def format_program_counter(self, pc: int, count: int = SEGMENTS_AFTER_PROGRAM_COUNTER) -> str:
        """The ``count`` segments starting at ``pc``, with PC marked."""
        lines = []
        for address, line in self._segments(pc, count):
            if address == pc:
                line = _highlight(line, "* PC")
            lines.append(line)
        return "\n".join(lines)

    def format_status(self, state: EmulatorState, address: int, opcode: int, instruction) -> str:
        """State just before the instruction at ``address`` executes."""
        return "".join([
            _section("screen", format_screen(state.screen.pixels)),
            _section("program counter", self.format_program_counter(address)),
            _section("registers", format_registers(state.V)),
            _section("keypad", format_keypad(state.keypad)),
            _section("stack", format_stack(state.stack.data)),
            _section("processor", format_processor(state)),
            _section("processor execute", format_execute(address, opcode, instruction)),
        ])

    def dump_rom(self):
        """Log the raw ROM and its disassembly at DEBUG level."""
        if self.logger is None or not self.logger.is_enabled_for("DEBUG"):
            return
        self.logger.debug(self.format_raw_rom())
        self.logger.debug(self.format_disassembly())

    def dump_status(self, state: EmulatorState, address: int, opcode: int, instruction):
        """Log the status for one executed instruction at DEBUG level.

        Matches :data:`chipvm.emulator.Tracer`, so it can be handed to
        :func:`chipvm.emulator.advance` as ``trace``.
        """
        if self.logger is None or not self.logger.is_enabled_for("DEBUG"):
            return
        self.logger.debug(self.format_status(state, address, opcode, instruction))
