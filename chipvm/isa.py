"""Instruction decoding.

Every 16-bit opcode decodes to exactly one variant from a closed set of
frozen dataclasses. Each variant carries only the operand fields it needs:

* ``x``, ``y`` - register indices (second and third nibble)
* ``value``    - 8-bit immediate (last byte)
* ``address``  - 12-bit address (last three nibbles)
* ``height``   - sprite height (last nibble)

Opcodes with no documented form decode to :class:`Unknown`, which keeps the
raw opcode for diagnostics. ``str()`` of any variant gives its mnemonic.
"""

from typing import Union

from chex import dataclass

INSTRUCTION_TYPES = []


def _variant(mnemonic: str):
    """Register a variant and give it a mnemonic ``__str__``."""
    def register(cls):
        def __str__(self) -> str:
            return mnemonic.format(**{name: getattr(self, name) for name in self.__dataclass_fields__})

        cls.mnemonic = mnemonic
        cls.__str__ = __str__
        INSTRUCTION_TYPES.append(cls)
        return cls
    return register


# System (0xxx)

@_variant("CLS")
@dataclass(frozen=True, mappable_dataclass=False)
class ClearScreen:
    """00E0 - Clear the display."""


@_variant("RET")
@dataclass(frozen=True, mappable_dataclass=False)
class Return:
    """00EE - Return from subroutine."""


@_variant("SYS 0x{address:04X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SysCall:
    """0NNN - Call machine code routine at NNN (not supported)."""
    address: int


# Control flow

@_variant("JP 0x{address:04X}")
@dataclass(frozen=True, mappable_dataclass=False)
class Jump:
    """1NNN - Jump to NNN."""
    address: int


@_variant("CALL 0x{address:04X}")
@dataclass(frozen=True, mappable_dataclass=False)
class Call:
    """2NNN - Call subroutine at NNN."""
    address: int


@_variant("SE V{x:X}, 0x{value:02X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SkipIfEqualImmediate:
    """3XNN - Skip next instruction if VX == NN."""
    x: int
    value: int


@_variant("SNE V{x:X}, 0x{value:02X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SkipIfNotEqualImmediate:
    """4XNN - Skip next instruction if VX != NN."""
    x: int
    value: int


@_variant("SE V{x:X}, V{y:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SkipIfEqualRegister:
    """5XY0 - Skip next instruction if VX == VY."""
    x: int
    y: int


@_variant("SNE V{x:X}, V{y:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SkipIfNotEqualRegister:
    """9XY0 - Skip next instruction if VX != VY."""
    x: int
    y: int


@_variant("JP V0, 0x{address:04X}")
@dataclass(frozen=True, mappable_dataclass=False)
class JumpWithOffset:
    """BNNN - Jump to NNN + V0."""
    address: int


@_variant("SKP V{x:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SkipIfKey:
    """EX9E - Skip next instruction if key VX is pressed."""
    x: int


@_variant("SKNP V{x:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SkipIfNotKey:
    """EXA1 - Skip next instruction if key VX is not pressed."""
    x: int


# Registers and index

@_variant("LD V{x:X}, 0x{value:02X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SetImmediate:
    """6XNN - VX = NN."""
    x: int
    value: int


@_variant("ADD V{x:X}, 0x{value:02X}")
@dataclass(frozen=True, mappable_dataclass=False)
class AddImmediate:
    """7XNN - VX += NN, no carry."""
    x: int
    value: int


@_variant("LD I, 0x{address:04X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SetIndex:
    """ANNN - I = NNN."""
    address: int


@_variant("RND V{x:X}, 0x{value:02X}")
@dataclass(frozen=True, mappable_dataclass=False)
class Random:
    """CXNN - VX = random byte & NN."""
    x: int
    value: int


# ALU (8XYN)

@_variant("LD V{x:X}, V{y:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SetRegister:
    """8XY0 - VX = VY."""
    x: int
    y: int


@_variant("OR V{x:X}, V{y:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class Or:
    """8XY1 - VX |= VY."""
    x: int
    y: int


@_variant("AND V{x:X}, V{y:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class And:
    """8XY2 - VX &= VY."""
    x: int
    y: int


@_variant("XOR V{x:X}, V{y:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class Xor:
    """8XY3 - VX ^= VY."""
    x: int
    y: int


@_variant("ADD V{x:X}, V{y:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class AddRegister:
    """8XY4 - VX += VY, VF = carry."""
    x: int
    y: int


@_variant("SUB V{x:X}, V{y:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SubtractXY:
    """8XY5 - VX -= VY, VF = not borrow."""
    x: int
    y: int


@_variant("SHR V{x:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class ShiftRight:
    """8XY6 - VF = LSB(VX), VX >>= 1."""
    x: int


@_variant("SUBN V{x:X}, V{y:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SubtractYX:
    """8XY7 - VX = VY - VX, VF = not borrow."""
    x: int
    y: int


@_variant("SHL V{x:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class ShiftLeft:
    """8XYE - VF = MSB(VX), VX <<= 1."""
    x: int


# Display

@_variant("DRW V{x:X}, V{y:X}, {height}")
@dataclass(frozen=True, mappable_dataclass=False)
class Draw:
    """DXYN - Draw an 8xN sprite from I at (VX, VY), VF = collision."""
    x: int
    y: int
    height: int


# Misc (FXNN)

@_variant("LD V{x:X}, K")
@dataclass(frozen=True, mappable_dataclass=False)
class WaitForKey:
    """FX0A - Block until a key is pressed, store it in VX."""
    x: int


@_variant("LD V{x:X}, DT")
@dataclass(frozen=True, mappable_dataclass=False)
class GetDelayTimer:
    """FX07 - VX = delay timer."""
    x: int


@_variant("LD DT, V{x:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SetDelayTimer:
    """FX15 - Delay timer = VX."""
    x: int


@_variant("LD ST, V{x:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class SetSoundTimer:
    """FX18 - Sound timer = VX."""
    x: int


@_variant("ADD I, V{x:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class AddToIndex:
    """FX1E - I += VX, VF = I past the overflow threshold."""
    x: int


@_variant("LD F, V{x:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class FontCharacter:
    """FX29 - I = address of the font glyph for VX."""
    x: int


@_variant("BCD V{x:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class BcdConversion:
    """FX33 - Store the decimal digits of VX at I, I+1, I+2."""
    x: int


@_variant("LD [I], V{x:X}")
@dataclass(frozen=True, mappable_dataclass=False)
class StoreRegisters:
    """FX55 - Store V0..VX at I; I unchanged."""
    x: int


@_variant("LD V{x:X}, [I]")
@dataclass(frozen=True, mappable_dataclass=False)
class LoadRegisters:
    """FX65 - Load V0..VX from I; I unchanged."""
    x: int


@_variant("UNKNOWN 0x{opcode:04X}")
@dataclass(frozen=True, mappable_dataclass=False)
class Unknown:
    """Any opcode without a documented form."""
    opcode: int


INSTRUCTION_TYPES = tuple(INSTRUCTION_TYPES)

Instruction = Union[tuple(INSTRUCTION_TYPES)]

# Families decided by the first nibble alone
_ADDRESS_FAMILIES = {
    0x1: Jump,
    0x2: Call,
    0xA: SetIndex,
    0xB: JumpWithOffset,
}

_IMMEDIATE_FAMILIES = {
    0x3: SkipIfEqualImmediate,
    0x4: SkipIfNotEqualImmediate,
    0x6: SetImmediate,
    0x7: AddImmediate,
    0xC: Random,
}

# 8XYN, keyed by N
_ALU_OPERATIONS = {
    0x0: SetRegister,
    0x1: Or,
    0x2: And,
    0x3: Xor,
    0x4: AddRegister,
    0x5: SubtractXY,
    0x7: SubtractYX,
}

_ALU_SHIFTS = {
    0x6: ShiftRight,
    0xE: ShiftLeft,
}

# EXNN and FXNN, keyed by NN
_KEY_OPERATIONS = {
    0x9E: SkipIfKey,
    0xA1: SkipIfNotKey,
}

_MISC_OPERATIONS = {
    0x07: GetDelayTimer,
    0x0A: WaitForKey,
    0x15: SetDelayTimer,
    0x18: SetSoundTimer,
    0x1E: AddToIndex,
    0x29: FontCharacter,
    0x33: BcdConversion,
    0x55: StoreRegisters,
    0x65: LoadRegisters,
}


def decode(opcode: int) -> Instruction:
    """Decode a 16-bit opcode into its instruction variant."""
    opcode = int(opcode) & 0xFFFF
    family = (opcode & 0xF000) >> 12
    x = (opcode & 0x0F00) >> 8
    y = (opcode & 0x00F0) >> 4
    n = opcode & 0x000F
    nn = opcode & 0x00FF
    nnn = opcode & 0x0FFF

    if opcode == 0x00E0:
        return ClearScreen()
    if opcode == 0x00EE:
        return Return()
    if family == 0x0:
        return SysCall(address=nnn)

    if family in _ADDRESS_FAMILIES:
        return _ADDRESS_FAMILIES[family](address=nnn)
    if family in _IMMEDIATE_FAMILIES:
        return _IMMEDIATE_FAMILIES[family](x=x, value=nn)

    if family == 0x5 and n == 0x0:
        return SkipIfEqualRegister(x=x, y=y)
    if family == 0x9 and n == 0x0:
        return SkipIfNotEqualRegister(x=x, y=y)
    if family == 0x8 and n in _ALU_OPERATIONS:
        return _ALU_OPERATIONS[n](x=x, y=y)
    if family == 0x8 and n in _ALU_SHIFTS:
        return _ALU_SHIFTS[n](x=x)
    if family == 0xD:
        return Draw(x=x, y=y, height=n)
    if family == 0xE and nn in _KEY_OPERATIONS:
        return _KEY_OPERATIONS[nn](x=x)
    if family == 0xF and nn in _MISC_OPERATIONS:
        return _MISC_OPERATIONS[nn](x=x)

    return Unknown(opcode=opcode)
