"""ALU operations (8xxx).

Each ``alu_*`` function maps ``(vx, vy)`` to ``(result, flag)``; a flag of
``None`` leaves VF untouched. Shifts operate on VX alone.
"""

from typing import Optional

from chipvm.cycle import NEXT
from chipvm.isa import (
    AddRegister,
    And,
    Or,
    ShiftLeft,
    ShiftRight,
    SubtractXY,
    SubtractYX,
    Xor,
)
from chipvm.instructions import Outcome, read_register, write_register
from chipvm.state import EmulatorState


def alu_or(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    return result & 0xFF, int(result > 0xFF)


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when no borrow."""
    return (vx - vy) & 0xFF, int(vx >= vy)


def alu_shift_right(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right: VX >>= 1, VF = shifted out bit."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when no borrow."""
    return (vy - vx) & 0xFF, int(vy >= vx)


def alu_shift_left(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XYE - Shift left: VX <<= 1, VF = shifted out bit."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


ALU_OPERATIONS = {
    Or: alu_or,
    And: alu_and,
    Xor: alu_xor,
    AddRegister: alu_add,
    SubtractXY: alu_sub_xy,
    ShiftRight: alu_shift_right,
    SubtractYX: alu_sub_yx,
    ShiftLeft: alu_shift_left,
}


def execute_alu_operation(state: EmulatorState, instruction) -> Outcome:
    """8XYN - ALU operations dispatcher."""
    vx = read_register(state, instruction.x)
    # Shift variants carry no Y operand
    vy = read_register(state, instruction.y) if hasattr(instruction, "y") else 0

    result, vf = ALU_OPERATIONS[type(instruction)](vx, vy)
    return write_register(state, instruction.x, result), NEXT, vf
