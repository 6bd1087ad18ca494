"""Tests for ALU operations (8xxx)."""

import pytest

from chipvm import execute
from chipvm.instructions.alu import alu_add, alu_shift_left, alu_shift_right, alu_sub_xy, alu_sub_yx
from conftest import set_registers


class TestBasicALU:
    """Test bitwise ALU operations."""

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0x0F)
        state = execute(state, 0x8121)  # V1 |= V2
        assert state.V[1] == 0xFF
        assert state.pc == 0x202

    def test_alu_and_basic(self, fresh_state):
        """8XY2 - AND operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0xF1)
        state = execute(state, 0x8122)
        assert state.V[1] == 0xF0

    def test_alu_xor_same(self, fresh_state):
        """8XY3 - XOR with same value should be 0."""
        state = set_registers(fresh_state, V3=0xAA, V4=0xAA)
        state = execute(state, 0x8343)
        assert state.V[3] == 0x00

    @pytest.mark.parametrize("opcode", [0x8121, 0x8122, 0x8123])
    def test_bitwise_ops_leave_flag_alone(self, fresh_state, opcode):
        state = set_registers(fresh_state, V1=0x0F, V2=0xF0, VF=0x55)
        state = execute(state, opcode)
        assert state.V[0xF] == 0x55


class TestALUArithmetic:
    """Test arithmetic ALU operations."""

    def test_alu_add_with_carry(self, fresh_state):
        """8XY4 - 0xFF + 0xFF = 0xFE carry 1."""
        state = set_registers(fresh_state, V1=0xFF, V2=0xFF)
        state = execute(state, 0x8124)
        assert state.V[1] == 0xFE
        assert state.V[15] == 1

    def test_alu_add_no_carry(self, fresh_state):
        """8XY4 - 0x0F + 0x0F = 0x1E carry 0."""
        state = set_registers(fresh_state, V1=0x0F, V2=0x0F, VF=1)
        state = execute(state, 0x8124)
        assert state.V[1] == 0x1E
        assert state.V[15] == 0

    def test_alu_sub_xy_with_borrow(self, fresh_state):
        """8XY5 - 0x0F - 0xFF = 0x10 with borrow."""
        state = set_registers(fresh_state, V1=0x0F, V2=0xFF)
        state = execute(state, 0x8125)
        assert state.V[1] == 0x10
        assert state.V[15] == 0

    def test_alu_sub_xy_no_borrow(self, fresh_state):
        """8XY5 - 0x0F - 0x01 = 0x0E, no borrow."""
        state = set_registers(fresh_state, V1=0x0F, V2=0x01)
        state = execute(state, 0x8125)
        assert state.V[1] == 0x0E
        assert state.V[15] == 1

    def test_alu_sub_xy_equal_is_no_borrow(self, fresh_state):
        state = set_registers(fresh_state, V1=0x42, V2=0x42)
        state = execute(state, 0x8125)
        assert state.V[1] == 0
        assert state.V[15] == 1

    def test_alu_sub_yx(self, fresh_state):
        """8XY7 - VX = VY - VX."""
        state = set_registers(fresh_state, V1=0x10, V2=0x30)
        state = execute(state, 0x8127)
        assert state.V[1] == 0x20
        assert state.V[15] == 1

    def test_alu_sub_yx_with_borrow(self, fresh_state):
        state = set_registers(fresh_state, V1=0x30, V2=0x10)
        state = execute(state, 0x8127)
        assert state.V[1] == 0xE0
        assert state.V[15] == 0

    def test_flag_register_as_operand(self, fresh_state):
        """VF receives the flag even when it is the destination."""
        state = set_registers(fresh_state, VF=0xFF, V1=0x01)
        state = execute(state, 0x8F14)
        assert state.V[0xF] == 1


class TestShifts:
    """Shifts use VX only; VY is ignored."""

    def test_shift_right_odd(self, fresh_state):
        state = set_registers(fresh_state, V3=0x05)
        state = execute(state, 0x8306)
        assert state.V[3] == 0x02
        assert state.V[15] == 1

    def test_shift_right_even(self, fresh_state):
        state = set_registers(fresh_state, V1=0x04, VF=1)
        state = execute(state, 0x8106)
        assert state.V[1] == 0x02
        assert state.V[15] == 0

    def test_shift_right_ignores_vy(self, fresh_state):
        state = set_registers(fresh_state, V1=0x08, V2=0x03)
        state = execute(state, 0x8126)
        assert state.V[1] == 0x04
        assert state.V[2] == 0x03

    def test_shift_left_overflow(self, fresh_state):
        state = set_registers(fresh_state, V3=0x81)
        state = execute(state, 0x830E)
        assert state.V[3] == 0x02
        assert state.V[15] == 1

    def test_shift_left_no_overflow(self, fresh_state):
        state = set_registers(fresh_state, V3=0x41)
        state = execute(state, 0x830E)
        assert state.V[3] == 0x82
        assert state.V[15] == 0


class TestALUFunctions:
    """The pure (result, flag) helpers."""

    @pytest.mark.parametrize("fn,vx,vy,expected", [
        (alu_add, 0xFF, 0xFF, (0xFE, 1)),
        (alu_add, 0x0F, 0x0F, (0x1E, 0)),
        (alu_sub_xy, 0x0F, 0xFF, (0x10, 0)),
        (alu_sub_xy, 0x0F, 0x01, (0x0E, 1)),
        (alu_sub_yx, 0x01, 0x0F, (0x0E, 1)),
        (alu_shift_right, 0x05, 0x00, (0x02, 1)),
        (alu_shift_right, 0x04, 0x00, (0x02, 0)),
        (alu_shift_left, 0x80, 0x00, (0x00, 1)),
    ])
    def test_alu_function(self, fn, vx, vy, expected):
        assert fn(vx, vy) == expected
