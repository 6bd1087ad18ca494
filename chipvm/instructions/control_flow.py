"""Control flow instructions."""

from chipvm.constants import OPCODE_SIZE
from chipvm.cycle import Jump, skip_if
from chipvm.isa import Call, JumpWithOffset, SkipIfKey, SkipIfNotKey
from chipvm.isa import Jump as JumpInstruction
from chipvm.instructions import Outcome, read_register
from chipvm.stack import push
from chipvm.state import EmulatorState


def execute_jump(state: EmulatorState, instruction: JumpInstruction) -> Outcome:
    """1NNN - Jump to address NNN."""
    return state, Jump(address=instruction.address), None


def execute_call(state: EmulatorState, instruction: Call) -> Outcome:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, int(state.pc) + OPCODE_SIZE))
    return state, Jump(address=instruction.address), None


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction) -> Outcome:
        return state, skip_if(condition_fn(state, instruction)), None
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: read_register(state, inst.x) == inst.value
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: read_register(state, inst.x) != inst.value
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: read_register(state, inst.x) == read_register(state, inst.y)
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: read_register(state, inst.x) != read_register(state, inst.y)
)


def execute_jump_with_offset(state: EmulatorState, instruction: JumpWithOffset) -> Outcome:
    """BNNN - Jump to address NNN + V0."""
    return state, Jump(address=instruction.address + read_register(state, 0)), None


def _key_pressed(state: EmulatorState, instruction) -> bool:
    return (int(state.keypad) >> read_register(state, instruction.x)) & 1 == 1


execute_skip_if_key = make_skip_instruction(_key_pressed)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: not _key_pressed(state, inst)
)
