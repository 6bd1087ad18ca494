"""System instructions (0xxx) and opcodes that are not executed."""

from chipvm import screen
from chipvm.cycle import NEXT, Fault, Jump
from chipvm.isa import ClearScreen, Return, SysCall, Unknown
from chipvm.instructions import Outcome
from chipvm.stack import pop
from chipvm.state import EmulatorState


def execute_clear_screen(state: EmulatorState, instruction: ClearScreen) -> Outcome:
    """00E0 - Clear display."""
    return state.replace(screen=screen.clear(state.screen)), NEXT, None


def execute_return(state: EmulatorState, instruction: Return) -> Outcome:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack), Jump(address=address), None


def execute_sys_call(state: EmulatorState, instruction: SysCall) -> Outcome:
    """0NNN - Machine code routines are not supported."""
    return state, Fault(message="not implemented opcode"), None


def execute_unknown(state: EmulatorState, instruction: Unknown) -> Outcome:
    return state, Fault(message="unknown opcode"), None
