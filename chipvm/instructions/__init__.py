"""Instruction handlers, one module per opcode family.

Every handler takes ``(state, instruction)`` and returns
``(state, effect, flag)``: the updated state, the program counter
:mod:`~chipvm.cycle` effect, and the value to write into VF, or ``None``
when the instruction leaves VF alone. VF is written after the handler's
own register writes.
"""

from typing import Optional

import jax
import numpy as np

from chipvm.cycle import Effect
from chipvm.state import EmulatorState

Outcome = tuple[EmulatorState, Effect, Optional[int]]


@jax.jit
def _set_element(array: jax.Array, index, value) -> jax.Array:
    return array.at[index].set(value)


def read_register(state: EmulatorState, index: int) -> int:
    """Value of V[index] as a host int."""
    return int(np.asarray(state.V)[index])


def write_register(state: EmulatorState, index: int, value: int) -> EmulatorState:
    """Set V[index], keeping the low 8 bits of ``value``."""
    return state.replace(V=_set_element(state.V, index, value & 0xFF))


def write_index(state: EmulatorState, value: int) -> EmulatorState:
    """Set I, keeping the low 16 bits of ``value``."""
    return state.replace(I=value & 0xFFFF)
