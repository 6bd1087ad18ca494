"""Register load, add and random instructions."""

import jax
import jax.numpy as jnp

from chipvm.cycle import NEXT
from chipvm.isa import AddImmediate, Random, SetImmediate, SetIndex, SetRegister
from chipvm.instructions import Outcome, read_register, write_index, write_register
from chipvm.state import EmulatorState


def execute_set(state: EmulatorState, instruction: SetImmediate) -> Outcome:
    """6XNN - Set VX = NN."""
    return write_register(state, instruction.x, instruction.value), NEXT, None


def execute_add(state: EmulatorState, instruction: AddImmediate) -> Outcome:
    """7XNN - Add NN to VX, wrapping, VF untouched."""
    value = read_register(state, instruction.x) + instruction.value
    return write_register(state, instruction.x, value), NEXT, None


def execute_copy(state: EmulatorState, instruction: SetRegister) -> Outcome:
    """8XY0 - Set VX = VY."""
    return write_register(state, instruction.x, read_register(state, instruction.y)), NEXT, None


def execute_set_index(state: EmulatorState, instruction: SetIndex) -> Outcome:
    """ANNN - Set I = NNN."""
    return write_index(state, instruction.address), NEXT, None


@jax.jit
def _random_byte(rng: jax.Array) -> tuple[jax.Array, jax.Array]:
    key, subkey = jax.random.split(rng)
    return key, jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)


def execute_random(state: EmulatorState, instruction: Random) -> Outcome:
    """CXNN - Set VX = random & NN."""
    key, random_value = _random_byte(state.rng)
    state = write_register(state, instruction.x, int(random_value) & instruction.value)
    return state.replace(rng=key), NEXT, None
