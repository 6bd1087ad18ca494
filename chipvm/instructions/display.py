"""Display operations."""

import jax.numpy as jnp

from chipvm import screen
from chipvm.cycle import NEXT
from chipvm.isa import Draw
from chipvm.instructions import Outcome, read_register
from chipvm.state import EmulatorState


def execute_display(state: EmulatorState, instruction: Draw) -> Outcome:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    rows = state.memory.data[int(state.I) + jnp.arange(instruction.height)]
    new_screen, collision = screen.draw_sprite(
        state.screen,
        read_register(state, instruction.x),
        read_register(state, instruction.y),
        rows,
    )
    return state.replace(screen=new_screen), NEXT, int(collision)
