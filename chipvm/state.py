"""Processor state structures."""

from enum import IntEnum

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from chipvm.constants import PROGRAM_START, V_REGISTERS_SIZE
from chipvm.memory import Memory, create_memory
from chipvm.screen import Screen
from chipvm.stack import StackState


class ProcessorMode(IntEnum):
    """Execution state of the processor.

    RUNNING       fetch, decode and execute one instruction per cycle
    AWAITING_KEY  FX0A is pending; cycles only watch the keypad
    """
    RUNNING = 0
    AWAITING_KEY = 1


class EmulatorState(PyTreeNode):
    """Complete machine state.

    Buffers are jax arrays. Scalar registers are host ints, so reading them
    never waits on the device.

    Attributes:
        rng: Key for the random instruction; split on every use
        memory: 4 KiB address space
        screen: Pixel buffer
        pc: Address of the next instruction
        stack: Return addresses
        delay_timer: Counts down to zero at the frame rate
        sound_timer: Counts down to zero; tone plays while nonzero
        keypad: Bit i set while key i is held
        V: General registers V0..VF
        I: Address register
        mode: A :class:`ProcessorMode` value
        key_target: Register receiving the key when AWAITING_KEY ends
    """
    rng: jax.Array
    memory: Memory = field(default_factory=create_memory)
    screen: Screen = field(default_factory=Screen)
    pc: int = PROGRAM_START
    stack: StackState = field(default_factory=StackState)
    delay_timer: int = 0
    sound_timer: int = 0
    keypad: int = 0
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(V_REGISTERS_SIZE, dtype=jnp.uint8))
    I: int = 0
    mode: int = int(ProcessorMode.RUNNING)
    key_target: int = 0

    @property
    def awaiting_key(self) -> bool:
        return int(self.mode) == ProcessorMode.AWAITING_KEY


def create_state(rng: jax.Array = None) -> EmulatorState:
    """Create the power-on state: font loaded, PC at the program start."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    return EmulatorState(rng)
