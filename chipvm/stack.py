"""Call stack operations."""

import jax.numpy as jnp
from flax.struct import dataclass, field

from chipvm.constants import ADDRESS_MASK, STACK_SIZE


class StackError(RuntimeError):
    """Call stack misuse; the running program is malformed."""


class StackOverflowError(StackError):
    """CALL with every return slot in use."""


class StackUnderflowError(StackError):
    """RET with no pending return address."""


@dataclass(frozen=True)
class StackState:
    """Return addresses for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


def push(stack: StackState, address: int) -> StackState:
    """Push a return address onto the stack."""
    if stack.pointer >= STACK_SIZE:
        raise StackOverflowError(f"call stack full ({STACK_SIZE} entries) pushing 0x{address:04X}")
    new_data = stack.data.at[stack.pointer].set(address & ADDRESS_MASK)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, int]:
    """Pop the most recent return address."""
    if stack.pointer <= 0:
        raise StackUnderflowError("return with an empty call stack")
    new_pointer = stack.pointer - 1
    popped_address = int(stack.data[new_pointer])
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
