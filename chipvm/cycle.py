"""Program counter effects returned by instruction handlers."""

from typing import Union

from chex import dataclass


@dataclass(frozen=True, mappable_dataclass=False)
class Next:
    """Advance to the following instruction."""


@dataclass(frozen=True, mappable_dataclass=False)
class Skip:
    """Skip the following instruction."""


@dataclass(frozen=True, mappable_dataclass=False)
class Jump:
    """Continue at ``address``."""
    address: int


@dataclass(frozen=True, mappable_dataclass=False)
class Fault:
    """Instruction was not executed; reported, then treated as :class:`Next`."""
    message: str


Effect = Union[Next, Skip, Jump, Fault]

NEXT = Next()
SKIP = Skip()


def skip_if(condition) -> Effect:
    return SKIP if condition else NEXT
