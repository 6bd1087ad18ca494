"""Monochrome pixel buffer with redraw coalescing."""

from typing import Callable, Sequence

import jax
import jax.numpy as jnp
import numpy as np
from flax.struct import PyTreeNode, field

from chipvm.constants import SCREEN_HEIGHT, SCREEN_SIZE, SCREEN_WIDTH, SPRITE_WIDTH

# Column offsets inside a sprite row, most significant bit first
_SPRITE_COLUMNS = jnp.arange(SPRITE_WIDTH)


class Screen(PyTreeNode):
    """Row-major on/off cells plus a dirty flag.

    The flag is raised by every mutation and lowered by :func:`refresh`.
    """
    pixels: jnp.ndarray = field(default_factory=lambda: jnp.zeros(SCREEN_SIZE, dtype=jnp.bool_))
    dirty: bool = False


def pixel_index(x: int, y: int) -> int:
    """Row-major index of cell (x, y)."""
    return x + SCREEN_WIDTH * y


def clear(screen: Screen) -> Screen:
    """Switch every cell off."""
    return screen.replace(pixels=jnp.zeros_like(screen.pixels), dirty=True)


def get_pixel(screen: Screen, index: int) -> bool:
    """State of the cell at a row-major index."""
    return bool(get_all_pixels(screen)[index])


def set_pixel(screen: Screen, index: int, value: bool) -> Screen:
    """Set one cell by row-major index."""
    return screen.replace(pixels=screen.pixels.at[index].set(value), dirty=True)


def get_all_pixels(screen: Screen) -> np.ndarray:
    """Read-only row-major view of every cell."""
    return np.asarray(screen.pixels)


def refresh(screen: Screen, sink: Callable[[np.ndarray], None]) -> Screen:
    """Hand the frame to ``sink`` if anything changed since the last refresh."""
    if not screen.dirty:
        return screen
    sink(get_all_pixels(screen))
    return screen.replace(dirty=False)


@jax.jit
def _xor_sprite(pixels: jax.Array, x, y, rows: jax.Array):
    sprite = ((rows[:, None] >> (7 - _SPRITE_COLUMNS)[None, :]) & 1).astype(jnp.bool_)
    xs = (x + _SPRITE_COLUMNS) % SCREEN_WIDTH
    ys = (y + jnp.arange(rows.shape[0])) % SCREEN_HEIGHT
    indices = (xs[None, :] + SCREEN_WIDTH * ys[:, None]).reshape(-1)
    sprite = sprite.reshape(-1)

    # A sprite is narrower and shorter than the screen, so indices never repeat
    cells = pixels[indices]
    return pixels.at[indices].set(cells ^ sprite), jnp.any(cells & sprite), jnp.any(sprite)


def draw_sprite(screen: Screen, x: int, y: int, rows: Sequence[int]) -> tuple[Screen, bool]:
    """XOR an 8-pixel-wide sprite onto the screen at (x, y).

    Every set bit toggles the cell at ``((x + column) % width, (y + row) % height)``,
    so sprites wrap on both axes. Returns the new screen and whether any
    toggled cell was already on.
    """
    rows = jnp.asarray(rows, dtype=jnp.uint8).reshape(-1)
    pixels, collision, changed = _xor_sprite(screen.pixels, x, y, rows)
    collision, changed = jax.device_get((collision, changed))

    if not changed:
        return screen, bool(collision)
    return screen.replace(pixels=pixels, dirty=True), bool(collision)
