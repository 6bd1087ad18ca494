"""Rendering utilities for the pixel buffer."""

from typing import Tuple

import numpy as np

from chipvm.constants import BACKGROUND_COLOR, FOREGROUND_COLOR, SCREEN_HEIGHT, SCREEN_WIDTH


def display_to_rgb(
    pixels: np.ndarray,
    scale: int = 8,
    on_color: Tuple[int, int, int] = FOREGROUND_COLOR,
    off_color: Tuple[int, int, int] = BACKGROUND_COLOR,
) -> np.ndarray:
    """Convert the boolean frame buffer to an RGB array with optional upscaling.

    Args:
        pixels: Row-major boolean buffer of SCREEN_WIDTH * SCREEN_HEIGHT cells
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels
        off_color: RGB color for "off" pixels

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    pixels = np.asarray(pixels, dtype=np.bool_).reshape(SCREEN_HEIGHT, SCREEN_WIDTH)

    rgb_frame = np.zeros((SCREEN_HEIGHT, SCREEN_WIDTH, 3), dtype=np.uint8)
    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Nearest neighbor upscaling
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def create_color_scheme(
    scheme: str = "mint",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for rendering.

    Args:
        scheme: Color scheme name ("mint", "classic", "amber", "white", "blue", "retro")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    schemes = {
        "mint": (FOREGROUND_COLOR, BACKGROUND_COLOR),
        "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
        "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
        "white": ((255, 255, 255), (0, 0, 0)),  # White on black
        "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
        "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]
