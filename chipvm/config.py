"""Emulator configuration."""

from typing import Optional

from chex import dataclass

from chipvm.constants import FRAME_FREQUENCY, FRAME_SIZE, SCALE_FACTOR


@dataclass(frozen=True, mappable_dataclass=False)
class EmulatorConfig:
    """Runtime settings, built once at startup and passed explicitly.

    Attributes:
        scale: Host pixels per emulated pixel
        color_scheme: Name understood by :func:`chipvm.rendering.create_color_scheme`
        cycles_per_frame: Processor cycles between timer ticks
        frame_rate: Timer and pacing frequency in Hz
        tone_hz: Beep frequency
        volume: Beep volume in [0, 1]
        log_level: Minimum level written by the logger
        log_file: Write log lines to this file instead of stdout
        debug: Emit ROM disassembly and per-cycle trace at DEBUG level
        seed: Seed for the random instruction
    """
    scale: int = SCALE_FACTOR
    color_scheme: str = "mint"
    cycles_per_frame: int = FRAME_SIZE
    frame_rate: float = FRAME_FREQUENCY
    tone_hz: int = 440
    volume: float = 0.2
    log_level: str = "INFO"
    log_file: Optional[str] = None
    debug: bool = False
    seed: int = 0
