"""pygame drivers for the display, keypad and beeper."""

from typing import Optional

import numpy as np
import pygame

from chipvm.config import EmulatorConfig
from chipvm.constants import SCREEN_HEIGHT, SCREEN_WIDTH
from chipvm.logging import ConsoleLogger
from chipvm.rendering import create_color_scheme, display_to_rgb

# Host key -> keypad key, laid out as the 4x4 hex pad:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  <-  Q W E R
#   7 8 9 E      A S D F
#   A 0 B F      Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

SAMPLE_RATE = 44100


class PygameDisplay:
    """Window showing the frame buffer, upscaled by ``config.scale``."""

    def __init__(self, config: EmulatorConfig, caption: str = "chipvm"):
        self.scale = config.scale
        self.on_color, self.off_color = create_color_scheme(config.color_scheme)
        pygame.display.init()
        self.surface = pygame.display.set_mode((SCREEN_WIDTH * self.scale, SCREEN_HEIGHT * self.scale))
        pygame.display.set_caption(caption)

    def draw(self, pixels: np.ndarray):
        rgb = display_to_rgb(pixels, self.scale, self.on_color, self.off_color)
        # surfarray is indexed (x, y)
        frame = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))
        self.surface.blit(frame, (0, 0))
        pygame.display.flip()


class PygameInput:
    """Keypad source backed by the pygame event queue."""

    def __init__(self, key_map: Optional[dict] = None):
        self.key_map = KEY_MAP if key_map is None else key_map

    def poll(self) -> Optional[int]:
        """Return the held-key mask, or None once the user asks to quit."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return None
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return None

        pressed = pygame.key.get_pressed()
        key_mask = 0
        for host_key, key in self.key_map.items():
            if pressed[host_key]:
                key_mask |= 1 << key
        return key_mask


def square_wave(tone_hz: int, volume: float, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """One period of a signed 16-bit square wave."""
    period = max(int(sample_rate / tone_hz), 2)
    amplitude = int(32767 * volume)
    wave = np.full(period, amplitude, dtype=np.int16)
    wave[period // 2:] = -amplitude
    return wave


class PygameAudio:
    """Looping square-wave beeper.

    When the mixer cannot be opened the driver stays silent and the
    emulator keeps running.
    """

    def __init__(self, config: EmulatorConfig, logger: Optional[ConsoleLogger] = None):
        self.playing = False
        self.sound = None
        try:
            pygame.mixer.pre_init(SAMPLE_RATE, -16, 1, 256)
            pygame.mixer.init()
        except pygame.error as e:
            if logger is not None:
                logger.warning(f"Audio disabled: {e}")
            return

        # The mixer may not grant the requested format
        sample_rate, _, channels = pygame.mixer.get_init()
        wave = square_wave(config.tone_hz, config.volume, sample_rate)
        if channels > 1:
            wave = np.repeat(wave[:, None], channels, axis=1)
        self.sound = pygame.sndarray.make_sound(wave)

    @property
    def enabled(self) -> bool:
        return self.sound is not None

    def start_beep(self):
        if self.playing or not self.enabled:
            return
        self.sound.play(loops=-1)
        self.playing = True

    def stop_beep(self):
        if not self.playing:
            return
        self.sound.stop()
        self.playing = False
