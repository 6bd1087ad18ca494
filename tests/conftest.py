"""Test configuration and fixtures for the emulator tests."""

import io

import jax.numpy as jnp
import pytest

from chipvm import create_state
from chipvm.logging import ConsoleLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    data = state.memory.data.at[address:address + len(sprite_bytes)].set(
        jnp.array(sprite_bytes, dtype=jnp.uint8)
    )
    return state.replace(memory=state.memory.replace(data=data))


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. ``set_registers(state, V1=0x10)``."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def pixel(state, x, y):
    return bool(state.screen.pixels[x + 64 * y])


class RecordingDisplay:
    """Display sink that keeps every frame it is given."""

    def __init__(self):
        self.frames = []

    def draw(self, pixels):
        self.frames.append(pixels.copy())


class RecordingAudio:
    """Audio sink that records start/stop calls."""

    def __init__(self):
        self.calls = []

    def start_beep(self):
        self.calls.append("start")

    def stop_beep(self):
        self.calls.append("stop")


class ScriptedInput:
    """Input source replaying key masks, then quitting."""

    def __init__(self, masks):
        self.masks = list(masks)
        self.polls = 0

    def poll(self):
        self.polls += 1
        if not self.masks:
            return None
        return self.masks.pop(0)


class SteppingClock:
    """Clock that moves forward by ``step`` seconds on every reading."""

    def __init__(self, step=0.0):
        self.step = step
        self.now = 0.0

    def __call__(self):
        self.now += self.step
        return self.now


@pytest.fixture
def log_stream():
    return io.StringIO()


@pytest.fixture
def logger(log_stream):
    """Logger writing uncoloured lines to an in-memory stream."""
    return ConsoleLogger(name="test", log_level="DEBUG", show_timestamps=False, stream=log_stream)
