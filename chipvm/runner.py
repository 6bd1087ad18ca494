"""Main emulation loop."""

import time
from typing import Callable, Optional, Protocol

import numpy as np

from chipvm import screen
from chipvm.cartridge import Cartridge
from chipvm.config import EmulatorConfig
from chipvm.disassembler import Disassembler
from chipvm.emulator import advance, load_rom, tick_timers
from chipvm.logging import ConsoleLogger
from chipvm.state import EmulatorState


class DisplaySink(Protocol):
    def draw(self, pixels: np.ndarray) -> None: ...


class AudioSink(Protocol):
    def start_beep(self) -> None: ...

    def stop_beep(self) -> None: ...


class InputSource(Protocol):
    def poll(self) -> Optional[int]: ...


def run(
    state: EmulatorState,
    display: DisplaySink,
    input_source: InputSource,
    audio: AudioSink,
    cartridge: Cartridge,
    logger: ConsoleLogger,
    config: EmulatorConfig,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.perf_counter,
) -> EmulatorState:
    """Load ``cartridge`` and run until ``input_source`` asks to quit.

    One cycle per poll: advance the processor, drive the beeper from the
    sound timer and push the frame to ``display`` if it changed. Every
    ``config.cycles_per_frame`` cycles the timers tick and the loop sleeps
    for whatever is left of the frame period, measured with ``clock``.
    Stack errors propagate to the caller.

    Returns:
        The state after the last cycle
    """
    state = load_rom(state, cartridge.rom, cartridge.rom_size, logger)

    trace = None
    if config.debug:
        tracer = Disassembler(logger)
        tracer.reset(cartridge.rom, cartridge.rom_size)
        tracer.dump_rom()
        trace = tracer.dump_status

    frame_period = 1.0 / config.frame_rate
    cycle = 0
    frame_start = clock()
    while (key_mask := input_source.poll()) is not None:
        state = advance(state, key_mask, logger, trace)

        if int(state.sound_timer) > 0:
            audio.start_beep()
        else:
            audio.stop_beep()

        state = state.replace(screen=screen.refresh(state.screen, display.draw))

        cycle += 1
        if cycle % config.cycles_per_frame == 0:
            state = tick_timers(state)
            sleep(max(0.0, frame_period - (clock() - frame_start)))
            frame_start = clock()

    logger.info(f"Stopped after {cycle} cycles")
    return state
