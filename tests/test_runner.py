"""Tests for the run loop with recording peripherals."""

import pytest

from chipvm.cartridge import Cartridge
from chipvm.config import EmulatorConfig
from chipvm.runner import run
from chipvm.stack import StackOverflowError
from conftest import RecordingAudio, RecordingDisplay, ScriptedInput, SteppingClock

# Draw the "0" glyph at (0, 0), then spin
DRAW_ZERO = bytes([0xF0, 0x29, 0xD0, 0x05, 0x12, 0x04])


@pytest.fixture
def config():
    return EmulatorConfig(cycles_per_frame=3)


def run_rom(fresh_state, rom, masks, logger, config, clock=None):
    display, audio, source = RecordingDisplay(), RecordingAudio(), ScriptedInput(masks)
    sleeps = []
    state = run(
        fresh_state, display, source, audio,
        Cartridge.from_bytes(rom), logger, config,
        sleep=sleeps.append, clock=clock or SteppingClock(),
    )
    return state, display, audio, source, sleeps


class TestRunLoop:

    def test_quits_immediately(self, fresh_state, logger, config):
        state, display, audio, source, sleeps = run_rom(fresh_state, DRAW_ZERO, [], logger, config)
        assert source.polls == 1
        assert display.frames == []
        assert audio.calls == []
        assert state.pc == 0x200
        assert state.memory.rom_size == len(DRAW_ZERO)

    def test_one_cycle_per_poll(self, fresh_state, logger, config):
        state, *_ = run_rom(fresh_state, DRAW_ZERO, [0, 0], logger, config)
        assert state.pc == 0x204

    def test_frame_drawn_once_per_change(self, fresh_state, logger, config):
        _, display, *_ = run_rom(fresh_state, DRAW_ZERO, [0] * 10, logger, config)
        assert len(display.frames) == 1
        assert display.frames[0].sum() == 14

    def test_timers_tick_every_frame(self, fresh_state, logger, config):
        # V0 = 9, DT = V0, spin
        rom = bytes([0x60, 0x09, 0xF0, 0x15, 0x12, 0x04])
        state, _, _, _, sleeps = run_rom(fresh_state, rom, [0] * 9, logger, config)
        assert len(sleeps) == 3
        assert sleeps[0] == pytest.approx(1 / 60)
        assert state.delay_timer == 9 - 3

    def test_sleep_covers_only_the_rest_of_the_frame(self, fresh_state, logger, config):
        clock = SteppingClock(step=0.005)
        *_, sleeps = run_rom(fresh_state, DRAW_ZERO, [0] * 6, logger, config, clock)
        assert sleeps == pytest.approx([1 / 60 - 0.005] * 2)

    def test_slow_frame_does_not_sleep(self, fresh_state, logger, config):
        clock = SteppingClock(step=0.05)
        *_, sleeps = run_rom(fresh_state, DRAW_ZERO, [0] * 6, logger, config, clock)
        assert sleeps == [0.0, 0.0]

    def test_beep_follows_sound_timer(self, fresh_state, logger, config):
        # V0 = 2, ST = V0, spin
        rom = bytes([0x60, 0x02, 0xF0, 0x18, 0x12, 0x04])
        _, _, audio, _, _ = run_rom(fresh_state, rom, [0] * 9, logger, config)
        # Timer ticks after cycles 3 and 6
        assert audio.calls == ["stop", "start", "start", "start", "start", "start", "stop", "stop", "stop"]

    def test_keypad_reaches_program(self, fresh_state, logger, config):
        # Wait for a key into V5, then spin
        rom = bytes([0xF5, 0x0A, 0x12, 0x02])
        state, *_ = run_rom(fresh_state, rom, [0, 0, 0, 1 << 9, 0], logger, config)
        assert state.V[5] == 9

    def test_stack_errors_propagate(self, fresh_state, logger, config):
        rom = bytes([0x22, 0x00])  # Call itself forever
        with pytest.raises(StackOverflowError):
            run_rom(fresh_state, rom, [0] * 20, logger, config)


class TestDebugTrace:

    def test_debug_dumps_rom_and_status(self, fresh_state, logger, log_stream):
        config = EmulatorConfig(debug=True)
        run_rom(fresh_state, DRAW_ZERO, [0], logger, config)
        output = log_stream.getvalue()
        assert "- raw rom " in output
        assert "- disassembled rom " in output
        assert "- registers " in output
        assert "DRW V0, V0, 5" in output

    def test_no_trace_without_debug(self, fresh_state, logger, log_stream):
        run_rom(fresh_state, DRAW_ZERO, [0], logger, EmulatorConfig())
        assert "- raw rom " not in log_stream.getvalue()

    def test_trace_shows_instruction_about_to_run(self, fresh_state, logger, log_stream):
        run_rom(fresh_state, DRAW_ZERO, [0], logger, EmulatorConfig(debug=True))
        output = log_stream.getvalue()
        assert "- processor execute " in output
        assert "| PC: 0x0200" in output
        execute_line = [line for line in output.splitlines() if "LD F, V0" in line and "* PC" in line]
        assert execute_line
        assert "AD: 0x0200" in execute_line[0]

    def test_waiting_for_key_is_not_traced(self, fresh_state, logger, log_stream):
        # Wait for a key into V5, then spin
        rom = bytes([0xF5, 0x0A, 0x12, 0x02])
        run_rom(fresh_state, rom, [0, 0, 0], logger, EmulatorConfig(debug=True))
        output = log_stream.getvalue()
        assert output.count("- processor execute ") == 1
        assert "LD V5, K" in output
