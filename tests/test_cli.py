"""Tests for the command line entry point."""

import pygame
import pytest

from chipvm import cli
from conftest import RecordingAudio, RecordingDisplay, ScriptedInput


@pytest.fixture
def fake_peripherals(monkeypatch):
    """Swap the pygame drivers for recording fakes."""
    created = {}

    def make_display(config, caption="chipvm"):
        created["display"] = RecordingDisplay()
        return created["display"]

    def make_audio(config, logger=None):
        created["audio"] = RecordingAudio()
        return created["audio"]

    def make_input():
        created["input"] = ScriptedInput([0] * 30)
        return created["input"]

    monkeypatch.setattr(cli, "PygameDisplay", make_display)
    monkeypatch.setattr(cli, "PygameAudio", make_audio)
    monkeypatch.setattr(cli, "PygameInput", make_input)
    monkeypatch.setattr(pygame, "init", lambda: (0, 0))
    monkeypatch.setattr(pygame, "quit", lambda: None)
    return created


@pytest.fixture
def rom_file(tmp_path):
    def write(data):
        path = tmp_path / "rom.ch8"
        path.write_bytes(bytes(data))
        return str(path)
    return write


class TestStartupErrors:
    """Fatal startup conditions exit with status 1."""

    def test_missing_argument(self, capsys, fake_peripherals):
        assert cli.main([]) == 1
        out = capsys.readouterr().out
        assert "CRITICAL" in out
        assert "No ROM given" in out
        assert "display" not in fake_peripherals

    def test_unreadable_rom(self, tmp_path, capsys, fake_peripherals):
        assert cli.main([str(tmp_path / "nope.ch8")]) == 1
        assert "cannot read ROM" in capsys.readouterr().out

    def test_empty_rom(self, rom_file, capsys, fake_peripherals):
        assert cli.main([rom_file([])]) == 1
        assert "is empty" in capsys.readouterr().out

    def test_unknown_color_scheme(self, rom_file, capsys, fake_peripherals):
        assert cli.main([rom_file([0x12, 0x00]), "--color_scheme", "neon"]) == 1
        assert "Unknown color scheme" in capsys.readouterr().out

    def test_invalid_log_level(self, rom_file):
        with pytest.raises(SystemExit):
            cli.main([rom_file([0x12, 0x00]), "--log_level", "loud"])

    @pytest.mark.parametrize("flag", ["--cycles_per_frame", "--scale"])
    @pytest.mark.parametrize("value", ["0", "-3", "many"])
    def test_counts_must_be_positive(self, rom_file, capsys, fake_peripherals, flag, value):
        with pytest.raises(SystemExit) as excinfo:
            cli.main([rom_file([0x12, 0x00]), flag, value])
        assert excinfo.value.code == 2
        assert flag in capsys.readouterr().err
        assert "display" not in fake_peripherals

    def test_unwritable_log_file(self, rom_file, tmp_path, capsys, fake_peripherals):
        log_path = tmp_path / "missing" / "chipvm.log"
        assert cli.main([rom_file([0x12, 0x00]), "--log_file", str(log_path)]) == 1
        err = capsys.readouterr().err
        assert "CRITICAL" in err
        assert "cannot open log file" in err
        assert "display" not in fake_peripherals


class TestRun:

    def test_runs_until_quit(self, rom_file, capsys, fake_peripherals):
        # Draw the "0" glyph and spin
        assert cli.main([rom_file([0xD0, 0x05, 0x12, 0x02])]) == 0

        assert len(fake_peripherals["display"].frames) == 1
        assert fake_peripherals["input"].polls == 31
        out = capsys.readouterr().out
        assert "Loaded ROM" in out
        assert "(4 bytes)" in out

    def test_stack_overflow_is_fatal(self, rom_file, capsys, fake_peripherals):
        assert cli.main([rom_file([0x22, 0x00])]) == 1
        out = capsys.readouterr().out
        assert "CRITICAL" in out
        assert "call stack full" in out
        assert fake_peripherals["audio"].calls[-1] == "stop"

    def test_unknown_opcode_keeps_running(self, rom_file, capsys, fake_peripherals):
        assert cli.main([rom_file([0x51, 0x21, 0x12, 0x02])]) == 0
        assert "unknown opcode at 0x0200: UNKNOWN 0x5121" in capsys.readouterr().out

    def test_log_file(self, rom_file, tmp_path, capsys, fake_peripherals):
        log_path = tmp_path / "chipvm.log"
        assert cli.main([rom_file([0x12, 0x00]), "--log_file", str(log_path)]) == 0
        assert "Loaded ROM" in log_path.read_text()
        assert capsys.readouterr().out == ""

    def test_debug_trace(self, rom_file, capsys, fake_peripherals):
        assert cli.main([rom_file([0x12, 0x00]), "--debug"]) == 0
        out = capsys.readouterr().out
        assert "- disassembled rom " in out
        assert "- processor " in out


def test_parser_defaults():
    args = cli.build_parser().parse_args(["game.ch8"])
    assert args.rom == "game.ch8"
    assert args.scale == 20
    assert args.cycles_per_frame == 15
    assert args.color_scheme == "mint"
    assert args.log_level == "INFO"
    assert not args.debug


def test_positive_int():
    assert cli.positive_int("1") == 1
    assert cli.positive_int("15") == 15
