"""Command line entry point."""

import argparse
import sys
from typing import Optional, Sequence

import jax
import pygame

from chipvm.cartridge import Cartridge, CartridgeError
from chipvm.config import EmulatorConfig
from chipvm.constants import FRAME_SIZE, SCALE_FACTOR
from chipvm.logging import LEVELS, ConsoleLogger, create_logger
from chipvm.peripherals import PygameAudio, PygameDisplay, PygameInput
from chipvm.rendering import create_color_scheme
from chipvm.runner import run
from chipvm.stack import StackError
from chipvm.state import create_state


def positive_int(text: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{text}'") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chipvm",
        description="Run a CHIP-8 program",
    )
    parser.add_argument("rom", nargs="?", help="Path to the ROM file")
    parser.add_argument(
        "--scale",
        type=positive_int,
        default=SCALE_FACTOR,
        help=f"Host pixels per emulated pixel (default: {SCALE_FACTOR})",
    )
    parser.add_argument(
        "--color_scheme",
        type=str,
        default="mint",
        help="Display colors: mint, classic, amber, white, blue, retro (default: mint)",
    )
    parser.add_argument(
        "--cycles_per_frame",
        type=positive_int,
        default=FRAME_SIZE,
        help=f"Processor cycles per 60 Hz timer tick (default: {FRAME_SIZE})",
    )
    parser.add_argument(
        "--log_level",
        type=str.upper,
        default="INFO",
        choices=LEVELS,
        help="Minimum level to log (default: INFO)",
    )
    parser.add_argument(
        "--log_file",
        type=str,
        default=None,
        help="Write the log to this file instead of stdout",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log the ROM disassembly and a per-cycle trace",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed for the random number instruction (default: 0)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the emulator; returns the process exit code."""
    args = build_parser().parse_args(argv)
    config = EmulatorConfig(
        scale=args.scale,
        color_scheme=args.color_scheme,
        cycles_per_frame=args.cycles_per_frame,
        log_level=args.log_level,
        log_file=args.log_file,
        debug=args.debug,
        seed=args.seed,
    )
    try:
        logger = create_logger(config)
    except OSError as e:
        ConsoleLogger(name="chipvm", stream=sys.stderr).critical(
            f"cannot open log file '{config.log_file}': {e.strerror}"
        )
        return 1

    try:
        if args.rom is None:
            logger.critical("No ROM given. Usage: chipvm <rom>")
            return 1
        try:
            create_color_scheme(config.color_scheme)
            cartridge = Cartridge.from_file(args.rom)
        except (CartridgeError, ValueError) as e:
            logger.critical(str(e))
            return 1
        if cartridge.empty:
            logger.critical(f"ROM '{args.rom}' is empty")
            return 1
        logger.info(f"Loaded ROM '{args.rom}' ({cartridge.rom_size} bytes)")

        # The mixer must be configured before pygame.init()
        audio = PygameAudio(config, logger)
        pygame.init()
        display = PygameDisplay(config, caption=f"chipvm - {args.rom}")
        state = create_state(jax.random.PRNGKey(config.seed))

        try:
            run(state, display, PygameInput(), audio, cartridge, logger, config)
        except StackError as e:
            logger.critical(f"Program halted: {e}")
            return 1
        finally:
            audio.stop_beep()
        return 0
    finally:
        pygame.quit()
        logger.close()


if __name__ == "__main__":
    raise SystemExit(main())
