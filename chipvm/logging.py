"""Console logging utilities for the emulator.

A single :class:`ConsoleLogger` is built at startup by :func:`create_logger`
and handed to everything that reports diagnostics: the run loop, ROM
loading and the trace dump.
"""

import sys
import time
from typing import Optional, TextIO

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConsoleLogger:
    """Levelled logger writing formatted lines to a text stream."""

    def __init__(
        self,
        name: str = "chipvm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        if self.log_level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.stream = stream if stream is not None else sys.stdout
        self.owns_stream = False
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {k: "" for k in LEVELS + ("RESET",)}
        )

        self.level_order = {level: order for order, level in enumerate(LEVELS)}

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def is_enabled_for(self, level: str) -> bool:
        """Whether a message at ``level`` would be written."""
        return self._should_log(level)

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)

    def close(self):
        """Close the stream if this logger opened it."""
        if self.owns_stream:
            self.stream.close()
            self.owns_stream = False


def create_logger(config) -> ConsoleLogger:
    """Build the process logger from an :class:`~chipvm.config.EmulatorConfig`.

    With ``config.log_file`` set, the file is truncated and receives every
    line; otherwise lines go to stdout. ``config.debug`` forces DEBUG level.
    """
    level = "DEBUG" if config.debug else config.log_level
    stream = open(config.log_file, "w", encoding="utf-8") if config.log_file else None
    logger = ConsoleLogger(name="chipvm", log_level=level, stream=stream)
    logger.owns_stream = stream is not None
    return logger
