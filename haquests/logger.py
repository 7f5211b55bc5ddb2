"""A process-wide logger writing timestamped lines to the console and a file."""

import enum
import sys
from datetime import datetime
from pathlib import Path


class LogLevel(enum.IntEnum):
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    FATAL = 4


class Logger:
    """Writes ``[time] [LEVEL] message`` lines at or above a chosen level."""

    _instance = None

    def __init__(self):
        self.level = LogLevel.INFO
        self.console_output = True
        self.output_file = None

    @classmethod
    def get_instance(cls):
        """Return the shared logger."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def set_level(self, level):
        self.level = LogLevel(level)

    def set_output_file(self, filename):
        """Append every following line to ``filename``."""
        self.output_file = Path(filename)

    def set_console_output(self, enabled):
        self.console_output = bool(enabled)

    def debug(self, message):
        self._write(LogLevel.DEBUG, message)

    def info(self, message):
        self._write(LogLevel.INFO, message)

    def warning(self, message):
        self._write(LogLevel.WARNING, message)

    def error(self, message):
        self._write(LogLevel.ERROR, message)

    def fatal(self, message):
        self._write(LogLevel.FATAL, message)

    def log(self, level, *args):
        """Log the concatenated string forms of ``args``."""
        if level < self.level:
            return
        self._write(LogLevel(level), "".join(str(arg) for arg in args))

    def _write(self, level, message):
        if level < self.level:
            return
        line = f"[{_timestamp()}] [{level.name}] {message}"
        if self.console_output:
            stream = sys.stderr if level >= LogLevel.ERROR else sys.stdout
            print(line, file=stream, flush=True)
        if self.output_file is not None:
            with self.output_file.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")


def _timestamp():
    now = datetime.now()
    return f"{now:%Y-%m-%d %H:%M:%S}.{now.microsecond // 1000:03d}"