from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import IO, Optional

# Pass as `extra=SUCCESS` to render an info record with the success marker.
SUCCESS = {"success": True}

_RESET = "\033[0m"
_BLUE = "\033[0;34m"
_GREEN = "\033[0;32m"
_YELLOW = "\033[0;33m"
_RED = "\033[0;31m"


class ConsoleFormatter(logging.Formatter):
    """Terminal output in the installer's `==>` / `✓` / `⚠` / `ERROR:` style."""

    def __init__(self, color: bool = False) -> None:
        super().__init__("%(message)s")
        self.color = color

    def _paint(self, code: str, text: str) -> str:
        return f"{code}{text}{_RESET}" if self.color else text

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        if record.levelno >= logging.ERROR:
            return f"{self._paint(_RED, 'ERROR:')} {msg}"
        if record.levelno >= logging.WARNING:
            return f"{self._paint(_YELLOW, '⚠')} {msg}"
        if getattr(record, "success", False):
            return f"{self._paint(_GREEN, '✓')} {msg}"
        if record.levelno <= logging.DEBUG:
            return f"    {msg}"
        return f"{self._paint(_BLUE, '==>')} {msg}"


def use_color(stream: IO[str]) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def configure_logging(
    log_path: Optional[str] = None,
    level: int = logging.INFO,
    stream: Optional[IO[str]] = None,
) -> Optional[str]:
    """Configure logging.

    Console records go to stderr in marker style. A timestamped log file is
    only written when log_path is given, so a dry run touches nothing on disk.

    Returns the log file path in use, if any.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_dotfiles_configured", False):
        return getattr(logger, "_dotfiles_log_path", None)

    console_stream = stream if stream is not None else sys.stderr
    console = logging.StreamHandler(console_stream)
    console.setFormatter(ConsoleFormatter(color=use_color(console_stream)))
    logger.addHandler(console)

    if log_path:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
        logger.addHandler(file_handler)

    setattr(logger, "_dotfiles_configured", True)
    setattr(logger, "_dotfiles_log_path", log_path)

    if log_path:
        logging.getLogger(__name__).debug("Logging to %s", log_path)
    return log_path
