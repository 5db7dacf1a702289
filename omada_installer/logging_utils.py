from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional, TextIO

DEFAULT_LOG_PATH = "/var/log/omada-installer.log"

RED = "\033[1;31m"
YELLOW = "\033[1;33m"
GREEN = "\033[0;32m"
RESET = "\033[0m"

# Pass as logger.info(..., extra=ACTION) etc.
ACTION = {"marker": "[+]"}
NOTE = {"marker": "[~]"}
REMEDY = {"marker": "[~]", "color": YELLOW}
SUCCESS = {"marker": "[~]", "color": GREEN}


class StatusFormatter(logging.Formatter):
    """Render console lines as '<marker> message', colorized when on a TTY."""

    def __init__(self, use_color: bool = True):
        super().__init__(fmt="%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        marker = getattr(record, "marker", None)
        color = getattr(record, "color", None)
        if record.levelno >= logging.ERROR:
            marker = marker or "[!]"
            color = color or RED
        elif record.levelno >= logging.WARNING:
            marker = marker or "[~]"
            color = color or YELLOW

        line = f"{marker} {msg}" if marker else msg
        if color and self.use_color:
            return f"{color}{line}{RESET}"
        return line


class _ConsoleFilter(logging.Filter):
    # Operator-facing lines carry a marker; everything else stays in the file log.
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.WARNING or hasattr(record, "marker")


def configure_logging(
    log_path: Optional[str] = DEFAULT_LOG_PATH,
    level: int = logging.DEBUG,
    also_console: bool = True,
    stream: Optional[TextIO] = None,
    verbose: bool = False,
) -> Optional[str]:
    """Configure logging.

    Every status line and every executed command goes to the log file.
    The console only shows status lines (or everything at INFO+ with
    verbose=True).

    log_path=None configures the console only and touches no file.
    Writing to /var/log may not be permitted; we fall back to a file in the
    working directory and return the path actually used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_omada_configured", False):
        return getattr(logger, "_omada_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    if log_path is not None:
        try:
            Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
        except OSError:
            chosen_path = str(Path.cwd() / "omada-installer.log")
            file_handler = logging.FileHandler(chosen_path)
        file_handler.setFormatter(fmt)
        handlers.append(file_handler)

    if also_console:
        out = stream or sys.stdout
        console = logging.StreamHandler(out)
        console.setLevel(logging.INFO)
        console.setFormatter(StatusFormatter(use_color=out.isatty()))
        if not verbose:
            console.addFilter(_ConsoleFilter())
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_omada_configured", True)
    setattr(logger, "_omada_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path


def reset_logging() -> None:
    """Detach handlers installed by configure_logging()."""

    logger = logging.getLogger()
    if not getattr(logger, "_omada_configured", False):
        return
    for h in list(logger.handlers):
        if isinstance(h, logging.FileHandler) or isinstance(h.formatter, StatusFormatter):
            logger.removeHandler(h)
            h.close()
    delattr(logger, "_omada_configured")
    delattr(logger, "_omada_log_path")
