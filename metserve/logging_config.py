"""Loguru-based logging configuration.

Provides:
- Colorized console output on stderr
- metserve.log with every record, and commands.log with the diagnostic
  command trace (launches, exit codes, kills)
- Configurable log levels via environment variables
- Intercept handler for standard logging compatibility (uvicorn)

Records logged through ``logger.bind(command=...)`` carry the command line
they belong to; the formatters print it next to the message.

Environment Variables:
- METSERVE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
- METSERVE_COMMAND_LOG_LEVEL: Level of commands.log. Default: DEBUG
- METSERVE_LOG_DIR: Log directory path. Default: logs/
"""

import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from loguru import Record

# Environment variables
LOG_LEVEL = os.environ.get("METSERVE_LOG_LEVEL", "INFO").upper()
COMMAND_LOG_LEVEL = os.environ.get("METSERVE_COMMAND_LOG_LEVEL", "DEBUG").upper()
LOG_DIR = Path(os.environ.get("METSERVE_LOG_DIR", "logs"))

# Track if logging has been configured to avoid duplicate setup
_logging_configured = False

CONSOLE_PREFIX = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
)
FILE_PREFIX = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - "


def has_command(record: "Record") -> bool:
    """True for records bound to a diagnostic command."""
    return "command" in record["extra"]


def format_console(record: "Record") -> str:
    command = "<magenta>[{extra[command]}]</magenta> " if has_command(record) else ""
    return CONSOLE_PREFIX + command + "<level>{message}</level>\n{exception}"


def format_file(record: "Record") -> str:
    command = "[{extra[command]}] " if has_command(record) else ""
    return FILE_PREFIX + command + "{message}\n{exception}"


def setup_logging() -> None:
    """Configure Loguru logging.

    Sets up:
    - Console output (stderr) with colorized format
    - metserve.log with every record at LOG_LEVEL
    - commands.log with command-bound records at COMMAND_LOG_LEVEL

    Log files are rotated at 10 MB and retained for 7 days.
    """
    global _logging_configured
    if _logging_configured:
        return
    _logging_configured = True

    LOG_DIR.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()

    logger.add(sys.stderr, level=LOG_LEVEL, format=format_console, colorize=True)

    logger.add(
        LOG_DIR / "metserve.log",
        level=LOG_LEVEL,
        format=format_file,
        rotation="10 MB",
        retention="7 days",
    )

    logger.add(
        LOG_DIR / "commands.log",
        level=COMMAND_LOG_LEVEL,
        format=format_file,
        filter=has_command,
        rotation="10 MB",
        retention="7 days",
    )


class InterceptHandler(logging.Handler):
    """Intercept standard logging and redirect to Loguru.

    Lets uvicorn and other libraries that use standard logging
    share the Loguru sinks.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record by forwarding to Loguru."""
        # Get corresponding Loguru level
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)

        # Find caller from where the logged message originated
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def intercept_standard_logging() -> None:
    """Redirect all standard logging to Loguru."""
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # Suppress noisy third-party loggers
    for name in ["httpx", "httpcore", "uvicorn.access"]:
        logging.getLogger(name).setLevel(logging.WARNING)
