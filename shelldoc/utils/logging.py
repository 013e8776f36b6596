"""Loguru setup shared by the filtering engine, history loader and CLI.

Import the logger from here, never from loguru directly, so the handlers
below are installed exactly once:

    from shelldoc.utils.logging import logger

SHELLDOC_LOG_LEVEL picks the stderr level (INFO by default).
SHELLDOC_LOG_JSON=1 swaps the coloured stderr lines for Pino NDJSON on
stdout, for piping ``shelldoc filter process`` into log tooling.
"""

import json
import os
import sys
from pathlib import Path

from loguru import logger

PINO_LEVELS = {
    "TRACE": 10,
    "DEBUG": 20,
    "INFO": 30,
    "SUCCESS": 35,
    "WARNING": 40,
    "ERROR": 50,
    "CRITICAL": 60,
}

_STDERR_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}:{line}</cyan> - "
    "<level>{message}</level>"
)

_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message}"


def _pino_record(record) -> dict:
    """Pino field names for a loguru record; bound extras are copied as-is."""
    entry = {
        "level": PINO_LEVELS.get(record["level"].name, 30),
        "time": int(record["time"].timestamp() * 1000),
        "msg": record["message"],
        "pid": record["process"].id,
        **record["extra"],
    }

    exception = record["exception"]
    if exception:
        entry["err"] = {
            "type": exception.type.__name__ if exception.type else "Error",
            "message": str(exception.value) if exception.value else "",
        }

    return entry


def _pino_sink(message):
    # Logging from inside a sink would recurse
    sys.stdout.write(json.dumps(_pino_record(message.record), default=str) + "\n")
    sys.stdout.flush()


def _install_handlers():
    level = os.environ.get("SHELLDOC_LOG_LEVEL", "INFO").upper()

    logger.remove()
    logger.level("DEBUG", color="<blue>")
    logger.level("WARNING", color="<yellow>")

    if os.environ.get("SHELLDOC_LOG_JSON") == "1":
        logger.add(_pino_sink, level=level, colorize=False)
    else:
        # colorize=None lets loguru drop colours when stderr is not a TTY
        logger.add(sys.stderr, level=level, format=_STDERR_FORMAT, colorize=None)


_install_handlers()


def configure_file_logging(log_dir: Path, level: str = "DEBUG") -> int:
    """Also log to ``log_dir/shelldoc.log``, rotated at 10 MB.

    Returns the handler id for ``logger.remove``.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    return logger.add(
        log_dir / "shelldoc.log",
        rotation="10 MB",
        retention="7 days",
        level=level,
        format=_FILE_FORMAT,
    )


__all__ = ["logger", "configure_file_logging"]
