"""Turns unexpected exceptions in CLI commands into short click errors.

The full traceback goes to loguru and to ``.shelldoc/error.log``; the user
sees one line naming the exception and where the traceback was written.
"""

import traceback
from collections.abc import Callable
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any

import click

from shelldoc.utils.logging import logger

from .constants import ERROR_LOG_FILE

_RULE = "-" * 72


def _append_error_log(path: Path, command_name: str, summary: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{_RULE}\n{datetime.now().isoformat()} Error in command: {command_name}\n")
        f.write(f"{summary}\n\n{traceback.format_exc()}{_RULE}\n\n")


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorate a click command so crashes exit cleanly with a logged traceback.

    click's own exceptions (usage errors, ``click.Abort``) pass through.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except Exception as e:
            summary = f"{type(e).__name__}: {e}"
            logger.opt(exception=True).error(f"shelldoc {func.__name__} crashed: {summary}")
            _append_error_log(ERROR_LOG_FILE, func.__name__, summary)
            raise click.ClickException(f"{summary}\n\nTraceback written to {ERROR_LOG_FILE}") from e

    return wrapper
