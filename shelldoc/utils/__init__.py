"""shelldoc utilities package."""

from .constants import CONFIG_FILE_NAME, ERROR_LOG_FILE, STATE_DIR, STATE_DIR_NAME
from .error_handler import handle_exceptions
from .exit_codes import ExitCodes
from .logging import logger

__all__ = [
    "STATE_DIR",
    "STATE_DIR_NAME",
    "CONFIG_FILE_NAME",
    "ERROR_LOG_FILE",
    "handle_exceptions",
    "ExitCodes",
    "logger",
]
