"""Centralized constants for the shelldoc utils package.

Single source of truth for paths, directories and environment variable names
used across the CLI and the configuration loader.
"""

from pathlib import Path

# ============================================================================
# OUTPUT DIRECTORIES
# ============================================================================

# Per-project state directory (config, logs)
STATE_DIR_NAME = ".shelldoc"
STATE_DIR = Path(".") / STATE_DIR_NAME

CONFIG_FILE_NAME = "config.json"
ERROR_LOG_FILE = STATE_DIR / "error.log"

# ============================================================================
# ENVIRONMENT VARIABLES
# ============================================================================

# Prefix for SHELLDOC_<SECTION>_<KEY> runtime overrides
ENV_PREFIX = "SHELLDOC"
