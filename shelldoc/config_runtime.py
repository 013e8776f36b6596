"""Runtime configuration for shelldoc - centralized configuration management."""

import copy
import json
import os
from datetime import timedelta
from pathlib import Path
from typing import Any

from shelldoc.filter.errors import ConfigurationError
from shelldoc.filter.models import FilterCriteria, PrivacyMode
from shelldoc.filter.typo import DEFAULT_TYPO_PATTERNS
from shelldoc.utils.constants import CONFIG_FILE_NAME, ENV_PREFIX, STATE_DIR_NAME
from shelldoc.utils.logging import logger

DEFAULTS = {
    "filter": {
        "exclude_failed": True,
        "only_successful": False,
        "exclude_exit_codes": [1, 2, 126, 127, 130],
        "exclude_patterns": list(DEFAULT_TYPO_PATTERNS),
        "extra_exclude_patterns": [],
        "max_execution_time": 300,  # seconds, 0 disables
        "enable_deduplication": True,
        "deduplication_window": 300,
    },
    "privacy": {
        "enabled": True,
        "mode": "strict",
        "custom_patterns": [],
    },
    "validation": {
        "enabled": True,
        "validate_dependencies": True,
        "suggest_fixes": True,
        "probe_host": False,
    },
    "workflow": {
        "enabled": True,
        "min_frequency": 3,
    },
}

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _coerce_env_value(raw: str, default: Any) -> Any:
    """Convert an environment string to the type of the default value."""
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"expected one of {_TRUE_VALUES + _FALSE_VALUES}")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    if isinstance(default, list):
        items = [v.strip() for v in raw.split(",") if v.strip()]
        if default and all(isinstance(v, int) for v in default):
            return [int(v) for v in items]
        return items
    return raw


def load_runtime_config(root: str = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .shelldoc/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (SHELLDOC_<SECTION>_<KEY>)
    2. .shelldoc/config.json file
    3. Built-in defaults

    Args:
        root: Root directory to look for config file

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / STATE_DIR_NAME / CONFIG_FILE_NAME
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and isinstance(value, type(cfg[section][key])):
                                cfg[section][key] = value
                            else:
                                logger.warning(
                                    f"Ignoring config value {section}.{key}={value!r} in {path}"
                                )
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config file from {path}: {e}")
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"{ENV_PREFIX}_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    cfg[section][key] = _coerce_env_value(value, cfg[section][key])
                except (ValueError, AttributeError) as e:
                    logger.warning(
                        f"Invalid value for environment variable {env_var}: '{value}' - {e}"
                    )
                    logger.info(f"Using default value: {cfg[section][key]}")

    return cfg


def build_filter_criteria(cfg: dict[str, Any]) -> FilterCriteria:
    """Turn a merged runtime config into validated FilterCriteria.

    Raises:
        ConfigurationError: a value is out of range or a pattern does not compile
    """
    filter_cfg = cfg["filter"]
    privacy_cfg = cfg["privacy"]
    validation_cfg = cfg["validation"]
    workflow_cfg = cfg["workflow"]

    try:
        privacy_mode = PrivacyMode(str(privacy_cfg["mode"]).lower())
    except ValueError as e:
        raise ConfigurationError(
            "privacy_mode", f"expected 'lenient' or 'strict', got {privacy_cfg['mode']!r}"
        ) from e

    max_seconds = filter_cfg["max_execution_time"]
    max_execution_time = timedelta(seconds=max_seconds) if max_seconds else None

    return FilterCriteria(
        exclude_failed=filter_cfg["exclude_failed"],
        only_successful=filter_cfg["only_successful"],
        exclude_exit_codes=set(filter_cfg["exclude_exit_codes"]),
        exclude_patterns=list(filter_cfg["exclude_patterns"]) + list(filter_cfg["extra_exclude_patterns"]),
        max_execution_time=max_execution_time,
        enable_deduplication=filter_cfg["enable_deduplication"],
        deduplication_window=filter_cfg["deduplication_window"],
        enable_workflow_optimization=workflow_cfg["enabled"],
        min_frequency_for_optimization=workflow_cfg["min_frequency"],
        enable_privacy_filtering=privacy_cfg["enabled"],
        privacy_mode=privacy_mode,
        custom_sensitive_patterns=list(privacy_cfg["custom_patterns"]),
        enable_sequence_validation=validation_cfg["enabled"],
        validate_dependencies=validation_cfg["validate_dependencies"],
        suggest_fixes=validation_cfg["suggest_fixes"],
    )
