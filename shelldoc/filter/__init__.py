"""Command filtering and validation engine."""

from shelldoc.filter.engine import CommandFilter
from shelldoc.filter.environment import (
    AssumePresentProber,
    EnvironmentProber,
    LocalEnvironmentProber,
)
from shelldoc.filter.errors import ConfigurationError, HistoryFormatError
from shelldoc.filter.history import dump_history, load_history
from shelldoc.filter.models import (
    CommandDependency,
    CommandEntry,
    FilterCriteria,
    FilteringStats,
    FilterResult,
    OptimizationType,
    PrivacyMode,
    ProcessedCommands,
    SequenceValidationError,
    ValidationErrorType,
    WorkflowOptimization,
)
from shelldoc.filter.typo import DEFAULT_TYPO_PATTERNS

__all__ = [
    # Engine
    "CommandFilter",
    # Models
    "CommandEntry",
    "CommandDependency",
    "FilterCriteria",
    "FilterResult",
    "FilteringStats",
    "OptimizationType",
    "PrivacyMode",
    "ProcessedCommands",
    "SequenceValidationError",
    "ValidationErrorType",
    "WorkflowOptimization",
    "DEFAULT_TYPO_PATTERNS",
    # Collaborators
    "EnvironmentProber",
    "AssumePresentProber",
    "LocalEnvironmentProber",
    "load_history",
    "dump_history",
    # Errors
    "ConfigurationError",
    "HistoryFormatError",
]
