"""Data model for the command filtering engine.

Command records come from the capture collaborator and are never mutated here:
sanitization produces derived copies through ``dataclasses.replace``.
Criteria are a plain value object; every collection default is a fresh copy so
an overridden criteria object never shares state with the defaults.
"""

import re
from dataclasses import asdict, dataclass, field, replace
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from shelldoc.filter.errors import ConfigurationError
from shelldoc.filter.typo import DEFAULT_TYPO_PATTERNS


@dataclass(frozen=True)
class CommandEntry:
    """A single executed shell command as captured from a terminal session."""

    command: str
    timestamp: datetime
    exit_code: int | None = None
    working_directory: str = ""
    shell: str = ""
    output: str | None = None
    error: str | None = None

    @property
    def first_token(self) -> str:
        """First whitespace-separated word of the command, or ''."""
        parts = self.command.split()
        return parts[0] if parts else ""

    def with_text(self, command: str, output: str | None, error: str | None) -> "CommandEntry":
        """Derived copy with rewritten text fields; other fields unchanged."""
        return replace(self, command=command, output=output, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CommandEntry":
        """Build an entry from a JSON record (ISO-8601 timestamp, 'Z' allowed).

        Timestamps without an offset are taken as UTC so every entry compares
        against every other one.
        """
        timestamp = data["timestamp"]
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        elif not isinstance(timestamp, datetime):
            raise TypeError(f"timestamp must be an ISO-8601 string, got {type(timestamp).__name__}")
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)

        exit_code = data.get("exit_code")
        if isinstance(exit_code, bool):
            raise TypeError("exit_code must be an integer, got bool")
        return cls(
            command=data["command"],
            timestamp=timestamp,
            exit_code=int(exit_code) if exit_code is not None else None,
            working_directory=data.get("working_directory", ""),
            shell=data.get("shell", ""),
            output=data.get("output"),
            error=data.get("error"),
        )


class PrivacyMode(Enum):
    """How aggressively the sanitizer redacts."""

    LENIENT = "lenient"  # Credentials, keys, tokens, certificates
    STRICT = "strict"  # Also IP addresses and home-directory paths


@dataclass
class FilterCriteria:
    """Tunable filtering configuration.

    All fields may be overridden after construction. ``validate()`` runs on
    construction and again whenever a ``CommandFilter`` adopts the criteria.
    """

    exclude_failed: bool = True
    exclude_exit_codes: set[int] = field(default_factory=lambda: {1, 2, 126, 127, 130})
    exclude_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_TYPO_PATTERNS))
    only_successful: bool = False
    max_execution_time: timedelta | None = field(default_factory=lambda: timedelta(minutes=5))
    enable_deduplication: bool = True
    deduplication_window: int = 300
    enable_workflow_optimization: bool = True
    min_frequency_for_optimization: int = 3
    enable_privacy_filtering: bool = True
    privacy_mode: PrivacyMode = PrivacyMode.STRICT
    custom_sensitive_patterns: list[str] = field(default_factory=list)
    enable_sequence_validation: bool = True
    validate_dependencies: bool = True
    suggest_fixes: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self) -> "FilterCriteria":
        """Reject criteria that would fail later at classification time."""
        if self.deduplication_window < 0:
            raise ConfigurationError("deduplication_window", "must be >= 0 seconds")

        if self.min_frequency_for_optimization < 1:
            raise ConfigurationError("min_frequency_for_optimization", "must be >= 1")

        if self.max_execution_time is not None and self.max_execution_time <= timedelta(0):
            raise ConfigurationError("max_execution_time", "must be positive when set")

        if not isinstance(self.privacy_mode, PrivacyMode):
            raise ConfigurationError(
                "privacy_mode", f"expected PrivacyMode, got {self.privacy_mode!r}"
            )

        for code in self.exclude_exit_codes:
            if not isinstance(code, int) or isinstance(code, bool):
                raise ConfigurationError("exclude_exit_codes", f"not an integer: {code!r}")

        for pattern in self.exclude_patterns:
            if not pattern:
                raise ConfigurationError("exclude_patterns", "empty pattern matches everything")

        for pattern in self.custom_sensitive_patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ConfigurationError(
                    "custom_sensitive_patterns", f"{pattern!r} is not a valid regex ({e})"
                ) from e

        return self


@dataclass(frozen=True)
class FilterResult:
    """Include/exclude decision for one command."""

    should_include: bool
    reason: str
    confidence: float  # 0.0 to 1.0


@dataclass
class FilteringStats:
    """Counters over a command list.

    Categories are independent predicates, not a partition of the excluded
    set: one command can bump several of them.
    """

    total_commands: int = 0
    included_commands: int = 0
    excluded_commands: int = 0
    failed_commands: int = 0
    typo_commands: int = 0
    suspicious_commands: int = 0
    error_output_commands: int = 0
    privacy_filtered_commands: int = 0
    validation_errors: int = 0
    missing_dependencies: int = 0
    broken_sequences: int = 0

    def inclusion_rate(self) -> float:
        """Percentage of commands that were included."""
        if self.total_commands == 0:
            return 0.0
        return (self.included_commands / self.total_commands) * 100.0

    def exclusion_rate(self) -> float:
        """Percentage of commands that were excluded."""
        if self.total_commands == 0:
            return 0.0
        return (self.excluded_commands / self.total_commands) * 100.0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["inclusion_rate"] = self.inclusion_rate()
        data["exclusion_rate"] = self.exclusion_rate()
        return data


@dataclass(frozen=True)
class CommandDependency:
    """Files, executables and environment a tool needs to run."""

    command_pattern: str
    required_files: tuple[str, ...] = ()
    required_commands: tuple[str, ...] = ()
    required_environment: tuple[str, ...] = ()
    description: str = ""


class ValidationErrorType(Enum):
    """Kinds of sequence/dependency validation errors."""

    MISSING_FILE = "missing_file"
    MISSING_COMMAND = "missing_command"
    MISSING_ENVIRONMENT = "missing_environment"
    BROKEN_SEQUENCE = "broken_sequence"
    INVALID_PREREQUISITE = "invalid_prerequisite"


@dataclass(frozen=True)
class SequenceValidationError:
    """A prerequisite or dependency problem found in a command history."""

    command: str
    error_type: ValidationErrorType
    description: str
    suggested_fix: str | None
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "command": self.command,
            "error_type": self.error_type.value,
            "description": self.description,
            "suggested_fix": self.suggested_fix,
            "confidence": self.confidence,
        }


class OptimizationType(Enum):
    """Kinds of workflow suggestions."""

    FREQUENT_COMMAND = "frequent_command"
    REDUNDANT_SEQUENCE = "redundant_sequence"
    DIRECTORY_OPTIMIZATION = "directory_optimization"
    SEQUENCE_VALIDATION = "sequence_validation"


@dataclass(frozen=True)
class WorkflowOptimization:
    """A suggested improvement mined from the command history."""

    optimization_type: OptimizationType
    description: str
    suggested_replacement: str
    confidence: float
    original_commands: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.optimization_type.value,
            "description": self.description,
            "original_commands": list(self.original_commands),
            "suggested_replacement": self.suggested_replacement,
            "confidence": self.confidence,
        }


@dataclass
class ProcessedCommands:
    """Result of one orchestration call; owned by the caller."""

    original_count: int
    filtered_commands: list[CommandEntry] = field(default_factory=list)
    optimizations: list[WorkflowOptimization] = field(default_factory=list)
    stats: FilteringStats = field(default_factory=FilteringStats)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "original_count": self.original_count,
            "filtered_commands": [entry.to_dict() for entry in self.filtered_commands],
            "optimizations": [opt.to_dict() for opt in self.optimizations],
            "stats": self.stats.to_dict(),
        }
