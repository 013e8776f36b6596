"""CommandFilter: one entry point over classification, dedup, privacy,
sequence validation and workflow mining.

The filter holds a criteria snapshot and an environment prober, nothing else.
Every call works on the list it is given and returns fresh results, so one
instance can serve independent callers.
"""

import copy

from shelldoc.filter import classifier, dedup, typo, workflow
from shelldoc.filter.environment import EnvironmentProber
from shelldoc.filter.models import (
    CommandDependency,
    CommandEntry,
    FilterCriteria,
    FilteringStats,
    FilterResult,
    ProcessedCommands,
    SequenceValidationError,
    ValidationErrorType,
    WorkflowOptimization,
)
from shelldoc.filter.privacy import PrivacySanitizer
from shelldoc.filter.sequence import SequenceValidator, get_command_dependencies
from shelldoc.utils.logging import logger

_DEPENDENCY_ERRORS = frozenset({
    ValidationErrorType.MISSING_FILE,
    ValidationErrorType.MISSING_COMMAND,
    ValidationErrorType.MISSING_ENVIRONMENT,
})

_SEQUENCE_ERRORS = frozenset({
    ValidationErrorType.BROKEN_SEQUENCE,
    ValidationErrorType.INVALID_PREREQUISITE,
})


class CommandFilter:
    """Filters a terminal history down to documentation-worthy commands."""

    def __init__(self, criteria: FilterCriteria | None = None, prober: EnvironmentProber | None = None):
        self._prober = prober
        self.set_criteria(criteria if criteria is not None else FilterCriteria())

    # ------------------------------------------------------------------
    # Criteria
    # ------------------------------------------------------------------

    @property
    def criteria(self) -> FilterCriteria:
        return self.get_criteria()

    def set_criteria(self, criteria: FilterCriteria) -> None:
        """Adopt a copy of criteria. Raises ConfigurationError if they are invalid.

        Later changes to the caller's object have no effect until it is set again.
        """
        snapshot = copy.deepcopy(criteria).validate()
        self._criteria = snapshot
        self._sanitizer = PrivacySanitizer(snapshot)
        self._validator = SequenceValidator(snapshot, self._prober)

    def get_criteria(self) -> FilterCriteria:
        """Copy of the active criteria; edit it and pass it to set_criteria."""
        return copy.deepcopy(self._criteria)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def filter_command(self, entry: CommandEntry) -> FilterResult:
        return classifier.classify(entry, self._criteria)

    def filter_commands(self, entries: list[CommandEntry]) -> list[tuple[CommandEntry, FilterResult]]:
        """(entry, result) pairs in input order, one per entry."""
        return [(entry, self.filter_command(entry)) for entry in entries]

    def get_filtered_commands(self, entries: list[CommandEntry]) -> list[CommandEntry]:
        return [entry for entry, result in self.filter_commands(entries) if result.should_include]

    def get_filtered_and_sanitized_commands(self, entries: list[CommandEntry]) -> list[CommandEntry]:
        return [self.sanitize_command(entry) for entry in self.get_filtered_commands(entries)]

    def is_likely_typo(self, command: str) -> bool:
        return typo.is_likely_typo(command)

    def is_command_failed(self, entry: CommandEntry) -> bool:
        return classifier.is_command_failed(entry)

    def is_safe_to_test(self, command: str) -> bool:
        return classifier.is_safe_to_test(command)

    # ------------------------------------------------------------------
    # Deduplication
    # ------------------------------------------------------------------

    def deduplicate_commands(self, entries: list[CommandEntry]) -> list[CommandEntry]:
        return dedup.deduplicate_commands(entries, self._criteria)

    def normalize_command(self, command: str) -> str:
        return dedup.normalize_command(command)

    # ------------------------------------------------------------------
    # Privacy
    # ------------------------------------------------------------------

    def sanitize_command(self, entry: CommandEntry) -> CommandEntry:
        return self._sanitizer.sanitize_command(entry)

    def contains_sensitive_data(self, text: str) -> bool:
        return self._sanitizer.contains_sensitive_data(text)

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    def optimize_workflow(self, entries: list[CommandEntry]) -> list[WorkflowOptimization]:
        return workflow.optimize_workflow(entries, self._criteria)

    def extract_cd_target(self, command: str) -> str | None:
        return workflow.extract_cd_target(command)

    # ------------------------------------------------------------------
    # Sequence validation
    # ------------------------------------------------------------------

    def get_command_dependencies(self) -> list[CommandDependency]:
        return get_command_dependencies()

    def validate_command_dependencies(
        self, entry: CommandEntry, dependencies: list[CommandDependency] | None = None
    ) -> list[SequenceValidationError]:
        if dependencies is None:
            dependencies = get_command_dependencies()
        return self._validator.validate_command_dependencies(entry, dependencies)

    def validate_command_sequences(self, entries: list[CommandEntry]) -> list[SequenceValidationError]:
        return self._validator.validate_command_sequences(entries)

    def suggest_sequence_fixes(self, entries: list[CommandEntry]) -> list[WorkflowOptimization]:
        return self._validator.suggest_sequence_fixes(entries)

    # ------------------------------------------------------------------
    # Statistics and orchestration
    # ------------------------------------------------------------------

    def get_filtering_stats(self, entries: list[CommandEntry]) -> FilteringStats:
        """Counters over entries; categories are independent per-entry checks.

        typo_commands counts pattern matches as well as detected typos, so a
        command excluded for an unrelated pattern is still tallied there.
        """
        criteria = self._criteria
        stats = FilteringStats(total_commands=len(entries))

        for entry, result in self.filter_commands(entries):
            if result.should_include:
                stats.included_commands += 1
            else:
                stats.excluded_commands += 1

            if classifier.is_failed_exit(entry):
                stats.failed_commands += 1

            if (
                classifier.match_exclusion_pattern(entry.command, criteria.exclude_patterns) is not None
                or typo.is_likely_typo(entry.command)
            ):
                stats.typo_commands += 1

            if classifier.is_suspicious_command(entry.command):
                stats.suspicious_commands += 1

            if classifier.has_failure_output(entry):
                stats.error_output_commands += 1

            if criteria.enable_privacy_filtering and self.contains_sensitive_data(entry.command):
                stats.privacy_filtered_commands += 1

        return stats

    def _dedup_and_filter(self, entries: list[CommandEntry]) -> list[CommandEntry]:
        return self.get_filtered_commands(self.deduplicate_commands(entries))

    def process_commands(self, entries: list[CommandEntry]) -> ProcessedCommands:
        """Dedup, classify-and-keep, mine optimizations; stats over the full input."""
        kept = self._dedup_and_filter(entries)
        processed = ProcessedCommands(
            original_count=len(entries),
            filtered_commands=kept,
            optimizations=self.optimize_workflow(kept),
            stats=self.get_filtering_stats(entries),
        )
        logger.info(f"Kept {len(kept)} of {len(entries)} commands")
        return processed

    def process_commands_with_privacy(self, entries: list[CommandEntry]) -> ProcessedCommands:
        """As process_commands, with every kept entry sanitized."""
        kept = self._dedup_and_filter(entries)
        sanitized = [self.sanitize_command(entry) for entry in kept]
        processed = ProcessedCommands(
            original_count=len(entries),
            filtered_commands=sanitized,
            optimizations=self.optimize_workflow(sanitized),
            stats=self.get_filtering_stats(entries),
        )
        logger.info(f"Kept {len(sanitized)} of {len(entries)} commands (sanitized)")
        return processed

    def process_commands_with_validation(self, entries: list[CommandEntry]) -> ProcessedCommands:
        """As the privacy variant, plus sequence validation over the kept history."""
        kept = self._dedup_and_filter(entries)
        sanitized = [self.sanitize_command(entry) for entry in kept]

        stats = self.get_filtering_stats(entries)
        errors = self.validate_command_sequences(sanitized)
        stats.validation_errors = len(errors)
        stats.missing_dependencies = sum(1 for e in errors if e.error_type in _DEPENDENCY_ERRORS)
        stats.broken_sequences = sum(1 for e in errors if e.error_type in _SEQUENCE_ERRORS)

        optimizations = self.optimize_workflow(sanitized)
        optimizations.extend(self.suggest_sequence_fixes(sanitized))

        logger.info(
            f"Kept {len(sanitized)} of {len(entries)} commands, "
            f"{len(errors)} validation error(s)"
        )
        return ProcessedCommands(
            original_count=len(entries),
            filtered_commands=sanitized,
            optimizations=optimizations,
            stats=stats,
        )
