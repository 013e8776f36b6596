"""Include/exclude classification of single command records.

``classify`` applies a fixed priority of checks; the first check that fires
decides the outcome. Deterministic checks (exit codes, failure text, explicit
patterns) carry confidence 1.0, heuristic ones 0.8.

Priority:
    1. only_successful + non-zero exit code
    2. exclude_failed: non-zero exit code, then failure text
    3. exit code in the exclusion set
    4. exclusion patterns (case-insensitive substring)
    5. failure text in output/error
    6. suspicious shape of the first token
    7. transposition / edit-distance typo
    8. keyboard-adjacency typo
    9. include
"""

from shelldoc.filter.models import CommandEntry, FilterCriteria, FilterResult
from shelldoc.filter.typo import (
    DEFAULT_TYPO_PATTERNS,
    find_close_command,
    find_keyboard_typo,
    find_transposition,
)
from shelldoc.utils.logging import logger

HEURISTIC_CONFIDENCE = 0.8
DETERMINISTIC_CONFIDENCE = 1.0

FAILURE_INDICATORS = (
    "error:",
    "failed",
    "not found",
    "permission denied",
    "no such file",
    "command not found",
    "syntax error",
    "invalid option",
    "cannot access",
    "operation not permitted",
)

# Phrases that mark a dead process wherever they appear, including the command line.
FATAL_SIGNAL_INDICATORS = (
    "segmentation fault",
    "core dumped",
    "killed",
    "terminated",
    "aborted",
    "connection refused",
    "network unreachable",
    "host unreachable",
)

# Single-character commands that are real (aliases or binaries).
SINGLE_CHAR_ALLOWED = frozenset({"l", "w", "q"})

# Read-only commands a caller may re-run to verify documentation.
SAFE_TO_TEST_COMMANDS = frozenset({
    "ls", "pwd", "whoami", "date", "echo", "cat", "head", "tail",
    "grep", "find", "which", "type", "file", "stat", "wc",
})

_BUILTIN_PATTERNS = frozenset(p.lower() for p in DEFAULT_TYPO_PATTERNS)


def contains_failure_indicators(text: str | None) -> bool:
    """True when text contains any failure phrase (case-insensitive)."""
    if not text:
        return False
    lowered = text.lower()
    return any(indicator in lowered for indicator in FAILURE_INDICATORS)


def has_failure_output(entry: CommandEntry) -> bool:
    """True when the entry's output or error stream reports a failure."""
    return contains_failure_indicators(entry.error) or contains_failure_indicators(entry.output)


def is_failed_exit(entry: CommandEntry) -> bool:
    """Exit code present and non-zero. A missing exit code is not a failure."""
    return entry.exit_code is not None and entry.exit_code != 0


def is_command_failed(entry: CommandEntry) -> bool:
    """Broad failure predicate: exit code, failure text or a fatal-signal phrase."""
    if is_failed_exit(entry) or has_failure_output(entry):
        return True

    for text in (entry.command, entry.output, entry.error):
        if text and any(phrase in text.lower() for phrase in FATAL_SIGNAL_INDICATORS):
            return True
    return False


def is_safe_to_test(command: str) -> bool:
    """True when the command's first word is a read-only, side-effect-free tool."""
    parts = command.split()
    return bool(parts) and parts[0] in SAFE_TO_TEST_COMMANDS


def match_exclusion_pattern(command: str, patterns: list[str]) -> str | None:
    """First pattern occurring in command (case-insensitive substring), if any."""
    lowered = command.lower()
    for pattern in patterns:
        if pattern.lower() in lowered:
            return pattern
    return None


def _has_repeated_run(word: str) -> bool:
    return any(word[i] == word[i + 1] == word[i + 2] for i in range(len(word) - 2))


def _is_alternating(word: str) -> bool:
    if len(word) < 4 or len(set(word)) != 2:
        return False
    return all(word[i] == word[i % 2] for i in range(len(word)))


def suspicion_reason(command: str) -> str | None:
    """Describe why a command looks like junk input, or None if it looks fine."""
    parts = command.split()
    if not parts:
        return None
    word = parts[0]

    if len(word) == 1 and word not in SINGLE_CHAR_ALLOWED:
        return f"single-character command '{word}'"

    if _has_repeated_run(word):
        return f"repeated characters in '{word}'"

    if _is_alternating(word):
        return f"alternating characters in '{word}'"

    if not any(ch.isalnum() for ch in command):
        return "no alphanumeric characters"

    return None


def is_suspicious_command(command: str) -> bool:
    return suspicion_reason(command) is not None


def classify(entry: CommandEntry, criteria: FilterCriteria) -> FilterResult:
    """Decide whether a single command record belongs in documentation."""
    command = entry.command

    if criteria.only_successful:
        if is_failed_exit(entry):
            return FilterResult(False, "Only successful commands are allowed", DETERMINISTIC_CONFIDENCE)
    elif criteria.exclude_failed:
        if is_failed_exit(entry):
            return FilterResult(
                False,
                f"Command failed with exit code {entry.exit_code}",
                DETERMINISTIC_CONFIDENCE,
            )
        if has_failure_output(entry):
            return FilterResult(
                False, "Command output contains failure indicators", DETERMINISTIC_CONFIDENCE
            )

    if entry.exit_code is not None and entry.exit_code in criteria.exclude_exit_codes:
        return FilterResult(
            False,
            f"Exit code {entry.exit_code} is in exclusion list",
            DETERMINISTIC_CONFIDENCE,
        )

    pattern = match_exclusion_pattern(command, criteria.exclude_patterns)
    if pattern is not None:
        confidence = (
            HEURISTIC_CONFIDENCE if pattern.lower() in _BUILTIN_PATTERNS else DETERMINISTIC_CONFIDENCE
        )
        logger.debug(f"Excluded by pattern {pattern!r}: {command}")
        return FilterResult(False, f"Command matches exclusion pattern: {pattern}", confidence)

    if has_failure_output(entry):
        return FilterResult(
            False, "Command output contains failure indicators", DETERMINISTIC_CONFIDENCE
        )

    detail = suspicion_reason(command)
    if detail is not None:
        logger.debug(f"Suspicious command ({detail}): {command}")
        return FilterResult(False, f"Command appears suspicious: {detail}", HEURISTIC_CONFIDENCE)

    word = entry.first_token
    intended = find_transposition(word) or find_close_command(word)
    if intended:
        logger.debug(f"Likely typo of {intended!r}: {command}")
        return FilterResult(
            False, f"Command is likely a typo of '{intended}'", HEURISTIC_CONFIDENCE
        )

    intended = find_keyboard_typo(word)
    if intended:
        logger.debug(f"Likely keyboard typo of {intended!r}: {command}")
        return FilterResult(
            False, f"Command is likely a keyboard typo of '{intended}'", HEURISTIC_CONFIDENCE
        )

    return FilterResult(True, "Command passed all filters", DETERMINISTIC_CONFIDENCE)
