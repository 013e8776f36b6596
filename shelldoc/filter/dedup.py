"""Time-windowed deduplication of repeated commands."""

import re

from shelldoc.filter.models import CommandEntry, FilterCriteria
from shelldoc.utils.logging import logger

# Applied in order, after lower-casing, so the upper-case markers survive.
_TIMESTAMP_PATTERNS = (
    re.compile(r"\d{4}-\d{2}-\d{2}t\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:z|[+-]\d{2}:?\d{2})?"),
    re.compile(r"\d{4}-\d{2}-\d{2}"),
    re.compile(r"\d{2}:\d{2}:\d{2}"),
    re.compile(r"\b\d{10,13}\b"),
)

_FILEPATH_PATTERNS = (
    re.compile(r"/tmp/\S+"),
    re.compile(r"/var/log/\S+"),
    re.compile(r"\.log\.\d+"),
    re.compile(r"/proc/\d+"),
    re.compile(r"\.tmp\.\w+"),
)

_PID_PATTERNS = (
    (re.compile(r"\b(kill\s+(?:-\w+\s+)?)\d+\b"), r"\1PID"),
    (re.compile(r"\b(pid\s+)\d+"), r"\1PID"),
)

_PORT_PATTERNS = (
    (re.compile(r":\d{2,5}\b"), ":PORT"),
    (re.compile(r"\b(port\s+)\d+"), r"\1PORT"),
)


def normalize_command(command: str) -> str:
    """Reduce a command to its stable shape for duplicate detection.

    Variable parts become markers: dates and epochs -> TIMESTAMP, temp/log/proc
    paths -> FILEPATH, process ids -> PID, port numbers -> PORT.

    >>> normalize_command("curl localhost:8080/api")
    'curl localhost:PORT/api'
    """
    normalized = command.lower()

    for pattern in _TIMESTAMP_PATTERNS:
        normalized = pattern.sub("TIMESTAMP", normalized)

    for pattern in _FILEPATH_PATTERNS:
        normalized = pattern.sub("FILEPATH", normalized)

    for pattern, replacement in _PID_PATTERNS:
        normalized = pattern.sub(replacement, normalized)

    for pattern, replacement in _PORT_PATTERNS:
        normalized = pattern.sub(replacement, normalized)

    return " ".join(normalized.split())


def deduplication_key(entry: CommandEntry) -> tuple[str, str]:
    """Normalized text plus directory; the same command elsewhere is distinct."""
    return normalize_command(entry.command), entry.working_directory


def deduplicate_commands(entries: list[CommandEntry], criteria: FilterCriteria) -> list[CommandEntry]:
    """Drop repeats of a command seen within the deduplication window.

    An entry is kept when its key is new, or when at least
    ``criteria.deduplication_window`` seconds passed since the last *kept*
    entry with that key. Order is preserved; the function is idempotent.
    """
    if not criteria.enable_deduplication:
        return list(entries)

    last_kept = {}
    kept = []

    for entry in entries:
        key = deduplication_key(entry)
        previous = last_kept.get(key)
        if previous is not None:
            elapsed = (entry.timestamp - previous).total_seconds()
            if elapsed < criteria.deduplication_window:
                continue

        last_kept[key] = entry.timestamp
        kept.append(entry)

    if len(kept) != len(entries):
        logger.debug(f"Deduplicated {len(entries)} commands to {len(kept)}")

    return kept
