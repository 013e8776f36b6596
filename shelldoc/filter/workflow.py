"""Workflow pattern mining over the kept command history."""

import posixpath
import re
from collections import Counter

from shelldoc.filter.models import CommandEntry, FilterCriteria, OptimizationType, WorkflowOptimization

_ALIAS_WORD = re.compile(r"[A-Za-z][A-Za-z0-9]*")

# cd arguments that always return to the previous directory
_REVERSING_TARGETS = ("..", "-")


def extract_cd_target(command: str) -> str | None:
    """Trimmed argument of a cd command; "" for bare cd, None for anything else.

    >>> extract_cd_target("cd /tmp")
    '/tmp'
    >>> extract_cd_target("cd ")
    ''
    >>> extract_cd_target("ls") is None
    True
    """
    text = command.strip()
    if text == "cd":
        return ""
    if text.startswith("cd "):
        return text[2:].strip()
    return None


def is_cd_command(entry: CommandEntry) -> bool:
    return extract_cd_target(entry.command) is not None


def resolve_cd_target(target: str, working_directory: str) -> str | None:
    """Absolute posix directory a cd target leads to, or None when unknowable."""
    if not target or target.startswith("~") or target == "-":
        return None
    if posixpath.isabs(target):
        return posixpath.normpath(target)
    if not working_directory:
        return None
    return posixpath.normpath(posixpath.join(working_directory, target))


def reverses_directory_change(first: CommandEntry, second: CommandEntry) -> bool:
    """True when the second cd returns to where the first one started."""
    target = extract_cd_target(second.command)
    if target is None:
        return False
    if target in _REVERSING_TARGETS:
        return True

    origin = first.working_directory
    if not origin:
        return False

    # Directory active before the second cd
    current = second.working_directory or resolve_cd_target(
        extract_cd_target(first.command) or "", origin
    )
    if current is None:
        return False

    return resolve_cd_target(target, current) == posixpath.normpath(origin)


def alias_name(command: str) -> str:
    """Short alias from the initials of a command's words ("git status" -> "gs")."""
    words = _ALIAS_WORD.findall(command)
    name = "".join(w[0] for w in words[:3]).lower()
    return name or "cmd"


def find_frequent_commands(entries: list[CommandEntry], min_frequency: int) -> list[WorkflowOptimization]:
    counts = Counter(entry.command for entry in entries)
    optimizations = []

    # Counter preserves first-seen order
    for command, count in counts.items():
        if count < min_frequency:
            continue
        optimizations.append(WorkflowOptimization(
            optimization_type=OptimizationType.FREQUENT_COMMAND,
            description=f"Command '{command}' appears {count} times - consider creating an alias",
            suggested_replacement=f"alias {alias_name(command)}='{command}'",
            confidence=0.8,
            original_commands=(command,),
        ))

    return optimizations


def is_redundant_cd_sequence(first: CommandEntry, middle: CommandEntry, last: CommandEntry) -> bool:
    """cd A; <one command>; cd back. The pair of cds can be a subshell."""
    return (
        is_cd_command(first)
        and not is_cd_command(middle)
        and is_cd_command(last)
        and reverses_directory_change(first, last)
    )


def find_redundant_sequences(entries: list[CommandEntry]) -> list[WorkflowOptimization]:
    optimizations = []

    for first, middle, last in zip(entries, entries[1:], entries[2:]):
        if not is_redundant_cd_sequence(first, middle, last):
            continue
        target = extract_cd_target(first.command) or "DIR"
        optimizations.append(WorkflowOptimization(
            optimization_type=OptimizationType.REDUNDANT_SEQUENCE,
            description="Redundant directory change sequence detected",
            suggested_replacement=f"(cd {target} && {middle.command})",
            confidence=0.9,
            original_commands=(first.command, middle.command, last.command),
        ))

    return optimizations


def find_directory_optimizations(entries: list[CommandEntry]) -> list[WorkflowOptimization]:
    changes = [entry for entry in entries if is_cd_command(entry)]
    optimizations = []

    for first, second in zip(changes, changes[1:]):
        if not reverses_directory_change(first, second):
            continue
        optimizations.append(WorkflowOptimization(
            optimization_type=OptimizationType.DIRECTORY_OPTIMIZATION,
            description="Back-and-forth directory changes detected",
            suggested_replacement="Consider staying in one directory or using absolute paths",
            confidence=0.7,
            original_commands=(first.command, second.command),
        ))

    return optimizations


def optimize_workflow(entries: list[CommandEntry], criteria: FilterCriteria) -> list[WorkflowOptimization]:
    """Frequent commands, then redundant cd triples, then back-and-forth cds."""
    if not criteria.enable_workflow_optimization:
        return []

    optimizations = find_frequent_commands(entries, criteria.min_frequency_for_optimization)
    optimizations.extend(find_redundant_sequences(entries))
    optimizations.extend(find_directory_optimizations(entries))
    return optimizations
