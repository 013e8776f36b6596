"""Read and write command histories as JSONL.

One JSON object per line:

    {"command": "git status", "timestamp": "2024-01-15T10:30:00Z",
     "exit_code": 0, "working_directory": "/repo", "shell": "bash",
     "output": null, "error": null}

Only ``command`` and ``timestamp`` are required. Blank lines are skipped.
"""

import json
from pathlib import Path

from shelldoc.filter.errors import HistoryFormatError
from shelldoc.filter.models import CommandEntry
from shelldoc.utils.logging import logger


def parse_history_line(line: str, source: str = "<history>", line_number: int = 1) -> CommandEntry:
    """Parse one JSONL record into a CommandEntry."""
    try:
        record = json.loads(line)
    except json.JSONDecodeError as e:
        raise HistoryFormatError(source, line_number, f"invalid JSON ({e.msg})") from e

    if not isinstance(record, dict):
        raise HistoryFormatError(source, line_number, "record is not a JSON object")

    for key in ("command", "timestamp"):
        if key not in record:
            raise HistoryFormatError(source, line_number, f"missing required field '{key}'")

    try:
        return CommandEntry.from_dict(record)
    except (TypeError, ValueError) as e:
        raise HistoryFormatError(source, line_number, str(e)) from e


def load_history(path: str | Path) -> list[CommandEntry]:
    """Load a JSONL history file, ordered by timestamp (stable for ties)."""
    path = Path(path)
    entries = []

    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, 1):
            if not line.strip():
                continue
            entries.append(parse_history_line(line, path.name, line_number))

    entries.sort(key=lambda entry: entry.timestamp)
    logger.debug(f"Loaded {len(entries)} commands from {path}")
    return entries


def dump_history(entries: list[CommandEntry], path: str | Path) -> int:
    """Write entries as JSONL. Returns the number of records written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        for entry in entries:
            f.write(json.dumps(entry.to_dict()) + "\n")

    return len(entries)
