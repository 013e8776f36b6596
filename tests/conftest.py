"""Pytest configuration and fixtures."""

from datetime import UTC, datetime, timedelta

import pytest

from shelldoc.filter import CommandEntry, CommandFilter, FilterCriteria

BASE_TIME = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)


def make_entry(
    command,
    exit_code=0,
    output=None,
    error=None,
    seconds=0,
    working_directory="/test",
    shell="bash",
):
    """Build a CommandEntry at BASE_TIME + seconds."""
    return CommandEntry(
        command=command,
        timestamp=BASE_TIME + timedelta(seconds=seconds),
        exit_code=exit_code,
        working_directory=working_directory,
        shell=shell,
        output=output,
        error=error,
    )


def make_history(*commands, spacing=60):
    """Entries spaced `spacing` seconds apart, all successful."""
    return [make_entry(cmd, seconds=i * spacing) for i, cmd in enumerate(commands)]


@pytest.fixture
def entry():
    """Factory fixture for single entries."""
    return make_entry


@pytest.fixture
def command_filter():
    """Filter with default criteria."""
    return CommandFilter()


@pytest.fixture
def criteria():
    """Fresh default criteria, safe to mutate."""
    return FilterCriteria()
