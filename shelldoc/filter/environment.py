"""Environment probing for dependency validation.

The engine never touches the host on its own. Dependency checks ask an
``EnvironmentProber`` what is missing; the default prober reports nothing
missing, and the CLI swaps in ``LocalEnvironmentProber`` on request.
"""

import os
import shutil
from abc import ABC, abstractmethod
from pathlib import Path


class EnvironmentProber(ABC):
    """Answers "what is missing?" for files, executables and variables."""

    @property
    def name(self) -> str:
        """Human-readable name for logging."""
        return self.__class__.__name__

    @abstractmethod
    def missing_files(self, paths: tuple[str, ...], working_directory: str) -> set[str]:
        """Subset of paths that do not exist relative to working_directory."""

    @abstractmethod
    def missing_commands(self, names: tuple[str, ...]) -> set[str]:
        """Subset of executable names not found on PATH."""

    @abstractmethod
    def missing_environment(self, names: tuple[str, ...]) -> set[str]:
        """Subset of environment variable names that are unset."""


class AssumePresentProber(EnvironmentProber):
    """Reports everything as present. Keeps validation host-independent."""

    def missing_files(self, paths, working_directory):
        return set()

    def missing_commands(self, names):
        return set()

    def missing_environment(self, names):
        return set()


class LocalEnvironmentProber(EnvironmentProber):
    """Probes the local filesystem, PATH and process environment."""

    def __init__(self, environ: dict[str, str] | None = None):
        self.environ = os.environ if environ is None else environ

    def missing_files(self, paths, working_directory):
        base = Path(working_directory) if working_directory else Path(".")
        missing = set()
        for pattern in paths:
            if any(ch in pattern for ch in "*?["):
                found = next(iter(base.glob(pattern)), None) is not None
            else:
                found = (base / pattern).exists()
            if not found:
                missing.add(pattern)
        return missing

    def missing_commands(self, names):
        return {name for name in names if shutil.which(name) is None}

    def missing_environment(self, names):
        return {name for name in names if not self.environ.get(name)}
