"""Prerequisite and dependency validation over an ordered command history.

Two independent checks run per entry:

1. Dependency check: the entry's leading token names a tool from
   COMMAND_DEPENDENCIES; the environment prober reports which marker files,
   executables and variables are missing.
2. Sequence check: the entry is the terminal action of a SEQUENCE_RULES rule
   and no earlier entry performed the required prior action. Any earlier
   occurrence satisfies a rule; there is no recency cutoff.

Outcomes are data (SequenceValidationError), never exceptions.
"""

import shlex
from collections.abc import Callable
from dataclasses import dataclass

from shelldoc.filter.environment import AssumePresentProber, EnvironmentProber
from shelldoc.filter.models import (
    CommandDependency,
    CommandEntry,
    FilterCriteria,
    OptimizationType,
    SequenceValidationError,
    ValidationErrorType,
    WorkflowOptimization,
)
from shelldoc.utils.logging import logger


# ============================================================================
# DEPENDENCY TABLE
# ============================================================================

COMMAND_DEPENDENCIES: tuple[CommandDependency, ...] = (
    CommandDependency(
        "git", (".git",), ("git",), (), "Git commands require a git repository"
    ),
    CommandDependency(
        "make", ("Makefile", "makefile", "GNUmakefile"), ("make",), (),
        "Make commands require a Makefile",
    ),
    CommandDependency(
        "npm", ("package.json",), ("npm", "node"), (),
        "NPM commands require package.json and Node.js",
    ),
    CommandDependency(
        "yarn", ("package.json",), ("yarn", "node"), (),
        "Yarn commands require package.json and Node.js",
    ),
    CommandDependency(
        "cargo", ("Cargo.toml",), ("cargo", "rustc"), (),
        "Cargo commands require Cargo.toml and Rust",
    ),
    CommandDependency(
        "docker", (), ("docker",), ("DOCKER_HOST",), "Docker commands require Docker daemon"
    ),
    CommandDependency(
        "kubectl", (), ("kubectl",), ("KUBECONFIG",),
        "Kubectl commands require Kubernetes configuration",
    ),
    CommandDependency("pip", (), ("pip", "python"), (), "Pip commands require Python"),
    CommandDependency(
        "conda", (), ("conda",), ("CONDA_DEFAULT_ENV",), "Conda commands require Anaconda/Miniconda"
    ),
    CommandDependency(
        "terraform", ("main.tf", "*.tf"), ("terraform",), (), "Terraform commands require .tf files"
    ),
    CommandDependency(
        "ansible", ("ansible.cfg", "inventory"), ("ansible",), (),
        "Ansible commands require configuration and inventory",
    ),
    CommandDependency(
        "mvn", ("pom.xml",), ("mvn", "java"), ("JAVA_HOME",), "Maven commands require pom.xml and Java"
    ),
    CommandDependency(
        "gradle", ("build.gradle", "build.gradle.kts"), ("gradle", "java"), ("JAVA_HOME",),
        "Gradle commands require build.gradle and Java",
    ),
)


def get_command_dependencies() -> list[CommandDependency]:
    """Fresh copy of the dependency table; callers may extend or filter it."""
    return list(COMMAND_DEPENDENCIES)


# ============================================================================
# SEQUENCE RULES
# ============================================================================


def _normalize(command: str) -> str:
    return " ".join(command.split())


def _starts_with_any(command: str, prefixes: tuple[str, ...]) -> bool:
    """Word-boundary prefix match: "npm i" matches "npm i x" but not "npm init"."""
    return any(command == p or command.startswith(p + " ") for p in prefixes)


def _equals_any(command: str, candidates: tuple[str, ...]) -> bool:
    return command in candidates


def _commits_all_tracked(command: str) -> bool:
    """True for git commit -a / --all / bundled short flags such as -am."""
    try:
        tokens = shlex.split(command)
    except ValueError:
        tokens = command.split()

    for token in tokens[2:]:
        if token in ("-a", "--all"):
            return True
        if token.startswith("-") and not token.startswith("--") and "a" in token[1:]:
            return True
    return False


@dataclass(frozen=True)
class SequenceRule:
    """A terminal action that needs some earlier prerequisite action."""

    name: str
    terminal: tuple[str, ...]
    prerequisite: tuple[str, ...]
    description: str
    suggested_fix: str
    confidence: float
    exact_prerequisite: bool = False
    exempt: Callable[[str], bool] | None = None

    def applies_to(self, command: str) -> bool:
        if not _starts_with_any(command, self.terminal):
            return False
        return self.exempt is None or not self.exempt(command)

    def satisfied_by(self, command: str) -> bool:
        if self.exact_prerequisite:
            return _equals_any(command, self.prerequisite)
        return _starts_with_any(command, self.prerequisite)


SEQUENCE_RULES: tuple[SequenceRule, ...] = (
    SequenceRule(
        name="git-push-needs-commit",
        terminal=("git push",),
        prerequisite=("git commit",),
        description="git push without recent commit",
        suggested_fix="Run 'git commit' before pushing",
        confidence=0.8,
    ),
    SequenceRule(
        name="git-commit-needs-add",
        terminal=("git commit",),
        prerequisite=("git add",),
        description="git commit without staging files",
        suggested_fix="Run 'git add' to stage files before committing",
        confidence=0.7,
        exempt=_commits_all_tracked,
    ),
    SequenceRule(
        name="make-install-needs-build",
        terminal=("make install",),
        prerequisite=("make", "make all", "make clean", "make build"),
        description="make install without building first",
        suggested_fix="Run 'make' before 'make install'",
        confidence=0.9,
        exact_prerequisite=True,
    ),
    SequenceRule(
        name="npm-start-needs-install",
        terminal=("npm start", "npm run start"),
        prerequisite=("npm install", "npm i", "npm ci"),
        description="npm start without installing dependencies",
        suggested_fix="Run 'npm install' first",
        confidence=0.8,
    ),
    SequenceRule(
        name="docker-run-needs-build",
        terminal=("docker run",),
        prerequisite=("docker build", "docker buildx build", "docker image build"),
        description="docker run without recent build",
        suggested_fix="Run 'docker build' before running a local image",
        confidence=0.7,
    ),
    SequenceRule(
        name="kubectl-apply-needs-context",
        terminal=("kubectl apply",),
        prerequisite=("kubectl config",),
        description="kubectl apply without setting context",
        suggested_fix="Set kubectl context with 'kubectl config use-context'",
        confidence=0.6,
    ),
)


# ============================================================================
# VALIDATOR
# ============================================================================


class SequenceValidator:
    """Runs dependency and sequence checks with a pluggable environment prober."""

    def __init__(self, criteria: FilterCriteria, prober: EnvironmentProber | None = None):
        self.criteria = criteria
        self.prober = prober or AssumePresentProber()

    def validate_command_dependencies(
        self, entry: CommandEntry, dependencies: list[CommandDependency]
    ) -> list[SequenceValidationError]:
        """Missing files, executables and variables for the tool entry invokes."""
        if not self.criteria.validate_dependencies:
            return []

        tool = entry.first_token
        if not tool:
            return []

        errors = []
        for dep in dependencies:
            if tool != dep.command_pattern:
                continue

            if dep.required_files:
                missing = self.prober.missing_files(dep.required_files, entry.working_directory)
                # Any one marker file is enough (Makefile or makefile)
                if all(path in missing for path in dep.required_files):
                    errors.append(SequenceValidationError(
                        command=entry.command,
                        error_type=ValidationErrorType.MISSING_FILE,
                        description=f"Missing required file: {' or '.join(dep.required_files)}",
                        suggested_fix=(
                            f"Create {dep.required_files[0]} or run the command in the project directory"
                        ),
                        confidence=0.8,
                    ))

            missing_commands = self.prober.missing_commands(dep.required_commands)
            for name in dep.required_commands:
                if name in missing_commands:
                    errors.append(SequenceValidationError(
                        command=entry.command,
                        error_type=ValidationErrorType.MISSING_COMMAND,
                        description=f"Missing required command: {name}",
                        suggested_fix=f"Install {name} or add it to PATH",
                        confidence=0.9,
                    ))

            missing_env = self.prober.missing_environment(dep.required_environment)
            for name in dep.required_environment:
                if name in missing_env:
                    errors.append(SequenceValidationError(
                        command=entry.command,
                        error_type=ValidationErrorType.MISSING_ENVIRONMENT,
                        description=f"Missing environment variable: {name}",
                        suggested_fix=f"Set {name} environment variable",
                        confidence=0.7,
                    ))

        return errors

    def check_sequence_rules(
        self, entry: CommandEntry, previous: list[CommandEntry]
    ) -> list[SequenceValidationError]:
        """Rule violations for entry given every entry that ran before it."""
        command = _normalize(entry.command)
        errors = []

        for rule in SEQUENCE_RULES:
            if not rule.applies_to(command):
                continue
            if any(rule.satisfied_by(_normalize(prev.command)) for prev in previous):
                continue

            logger.debug(f"Sequence rule {rule.name} violated by: {entry.command}")
            errors.append(SequenceValidationError(
                command=entry.command,
                error_type=ValidationErrorType.BROKEN_SEQUENCE,
                description=rule.description,
                suggested_fix=rule.suggested_fix,
                confidence=rule.confidence,
            ))

        return errors

    def validate_command_sequences(self, entries: list[CommandEntry]) -> list[SequenceValidationError]:
        """All dependency and sequence errors, in history order."""
        if not self.criteria.enable_sequence_validation:
            return []

        dependencies = get_command_dependencies()
        errors = []

        for i, entry in enumerate(entries):
            errors.extend(self.validate_command_dependencies(entry, dependencies))
            errors.extend(self.check_sequence_rules(entry, entries[:i]))

        if errors:
            logger.info(f"Sequence validation found {len(errors)} issue(s) in {len(entries)} commands")

        return errors

    def suggest_sequence_fixes(self, entries: list[CommandEntry]) -> list[WorkflowOptimization]:
        """One SEQUENCE_VALIDATION optimization per error that carries a fix."""
        if not self.criteria.suggest_fixes or not self.criteria.enable_sequence_validation:
            return []

        suggestions = []
        for error in self.validate_command_sequences(entries):
            if not error.suggested_fix:
                continue
            suggestions.append(WorkflowOptimization(
                optimization_type=OptimizationType.SEQUENCE_VALIDATION,
                description=f"Sequence validation: {error.command}: {error.description}",
                suggested_replacement=error.suggested_fix,
                confidence=error.confidence,
                original_commands=(error.command,),
            ))

        return suggestions
