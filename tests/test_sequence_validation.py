"""Tests for dependency checks and prerequisite sequence rules."""

import pytest

from conftest import make_entry, make_history
from shelldoc.filter import (
    CommandFilter,
    FilterCriteria,
    OptimizationType,
    ValidationErrorType,
)
from shelldoc.filter.environment import (
    AssumePresentProber,
    EnvironmentProber,
    LocalEnvironmentProber,
)
from shelldoc.filter.sequence import SEQUENCE_RULES, SequenceValidator, get_command_dependencies


class MissingProber(EnvironmentProber):
    """Reports a fixed set of names as missing."""

    def __init__(self, files=(), commands=(), environment=()):
        self.files = set(files)
        self.commands = set(commands)
        self.environment = set(environment)

    def missing_files(self, paths, working_directory):
        return {p for p in paths if p in self.files}

    def missing_commands(self, names):
        return {n for n in names if n in self.commands}

    def missing_environment(self, names):
        return {n for n in names if n in self.environment}


def broken(errors):
    return [e for e in errors if e.error_type is ValidationErrorType.BROKEN_SEQUENCE]


class TestDependencyTable:
    def test_known_tools(self):
        tools = {dep.command_pattern for dep in get_command_dependencies()}
        assert {"git", "make", "npm", "yarn", "cargo", "docker", "kubectl", "pip"} <= tools
        assert {"conda", "terraform", "ansible", "mvn", "gradle"} <= tools

    def test_returns_fresh_list(self):
        deps = get_command_dependencies()
        deps.clear()
        assert get_command_dependencies()


class TestDependencyValidation:
    def test_default_prober_reports_nothing(self):
        validator = SequenceValidator(FilterCriteria())
        assert validator.validate_command_dependencies(make_entry("make"), get_command_dependencies()) == []

    def test_missing_makefile(self):
        prober = MissingProber(files={"Makefile", "makefile", "GNUmakefile"})
        validator = SequenceValidator(FilterCriteria(), prober)
        errors = validator.validate_command_dependencies(make_entry("make all"), get_command_dependencies())

        assert len(errors) == 1
        assert errors[0].error_type is ValidationErrorType.MISSING_FILE
        assert errors[0].description == "Missing required file: Makefile or makefile or GNUmakefile"
        assert errors[0].confidence == 0.8

    def test_one_marker_file_is_enough(self):
        prober = MissingProber(files={"Makefile", "GNUmakefile"})
        validator = SequenceValidator(FilterCriteria(), prober)
        assert validator.validate_command_dependencies(make_entry("make"), get_command_dependencies()) == []

    def test_missing_command_and_environment(self):
        prober = MissingProber(commands={"kubectl"}, environment={"KUBECONFIG"})
        validator = SequenceValidator(FilterCriteria(), prober)
        errors = validator.validate_command_dependencies(
            make_entry("kubectl get pods"), get_command_dependencies()
        )

        by_type = {e.error_type: e for e in errors}
        assert by_type[ValidationErrorType.MISSING_COMMAND].description == "Missing required command: kubectl"
        assert by_type[ValidationErrorType.MISSING_COMMAND].confidence == 0.9
        assert by_type[ValidationErrorType.MISSING_ENVIRONMENT].description == (
            "Missing environment variable: KUBECONFIG"
        )
        assert by_type[ValidationErrorType.MISSING_ENVIRONMENT].confidence == 0.7

    def test_tool_must_be_whole_first_token(self):
        prober = MissingProber(commands={"git"})
        validator = SequenceValidator(FilterCriteria(), prober)
        assert validator.validate_command_dependencies(make_entry("gitk"), get_command_dependencies()) == []

    def test_disabled(self):
        prober = MissingProber(commands={"git"})
        validator = SequenceValidator(FilterCriteria(validate_dependencies=False), prober)
        assert validator.validate_command_dependencies(make_entry("git status"), get_command_dependencies()) == []


class TestSequenceRules:
    @pytest.mark.parametrize(
        "history, description",
        [
            (["git push"], "git push without recent commit"),
            (["git commit -m 'x'"], "git commit without staging files"),
            (["make install"], "make install without building first"),
            (["npm start"], "npm start without installing dependencies"),
            (["npm run start"], "npm start without installing dependencies"),
            (["docker run app"], "docker run without recent build"),
            (["kubectl apply -f app.yaml"], "kubectl apply without setting context"),
        ],
    )
    def test_violation(self, history, description):
        validator = SequenceValidator(FilterCriteria())
        errors = broken(validator.validate_command_sequences(make_history(*history)))

        assert [e.description for e in errors] == [description]

    @pytest.mark.parametrize(
        "history",
        [
            ["git add .", "git commit -m 'x'", "git push"],
            ["make", "make install"],
            ["make build", "make install"],
            ["npm ci", "npm start"],
            ["npm i", "npm run start"],
            ["docker build -t app .", "docker run app"],
            ["kubectl config use-context dev", "kubectl apply -f app.yaml"],
        ],
    )
    def test_satisfied(self, history):
        validator = SequenceValidator(FilterCriteria())
        assert broken(validator.validate_command_sequences(make_history(*history))) == []

    def test_push_needs_commit_even_after_add(self):
        validator = SequenceValidator(FilterCriteria())
        errors = broken(validator.validate_command_sequences(make_history("git add .", "git push")))

        assert len(errors) == 1
        assert errors[0].command == "git push"
        assert errors[0].confidence == 0.8
        assert errors[0].suggested_fix == "Run 'git commit' before pushing"

    @pytest.mark.parametrize("command", ["git commit -a -m 'x'", "git commit -am 'x'", "git commit --all"])
    def test_commit_all_exempt(self, command):
        validator = SequenceValidator(FilterCriteria())
        assert broken(validator.validate_command_sequences(make_history(command))) == []

    def test_make_prerequisite_is_exact(self):
        # "make test" does not build
        validator = SequenceValidator(FilterCriteria())
        errors = broken(validator.validate_command_sequences(make_history("make test", "make install")))

        assert len(errors) == 1
        assert errors[0].confidence == 0.9

    def test_npm_init_is_not_install(self):
        validator = SequenceValidator(FilterCriteria())
        errors = broken(validator.validate_command_sequences(make_history("npm init", "npm start")))
        assert len(errors) == 1

    def test_prerequisite_must_come_first(self):
        validator = SequenceValidator(FilterCriteria())
        errors = broken(validator.validate_command_sequences(make_history("git push", "git commit -am x")))
        assert [e.command for e in errors] == ["git push"]

    def test_whitespace_normalized(self):
        validator = SequenceValidator(FilterCriteria())
        history = make_history("git   commit  -am x", "git  push")
        assert broken(validator.validate_command_sequences(history)) == []

    def test_disabled(self):
        validator = SequenceValidator(FilterCriteria(enable_sequence_validation=False))
        assert validator.validate_command_sequences(make_history("git push")) == []

    def test_rule_names_unique(self):
        names = [rule.name for rule in SEQUENCE_RULES]
        assert len(names) == len(set(names))


class TestSuggestFixes:
    def test_one_suggestion_per_error(self):
        command_filter = CommandFilter()
        fixes = command_filter.suggest_sequence_fixes(make_history("git push", "make install"))

        assert [f.optimization_type for f in fixes] == [OptimizationType.SEQUENCE_VALIDATION] * 2
        assert fixes[0].description == "Sequence validation: git push: git push without recent commit"
        assert fixes[0].suggested_replacement == "Run 'git commit' before pushing"
        assert fixes[0].original_commands == ("git push",)
        assert fixes[1].confidence == 0.9

    def test_disabled(self):
        command_filter = CommandFilter(FilterCriteria(suggest_fixes=False))
        assert command_filter.suggest_sequence_fixes(make_history("git push")) == []

    def test_clean_history(self):
        command_filter = CommandFilter()
        assert command_filter.suggest_sequence_fixes(make_history("ls", "pwd")) == []


class TestProbers:
    def test_assume_present(self):
        prober = AssumePresentProber()
        assert prober.missing_files(("Makefile",), "/nowhere") == set()
        assert prober.missing_commands(("definitely-not-a-tool",)) == set()
        assert prober.missing_environment(("NOPE",)) == set()
        assert prober.name == "AssumePresentProber"

    def test_local_files(self, tmp_path):
        (tmp_path / "Makefile").write_text("all:\n")
        (tmp_path / "main.tf").write_text("")
        prober = LocalEnvironmentProber()

        assert prober.missing_files(("Makefile", "pom.xml"), str(tmp_path)) == {"pom.xml"}
        assert prober.missing_files(("*.tf",), str(tmp_path)) == set()
        assert prober.missing_files(("*.gradle",), str(tmp_path)) == {"*.gradle"}

    def test_local_environment(self):
        prober = LocalEnvironmentProber(environ={"KUBECONFIG": "/k", "EMPTY": ""})
        assert prober.missing_environment(("KUBECONFIG", "EMPTY", "UNSET")) == {"EMPTY", "UNSET"}

    def test_local_commands(self):
        prober = LocalEnvironmentProber()
        assert prober.missing_commands(("shelldoc-no-such-binary",)) == {"shelldoc-no-such-binary"}

    def test_engine_uses_prober(self, tmp_path):
        command_filter = CommandFilter(prober=LocalEnvironmentProber(environ={}))
        entry = make_entry("cargo build", working_directory=str(tmp_path))
        errors = command_filter.validate_command_dependencies(entry)

        assert any(e.error_type is ValidationErrorType.MISSING_FILE for e in errors)
