"""Tests for workflow pattern mining."""

import pytest

from conftest import make_entry, make_history
from shelldoc.filter import CommandFilter, FilterCriteria, OptimizationType
from shelldoc.filter.workflow import (
    alias_name,
    extract_cd_target,
    find_directory_optimizations,
    find_frequent_commands,
    find_redundant_sequences,
    optimize_workflow,
    resolve_cd_target,
    reverses_directory_change,
)


class TestExtractCdTarget:
    @pytest.mark.parametrize(
        "command, expected",
        [
            ("cd /tmp", "/tmp"),
            ("cd ..", ".."),
            ("cd", ""),
            ("cd ", ""),
            ("  cd   src  ", "src"),
            ("ls", None),
            ("cdrom", None),
            ("echo cd /tmp", None),
        ],
    )
    def test_targets(self, command, expected):
        assert extract_cd_target(command) == expected

    def test_engine_pass_through(self):
        assert CommandFilter().extract_cd_target("cd /srv") == "/srv"


class TestResolveCdTarget:
    def test_absolute(self):
        assert resolve_cd_target("/srv/app/../web", "/anything") == "/srv/web"

    def test_relative(self):
        assert resolve_cd_target("src", "/repo") == "/repo/src"
        assert resolve_cd_target("..", "/repo/src") == "/repo"

    def test_unknowable(self):
        assert resolve_cd_target("~", "/repo") is None
        assert resolve_cd_target("-", "/repo") is None
        assert resolve_cd_target("", "/repo") is None
        assert resolve_cd_target("src", "") is None


class TestReversal:
    def test_parent_and_dash_always_reverse(self):
        first = make_entry("cd src", working_directory="/repo")
        assert reverses_directory_change(first, make_entry("cd .."))
        assert reverses_directory_change(first, make_entry("cd -"))

    def test_absolute_return(self):
        first = make_entry("cd src", working_directory="/repo")
        second = make_entry("cd /repo", working_directory="/repo/src")
        assert reverses_directory_change(first, second)

    def test_origin_inferred_from_first_cd(self):
        first = make_entry("cd /opt/tool", working_directory="/repo")
        second = make_entry("cd ../../repo", working_directory="")
        assert reverses_directory_change(first, second)

    def test_moving_on(self):
        first = make_entry("cd src", working_directory="/repo")
        second = make_entry("cd lib", working_directory="/repo/src")
        assert not reverses_directory_change(first, second)

    def test_second_not_cd(self):
        assert not reverses_directory_change(make_entry("cd src"), make_entry("ls"))


class TestFrequentCommands:
    def test_alias_suggested(self):
        entries = make_history("git status", "ls", "git status", "git status")
        optimizations = find_frequent_commands(entries, 3)

        assert len(optimizations) == 1
        opt = optimizations[0]
        assert opt.optimization_type is OptimizationType.FREQUENT_COMMAND
        assert opt.description == "Command 'git status' appears 3 times - consider creating an alias"
        assert opt.suggested_replacement == "alias gs='git status'"
        assert opt.confidence == 0.8
        assert opt.original_commands == ("git status",)

    def test_below_threshold(self):
        assert find_frequent_commands(make_history("ls", "ls"), 3) == []

    def test_first_seen_order(self):
        entries = make_history("pwd", "ls", "ls", "pwd")
        commands = [opt.original_commands[0] for opt in find_frequent_commands(entries, 2)]
        assert commands == ["pwd", "ls"]

    def test_exact_text_counted(self):
        # "ls" and "ls " are distinct commands
        assert find_frequent_commands(make_history("ls", "ls ", "ls"), 3) == []

    @pytest.mark.parametrize(
        "command, expected",
        [("git status", "gs"), ("docker compose up -d", "dcu"), ("make", "m"), ("./run.sh", "rs"), ("!!", "cmd")],
    )
    def test_alias_name(self, command, expected):
        assert alias_name(command) == expected


class TestRedundantSequences:
    def test_cd_command_cd_back(self):
        entries = [
            make_entry("cd /project", working_directory="/home"),
            make_entry("make", working_directory="/project"),
            make_entry("cd ..", working_directory="/project"),
        ]
        optimizations = find_redundant_sequences(entries)

        assert len(optimizations) == 1
        opt = optimizations[0]
        assert opt.optimization_type is OptimizationType.REDUNDANT_SEQUENCE
        assert opt.suggested_replacement == "(cd /project && make)"
        assert opt.confidence == 0.9
        assert opt.original_commands == ("cd /project", "make", "cd ..")

    def test_no_return(self):
        entries = [make_entry("cd /project"), make_entry("make"), make_entry("cd /other")]
        assert find_redundant_sequences(entries) == []

    def test_two_commands_in_between(self):
        entries = [make_entry("cd /project"), make_entry("make"), make_entry("make test"), make_entry("cd ..")]
        assert find_redundant_sequences(entries) == []

    def test_middle_cd_is_not_redundant(self):
        entries = [make_entry("cd a"), make_entry("cd b"), make_entry("cd ..")]
        assert find_redundant_sequences(entries) == []


class TestDirectoryOptimizations:
    def test_back_and_forth(self):
        entries = [
            make_entry("cd src", working_directory="/repo"),
            make_entry("ls", working_directory="/repo/src"),
            make_entry("git diff", working_directory="/repo/src"),
            make_entry("cd ..", working_directory="/repo/src"),
        ]
        optimizations = find_directory_optimizations(entries)

        assert len(optimizations) == 1
        opt = optimizations[0]
        assert opt.optimization_type is OptimizationType.DIRECTORY_OPTIMIZATION
        assert opt.description == "Back-and-forth directory changes detected"
        assert opt.confidence == 0.7
        assert opt.original_commands == ("cd src", "cd ..")

    def test_forward_only(self):
        entries = [
            make_entry("cd src", working_directory="/repo"),
            make_entry("cd lib", working_directory="/repo/src"),
        ]
        assert find_directory_optimizations(entries) == []


class TestOptimizeWorkflow:
    def test_ordering(self, criteria):
        entries = [
            make_entry("ls"),
            make_entry("cd /project", working_directory="/home"),
            make_entry("ls", working_directory="/project"),
            make_entry("cd ..", working_directory="/project"),
            make_entry("ls", working_directory="/home"),
        ]
        types = [opt.optimization_type for opt in optimize_workflow(entries, criteria)]

        assert types == [
            OptimizationType.FREQUENT_COMMAND,
            OptimizationType.REDUNDANT_SEQUENCE,
            OptimizationType.DIRECTORY_OPTIMIZATION,
        ]

    def test_disabled(self):
        criteria = FilterCriteria(enable_workflow_optimization=False)
        assert optimize_workflow(make_history("ls", "ls", "ls"), criteria) == []

    def test_min_frequency_from_criteria(self):
        command_filter = CommandFilter(FilterCriteria(min_frequency_for_optimization=2))
        optimizations = command_filter.optimize_workflow(make_history("pwd", "pwd"))
        assert len(optimizations) == 1

    def test_empty(self, criteria):
        assert optimize_workflow([], criteria) == []
