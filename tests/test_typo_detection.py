"""Tests for edit-distance, transposition and keyboard typo detection."""

import pytest

from conftest import make_entry
from shelldoc.filter import CommandFilter, FilterCriteria
from shelldoc.filter.typo import (
    COMMON_COMMANDS,
    DEFAULT_TYPO_PATTERNS,
    KNOWN_COMMANDS,
    detect_typo,
    edit_distance,
    find_close_command,
    find_keyboard_typo,
    find_transposition,
    is_keyboard_typo,
    is_likely_typo,
    is_transposition,
)


class TestEditDistance:
    def test_identical_strings(self):
        assert edit_distance("cat", "cat") == 0

    def test_swap_costs_two(self):
        assert edit_distance("cat", "cta") == 2
        assert edit_distance("ls", "sl") == 2

    def test_unrelated_words(self):
        assert edit_distance("hello", "world") == 4

    def test_empty_strings(self):
        assert edit_distance("", "") == 0
        assert edit_distance("", "git") == 3
        assert edit_distance("git", "") == 3

    def test_single_edits(self):
        assert edit_distance("grep", "grp") == 1  # deletion
        assert edit_distance("gitt", "git") == 1  # insertion
        assert edit_distance("curl", "cirl") == 1  # substitution

    def test_symmetric(self):
        assert edit_distance("docker", "dokcer") == edit_distance("dokcer", "docker")


class TestTransposition:
    def test_adjacent_swap(self):
        assert is_transposition("sl", "ls")
        assert is_transposition("gti", "git")

    def test_unrelated_words(self):
        assert not is_transposition("cat", "dog")

    def test_non_adjacent_swap_rejected(self):
        # c-a-t vs t-a-c: positions 0 and 2 differ
        assert not is_transposition("tac", "cat")

    def test_length_mismatch(self):
        assert not is_transposition("git", "gitt")

    def test_identical_is_not_transposition(self):
        assert not is_transposition("ls", "ls")

    def test_find_transposition(self):
        assert find_transposition("sl") == "ls"
        assert find_transposition("gerp") == "grep"
        assert find_transposition("ls") is None


class TestCloseCommand:
    def test_one_edit_away(self):
        assert find_close_command("grp") == "grep"
        assert find_close_command("dockr") == "docker"

    def test_known_commands_never_flagged(self):
        for word in ("pwd", "whoami", "date", "git", "make", "test"):
            assert find_close_command(word) is None

    def test_short_words_skipped(self):
        assert find_close_command("lx") is None

    def test_paths_and_assignments_skipped(self):
        assert find_close_command("./gti") is None
        assert find_close_command("FOO=bar") is None


class TestKeyboardTypo:
    def test_adjacent_key(self):
        # k sits next to l
        assert find_keyboard_typo("ks") == "ls"
        assert is_keyboard_typo("ks")

    def test_known_commands_not_flagged(self):
        assert not is_keyboard_typo("ls")
        assert not is_keyboard_typo("git")

    def test_single_character_not_flagged(self):
        assert not is_keyboard_typo("x")

    def test_long_words_not_checked(self):
        assert find_keyboard_typo("systemctk") is None

    def test_non_adjacent_substitution(self):
        # b is nowhere near s
        assert find_keyboard_typo("lb") is None


class TestLikelyTypo:
    @pytest.mark.parametrize("command", ["sl", "gti", "gti status", "grpe foo", "dockr ps"])
    def test_typos(self, command):
        assert is_likely_typo(command)

    @pytest.mark.parametrize("command", ["pwd", "whoami", "date", "ls -la", "git status", ""])
    def test_valid_commands(self, command):
        assert not is_likely_typo(command)

    @pytest.mark.parametrize(
        "command",
        [
            "nvm use 18", "jar cf app.jar .", "cc main.c", "as --version", "ng serve",
            "python2 setup.py", "dash", "ksh", "csh", "gawk '{print $1}' data", "mawk",
            "sshd -t", "gmake", "gvim notes", "ncat -l 9000", "atop", "ping6 ::1",
        ],
    )
    def test_real_commands_near_common_ones(self, command):
        assert detect_typo(command) is None

    @pytest.mark.parametrize("command", ["node18 app.js", "gcc12 -O2 a.c", "python3.12 -m venv .venv"])
    def test_versioned_binaries(self, command):
        assert not is_likely_typo(command)

    @pytest.mark.parametrize(
        "command",
        ["nvm use 18", "jar cf app.jar .", "cc main.c", "python2 setup.py", "dash", "gawk -f x.awk", "ng serve"],
    )
    def test_real_commands_kept_by_filter(self, command):
        # Substring patterns are cleared so only the detectors are exercised
        command_filter = CommandFilter(FilterCriteria(exclude_patterns=["never-matches"]))
        assert command_filter.filter_command(make_entry(command, exit_code=0)).should_include

    def test_detect_typo_reports_detector(self):
        assert detect_typo("sl") == ("transposition", "ls")
        assert detect_typo("grp x") == ("edit_distance", "grep")
        assert detect_typo("ks") == ("keyboard", "ls")
        assert detect_typo("ls") is None


class TestRuleTables:
    def test_known_commands_cover_common(self):
        assert COMMON_COMMANDS <= KNOWN_COMMANDS

    def test_default_patterns_contain_classic_typos(self):
        for pattern in ("sl", "gti", "cd..", "claer", "ehco"):
            assert pattern in DEFAULT_TYPO_PATTERNS

    def test_default_patterns_not_empty_strings(self):
        assert all(DEFAULT_TYPO_PATTERNS)
        assert len(DEFAULT_TYPO_PATTERNS) >= 70
