"""Typo detection for shell commands.

Pure computational helpers plus the rule tables they read. The tables are
plain module-level data so new commands, typos or keyboard layouts can be
added without touching the detection code.

Detectors, cheapest first:
- transposition: two adjacent characters swapped ("sl" for "ls")
- edit distance: Levenshtein distance <= TYPO_DISTANCE_THRESHOLD
- keyboard adjacency: one key replaced by its QWERTY neighbour ("ks" for "ls")

Every detector ignores tokens in KNOWN_COMMANDS, so a valid command is never
reported as a typo of a similar valid command ("ps" vs "ls").
"""

import re


# ============================================================================
# RULE TABLES
# ============================================================================

# Known misspellings, matched as case-insensitive substrings by the classifier.
DEFAULT_TYPO_PATTERNS: tuple[str, ...] = (
    "sl",  # ls
    "gti",  # git
    "cd..",  # missing space
    "..",  # incomplete command
    "q",  # accidental quit
    "x",  # accidental command
    "claer",  # clear
    "exot",  # exit
    "grpe",  # grep
    "mkdri",  # mkdir
    "tial",  # tail
    "ehco",  # echo
    "cta",  # cat
    "mvoe",  # move
    "cpoy",  # copy
    "sudp",  # sudo
    "whihc",  # which
    "finde",  # find
    "killl",  # kill
    "pign",  # ping
    "wgte",  # wget
    "curll",  # curl
    "vmi",  # vim
    "naon",  # nano
    "emcas",  # emacs
    "tpo",  # top
    "htpo",  # htop
    "pws",  # ps
    "duf",  # du
    "fre",  # free
    "upitme",  # uptime
    "histroy",  # history
    "alais",  # alias
    "soruce",  # source
    "exprot",  # export
    "unste",  # unset
    "chmdo",  # chmod
    "chonw",  # chown
    "tarr",  # tar
    "ziip",  # zip
    "unzpi",  # unzip
    "sssh",  # ssh
    "scpp",  # scp
    "rsyncc",  # rsync
    "moutnt",  # mount
    "umoutnt",  # umount
    "fdiksk",  # fdisk
    "lsblkk",  # lsblk
    "systemclt",  # systemctl
    "servicce",  # service
    "aptget",  # apt-get
    "yumm",  # yum
    "dnff",  # dnf
    "pacmna",  # pacman
    "breww",  # brew
    "snapp",  # snap
    "dockerr",  # docker
    "kubectll",  # kubectl
    "helmm",  # helm
    "terrafrm",  # terraform
    "ansibel",  # ansible
    "vagrnant",  # vagrant
    "nodee",  # node
    "npmm",  # npm
    "yarnn",  # yarn
    "piip",  # pip
    "condaa",  # conda
    "cargoo",  # cargo
    "rustcc",  # rustc
    "pythno",  # python
    "rubby",  # ruby
    "goo",  # go
    "gcccc",  # gcc
    "makee",  # make
    "cmakee",  # cmake
    "ninaj",  # ninja
    "baezl",  # bazel
    "gradel",  # gradle
    "mavne",  # maven
    "antt",  # ant
)

# Commands typos are measured against.
COMMON_COMMANDS: frozenset[str] = frozenset({
    "ls", "cd", "pwd", "cat", "echo", "grep", "find", "which", "chmod", "chown",
    "cp", "mv", "rm", "mkdir", "rmdir", "touch", "head", "tail", "less", "more",
    "ps", "top", "kill", "jobs", "bg", "fg", "nohup", "screen", "tmux",
    "git", "svn", "hg", "make", "cmake", "gcc", "g++", "clang",
    "python", "python3", "node", "npm", "yarn", "pip", "cargo", "rustc",
    "java", "javac", "scala", "go", "ruby", "perl", "php", "bash", "zsh",
    "vim", "emacs", "nano", "code",
    "ssh", "scp", "rsync", "wget", "curl", "ping", "telnet", "ftp", "sftp",
    "tar", "gzip", "gunzip", "zip", "unzip",
    "mount", "umount", "df", "du", "free", "uptime", "uname", "whoami",
    "sudo", "su", "passwd", "useradd", "userdel", "usermod", "groups",
    "systemctl", "service", "crontab", "watch",
    "apt", "apt-get", "yum", "dnf", "pacman", "brew", "snap", "flatpak",
    "docker", "kubectl", "helm", "terraform", "ansible", "vagrant",
    "history", "alias", "unalias", "source", "export", "unset", "env",
    "date", "cal", "bc", "expr", "seq", "sort", "uniq", "cut", "awk", "sed",
    "file", "stat", "lsof", "netstat", "ss", "iptables",
    "fdisk", "lsblk", "blkid", "mkfs", "fsck", "clear", "exit",
})

# Valid commands that are close to a common command but never a typo of one.
KNOWN_COMMANDS: frozenset[str] = COMMON_COMMANDS | frozenset({
    "l", "w", "q", "la", "ll", "vi", "ln", "id", "ip", "nc", "dd", "tr", "wc",
    "od", "nl", "sh", "fd", "rg", "jq", "yq", "gh", "uv", "ld", "at",
    "aws", "gcloud", "az", "bat", "dig", "tac", "tee", "tree", "set", "exec",
    "read", "test", "time", "type", "wait", "kind", "man", "mvn", "rake",
    "npx", "pnpm", "pip3", "pipx", "tox", "htop", "psql", "mysql", "tig",
    "gitk", "copy", "dir", "del", "move", "gem", "bun", "deno", "true",
    "false", "yes", "nvim", "sbt", "ant", "gradle", "maven", "ninja", "bazel",
    "conda", "brew", "xargs", "diff", "patch", "cmp", "file", "host", "zcat",
    "less", "most", "pass", "paste", "join", "split", "mktemp", "basename",
    "dirname", "realpath", "readlink", "printf", "printenv", "pushd", "popd",
    "dirs", "hash", "help", "info", "apropos", "locate", "updatedb", "nice",
    "renice", "pgrep", "pkill", "killall", "trap", "ulimit", "umask", "sync",
    "ssh-add", "ssh-keygen", "openssl", "rustup", "poetry", "pytest", "mypy",
    "ruff", "black", "flake8", "pylint", "node", "tsc", "eslint", "make",
    "command", "builtin", "eval", "shift", "return", "local", "declare",
    "nvm", "jar", "cc", "as", "ng", "python2", "dash", "ksh", "csh", "fish",
    "gawk", "mawk", "nawk", "sshd", "gmake", "gvim", "ncat", "atop", "ping6",
    "rvm", "rbenv", "pyenv", "nodenv", "sdk", "jshell", "kotlin", "swift",
})

# Physical QWERTY neighbours (same row and the rows directly above/below).
QWERTY_ADJACENCY: dict[str, frozenset[str]] = {
    "q": frozenset("was"),
    "w": frozenset("qeasd"),
    "e": frozenset("wrsdf"),
    "r": frozenset("etdfg"),
    "t": frozenset("ryfgh"),
    "y": frozenset("tughj"),
    "u": frozenset("yihjk"),
    "i": frozenset("uojkl"),
    "o": frozenset("ipkl"),
    "p": frozenset("ol"),
    "a": frozenset("qwszx"),
    "s": frozenset("qweadzxc"),
    "d": frozenset("wersfxcv"),
    "f": frozenset("ertdgcvb"),
    "g": frozenset("rtyfhvbn"),
    "h": frozenset("tyugjbnm"),
    "j": frozenset("yuihknm"),
    "k": frozenset("uiojlm"),
    "l": frozenset("iopk"),
    "z": frozenset("asx"),
    "x": frozenset("asdzc"),
    "c": frozenset("sdfxv"),
    "v": frozenset("dfgcb"),
    "b": frozenset("fghvn"),
    "n": frozenset("ghjbm"),
    "m": frozenset("hjkn"),
}

# Maximum Levenshtein distance still reported as a typo.
TYPO_DISTANCE_THRESHOLD = 1

# Keyboard slips are only checked on short words, where they are unambiguous.
KEYBOARD_TYPO_MAX_LENGTH = 6

# Only plain words are compared; paths, scripts and assignments are skipped.
_PLAIN_WORD = re.compile(r"^[a-z][a-z0-9+_-]*$")

# Versioned binaries such as node18 or gcc12
_VERSION_SUFFIX = re.compile(r"[0-9.-]+$")

_SORTED_COMMON = tuple(sorted(COMMON_COMMANDS))


# ============================================================================
# DISTANCE PRIMITIVES
# ============================================================================


def edit_distance(s1: str, s2: str) -> int:
    """Levenshtein distance with unit-cost substitution, insertion and deletion.

    A transposition counts as two edits: edit_distance("ls", "sl") == 2.
    """
    if s1 == s2:
        return 0
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, 1):
        current = [i]
        for j, c2 in enumerate(s2, 1):
            cost = 0 if c1 == c2 else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current

    return previous[-1]


def is_transposition(s1: str, s2: str) -> bool:
    """True when s1 is s2 with exactly one pair of adjacent characters swapped."""
    if len(s1) != len(s2) or len(s1) < 2:
        return False

    diff_positions = [i for i, (a, b) in enumerate(zip(s1, s2)) if a != b]
    if len(diff_positions) != 2:
        return False

    first, second = diff_positions
    return second == first + 1 and s1[first] == s2[second] and s1[second] == s2[first]


# ============================================================================
# DETECTORS
# ============================================================================


def _candidate_word(word: str) -> str | None:
    """Lower-cased word if it is eligible for typo checks, else None."""
    word = word.lower()
    if not word or word in KNOWN_COMMANDS or not _PLAIN_WORD.match(word):
        return None
    if _VERSION_SUFFIX.sub("", word) in KNOWN_COMMANDS:
        return None
    return word


def find_transposition(word: str) -> str | None:
    """Common command that word is a transposition of, if any."""
    word = _candidate_word(word)
    if word is None:
        return None

    for command in _SORTED_COMMON:
        if is_transposition(word, command):
            return command
    return None


def find_close_command(word: str, threshold: int = TYPO_DISTANCE_THRESHOLD) -> str | None:
    """Common command within edit distance threshold of word, if any.

    Words shorter than three characters are left to the keyboard detector:
    nearly every two-letter word is one edit away from some command.
    """
    word = _candidate_word(word)
    if word is None or len(word) < 3:
        return None

    for command in _SORTED_COMMON:
        if abs(len(command) - len(word)) > threshold:
            continue
        distance = edit_distance(word, command)
        if 0 < distance <= threshold:
            return command
    return None


def find_keyboard_typo(word: str) -> str | None:
    """Common command that word differs from by one adjacent-key slip."""
    word = _candidate_word(word)
    if word is None or not 2 <= len(word) <= KEYBOARD_TYPO_MAX_LENGTH:
        return None

    for command in _SORTED_COMMON:
        if len(command) != len(word):
            continue
        diffs = [i for i, (a, b) in enumerate(zip(word, command)) if a != b]
        if len(diffs) != 1:
            continue
        i = diffs[0]
        if word[i] in QWERTY_ADJACENCY.get(command[i], frozenset()):
            return command
    return None


def is_keyboard_typo(word: str) -> bool:
    """True when word looks like a known command typed with a neighbouring key."""
    return find_keyboard_typo(word) is not None


def detect_typo(command: str) -> tuple[str, str] | None:
    """Classify the first token of command as a typo.

    Returns:
        (detector, intended_command) where detector is one of
        "transposition", "edit_distance", "keyboard", or None.
    """
    parts = command.split()
    if not parts:
        return None
    word = parts[0]

    intended = find_transposition(word)
    if intended:
        return "transposition", intended

    intended = find_close_command(word)
    if intended:
        return "edit_distance", intended

    intended = find_keyboard_typo(word)
    if intended:
        return "keyboard", intended

    return None


def is_likely_typo(command: str) -> bool:
    """True when the command's first token is probably a misspelled command."""
    return detect_typo(command) is not None
