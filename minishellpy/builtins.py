"""Commands the shell runs itself: echo, pwd, env, cd, exit, export, unset."""

from __future__ import annotations

import os
import sys

from minishellpy.expand import get_env_value
from minishellpy.state import ShellState

_SPACES = frozenset("\t\n\v\f\r ")
_QUOTES = frozenset("'\"")


class ShellExit(Exception):
    """Raised by ``exit``; ``status`` is the process exit status (0-255)."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.status = code & 0xFF


def _error(message: str) -> None:
    print(message, file=sys.stderr)


def parse_int_prefix(text: str) -> int:
    """Read a leading, optionally signed decimal number; 0 if there is none."""
    i = 0
    end = len(text)
    while i < end and text[i] in _SPACES:
        i += 1
    if text.startswith("+", i) and not text.startswith("-", i + 1):
        i += 1
    sign = 1
    if text.startswith("-", i):
        sign = -1
        i += 1
    start = i
    while i < end and "0" <= text[i] <= "9":
        i += 1
    digits = text[start:i]
    return sign * int(digits) if digits else 0


def builtin_echo(args: list[str]) -> int:
    """Print the arguments separated by spaces; ``-n`` drops the newline."""
    words = args[1:]
    newline = True
    if words and words[0] == "-n":
        newline = False
        words = words[1:]
    sys.stdout.write(" ".join(words) + ("\n" if newline else ""))
    sys.stdout.flush()
    return 0


def builtin_pwd() -> int:
    """Print the current working directory."""
    try:
        cwd = os.getcwd()
    except OSError as exc:
        _error(f"pwd: {exc.strerror}")
        return 1
    print(cwd)
    return 0


def builtin_env(env: list[str]) -> int:
    """Print every ``NAME=value`` entry of the environment."""
    for entry in env:
        print(entry)
    return 0


def _cd_too_many(args: list[str]) -> bool:
    if len(args) > 2:
        return args[1] != "--" or len(args) > 3
    return False


def _cd_target(args: list[str], state: ShellState) -> str | None:
    if len(args) < 2:
        return get_env_value(state, "HOME")
    if args[1] == "--":
        return args[2] if len(args) > 2 else get_env_value(state, "HOME")
    if args[1] == "-":
        previous_dir = get_env_value(state, "OLD" + "PWD")
        if not previous_dir:
            _error("minishell: cd: OLDPWD not set")
            return None
        print(previous_dir)
        return previous_dir
    return args[1]


def builtin_cd(args: list[str], state: ShellState) -> int:
    """Change directory and keep ``PWD`` and ``OLDPWD`` up to date."""
    if _cd_too_many(args):
        _error("minishell: cd: too many arguments")
        state.last_exit = 1
        return 1
    try:
        previous_dir = os.getcwd()
    except OSError as exc:
        _error(f"getcwd: {exc.strerror}")
        return 1
    target = _cd_target(args, state)
    if target is None:
        return 1
    try:
        os.chdir(target)
    except OSError as exc:
        _error(f"cd: {exc.strerror}")
        return 1
    update_env(state, f"OLDPWD={previous_dir}")
    update_env(state, f"PWD={os.getcwd()}")
    return 0


def _is_numeric(text: str) -> bool:
    body = text[1:] if text[:1] in ("-", "+") else text
    return all("0" <= ch <= "9" for ch in body)


def builtin_exit(args: list[str], state: ShellState) -> int:
    """Leave the shell by raising ShellExit; returns 1 on too many arguments."""
    sys.stdout.write("exit\n")
    sys.stdout.flush()
    if len(args) < 2:
        raise ShellExit(state.last_exit)
    if not _is_numeric(args[1]):
        _error("minishell: exit: numeric argument required")
        raise ShellExit(255)
    if len(args) > 2:
        _error("minishell: exit: too many arguments")
        return 1
    raise ShellExit(parse_int_prefix(args[1]))


def _is_export_identifier(text: str) -> bool:
    if not text or "0" <= text[0] <= "9":
        return False
    name = text.partition("=")[0]
    return all(ch == "-" or ch.isascii() and ch.isalnum() for ch in name)


def _is_unset_identifier(text: str) -> bool:
    if not text or "0" <= text[0] <= "9":
        return False
    return all(ch == "_" or ch.isascii() and ch.isalnum() for ch in text)


def _remove_quotes(value: str) -> str:
    if value and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def _clean_export_arg(arg: str) -> str:
    key, eq, value = arg.partition("=")
    if not eq:
        return arg
    return f"{key}={_remove_quotes(value)}"


def update_env(state: ShellState, arg: str) -> None:
    """Set ``NAME=value`` in the environment, replacing an existing entry."""
    clean = _clean_export_arg(arg)
    eq = clean.find("=")
    if eq != -1:
        prefix = clean[:eq + 1]
        for index, entry in enumerate(state.env):
            if entry.startswith(prefix):
                state.env[index] = clean
                return
    state.env.append(clean)


def add_to_export_only(state: ShellState, name: str) -> None:
    """Record a name exported without a value, once."""
    if name not in state.export_only:
        state.export_only.append(name)


def remove_from_export_only(state: ShellState, name: str) -> None:
    """Forget a name exported without a value."""
    state.export_only = [entry for entry in state.export_only if entry != name]


def _key_in_env(env: list[str], key: str) -> bool:
    prefix = key + "="
    return any(entry.startswith(prefix) for entry in env)


def export_listing(state: ShellState) -> list[str]:
    """Return the sorted ``declare -x`` lines that bare ``export`` prints."""
    combined = list(state.env)
    for name in state.export_only:
        if not _key_in_env(combined, name):
            combined.append(name)
    lines = []
    for entry in sorted(combined):
        key, eq, value = entry.partition("=")
        lines.append(f'declare -x {key}="{value}"' if eq else f"declare -x {entry}")
    return lines


def print_export(state: ShellState) -> None:
    """Print the export listing."""
    for line in export_listing(state):
        print(line)


def builtin_export(args: list[str], state: ShellState) -> int:
    """Export variables, or list them when no argument is given."""
    if len(args) < 2:
        print_export(state)
        return 0
    for arg in args[1:]:
        if not _is_export_identifier(arg):
            _error("minishell: export: not a valid identifier")
            state.last_exit = 1
            return 1
        if "=" in arg:
            remove_from_export_only(state, arg.partition("=")[0])
            update_env(state, arg)
        else:
            add_to_export_only(state, arg)
    return 0


def builtin_unset(args: list[str], state: ShellState) -> int:
    """Remove variables from the environment and the export-only list."""
    for name in args[1:]:
        if not _is_unset_identifier(name):
            _error("minishell: unset: not a valid identifier")
            return 1
        prefix = name + "="
        state.env = [entry for entry in state.env if not entry.startswith(prefix)]
        remove_from_export_only(state, name)
    return 0