"""Recognise builtin commands and run them inside the shell."""

from __future__ import annotations

from collections.abc import Callable

from minishellpy.builtins import (
    builtin_cd,
    builtin_echo,
    builtin_env,
    builtin_exit,
    builtin_export,
    builtin_pwd,
    builtin_unset,
)
from minishellpy.parser import Command
from minishellpy.state import ShellState

_Runner = Callable[[list[str], ShellState], int]

_BUILTINS: dict[str, _Runner] = {
    "echo": lambda args, state: builtin_echo(args),
    "pwd": lambda args, state: builtin_pwd(),
    "env": lambda args, state: builtin_env(state.env),
    "cd": builtin_cd,
    "exit": builtin_exit,
    "export": builtin_export,
    "unset": builtin_unset,
}


def is_builtin(name: str | None) -> bool:
    """Return True if ``name`` is a command the shell runs itself."""
    return name in _BUILTINS


def run_builtin(command: Command | None, state: ShellState) -> int:
    """Run the builtin named by the command's first word; 1 if there is none."""
    if command is None or not command.args:
        return 1
    runner = _BUILTINS.get(command.args[0])
    if runner is None:
        return 1
    return runner(command.args, state)