"""Read-eval loop of the shell and its command-line entry point."""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Callable

from minishellpy.builtins import ShellExit
from minishellpy.executor import execute
from minishellpy.expand import expand_tokens
from minishellpy.lexer import tokenize
from minishellpy.parser import parse
from minishellpy.state import ShellState, init_state
from minishellpy.syntax import ShellSyntaxError, check_syntax

try:
    import readline as _readline
except ImportError:
    _readline = None

PROMPT = "minishell$ "


def process_line(line: str, state: ShellState) -> int:
    """Tokenize, check, expand, parse and run one line; return ``last_exit``."""
    try:
        tokens = check_syntax(tokenize(line))
        expanded = check_syntax(expand_tokens(tokens, state))
        commands = parse(expanded)
    except ShellSyntaxError as exc:
        print(exc, file=sys.stderr)
        state.last_exit = exc.status
        return state.last_exit
    execute(commands, state)
    return state.last_exit


def process_input(text: str, state: ShellState) -> int:
    """Run everything the user entered, one non-empty line at a time."""
    state.raw_input = text
    if "\n" in text:
        for line in filter(None, text.split("\n")):
            process_line(line, state)
    else:
        process_line(text, state)
    return state.last_exit


def _read_command(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None
    except KeyboardInterrupt:
        sys.stdout.write("\n")
        return ""


def mini_loop(
    state: ShellState, reader: Callable[[str], str | None] | None = None
) -> int:
    """Prompt and run commands until end of input or ``exit``; return the status."""
    read = reader or _read_command
    while True:
        line = read(PROMPT)
        if line is None:
            sys.stdout.write("\nexit\n")
            sys.stdout.flush()
            return 0
        if line and _readline is not None:
            _readline.add_history(line)
        try:
            process_input(line, state)
        except ShellExit as exc:
            return exc.status
        except KeyboardInterrupt:
            sys.stdout.write("\n")


def _handle_signals() -> None:
    signal.signal(signal.SIGQUIT, lambda signum, frame: None)


def main(argv: list[str] | None = None) -> int:
    """Start an interactive shell; no arguments are accepted."""
    args = sys.argv[1:] if argv is None else list(argv)
    if args:
        print("Minishell does not accept arguments!")
        return 1
    _handle_signals()
    return mini_loop(init_state(os.environ))