"""Turn expanded tokens into a pipeline of commands."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

from minishellpy.syntax import REDIRECTIONS, ShellSyntaxError

ARG_MAX_LEN = 1024


@dataclass
class Command:
    """One stage of a pipeline with its redirections."""

    args: list[str] = field(default_factory=list)
    infile: str | None = None
    outfile: str | None = None
    append: bool = False
    heredoc: bool = False
    heredoc_delims: list[str] = field(default_factory=list)


def is_redirect(token: str) -> bool:
    """Return True for ``<``, ``>``, ``>>`` and ``<<``."""
    return token in REDIRECTIONS


def _touch(path: str, append: bool) -> None:
    flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
    try:
        os.close(os.open(path, flags, 0o644))
    except OSError as exc:
        print(f"{path}: {exc.strerror}", file=sys.stderr)


def _apply_redirect(command: Command, operator: str, target: str) -> None:
    if operator == "<":
        command.infile = target
    elif operator == "<<":
        command.heredoc_delims.append(target)
        command.heredoc = True
    else:
        append = operator == ">>"
        _touch(target, append)
        command.outfile = target
        command.append = append


def parse(tokens: list[str]) -> list[Command]:
    """Split tokens at pipes; output files are created as they are seen."""
    commands: list[Command] = []
    current: Command | None = None
    stream = iter(tokens)
    for token in stream:
        if current is None:
            current = Command()
            commands.append(current)
        if token == "|":
            current = None
        elif is_redirect(token):
            target = next(stream, None)
            if target is None:
                raise ShellSyntaxError("syntax error near unexpected token `newline'")
            _apply_redirect(current, token, target)
        else:
            current.args.append(token[:ARG_MAX_LEN])
    return commands


def format_commands(commands: list[Command]) -> str:
    """Describe parsed commands, one field per line."""
    lines = []
    for command in commands:
        lines.append("🟦 Command:")
        lines.extend(f"  arg[{index}]: {arg}" for index, arg in enumerate(command.args))
        if command.infile is not None:
            lines.append(f"  infile: {command.infile}")
        if command.outfile is not None:
            lines.append(f"  outfile: {command.outfile} (append: {int(command.append)})")
        if command.heredoc:
            lines.append("  heredoc: yes")
    return "".join(line + "\n" for line in lines)