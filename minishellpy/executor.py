"""Run parsed commands: builtins in the shell, the rest in child processes."""

from __future__ import annotations

import contextlib
import errno
import os
import signal
import sys
import tempfile
from collections.abc import Callable, Mapping

from minishellpy.builtins import ShellExit
from minishellpy.dispatch import is_builtin, run_builtin
from minishellpy.expand import expand_heredoc_line
from minishellpy.parser import Command
from minishellpy.state import MAX_CMDS, ShellState

HEREDOC_PROMPT = "heredoc> "
COMMAND_NOT_FOUND = 127

Reader = Callable[[str], "str | None"]


class RedirectionError(Exception):
    """A file named in a redirection could not be opened."""

    status = 1


def find_path(cmd: str, env: list[str]) -> str | None:
    """Locate ``cmd`` through the ``PATH`` entry of ``env``."""
    if "/" in cmd:
        return cmd
    path_value = next((entry[5:] for entry in env if entry.startswith("PATH=")), None)
    if path_value is None:
        return None
    for directory in filter(None, path_value.split(":")):
        candidate = f"{directory}/{cmd}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def is_quoted_delim(raw_input: str) -> bool:
    """Return True if the first here-document delimiter in the line is quoted."""
    pos = raw_input.find("<<")
    if pos == -1:
        return False
    rest = raw_input[pos + 2:].lstrip(" \t")
    return rest[:1] in ("'", '"') and rest != ""


def collect_heredoc(
    delim: str,
    quoted: bool,
    reader: Reader,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Read lines up to ``delim``; unquoted bodies get ``$NAME`` expanded."""
    lines = []
    while True:
        line = reader(HEREDOC_PROMPT)
        if line is None or line == delim:
            break
        lines.append(line if quoted else expand_heredoc_line(line, environ))
    return "".join(line + "\n" for line in lines)


def collect_heredocs(command: Command, state: ShellState, reader: Reader) -> str | None:
    """Read every here-document of a command; return the body of the last one."""
    quoted = is_quoted_delim(state.raw_input)
    body = None
    for delim in command.heredoc_delims:
        body = collect_heredoc(delim, quoted, reader)
    return body


def _read_heredoc_line(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def _env_mapping(env: list[str]) -> dict[str, str]:
    return dict(entry.partition("=")[::2] for entry in env if "=" in entry)


def _open_or_fail(path: str, flags: int) -> int:
    try:
        return os.open(path, flags, 0o644)
    except OSError as exc:
        print(f"{path}: {exc.strerror}", file=sys.stderr)
        raise RedirectionError(path) from exc


def _redirect(command: Command, heredoc_text: str | None) -> None:
    if heredoc_text is not None:
        with tempfile.TemporaryFile() as body:
            body.write(heredoc_text.encode())
            body.flush()
            body.seek(0)
            os.dup2(body.fileno(), 0)
    if command.infile is not None:
        fd = _open_or_fail(command.infile, os.O_RDONLY)
        os.dup2(fd, 0)
        os.close(fd)
    if command.outfile is not None:
        mode = os.O_APPEND if command.append else os.O_TRUNC
        fd = _open_or_fail(command.outfile, os.O_WRONLY | os.O_CREAT | mode)
        os.dup2(fd, 1)
        os.close(fd)


def _child_main(
    command: Command,
    state: ShellState,
    heredoc_text: str | None,
    stdin_fd: int,
    stdout_fd: int,
    report_missing: bool,
) -> int:
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    signal.signal(signal.SIGQUIT, signal.SIG_DFL)
    for fd, target in ((stdin_fd, 0), (stdout_fd, 1)):
        if fd != target:
            os.dup2(fd, target)
            os.close(fd)
    sys.stdout = os.fdopen(1, "w", closefd=False)
    sys.stderr = os.fdopen(2, "w", closefd=False)
    try:
        _redirect(command, heredoc_text)
    except RedirectionError as exc:
        return exc.status
    if not command.args:
        return 0
    name = command.args[0]
    if is_builtin(name):
        try:
            return run_builtin(command, state)
        except ShellExit as exc:
            return exc.status
    path = find_path(name, state.env)
    if path is None:
        if report_missing:
            print(f"minishell: command not found: {name}")
            return COMMAND_NOT_FOUND
        print(f"execve: {os.strerror(errno.ENOENT)}", file=sys.stderr)
        return 1
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        os.execve(path, command.args, _env_mapping(state.env))
    except OSError as exc:
        print(f"execve: {exc.strerror}", file=sys.stderr)
    return 1


def _fork(
    command: Command,
    state: ShellState,
    heredoc_text: str | None,
    stdin_fd: int,
    stdout_fd: int,
    report_missing: bool,
) -> int:
    sys.stdout.flush()
    sys.stderr.flush()
    pid = os.fork()
    if pid == 0:
        status = 1
        try:
            status = _child_main(
                command, state, heredoc_text, stdin_fd, stdout_fd, report_missing
            )
        except BaseException:
            status = 1
        finally:
            with contextlib.suppress(Exception):
                sys.stdout.flush()
                sys.stderr.flush()
            os._exit(status)
    return pid


def _exit_status(wait_status: int) -> int | None:
    if os.WIFEXITED(wait_status):
        return os.WEXITSTATUS(wait_status)
    return None


def _heredoc_for(command: Command, state: ShellState) -> str | None:
    if not command.heredoc:
        return None
    return collect_heredocs(command, state, _read_heredoc_line)


def _run_single(command: Command, state: ShellState) -> None:
    heredoc_text = _heredoc_for(command, state)
    pid = _fork(command, state, heredoc_text, 0, 1, True)
    _, wait_status = os.waitpid(pid, 0)
    code = _exit_status(wait_status)
    if code is not None:
        state.last_exit = code


def run_pipeline(commands: list[Command], state: ShellState) -> int:
    """Run commands connected by pipes and return the pipeline's status."""
    if len(commands) > MAX_CMDS:
        print("minishell: too many piped commands", file=sys.stderr)
        return 1
    heredocs = [_heredoc_for(command, state) for command in commands]
    pids = []
    in_fd = 0
    last_index = len(commands) - 1
    for index, (command, heredoc_text) in enumerate(zip(commands, heredocs)):
        if index == last_index:
            read_end, write_end = 0, 1
        else:
            read_end, write_end = os.pipe()
        pids.append(_fork(command, state, heredoc_text, in_fd, write_end, False))
        if write_end != 1:
            os.close(write_end)
        if in_fd != 0:
            os.close(in_fd)
        in_fd = read_end
    statuses = [os.waitpid(pid, 0)[1] for pid in pids]
    # The status reported is that of the first stage.
    code = _exit_status(statuses[0])
    state.last_exit = 1 if code is None else code
    return state.last_exit


def execute(commands: list[Command], state: ShellState) -> int:
    """Run a parsed command line and return the resulting ``last_exit``."""
    if not commands:
        return state.last_exit
    first = commands[0]
    if not first.args:
        if first.heredoc:
            collect_heredocs(first, state, _read_heredoc_line)
            state.last_exit = 0
        return state.last_exit
    if len(commands) > 1:
        run_pipeline(commands, state)
        return state.last_exit
    if (
        is_builtin(first.args[0])
        and first.infile is None
        and first.outfile is None
        and not first.heredoc
    ):
        state.last_exit = run_builtin(first, state)
        return state.last_exit
    _run_single(first, state)
    return state.last_exit