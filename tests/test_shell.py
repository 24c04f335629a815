import os

import pytest

from minishellpy.builtins import ShellExit
from minishellpy.shell import main, mini_loop, process_input, process_line
from minishellpy.state import init_state


def _reader(lines):
    items = iter(lines)
    return lambda prompt: next(items, None)


def test_process_line_runs_builtin():
    state = init_state(["HOME=/tmp"])
    assert process_line("export A=1", state) == 0
    assert "A=1" in state.env


def test_process_line_syntax_error(capsys):
    state = init_state([])
    assert process_line("| ls", state) == 2
    assert state.last_exit == 2
    assert "syntax error near unexpected token `|'" in capsys.readouterr().err


def test_process_line_redirection_error(capsys):
    state = init_state([])
    assert process_line("echo >", state) == 2
    assert "syntax error near unexpected token `newline'" in capsys.readouterr().err


def test_process_line_empty_keeps_status():
    state = init_state([])
    state.last_exit = 4
    assert process_line("", state) == 4


def test_process_line_writes_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    state = init_state(os.environ)
    assert process_line("echo hi > out.txt", state) == 0
    assert (tmp_path / "out.txt").read_text() == "hi\n"


def test_process_line_expands_status(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    state = init_state(os.environ)
    state.last_exit = 3
    assert process_line("echo $? > out.txt", state) == 0
    assert (tmp_path / "out.txt").read_text() == "3\n"


def test_process_line_exit():
    with pytest.raises(ShellExit) as info:
        process_line("exit 7", init_state([]))
    assert info.value.status == 7


def test_process_input_multiple_lines():
    state = init_state([])
    text = "export A=1\n\nexport B=2"
    assert process_input(text, state) == 0
    assert state.raw_input == text
    assert "A=1" in state.env and "B=2" in state.env


def test_mini_loop_end_of_input(capsys):
    state = init_state([])
    assert mini_loop(state, _reader(["export Z=1", None])) == 0
    assert "Z=1" in state.env
    assert capsys.readouterr().out.endswith("\nexit\n")


def test_mini_loop_exit_status(capsys):
    assert mini_loop(init_state([]), _reader(["exit 5"])) == 5
    assert "exit\n" in capsys.readouterr().out


def test_main_rejects_arguments(capsys):
    assert main(["extra"]) == 1
    assert capsys.readouterr().out == "Minishell does not accept arguments!\n"