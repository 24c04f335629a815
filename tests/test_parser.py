import pytest

from minishellpy.parser import ARG_MAX_LEN, Command, format_commands, is_redirect, parse
from minishellpy.syntax import ShellSyntaxError


@pytest.fixture(autouse=True)
def in_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_is_redirect():
    assert [is_redirect(t) for t in ["<", ">", ">>", "<<", "|", "ls"]] == [
        True, True, True, True, False, False,
    ]


def test_single_command():
    assert parse(["ls", "-l"]) == [Command(args=["ls", "-l"])]


def test_pipeline_split():
    commands = parse(["ls", "|", "wc", "-l"])
    assert [c.args for c in commands] == [["ls"], ["wc", "-l"]]


def test_trailing_pipe_adds_nothing():
    assert [c.args for c in parse(["ls", "|"])] == [["ls"]]


def test_empty_middle_stage():
    assert [c.args for c in parse(["a", "|", "|", "b"])] == [["a"], [], ["b"]]


def test_input_redirect():
    command = parse(["cat", "<", "in.txt"])[0]
    assert command.args == ["cat"]
    assert command.infile == "in.txt"


def test_output_redirect_creates_and_truncates(in_tmp):
    target = in_tmp / "out.txt"
    target.write_text("old")
    command = parse(["echo", "hi", ">", "out.txt"])[0]
    assert command.outfile == "out.txt"
    assert command.append is False
    assert target.read_text() == ""


def test_append_redirect_keeps_content(in_tmp):
    target = in_tmp / "log.txt"
    target.write_text("old")
    command = parse(["echo", ">>", "log.txt"])[0]
    assert command.append is True
    assert target.read_text() == "old"


def test_last_output_wins(in_tmp):
    command = parse([">", "a", ">>", "b"])[0]
    assert command.outfile == "b"
    assert (in_tmp / "a").exists()


def test_heredoc_delimiters():
    command = parse(["<<", "one", "cat", "<<", "two"])[0]
    assert command.heredoc is True
    assert command.heredoc_delims == ["one", "two"]
    assert command.args == ["cat"]


def test_long_argument_truncated():
    assert parse(["x" * (ARG_MAX_LEN * 2)])[0].args == ["x" * ARG_MAX_LEN]


def test_missing_redirect_target():
    with pytest.raises(ShellSyntaxError):
        parse(["cat", "<"])


def test_format_commands():
    text = format_commands(parse(["ls", "<", "in", "<<", "end"]))
    lines = text.splitlines()
    assert lines[0] == "🟦 Command:"
    assert "  arg[0]: ls" in lines
    assert "  infile: in" in lines
    assert lines[-1] == "  heredoc: yes"


def test_format_empty():
    assert format_commands([]) == ""