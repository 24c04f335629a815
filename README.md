# minishellpy

A small interactive shell for POSIX systems. It reads a line, splits it into
words and operators, checks the syntax, expands variables and quotes, and runs
the result: one command, or a pipeline of commands joined by `|`.

## Features

- Single and double quotes. `$NAME` and `$?` are expanded outside quotes and
  inside double quotes; a leading `~` or `~/` becomes `$HOME`.
- Redirections: `<`, `>`, `>>`, and heredocs with `<<`. Output files are
  created as soon as the line is parsed. If the first heredoc delimiter on the
  line is quoted, heredoc bodies are taken as they are; otherwise `$NAME` in
  them is replaced from the process environment.
- Pipelines of up to 256 commands. The status of a pipeline is that of its
  first command.
- Builtins: `echo` (with `-n`), `pwd`, `env`, `cd` (with `-` and `--`),
  `export`, `unset` and `exit`. A builtin without redirections runs inside the
  shell; with redirections, or in a pipeline, it runs in a child process, so
  `cd` or `export` there does not change the shell.
- Programs are looked up on the `PATH` of the shell's environment, or run
  directly when the name holds a `/`. An unknown command gives status 127.
- Syntax errors are printed to standard error and set the status to 2.
- Ctrl-C drops the current line; Ctrl-D prints `exit` and leaves the shell.
  Entered lines are added to the `readline` history when that module is
  available.

## Installing

```
pip install .
```

## Running

```
minishellpy
```

The shell takes no arguments and shows the prompt `minishell$ `:

```
minishell$ export GREETING=hello
minishell$ echo "$GREETING world" | tr a-z A-Z
HELLO WORLD
minishell$ cat << END
heredoc> home is $HOME
heredoc> END
minishell$ exit
```

The command's exit status is the argument given to `exit`, or the last
command's status.

## Using it from Python

Each stage can be used on its own:

```python
from minishellpy.state import init_state
from minishellpy.lexer import tokenize
from minishellpy.syntax import check_syntax
from minishellpy.expand import expand_tokens
from minishellpy.parser import parse, format_commands
from minishellpy.shell import process_line

state = init_state(["HOME=/home/demo", "PATH=/usr/bin:/bin"])
tokens = check_syntax(tokenize("echo $HOME > out.txt"))  # raises ShellSyntaxError
words = expand_tokens(tokens, state)   # ['echo', '/home/demo', '>', 'out.txt']
print(format_commands(parse(words)))   # parse() creates out.txt

process_line("echo hi", state)         # runs the line and sets state.last_exit
```

- `minishellpy.state`: `ShellState` (environment entries, names exported
  without a value, `last_exit`) and `init_state`, which takes `NAME=value`
  strings or a mapping.
- `minishellpy.lexer`: `tokenize`, `count_tokens`, `token_len`.
- `minishellpy.syntax`: `check_syntax`, `is_operator`, `ShellSyntaxError`.
- `minishellpy.expand`: `expand_token`, `expand_tokens`, `get_env_value`,
  `expand_heredoc_line`.
- `minishellpy.parser`: `Command`, `parse`, `is_redirect`, `format_commands`.
- `minishellpy.builtins`: the `builtin_*` functions, `update_env`,
  `export_listing`, and `ShellExit`, which `exit` raises.
- `minishellpy.dispatch`: `is_builtin`, `run_builtin`.
- `minishellpy.executor`: `execute`, `run_pipeline`, `find_path`,
  `collect_heredoc`, `RedirectionError`.
- `minishellpy.shell`: `process_line`, `process_input`, `mini_loop` (which
  accepts any function that takes a prompt and returns a line or `None`) and
  `main`.

## What it does not do

There are no `;`, `&&` or `||` lists, no subshells, no backslash escapes, no
wildcard expansion and no job control. The shell is interactive only: it does
not run script files or commands passed as arguments. Running external
programs uses `fork`, so it needs a POSIX system.

## Tests

```
pip install .[test]
pytest
```