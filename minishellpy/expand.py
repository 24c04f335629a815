"""Variable, exit-status, tilde and quote expansion."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping

from minishellpy.state import ShellState

_NAME = re.compile(r"[A-Za-z0-9_]+")
_PLAIN = re.compile(r"[^$'\"]+")
_HEREDOC_VAR = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)")


def get_env_value(state: ShellState, name: str) -> str:
    """Return the value of ``name`` in the shell environment, or ''."""
    if not name:
        return "$"
    prefix = name + "="
    return next(
        (entry[len(prefix):] for entry in state.env if entry.startswith(prefix)), ""
    )


def _expand_tilde(token: str, state: ShellState) -> str | None:
    if token == "~" or token.startswith("~/"):
        return get_env_value(state, "HOME") + token[1:]
    return None


def _expand_dollar(text: str, i: int, state: ShellState) -> tuple[str, int]:
    if text.startswith("?", i + 1):
        return str(state.last_exit), i + 2
    match = _NAME.match(text, i + 1)
    if match:
        return get_env_value(state, match.group()), match.end()
    return "$", i + 1


def _expand_dollars(body: str, state: ShellState) -> str:
    parts = []
    i = 0
    while i < len(body):
        if body[i] == "$":
            text, i = _expand_dollar(body, i, state)
        else:
            end = body.find("$", i)
            end = len(body) if end == -1 else end
            text, i = body[i:end], end
        parts.append(text)
    return "".join(parts)


def _closing(token: str, quote: str, start: int) -> int:
    end = token.find(quote, start)
    return len(token) if end == -1 else end


def expand_token(token: str, state: ShellState) -> str:
    """Expand one token and remove its quotes."""
    tilde = _expand_tilde(token, state)
    if tilde is not None:
        return tilde
    parts = []
    i = 0
    while i < len(token):
        ch = token[i]
        if ch == "'":
            end = _closing(token, "'", i + 1)
            parts.append(token[i + 1:end])
            i = end + 1
        elif ch == '"':
            end = _closing(token, '"', i + 1)
            parts.append(_expand_dollars(token[i + 1:end], state))
            i = end + 1
        elif ch == "$":
            text, i = _expand_dollar(token, i, state)
            parts.append(text)
        else:
            match = _PLAIN.match(token, i)
            parts.append(match.group())
            i = match.end()
    return "".join(parts)


def expand_tokens(tokens: list[str], state: ShellState) -> list[str]:
    """Expand every token of a command line."""
    return [expand_token(token, state) for token in tokens]


def expand_heredoc_line(line: str, environ: Mapping[str, str] | None = None) -> str:
    """Replace ``$NAME`` in a here-document line from the process environment."""
    env = os.environ if environ is None else environ
    return _HEREDOC_VAR.sub(lambda match: env.get(match.group(1), ""), line)