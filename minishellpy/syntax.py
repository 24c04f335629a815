"""Syntax checks on token lists before expansion and parsing."""

from __future__ import annotations

from itertools import zip_longest

OPERATORS = frozenset({"|", "<", ">", ">>", "<<"})
REDIRECTIONS = frozenset({"<", ">", ">>", "<<"})
SYNTAX_ERROR_STATUS = 2


class ShellSyntaxError(Exception):
    """A command line that cannot be parsed."""

    status = SYNTAX_ERROR_STATUS


def is_operator(token: str) -> bool:
    """Return True for pipe and redirection tokens."""
    return token in OPERATORS


def check_syntax(tokens: list[str]) -> list[str]:
    """Return ``tokens`` unchanged, or raise ShellSyntaxError."""
    if not tokens:
        return tokens
    first = tokens[0]
    if is_operator(first):
        heredoc_ok = first == "<<" and len(tokens) > 1 and not is_operator(tokens[1])
        if not heredoc_ok:
            if first == "|":
                message = "syntax error near unexpected token `|'"
            elif first == "<<":
                message = "syntax error near unexpected token `<<'"
            else:
                message = "syntax error near unexpected token"
            raise ShellSyntaxError(message)
    for token, following in zip_longest(tokens, tokens[1:]):
        if token in REDIRECTIONS and (following is None or is_operator(following)):
            raise ShellSyntaxError("syntax error near unexpected token `newline'")
    return tokens