"""Split a command line into words and operator tokens."""

from __future__ import annotations

from collections.abc import Iterator

OPERATOR_CHARS = frozenset("|<>")
_QUOTES = frozenset("'\"")


def _skip_quote(line: str, start: int) -> int:
    close = line.find(line[start], start + 1)
    return len(line) if close == -1 else close + 1


def _skip_word(line: str, i: int) -> int:
    end = len(line)
    while i < end and line[i] != " " and line[i] not in OPERATOR_CHARS:
        i = _skip_quote(line, i) if line[i] in _QUOTES else i + 1
    return i


def token_len(line: str, start: int) -> int:
    """Return the length of the token beginning at ``start``."""
    if start >= len(line):
        return 0
    ch = line[start]
    if ch in OPERATOR_CHARS:
        if ch in "<>" and line[start + 1:start + 2] == ch:
            return 2
        return 1
    return _skip_word(line, start) - start


def _scan(line: str) -> Iterator[str]:
    i = 0
    end = len(line)
    while True:
        while i < end and line[i] == " ":
            i += 1
        if i >= end:
            return
        length = token_len(line, i)
        yield line[i:i + length]
        i += length


def count_tokens(line: str) -> int:
    """Return how many tokens ``line`` holds."""
    return sum(1 for _ in _scan(line))


def tokenize(line: str) -> list[str]:
    """Split ``line`` into tokens; quotes are kept inside their words."""
    return list(_scan(line))