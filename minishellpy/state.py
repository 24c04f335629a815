"""Interpreter state shared by every stage of the shell."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

MAX_CMDS = 256


@dataclass
class ShellState:
    """Environment, exported-only names and last exit status of the shell."""

    env: list[str] = field(default_factory=list)
    last_exit: int = 0
    raw_input: str = ""
    export_only: list[str] = field(default_factory=list)

    def env_names(self) -> list[str]:
        """Return the variable names of the environment, in order."""
        return [entry.partition("=")[0] for entry in self.env]


def init_state(envp: Iterable[str] | Mapping[str, str]) -> ShellState:
    """Build a fresh state from ``NAME=value`` strings or a mapping."""
    if isinstance(envp, Mapping):
        entries = [f"{name}={value}" for name, value in envp.items()]
    else:
        entries = list(envp)
    return ShellState(env=entries)