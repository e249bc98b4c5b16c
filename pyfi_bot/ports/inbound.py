"""Inbound port — platform-agnostic command invocation."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class ArgShape(Enum):
    """How a command's raw arguments are split."""

    TEXT = "text"  # remainder kept as one free-text argument
    TOKENS = "tokens"  # whitespace-separated tokens


@dataclass(frozen=True)
class Invocation:
    """One parsed user command (slash or prefix style)."""

    command_name: str
    arguments: Tuple[str, ...]
    caller: str
    prefix: str = "/"

    @property
    def argument_string(self) -> str:
        return " ".join(a for a in self.arguments if a)

    def argument(self, index: int = 0, default: str = "") -> str:
        if 0 <= index < len(self.arguments):
            return self.arguments[index]
        return default
