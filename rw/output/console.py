"""Console output.

All user-facing output goes through `ConsoleProtocol` so services never
print directly and tests can capture messages with `MockConsole`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from rich.console import Console
from rich.markup import escape

__all__ = ["ConsoleProtocol", "MockConsole", "RichConsole", "Style"]


class Style(Enum):
    DEFAULT = ""
    DIM = "dim"
    INFO = "cyan"
    SUCCESS = "green"
    WARNING = "yellow"
    ERROR = "red"
    HEADER = "bold"


class ConsoleProtocol(Protocol):
    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def header(self, title: str) -> None: ...

    def newline(self) -> None: ...


class RichConsole:
    """Console backed by rich. Errors go to stderr."""

    def __init__(self, *, no_color: bool = False) -> None:
        self._out = Console(no_color=no_color, highlight=False)
        self._err = Console(stderr=True, no_color=no_color, highlight=False)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._out.print(escape(message), style=style.value or None)

    def success(self, message: str) -> None:
        self._out.print(f"[green]ok[/green]: {escape(message)}")

    def warning(self, message: str) -> None:
        self._err.print(f"[yellow]warning[/yellow]: {escape(message)}")

    def error(self, message: str) -> None:
        self._err.print(f"[bold red]error[/bold red]: {escape(message)}")

    def header(self, title: str) -> None:
        self._out.print(f"[bold]{escape(title)}[/bold]")

    def newline(self) -> None:
        self._out.print()


@dataclass
class MockConsole:
    """Records messages instead of printing them."""

    messages: list[tuple[str, Style]] = field(default_factory=list)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.messages.append((message, style))

    def success(self, message: str) -> None:
        self.messages.append((message, Style.SUCCESS))

    def warning(self, message: str) -> None:
        self.messages.append((message, Style.WARNING))

    def error(self, message: str) -> None:
        self.messages.append((message, Style.ERROR))

    def header(self, title: str) -> None:
        self.messages.append((title, Style.HEADER))

    def newline(self) -> None:
        self.messages.append(("", Style.DEFAULT))

    def texts(self, style: Style | None = None) -> list[str]:
        return [m for m, s in self.messages if style is None or s == style]

    def contains(self, needle: str) -> bool:
        return any(needle in m for m, _ in self.messages)
