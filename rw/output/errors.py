"""Render pipeline errors for the terminal."""

from __future__ import annotations

import shlex

from rw.core.errors import (
    ArtifactNotFoundError,
    BuildError,
    GenerationError,
    RunWasmError,
    ServerBindError,
    exit_code_for,
)
from rw.output.console import ConsoleProtocol, Style

__all__ = ["error_exit_code", "print_error"]


def print_error(error: RunWasmError, console: ConsoleProtocol) -> None:
    console.error(error.message)

    match error:
        case BuildError(command=command, cwd=cwd):
            console.print(f"command: {shlex.join(command)}", Style.DIM)
            console.print(f"cwd: {cwd}", Style.DIM)
        case ArtifactNotFoundError(checked=checked):
            for path in checked:
                console.print(f"checked: {path}", Style.DIM)
        case GenerationError(command=command, missing=missing):
            if command:
                console.print(f"command: {shlex.join(command)}", Style.DIM)
            for path in missing:
                console.print(f"missing: {path}", Style.DIM)
        case ServerBindError(host=host, port=port):
            console.print(f"address: {host}:{port}", Style.DIM)
        case _:
            pass

    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def error_exit_code(error: RunWasmError) -> int:
    return int(exit_code_for(error))
