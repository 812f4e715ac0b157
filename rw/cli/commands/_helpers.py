from __future__ import annotations

from typing import NoReturn

import typer

from rw.core.errors import RunWasmError
from rw.output.console import ConsoleProtocol
from rw.output.errors import error_exit_code, print_error


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)


def exit_on_error(error: RunWasmError, console: ConsoleProtocol) -> NoReturn:
    print_error(error, console)
    raise typer.Exit(code=error_exit_code(error))
