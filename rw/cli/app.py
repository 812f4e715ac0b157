from __future__ import annotations

import click
import typer

from rw.cli.commands.run_cmd import CONTEXT_SETTINGS, EPILOG, CliState, run
from rw.core.errors import ErrorCode
from rw.output.console import RichConsole

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
    context_settings=CONTEXT_SETTINGS,
)

app.command(epilog=EPILOG, context_settings=CONTEXT_SETTINGS)(run)


def main(css: str | None = None, args: list[str] | None = None) -> None:
    """Entry point. Exit codes follow `ErrorCode`, including for parser errors."""
    try:
        code = app(
            args=args,
            obj=CliState(css=css),
            prog_name="run-wasm",
            standalone_mode=False,
        )
    except click.exceptions.ClickException as e:
        # click would exit with 2, which is SETUP_ERROR here.
        e.show()
        raise SystemExit(int(ErrorCode.USER_ERROR)) from None
    except click.exceptions.Abort:
        RichConsole().error("interrupted")
        raise SystemExit(int(ErrorCode.INTERRUPTED)) from None
    raise SystemExit(code or 0)
