"""Run command - build a cargo target for wasm and serve it."""

from __future__ import annotations

from dataclasses import dataclass
import typer

from rw.cli.commands._helpers import exit_on_error, exit_with_code
from rw.cli.context import build_context
from rw.core.result import Err, Ok
from rw.core.target import resolve_target
from rw.output.console import RichConsole
from rw.services.run_wasm import RunWasmService

CONTEXT_SETTINGS = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
    "help_option_names": ["-h", "--help"],
}

EPILOG = (
    "Any other options are passed to `cargo build` unchanged "
    "(e.g. --features, --locked, -v). "
    "At least one of --package, --bin or --example must be used."
)


@dataclass(frozen=True)
class CliState:
    """Set by the integrating crate: `app(obj=CliState(css=...))`."""

    css: str | None = None


def _version_callback(value: bool) -> None:
    if value:
        from rw import __version__

        typer.echo(__version__)
        raise typer.Exit(code=0)


def run(
    ctx: typer.Context,
    package: str | None = typer.Option(
        None, "--package", "-p", help="Package with the target to run"
    ),
    bin: str | None = typer.Option(None, "--bin", help="Name of the bin target to run"),
    example: str | None = typer.Option(
        None, "--example", help="Name of the example target to run"
    ),
    release: bool = typer.Option(
        False, "--release", "-r", help="Build artifacts in release mode (same as --profile release)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", help="Build artifacts with the specified profile"
    ),
    build_only: bool = typer.Option(
        False, "--build-only", help="Only build the wasm artifacts, do not run the dev server"
    ),
    host: str | None = typer.Option(
        None, "--host", help="Dev server host [default: localhost]"
    ),
    port: int | None = typer.Option(
        None, "--port", min=0, max=65535, help="Dev server port, 0 picks a free one [default: 8000]"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Host a binary or example of the local package as wasm in a local web server."""
    state = ctx.obj if isinstance(ctx.obj, CliState) else CliState()

    target_res = resolve_target(
        package=package,
        bin=bin,
        example=example,
        release=release,
        profile=profile,
        extra_args=list(ctx.args),
    )
    match target_res:
        case Err(e):
            exit_on_error(e, RichConsole())
        case Ok(target):
            pass

    match build_context():
        case Err(e):
            exit_on_error(e, RichConsole())
        case Ok(cli):
            pass

    options = cli.options.with_overrides(
        host=host,
        port=port,
        build_only=build_only,
        css=state.css,
    )
    service = RunWasmService(
        workspace=cli.workspace,
        toolchain=cli.toolchain,
        console=cli.console,
        runner=cli.runner,
        env=cli.env,
    )
    exit_with_code(service.run(target, options))
