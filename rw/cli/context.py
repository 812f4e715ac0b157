"""Process-wide state captured once per invocation.

The working directory, environment and resolved tools are read here and
nowhere else; services receive them explicitly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from rw.core.config import CONFIG_FILENAME, RunOptions, load_config
from rw.core.errors import SetupError, UsageError
from rw.core.result import Err, Ok, Result
from rw.core.workspace import WorkspaceLayout, discover_workspace
from rw.output.console import ConsoleProtocol, RichConsole
from rw.platform.process import CommandRunner, DefaultCommandRunner
from rw.tools.resolver import Toolchain, resolve_toolchain


@dataclass(frozen=True, slots=True)
class CLIContext:
    workspace: WorkspaceLayout
    toolchain: Toolchain
    options: RunOptions
    console: ConsoleProtocol
    runner: CommandRunner
    env: dict[str, str]


def build_context(
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    console: ConsoleProtocol | None = None,
    runner: CommandRunner | None = None,
) -> Result[CLIContext, UsageError | SetupError]:
    cwd = (cwd or Path.cwd()).resolve()
    env = dict(os.environ) if env is None else dict(env)
    console = console or RichConsole(no_color=bool(env.get("NO_COLOR")))
    runner = runner or DefaultCommandRunner()

    toolchain = resolve_toolchain(env)

    match discover_workspace(cwd, cargo=toolchain.cargo, env=env, runner=runner):
        case Err(e):
            return Err(e)
        case Ok(workspace):
            pass

    match load_config(workspace.root / CONFIG_FILENAME):
        case Err(e):
            return Err(e)
        case Ok(options):
            pass

    return Ok(
        CLIContext(
            workspace=workspace,
            toolchain=toolchain,
            options=options,
            console=console,
            runner=runner,
            env=env,
        )
    )
