"""Base service class with common initialization."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from rw.platform.process import CommandRunner, DefaultCommandRunner

if TYPE_CHECKING:
    from rw.core.workspace import WorkspaceLayout
    from rw.output.console import ConsoleProtocol
    from rw.tools.resolver import Toolchain


class BaseService:
    """Base class for services that run external tools in the workspace.

    Provides:
    - Common constructor pattern
    - Access to workspace layout, toolchain, console
    - An injectable command runner (fakes in tests)
    - The environment captured at startup, handed to every child process
    """

    def __init__(
        self,
        *,
        workspace: WorkspaceLayout,
        toolchain: Toolchain,
        console: ConsoleProtocol,
        runner: CommandRunner | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._workspace = workspace
        self._toolchain = toolchain
        self._console = console
        self._runner = runner or DefaultCommandRunner()
        # None lets children inherit our environment.
        self._env = dict(env) if env is not None else None
