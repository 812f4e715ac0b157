"""The build → bindgen → compose → serve pipeline.

Stages run strictly in order and each one starts only after the previous
one has succeeded. Any failure is terminal for the invocation; nothing is
retried.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Mapping

from rw.core.errors import ErrorCode, GenerationError, RunWasmError, exit_code_for
from rw.core.result import Err, Ok, Result
from rw.output.console import Style
from rw.output.errors import print_error
from rw.services.assets import write_index_html
from rw.services.base import BaseService
from rw.services.bindgen import BindgenService, GeneratedBundle
from rw.services.build import BuildService
from rw.services.server import ServerConfig, serve

if TYPE_CHECKING:
    from rw.core.config import RunOptions
    from rw.core.target import BuildTarget
    from rw.core.workspace import WorkspaceLayout
    from rw.output.console import ConsoleProtocol
    from rw.platform.process import CommandRunner
    from rw.tools.resolver import Toolchain

__all__ = ["RunWasmService", "Stage"]

ServeFn = Callable[..., Result[None, RunWasmError]]


class Stage(Enum):
    IDLE = auto()
    BUILDING = auto()
    BUILD_FAILED = auto()
    BUILT = auto()
    GENERATING_BINDINGS = auto()
    GEN_FAILED = auto()
    GENERATED = auto()
    COMPOSING_ASSETS = auto()
    ASSETS_FAILED = auto()
    SERVING = auto()
    SERVE_FAILED = auto()
    DONE = auto()


class RunWasmService(BaseService):
    """Build a target for wasm, generate bindings and serve it."""

    def __init__(
        self,
        *,
        workspace: WorkspaceLayout,
        toolchain: Toolchain,
        console: ConsoleProtocol,
        runner: CommandRunner | None = None,
        env: Mapping[str, str] | None = None,
        serve_fn: ServeFn | None = None,
    ) -> None:
        super().__init__(
            workspace=workspace, toolchain=toolchain, console=console, runner=runner, env=env
        )
        self._serve = serve_fn or serve
        self._stage = Stage.IDLE

    @property
    def stage(self) -> Stage:
        return self._stage

    def prepare(self, target: BuildTarget, options: RunOptions) -> Result[GeneratedBundle, RunWasmError]:
        """Build, generate bindings and write index.html. Does not serve."""
        self._stage = Stage.BUILDING
        self._console.header(f"Building {target.name} ({target.profile_dir})")
        build = BuildService(
            workspace=self._workspace,
            toolchain=self._toolchain,
            console=self._console,
            runner=self._runner,
            env=self._env,
        )
        match build.build(target):
            case Err(e):
                self._stage = Stage.BUILD_FAILED
                return Err(e)
            case Ok(artifact):
                self._stage = Stage.BUILT

        self._stage = Stage.GENERATING_BINDINGS
        bindgen = BindgenService(
            workspace=self._workspace,
            toolchain=self._toolchain,
            console=self._console,
            runner=self._runner,
            env=self._env,
        )
        match bindgen.generate(artifact, self._workspace.bundle_dir(artifact.name)):
            case Err(e):
                self._stage = Stage.GEN_FAILED
                return Err(e)
            case Ok(bundle):
                self._stage = Stage.GENERATED

        self._stage = Stage.COMPOSING_ASSETS
        match write_index_html(bundle.out_dir, bundle.glue_module, options.css):
            case Err(e):
                self._stage = Stage.ASSETS_FAILED
                return Err(e)
            case Ok(_):
                pass

        missing = bundle.missing()
        if missing:
            self._stage = Stage.GEN_FAILED
            return Err(
                GenerationError(
                    kind="missing_output",
                    message=f"bundle in {bundle.out_dir} is incomplete",
                    missing=tuple(missing),
                )
            )
        return Ok(bundle)

    def run(self, target: BuildTarget, options: RunOptions) -> int:
        """Run the whole pipeline and return the process exit code."""
        match self.prepare(target, options):
            case Err(e):
                return self._fail(e)
            case Ok(bundle):
                pass

        self._console.success(str(bundle.out_dir))
        if options.build_only:
            self._stage = Stage.DONE
            return int(ErrorCode.OK)

        self._stage = Stage.SERVING
        config = ServerConfig(root=bundle.out_dir, host=options.host, port=options.port)
        match self._serve(config, console=self._console, name=bundle.name):
            case Err(e):
                self._stage = Stage.SERVE_FAILED
                return self._fail(e)
            case Ok(_):
                self._stage = Stage.DONE
                return int(ErrorCode.OK)

    def _fail(self, error: RunWasmError) -> int:
        print_error(error, self._console)
        code = exit_code_for(error)
        self._console.print(f"exit code {int(code)} ({code.name.lower()})", Style.DIM)
        return int(code)
