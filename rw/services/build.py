"""Build service: compile a cargo target to wasm32-unknown-unknown."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path

from rw.core.errors import ArtifactNotFoundError, BuildError, SetupError
from rw.core.result import Err, Ok, Result
from rw.core.target import BuildTarget
from rw.output.console import Style
from rw.services.base import BaseService
from rw.services.locator import locate
from rw.tools.hints import WASM_TARGET, get_install_hint

__all__ = ["BuildService", "BuiltArtifact"]


@dataclass(frozen=True, slots=True)
class BuiltArtifact:
    """A wasm file confirmed on disk after a successful build."""

    path: Path
    name: str


class BuildService(BaseService):
    """Runs `cargo build` for the wasm target with inherited output."""

    def command(self, cargo: Path, target: BuildTarget) -> list[str]:
        return [
            str(cargo),
            "build",
            "--target",
            WASM_TARGET,
            "--target-dir",
            str(self._workspace.wasm_target_dir),
            *target.cargo_args(),
            *target.extra_args,
        ]

    def build(
        self, target: BuildTarget
    ) -> Result[BuiltArtifact, SetupError | BuildError | ArtifactNotFoundError]:
        """Compile `target` and return the artifact cargo produced.

        Cargo's diagnostics go straight to the terminal; a failed build is
        reported without reinterpreting them.
        """
        match self._toolchain.require_cargo():
            case Err(e):
                return Err(e)
            case Ok(cargo):
                pass

        cmd = self.command(cargo, target)
        cwd = self._workspace.root
        self._console.print(shlex.join(cmd), Style.DIM)

        try:
            code = self._runner.run_attached(cmd, cwd=cwd, env=self._env)
        except FileNotFoundError:
            return Err(
                SetupError(
                    tool="cargo",
                    message=f"could not execute {cargo}",
                    hint=get_install_hint("cargo"),
                )
            )

        if code != 0:
            target_hint = get_install_hint("wasm32-target")
            return Err(
                BuildError(
                    message=f"cargo build failed with code {code}",
                    command=tuple(cmd),
                    cwd=cwd,
                    returncode=code,
                    hint=f"if the {WASM_TARGET} target is missing, run: {target_hint}",
                )
            )

        match locate(target, self._workspace, console=self._console):
            case Err(e):
                return Err(e)
            case Ok(path):
                return Ok(BuiltArtifact(path=path, name=target.artifact_name))
