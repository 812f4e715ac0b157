"""Binding generation: turn a cargo wasm artifact into browser assets.

Runs the external `wasm-bindgen` CLI in `--target web` mode.

The CLI version must match the version of the `wasm-bindgen` crate linked
into the artifact (see Cargo.lock). A mismatch shows up as a wasm-bindgen
failure; run-wasm cannot detect it itself and only points at it in the hint.
"""

from __future__ import annotations

import shlex
import tomllib
from dataclasses import dataclass
from pathlib import Path

from rw.core.errors import GenerationError, SetupError
from rw.core.result import Err, Ok, Result
from rw.output.console import Style
from rw.services.base import BaseService
from rw.services.build import BuiltArtifact
from rw.tools.hints import wasm_bindgen_install_hint

__all__ = ["BindgenService", "GeneratedBundle", "INDEX_HTML", "lockfile_bindgen_version"]

INDEX_HTML = "index.html"


@dataclass(frozen=True, slots=True)
class GeneratedBundle:
    """The files served to the browser, all inside `out_dir`."""

    out_dir: Path
    name: str

    @property
    def glue_module(self) -> str:
        return f"{self.name}.js"

    @property
    def wasm_asset(self) -> str:
        return f"{self.name}_bg.wasm"

    @property
    def index_html(self) -> str:
        return INDEX_HTML

    def files(self) -> list[Path]:
        return [
            self.out_dir / self.glue_module,
            self.out_dir / self.wasm_asset,
            self.out_dir / self.index_html,
        ]

    def missing(self, *, include_html: bool = True) -> list[Path]:
        """Expected files that are absent or empty."""
        paths = self.files() if include_html else self.files()[:2]
        return [p for p in paths if not p.is_file() or p.stat().st_size == 0]


def lockfile_bindgen_version(lockfile: Path) -> str | None:
    """Version of the wasm-bindgen crate pinned in Cargo.lock, if any."""
    try:
        data = tomllib.loads(lockfile.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return None

    packages = data.get("package", [])
    if not isinstance(packages, list):
        return None
    for pkg in packages:
        if isinstance(pkg, dict) and pkg.get("name") == "wasm-bindgen":
            version = pkg.get("version")
            return version if isinstance(version, str) else None
    return None


class BindgenService(BaseService):
    """Runs wasm-bindgen and checks its outputs."""

    def command(self, wasm_bindgen: Path, artifact: BuiltArtifact, out_dir: Path) -> list[str]:
        return [
            str(wasm_bindgen),
            "--target",
            "web",
            "--out-dir",
            str(out_dir),
            "--out-name",
            artifact.name,
            str(artifact.path),
        ]

    def generate(
        self, artifact: BuiltArtifact, out_dir: Path
    ) -> Result[GeneratedBundle, SetupError | GenerationError]:
        lock_version = lockfile_bindgen_version(self._workspace.lockfile)

        match self._toolchain.require_wasm_bindgen(lock_version=lock_version):
            case Err(e):
                return Err(e)
            case Ok(wasm_bindgen):
                pass

        out_dir.mkdir(parents=True, exist_ok=True)
        cmd = self.command(wasm_bindgen, artifact, out_dir)
        self._console.print(shlex.join(cmd), Style.DIM)

        try:
            code = self._runner.run_attached(cmd, cwd=self._workspace.root, env=self._env)
        except FileNotFoundError:
            return Err(
                SetupError(
                    tool="wasm-bindgen",
                    message=f"could not execute {wasm_bindgen}",
                    hint=f"Run: {wasm_bindgen_install_hint(lock_version)}",
                )
            )

        if code != 0:
            return Err(
                GenerationError(
                    kind="tool_failed",
                    message=f"wasm-bindgen failed with code {code}",
                    command=tuple(cmd),
                    hint=(
                        "the wasm-bindgen CLI version must match the wasm-bindgen crate "
                        f"in Cargo.lock; reinstall with: {wasm_bindgen_install_hint(lock_version)}"
                    ),
                )
            )

        bundle = GeneratedBundle(out_dir=out_dir, name=artifact.name)
        missing = bundle.missing(include_html=False)
        if missing:
            return Err(
                GenerationError(
                    kind="missing_output",
                    message="wasm-bindgen exited successfully but did not produce the expected files",
                    command=tuple(cmd),
                    missing=tuple(missing),
                )
            )
        return Ok(bundle)
