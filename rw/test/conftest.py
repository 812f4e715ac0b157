from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from rw.core.result import Err, Ok, Result
from rw.core.workspace import WorkspaceLayout
from rw.output.console import MockConsole
from rw.platform.process import ProcessError
from rw.tools.resolver import Toolchain


class FakeToolsRunner:
    """Stands in for cargo and wasm-bindgen.

    `cargo build` writes the wasm file where cargo would, `wasm-bindgen`
    writes its glue module and wasm asset. Either can be told to fail.
    """

    def __init__(
        self,
        *,
        cargo_code: int = 0,
        bindgen_code: int = 0,
        bindgen_outputs: tuple[str, ...] = ("js", "wasm"),
        produce_artifact: bool = True,
        metadata: str | None = None,
    ) -> None:
        self.calls: list[list[str]] = []
        self.cwds: list[Path] = []
        self.envs: list[dict[str, str] | None] = []
        self._cargo_code = cargo_code
        self._bindgen_code = bindgen_code
        self._bindgen_outputs = bindgen_outputs
        self._produce_artifact = produce_artifact
        self._metadata = metadata

    def run_attached(
        self, cmd: list[str], *, cwd: Path, env: dict[str, str] | None = None
    ) -> int:
        self.calls.append(cmd)
        self.cwds.append(cwd)
        self.envs.append(env)
        if cmd[1] == "build":
            return self._cargo_build(cmd)
        return self._wasm_bindgen(cmd)

    def run(
        self, cmd: list[str], *, cwd: Path, env: dict[str, str] | None = None
    ) -> Result[str, ProcessError]:
        self.calls.append(cmd)
        self.cwds.append(cwd)
        self.envs.append(env)
        if self._metadata is None:
            return Err(ProcessError(tuple(cmd), 101, "", "error: failed to parse manifest\n"))
        return Ok(self._metadata)

    def tool_calls(self, tool: str) -> list[list[str]]:
        return [c for c in self.calls if Path(c[0]).name == tool]

    def _cargo_build(self, cmd: list[str]) -> int:
        if self._cargo_code != 0 or not self._produce_artifact:
            return self._cargo_code

        target_dir = Path(_flag(cmd, "--target-dir"))
        profile = _flag(cmd, "--profile") or "debug"
        profile_dir = {"dev": "debug", "test": "debug", "bench": "release"}.get(profile, profile)
        out = target_dir / "wasm32-unknown-unknown" / profile_dir
        if "--example" in cmd:
            name = _flag(cmd, "--example")
            out = out / "examples"
        elif "--bin" in cmd:
            name = _flag(cmd, "--bin")
        else:
            name = _flag(cmd, "--package")
        out.mkdir(parents=True, exist_ok=True)
        (out / f"{name}.wasm").write_bytes(b"\0asm\x01\0\0\0")
        return 0

    def _wasm_bindgen(self, cmd: list[str]) -> int:
        if self._bindgen_code != 0:
            return self._bindgen_code
        out_dir = Path(_flag(cmd, "--out-dir"))
        name = _flag(cmd, "--out-name")
        if "js" in self._bindgen_outputs:
            (out_dir / f"{name}.js").write_text(
                "export default async function init() {}\n", encoding="utf-8"
            )
        if "wasm" in self._bindgen_outputs:
            (out_dir / f"{name}_bg.wasm").write_bytes(b"\0asm\x01\0\0\0")
        return 0


def _flag(cmd: list[str], flag: str) -> str:
    if flag not in cmd:
        return ""
    return cmd[cmd.index(flag) + 1]


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceLayout:
    root = tmp_path / "ws"
    (root / "target").mkdir(parents=True)
    (root / "Cargo.toml").write_text('[workspace]\nmembers = ["run-wasm"]\n', encoding="utf-8")
    return WorkspaceLayout(root=root, runner_dir=root / "run-wasm", target_dir=root / "target")


@pytest.fixture
def toolchain(tmp_path: Path) -> Toolchain:
    return Toolchain(cargo=tmp_path / "bin" / "cargo", wasm_bindgen=tmp_path / "bin" / "wasm-bindgen")


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def fake_runner() -> FakeToolsRunner:
    return FakeToolsRunner()


@pytest.fixture
def make_runner() -> Callable[..., FakeToolsRunner]:
    return FakeToolsRunner
