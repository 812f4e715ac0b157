"""Cargo workspace layout discovery.

The layout is discovered once at startup from the working directory and
then passed to every service.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from rw.core.errors import SetupError, UsageError
from rw.core.result import Err, Ok, Result
from rw.platform.process import CommandRunner, DefaultCommandRunner

__all__ = ["WorkspaceLayout", "discover_workspace", "find_manifest_dir"]

WASM_TARGET_SUBDIR = "wasm-examples-target"
BUNDLE_SUBDIR = "wasm-examples"


@dataclass(frozen=True, slots=True)
class WorkspaceLayout:
    """Where things live in the Cargo workspace.

    Attributes:
        root: Workspace root (cargo runs here)
        runner_dir: Directory of the crate run-wasm was started from
        target_dir: Cargo target directory (honours CARGO_TARGET_DIR and
            `build.target-dir` when discovered through `cargo metadata`)
    """

    root: Path
    runner_dir: Path
    target_dir: Path

    @property
    def wasm_target_dir(self) -> Path:
        """Separate target dir for wasm builds.

        Native builds often set linker rustflags that wasm can't use, and
        cargo rebuilds everything whenever rustflags change. Keeping wasm
        output apart avoids constant full rebuilds.
        """
        return self.target_dir / WASM_TARGET_SUBDIR

    def bundle_dir(self, name: str) -> Path:
        return self.target_dir / BUNDLE_SUBDIR / name

    @property
    def lockfile(self) -> Path:
        return self.root / "Cargo.lock"


def find_manifest_dir(start: Path) -> Path | None:
    """Closest directory at or above `start` containing Cargo.toml."""
    for parent in (start, *start.parents):
        if (parent / "Cargo.toml").is_file():
            return parent
    return None


def discover_workspace(
    cwd: Path,
    *,
    cargo: Path | None,
    env: Mapping[str, str] | None = None,
    runner: CommandRunner | None = None,
) -> Result[WorkspaceLayout, UsageError | SetupError]:
    """Find the workspace root and target directory.

    Fast path: walk up looking for a directory holding both Cargo.toml and
    target/. That finds the default layout without spawning cargo. It is
    skipped when CARGO_TARGET_DIR is set, and falls back to
    `cargo metadata` when nothing is found (e.g. `build.target-dir` in
    .cargo/config.toml with no local target/ yet).
    """
    child_env = dict(env) if env is not None else None
    env = {} if env is None else env
    runner = runner or DefaultCommandRunner()

    manifest_dir = find_manifest_dir(cwd)
    if manifest_dir is None:
        return Err(
            UsageError(
                f"could not find Cargo.toml in {cwd} or any parent directory",
                hint="Run run-wasm from inside a Cargo workspace",
            )
        )

    if not env.get("CARGO_TARGET_DIR"):
        for parent in (manifest_dir, *manifest_dir.parents):
            if (parent / "target").is_dir() and (parent / "Cargo.toml").is_file():
                return Ok(
                    WorkspaceLayout(
                        root=parent,
                        runner_dir=manifest_dir,
                        target_dir=parent / "target",
                    )
                )

    if cargo is None:
        # cargo itself will be reported missing by the build stage.
        return Ok(
            WorkspaceLayout(
                root=manifest_dir,
                runner_dir=manifest_dir,
                target_dir=Path(env["CARGO_TARGET_DIR"])
                if env.get("CARGO_TARGET_DIR")
                else manifest_dir / "target",
            )
        )

    return _from_cargo_metadata(cargo, manifest_dir, runner, child_env)


def _from_cargo_metadata(
    cargo: Path, manifest_dir: Path, runner: CommandRunner, env: dict[str, str] | None
) -> Result[WorkspaceLayout, UsageError | SetupError]:
    cmd = [str(cargo), "metadata", "--no-deps", "--format-version=1"]
    match runner.run(cmd, cwd=manifest_dir, env=env):
        case Err(e):
            detail = e.stderr.strip().splitlines()
            return Err(
                SetupError(
                    tool="cargo",
                    message=f"`cargo metadata` failed in {manifest_dir} (exit {e.returncode})",
                    hint=detail[0] if detail else None,
                )
            )
        case Ok(stdout):
            pass

    try:
        data = json.loads(stdout)
        target_dir = Path(data["target_directory"])
        root = Path(data["workspace_root"])
    except (ValueError, KeyError, TypeError) as e:
        return Err(
            SetupError(
                tool="cargo",
                message=f"unexpected `cargo metadata` output: {e}",
            )
        )

    return Ok(WorkspaceLayout(root=root, runner_dir=manifest_dir, target_dir=target_dir))
