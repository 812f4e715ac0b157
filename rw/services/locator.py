"""Find the wasm artifact cargo produced for a target.

Paths are computed from cargo's conventions, then confirmed on disk after
the build: a computed guess is never returned unless the file exists.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rw.core.errors import ArtifactNotFoundError
from rw.core.result import Err, Ok, Result
from rw.core.target import BuildTarget, TargetKind
from rw.tools.hints import WASM_TARGET

if TYPE_CHECKING:
    from rw.core.workspace import WorkspaceLayout
    from rw.output.console import ConsoleProtocol

__all__ = ["artifact_dir", "candidates", "locate"]


def artifact_dir(target: BuildTarget, workspace: WorkspaceLayout) -> Path:
    """Directory cargo writes the final wasm file to for `target`."""
    out = workspace.wasm_target_dir / WASM_TARGET / target.profile_dir
    if target.kind is TargetKind.EXAMPLE:
        out = out / "examples"
    return out


def candidates(target: BuildTarget, workspace: WorkspaceLayout) -> list[Path]:
    """Plausible artifact paths, most conventional first."""
    out = artifact_dir(target, workspace)
    names = [target.artifact_name]
    # Library-style crates get their hyphens replaced by cargo.
    normalized = target.artifact_name.replace("-", "_")
    if normalized not in names:
        names.append(normalized)
    return [out / f"{name}.wasm" for name in names]


def locate(
    target: BuildTarget,
    workspace: WorkspaceLayout,
    *,
    console: ConsoleProtocol | None = None,
) -> Result[Path, ArtifactNotFoundError]:
    """Confirm which candidate exists.

    If more than one exists the most recently modified wins, and the
    ambiguity is reported as a warning rather than silently resolved.
    """
    checked = candidates(target, workspace)
    existing = [p for p in checked if p.is_file()]

    if not existing:
        hint = None
        if target.kind is TargetKind.PACKAGE:
            hint = "maybe you used `--package NAME` on a package that has no binary?"
        return Err(
            ArtifactNotFoundError(
                message=f"there is no wasm artifact for `{target.name}` after a successful build",
                checked=tuple(checked),
                hint=hint,
            )
        )

    existing.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    chosen = existing[0]
    if len(existing) > 1 and console is not None:
        others = ", ".join(str(p) for p in existing[1:])
        console.warning(f"multiple artifacts match `{target.name}`; using newest {chosen} (also: {others})")
    return Ok(chosen)
