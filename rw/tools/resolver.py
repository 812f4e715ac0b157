"""
Resolution of the external tools run-wasm invokes.

Tools are resolved once at startup into a `Toolchain` value that is passed
to each service, so no stage reads PATH on its own.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from rw.core.errors import SetupError
from rw.core.result import Err, Ok, Result
from rw.tools.hints import get_install_hint, wasm_bindgen_install_hint

__all__ = ["Toolchain", "resolve_toolchain"]


@dataclass(frozen=True, slots=True)
class Toolchain:
    """Resolved executables. `None` means not found."""

    cargo: Path | None
    wasm_bindgen: Path | None

    def require_cargo(self) -> Result[Path, SetupError]:
        if self.cargo is not None:
            return Ok(self.cargo)
        hint = get_install_hint("cargo")
        return Err(
            SetupError(
                tool="cargo",
                message="cargo not found (set CARGO or add it to PATH)",
                hint=f"Install Rust: {hint}" if hint else None,
            )
        )

    def require_wasm_bindgen(
        self, *, lock_version: str | None = None
    ) -> Result[Path, SetupError]:
        if self.wasm_bindgen is not None:
            return Ok(self.wasm_bindgen)
        return Err(
            SetupError(
                tool="wasm-bindgen",
                message="wasm-bindgen not found; it is an external prerequisite not installed by run-wasm",
                hint=f"Run: {wasm_bindgen_install_hint(lock_version)}",
            )
        )


def resolve_toolchain(
    env: Mapping[str, str] | None = None,
    *,
    home: Path | None = None,
) -> Toolchain:
    """Find cargo and wasm-bindgen.

    Strategy:
    1. `CARGO` environment variable (set when run as a cargo subcommand)
    2. System PATH
    3. `~/.cargo/bin` (rustup default, often missing from PATH in IDEs)
    """
    env = os.environ if env is None else env
    cargo_home = Path(env["CARGO_HOME"]) if env.get("CARGO_HOME") else (home or Path.home()) / ".cargo"
    bundled = cargo_home / "bin"
    path = env.get("PATH")

    cargo: Path | None = None
    explicit = env.get("CARGO")
    if explicit:
        cargo = _which(explicit, path)
    if cargo is None:
        cargo = _resolve("cargo", bundled, path)

    return Toolchain(
        cargo=cargo,
        wasm_bindgen=_resolve("wasm-bindgen", bundled, path),
    )


def _resolve(name: str, bundled_dir: Path, path: str | None) -> Path | None:
    found = _which(name, path)
    if found is not None:
        return found
    candidate = bundled_dir / _exe(name)
    if candidate.is_file():
        return candidate
    return None


def _exe(name: str) -> str:
    return f"{name}.exe" if os.name == "nt" else name


def _which(cmd: str, path: str | None) -> Path | None:
    p = Path(cmd)
    if p.is_absolute() and p.is_file():
        return p
    found = shutil.which(cmd, path=path)
    return Path(found) if found else None
