"""
Install hints for the external tools run-wasm depends on.

Neither tool is managed by run-wasm; these messages tell the developer
exactly what to install.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

WASM_TARGET = "wasm32-unknown-unknown"


@dataclass(frozen=True)
class InstallHint:
    """Install command, with an optional Windows-specific variant."""

    default: str
    windows: str | None = None


INSTALL_HINTS: dict[str, InstallHint] = {
    "cargo": InstallHint(
        default="curl --proto '=https' --tlsv1.2 -sSf https://sh.rustup.rs | sh",
        windows="Download from https://rustup.rs",
    ),
    "wasm32-target": InstallHint(
        default=f"rustup target add {WASM_TARGET}",
    ),
    "wasm-bindgen": InstallHint(
        default="cargo install wasm-bindgen-cli",
    ),
}


def get_install_hint(tool: str) -> str | None:
    """
    Get the install command for a tool on this platform.

    Returns:
        Install command string, or None if unknown
    """
    hint = INSTALL_HINTS.get(tool)
    if not hint:
        return None
    if os.name == "nt" and hint.windows:
        return hint.windows
    return hint.default


def wasm_bindgen_install_hint(version: str | None) -> str:
    """Install command pinned to the wasm-bindgen version in Cargo.lock, if known."""
    if version:
        return f"cargo install wasm-bindgen-cli --version {version}"
    return "cargo install wasm-bindgen-cli (use the version of the wasm-bindgen crate in Cargo.lock)"
