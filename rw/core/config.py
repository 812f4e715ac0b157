"""Run options and the optional `run-wasm.toml` file.

Example `run-wasm.toml` at the workspace root::

    [serve]
    host = "127.0.0.1"
    port = 8080

    [page]
    css = "body { margin: 0px; }"
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from rw.core.errors import UsageError
from rw.core.result import Err, Ok, Result

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "RunOptions",
    "load_config",
]

CONFIG_FILENAME = "run-wasm.toml"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8000


@dataclass(frozen=True, slots=True)
class RunOptions:
    """How to run the pipeline once the target is known.

    `css` is included verbatim in the generated page; it comes from the
    integrating crate (or run-wasm.toml), never from the command line.
    """

    css: str = ""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    build_only: bool = False

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        build_only: bool | None = None,
        css: str | None = None,
    ) -> RunOptions:
        return replace(
            self,
            host=self.host if host is None else host,
            port=self.port if port is None else port,
            build_only=self.build_only if build_only is None else build_only,
            css=self.css if css is None else css,
        )


def load_config(path: Path) -> Result[RunOptions, UsageError]:
    """Read `path` if it exists; a missing file yields defaults."""
    if not path.is_file():
        return Ok(RunOptions())

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        return Err(UsageError(f"invalid config {path}: {e}"))

    serve = data.get("serve", {})
    page = data.get("page", {})
    if not isinstance(serve, dict) or not isinstance(page, dict):
        return Err(UsageError(f"invalid config {path}: [serve] and [page] must be tables"))

    host = serve.get("host", DEFAULT_HOST)
    port = serve.get("port", DEFAULT_PORT)
    css = page.get("css", "")

    if not isinstance(host, str) or not host:
        return Err(UsageError(f"invalid config {path}: serve.host must be a non-empty string"))
    if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
        return Err(UsageError(f"invalid config {path}: serve.port must be an integer in 0-65535"))
    if not isinstance(css, str):
        return Err(UsageError(f"invalid config {path}: page.css must be a string"))

    return Ok(RunOptions(css=css, host=host, port=port))
