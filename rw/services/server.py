"""Local static file server for the generated bundle.

Serves one directory, nothing else: no routing, no TLS. Each request runs
in its own thread; the files are read-only once generation is done.
"""

from __future__ import annotations

import errno
import socket
import sys
from dataclasses import dataclass
from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

from rw.core.errors import ServerBindError
from rw.core.result import Err, Ok, Result
from rw.output.console import ConsoleProtocol, Style

__all__ = ["LocalServer", "ServerConfig", "WasmRequestHandler", "serve"]

_ADDR_IN_USE = {errno.EADDRINUSE, getattr(errno, "WSAEADDRINUSE", errno.EADDRINUSE)}
_ACCESS_DENIED = {errno.EACCES, getattr(errno, "WSAEACCES", errno.EACCES)}


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Where to listen and what to serve. Port 0 picks a free port."""

    root: Path
    host: str = "localhost"
    port: int = 8000


class WasmRequestHandler(SimpleHTTPRequestHandler):
    """Static files with the content types browsers need for wasm modules."""

    extensions_map = {
        **SimpleHTTPRequestHandler.extensions_map,
        ".html": "text/html",
        ".js": "text/javascript",
        ".wasm": "application/wasm",
    }

    def __init__(
        self,
        *args: object,
        directory: str,
        console: ConsoleProtocol | None = None,
        **kwargs: object,
    ) -> None:
        # Must be set before super().__init__, which handles the request.
        self._console = console
        super().__init__(*args, directory=directory, **kwargs)  # type: ignore[arg-type]

    def end_headers(self) -> None:
        # Always serve the latest build.
        self.send_header("Cache-Control", "no-store")
        super().end_headers()

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        if self._console is not None:
            self._console.print(f"{self.address_string()} {format % args}", Style.DIM)


class _DevServer(ThreadingHTTPServer):
    # SO_REUSEADDR on Windows lets a second server bind an in-use port.
    allow_reuse_address = not sys.platform.startswith("win")
    daemon_threads = True


class _DevServerV6(_DevServer):
    address_family = socket.AF_INET6


class LocalServer:
    """A bound dev server. Use `bind()` first, then `serve_forever()`."""

    def __init__(self, config: ServerConfig, *, console: ConsoleProtocol) -> None:
        self._config = config
        self._console = console
        self._httpd: _DevServer | None = None

    def bind(self) -> Result[None, ServerBindError]:
        host, port = self._config.host, self._config.port
        handler = partial(
            WasmRequestHandler,
            directory=str(self._config.root),
            console=self._console,
        )
        server_cls = _DevServerV6 if ":" in host else _DevServer
        try:
            self._httpd = server_cls((host, port), handler)
        except socket.gaierror as e:
            return Err(
                ServerBindError(
                    host=host,
                    port=port,
                    message=f"cannot resolve host {host!r}: {e.strerror or e}",
                    hint="use --host localhost or an IP address",
                )
            )
        except OSError as e:
            return Err(_bind_error(host, port, e))
        return Ok(None)

    @property
    def port(self) -> int:
        if self._httpd is None:
            return self._config.port
        return int(self._httpd.server_address[1])

    @property
    def url(self) -> str:
        host = self._config.host
        if ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{self.port}/"

    def serve_forever(self) -> None:
        """Block until interrupted (ctrl-c) or `shutdown()` from another thread."""
        if self._httpd is None:
            raise RuntimeError("server is not bound; call bind() first")
        try:
            self._httpd.serve_forever()
        except KeyboardInterrupt:
            self._console.newline()
            self._console.print("server stopped", Style.DIM)
        finally:
            self._httpd.server_close()

    def shutdown(self) -> None:
        if self._httpd is not None:
            self._httpd.shutdown()

    def close(self) -> None:
        if self._httpd is not None:
            self._httpd.server_close()


def serve(config: ServerConfig, *, console: ConsoleProtocol, name: str) -> Result[None, ServerBindError]:
    """Bind, announce the URL and serve until interrupted."""
    server = LocalServer(config, console=console)
    match server.bind():
        case Err(e):
            return Err(e)
        case Ok(_):
            pass

    console.newline()
    console.print(f"Serving `{name}` on {server.url}", Style.INFO)
    console.print("Press Ctrl+C to stop", Style.DIM)
    server.serve_forever()
    return Ok(None)


def _bind_error(host: str, port: int, e: OSError) -> ServerBindError:
    if e.errno in _ADDR_IN_USE:
        return ServerBindError(
            host=host,
            port=port,
            message=f"port {port} is already in use on {host}",
            hint="stop the other server or pick another port with --port (0 picks a free one)",
        )
    if e.errno in _ACCESS_DENIED:
        return ServerBindError(
            host=host,
            port=port,
            message=f"permission denied listening on {host}:{port}",
            hint="ports below 1024 usually need elevated privileges; use --port 8000",
        )
    return ServerBindError(
        host=host,
        port=port,
        message=f"cannot listen on {host}:{port}: {e.strerror or e}",
    )
