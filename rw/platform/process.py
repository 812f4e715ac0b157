"""Child process helpers.

Children are always attached to our lifetime: if the parent is interrupted
(ctrl-c) or raises while waiting, the child is terminated and reaped before
the exception propagates. SIGTERM is turned into `SystemExit` while a child
runs so a terminated run-wasm takes its child down with it.
"""

from __future__ import annotations

import signal
import subprocess
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from types import FrameType
from typing import Iterator, Protocol

from rw.core.result import Err, Ok, Result

__all__ = [
    "CommandRunner",
    "DefaultCommandRunner",
    "ProcessError",
    "run",
    "run_attached",
]

_TERMINATE_GRACE_SECONDS = 5.0


@dataclass(frozen=True, slots=True)
class ProcessError:
    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


def run_attached(
    cmd: list[str],
    *,
    cwd: Path,
    env: dict[str, str] | None = None,
) -> int:
    """Run `cmd` with inherited stdio and return its exit code."""
    with _sigterm_as_exit(), subprocess.Popen(cmd, cwd=str(cwd), env=env) as proc:
        try:
            return proc.wait()
        except BaseException:
            _terminate(proc)
            raise


def run(
    cmd: list[str],
    *,
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[str, ProcessError]:
    """Run `cmd` capturing output. Returns stdout on exit code 0."""
    with _sigterm_as_exit(), subprocess.Popen(
        cmd,
        cwd=str(cwd),
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
    ) as proc:
        try:
            stdout, stderr = proc.communicate()
        except BaseException:
            _terminate(proc)
            raise

    if proc.returncode != 0:
        return Err(ProcessError(tuple(cmd), proc.returncode, stdout, stderr))
    return Ok(stdout)


@contextmanager
def _sigterm_as_exit() -> Iterator[None]:
    # signal.signal only works in the main thread; elsewhere we rely on the
    # caller owning the process lifetime.
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGTERM, _raise_exit)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous if previous is not None else signal.SIG_DFL)


def _raise_exit(signum: int, frame: FrameType | None) -> None:
    raise SystemExit(128 + signum)


def _terminate(proc: subprocess.Popen[str] | subprocess.Popen[bytes]) -> None:
    if proc.poll() is not None:
        return
    proc.terminate()
    try:
        proc.wait(timeout=_TERMINATE_GRACE_SECONDS)
    except subprocess.TimeoutExpired:
        proc.kill()
        proc.wait()


class CommandRunner(Protocol):
    def run_attached(
        self, cmd: list[str], *, cwd: Path, env: dict[str, str] | None = None
    ) -> int: ...

    def run(
        self, cmd: list[str], *, cwd: Path, env: dict[str, str] | None = None
    ) -> Result[str, ProcessError]: ...


class DefaultCommandRunner:
    def run_attached(
        self, cmd: list[str], *, cwd: Path, env: dict[str, str] | None = None
    ) -> int:
        return run_attached(cmd, cwd=cwd, env=env)

    def run(
        self, cmd: list[str], *, cwd: Path, env: dict[str, str] | None = None
    ) -> Result[str, ProcessError]:
        return run(cmd, cwd=cwd, env=env)
