"""Error types and stable exit codes.

Every pipeline stage returns one of these dataclasses inside an `Err`.
Each carries enough context (command, working directory, checked paths)
for the developer to diagnose the problem without reading the source.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Literal, TypeAlias

__all__ = [
    "ArtifactNotFoundError",
    "AssetError",
    "BuildError",
    "ErrorCode",
    "GenerationError",
    "RunWasmError",
    "ServerBindError",
    "SetupError",
    "UsageError",
    "exit_code_for",
]


class ErrorCode(IntEnum):
    """Process exit codes.

    Ranges: build 10-19, binding generation 20-29, assets 30-39,
    server 40-49. INTERRUPTED follows the shell convention (128 + SIGINT).
    Keep values stable; they are documented for scripts.
    """

    OK = 0
    USER_ERROR = 1
    SETUP_ERROR = 2
    BUILD_ERROR = 10
    ARTIFACT_NOT_FOUND = 11
    GENERATION_ERROR = 20
    GENERATION_OUTPUT_MISSING = 21
    ASSET_ERROR = 30
    SERVER_BIND_ERROR = 40
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class UsageError:
    """Invalid combination of command line options."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class SetupError:
    """A required external tool is missing."""

    tool: str
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class BuildError:
    """The compiler ran but did not succeed."""

    message: str
    command: tuple[str, ...]
    cwd: Path
    returncode: int
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ArtifactNotFoundError:
    """The build succeeded but no wasm artifact was found."""

    message: str
    checked: tuple[Path, ...] = field(default_factory=tuple)
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class GenerationError:
    """wasm-bindgen failed or left the bundle incomplete."""

    kind: Literal["tool_failed", "missing_output"]
    message: str
    command: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[Path, ...] = field(default_factory=tuple)
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class AssetError:
    """The boot HTML could not be written."""

    message: str
    path: Path
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ServerBindError:
    """The dev server could not listen on the requested address."""

    host: str
    port: int
    message: str
    hint: str | None = None


RunWasmError: TypeAlias = (
    UsageError
    | SetupError
    | BuildError
    | ArtifactNotFoundError
    | GenerationError
    | AssetError
    | ServerBindError
)


def exit_code_for(error: RunWasmError) -> ErrorCode:
    match error:
        case UsageError():
            return ErrorCode.USER_ERROR
        case SetupError():
            return ErrorCode.SETUP_ERROR
        case BuildError():
            return ErrorCode.BUILD_ERROR
        case ArtifactNotFoundError():
            return ErrorCode.ARTIFACT_NOT_FOUND
        case GenerationError(kind="missing_output"):
            return ErrorCode.GENERATION_OUTPUT_MISSING
        case GenerationError():
            return ErrorCode.GENERATION_ERROR
        case AssetError():
            return ErrorCode.ASSET_ERROR
        case ServerBindError():
            return ErrorCode.SERVER_BIND_ERROR
