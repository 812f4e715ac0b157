"""What to compile: target selection, profile and pass-through cargo flags."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from rw.core.errors import UsageError
from rw.core.result import Err, Ok, Result

__all__ = ["BANNED_CARGO_OPTIONS", "BuildTarget", "TargetKind", "resolve_target"]

# Owned by run-wasm: changing them would move the artifact out from under us.
BANNED_CARGO_OPTIONS = ("--target", "--target-dir")

# Built-in profiles that cargo writes to another profile's directory.
_PROFILE_DIRS = {"dev": "debug", "test": "debug", "bench": "release"}


class TargetKind(Enum):
    PACKAGE = "package"
    BIN = "bin"
    EXAMPLE = "example"


@dataclass(frozen=True, slots=True)
class BuildTarget:
    """A single cargo target to build for wasm.

    `package` is the package that owns a bin/example target; for
    `TargetKind.PACKAGE` it is the same as `name`.
    """

    kind: TargetKind
    name: str
    package: str | None = None
    profile: str | None = None
    extra_args: tuple[str, ...] = field(default_factory=tuple)

    @property
    def profile_dir(self) -> str:
        """Directory cargo uses for this profile under the target triple."""
        if self.profile is None:
            return "debug"
        return _PROFILE_DIRS.get(self.profile, self.profile)

    @property
    def artifact_name(self) -> str:
        return self.name

    def cargo_args(self) -> list[str]:
        """Target selection and profile flags for `cargo build`."""
        args: list[str] = []
        if self.package is not None:
            args += ["--package", self.package]
        match self.kind:
            case TargetKind.EXAMPLE:
                args += ["--example", self.name]
            case TargetKind.BIN:
                args += ["--bin", self.name]
            case TargetKind.PACKAGE:
                pass
        if self.profile is not None:
            args += ["--profile", self.profile]
        return args


def resolve_target(
    *,
    package: str | None,
    bin: str | None,
    example: str | None,
    release: bool = False,
    profile: str | None = None,
    extra_args: list[str] | None = None,
) -> Result[BuildTarget, UsageError]:
    """Validate CLI selections and build a `BuildTarget`.

    `--package` may accompany `--bin`/`--example` to pick the package that
    owns the target; `--bin` and `--example` are mutually exclusive.
    """
    if release and profile is not None:
        return Err(
            UsageError(
                "conflicting usage of --profile and --release",
                hint="`--release` is the same as `--profile=release`; remove one of them",
            )
        )
    if release:
        profile = "release"

    if bin is not None and example is not None:
        return Err(UsageError("--bin and --example are mutually exclusive"))

    extra = list(extra_args or [])
    for arg in extra:
        for banned in BANNED_CARGO_OPTIONS:
            if arg == banned or arg.startswith(f"{banned}="):
                return Err(UsageError(f"run-wasm does not support the {banned} option"))

    if example is not None:
        kind, name = TargetKind.EXAMPLE, example
    elif bin is not None:
        kind, name = TargetKind.BIN, bin
    elif package is not None:
        kind, name = TargetKind.PACKAGE, package
    else:
        return Err(
            UsageError(
                "need at least one of `--package NAME`, `--example NAME`, `--bin NAME`",
                hint="Run: run-wasm --help",
            )
        )

    return Ok(
        BuildTarget(
            kind=kind,
            name=name,
            package=package,
            profile=profile,
            extra_args=tuple(extra),
        )
    )
