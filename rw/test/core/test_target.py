from __future__ import annotations

import pytest

from rw.core.errors import UsageError
from rw.core.result import Err, Ok
from rw.core.target import BuildTarget, TargetKind, resolve_target


def _ok(**kwargs: object) -> BuildTarget:
    defaults: dict[str, object] = {"package": None, "bin": None, "example": None}
    defaults.update(kwargs)
    result = resolve_target(**defaults)  # type: ignore[arg-type]
    assert isinstance(result, Ok)
    return result.value


def _err(**kwargs: object) -> UsageError:
    defaults: dict[str, object] = {"package": None, "bin": None, "example": None}
    defaults.update(kwargs)
    result = resolve_target(**defaults)  # type: ignore[arg-type]
    assert isinstance(result, Err)
    return result.error


@pytest.mark.parametrize(
    ("profile", "expected"),
    [
        (None, "debug"),
        ("dev", "debug"),
        ("test", "debug"),
        ("release", "release"),
        ("bench", "release"),
        ("bench-lite", "bench-lite"),
    ],
)
def test_profile_dir(profile: str | None, expected: str) -> None:
    assert _ok(example="hello", profile=profile).profile_dir == expected


def test_release_shorthand_sets_release_profile() -> None:
    target = _ok(bin="viewer", release=True)
    assert target.profile == "release"
    assert target.cargo_args() == ["--bin", "viewer", "--profile", "release"]


def test_release_and_profile_conflict() -> None:
    err = _err(example="hello", release=True, profile="release")
    assert "--profile" in err.message and "--release" in err.message


def test_requires_a_target_selection() -> None:
    err = _err()
    assert "--package" in err.message


def test_bin_and_example_are_mutually_exclusive() -> None:
    err = _err(bin="a", example="b")
    assert "mutually exclusive" in err.message


def test_example_takes_precedence_and_keeps_package_scope() -> None:
    target = _ok(package="demo", example="hello")
    assert target.kind is TargetKind.EXAMPLE
    assert target.artifact_name == "hello"
    assert target.cargo_args() == ["--package", "demo", "--example", "hello"]


def test_package_alone_builds_package_binary() -> None:
    target = _ok(package="my-app")
    assert target.kind is TargetKind.PACKAGE
    assert target.cargo_args() == ["--package", "my-app"]


@pytest.mark.parametrize("arg", ["--target", "--target-dir", "--target-dir=/tmp/x"])
def test_target_options_are_rejected(arg: str) -> None:
    err = _err(example="hello", extra_args=[arg, "x"])
    assert "does not support" in err.message


def test_extra_args_are_kept_verbatim() -> None:
    target = _ok(example="hello", extra_args=["--features", "webgl", "--locked"])
    assert target.extra_args == ("--features", "webgl", "--locked")
