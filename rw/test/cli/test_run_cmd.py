from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import pytest
from typer.testing import CliRunner

from rw import __version__
from rw.cli.app import app, main
from rw.cli.commands import run_cmd
from rw.cli.commands.run_cmd import CliState
from rw.cli.context import CLIContext
from rw.core.config import RunOptions
from rw.core.errors import ErrorCode, UsageError
from rw.core.result import Err, Ok
from rw.core.workspace import WorkspaceLayout
from rw.output.console import MockConsole
from rw.tools.resolver import Toolchain

if TYPE_CHECKING:
    from conftest import FakeToolsRunner

runner = CliRunner()


@pytest.fixture
def cli_context(
    monkeypatch: pytest.MonkeyPatch,
    workspace: WorkspaceLayout,
    toolchain: Toolchain,
    console: MockConsole,
    fake_runner: FakeToolsRunner,
) -> CLIContext:
    ctx = CLIContext(
        workspace=workspace,
        toolchain=toolchain,
        options=RunOptions(css="from-config"),
        console=console,
        runner=fake_runner,
        env={"PATH": "/usr/bin", "RUSTFLAGS": "-C debuginfo=0"},
    )
    monkeypatch.setattr(run_cmd, "build_context", lambda **_: Ok(ctx))
    return ctx


def test_help_lists_options() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for option in ("--package", "--bin", "--example", "--release", "--profile", "--build-only", "--port"):
        assert option in result.output


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_requires_target_selection(cli_context: CLIContext) -> None:
    result = runner.invoke(app, ["--release"])
    assert result.exit_code == ErrorCode.USER_ERROR


def test_release_conflicts_with_profile(cli_context: CLIContext) -> None:
    result = runner.invoke(app, ["--example", "hello", "--release", "--profile", "release"])
    assert result.exit_code == ErrorCode.USER_ERROR


def test_target_dir_is_rejected(cli_context: CLIContext, fake_runner: FakeToolsRunner) -> None:
    result = runner.invoke(app, ["--example", "hello", "--target-dir", "/tmp/elsewhere"])
    assert result.exit_code == ErrorCode.USER_ERROR
    assert fake_runner.calls == []


def test_unknown_flags_are_forwarded_to_cargo(
    cli_context: CLIContext, fake_runner: FakeToolsRunner
) -> None:
    result = runner.invoke(
        app,
        ["--example", "hello", "--build-only", "--features", "webgl", "--locked"],
        obj=CliState(css="body { margin: 0px; }"),
    )

    assert result.exit_code == ErrorCode.OK, result.output
    cargo_cmd = fake_runner.calls[0]
    assert cargo_cmd[-3:] == ["--features", "webgl", "--locked"]

    index = cli_context.workspace.bundle_dir("hello") / "index.html"
    assert "body { margin: 0px; }" in index.read_text(encoding="utf-8")


def test_config_css_used_without_integration_css(
    cli_context: CLIContext, fake_runner: FakeToolsRunner
) -> None:
    result = runner.invoke(app, ["--bin", "hello", "-r", "--build-only"])

    assert result.exit_code == ErrorCode.OK, result.output
    assert "--profile" in fake_runner.calls[0]
    index = cli_context.workspace.bundle_dir("hello") / "index.html"
    assert "from-config" in index.read_text(encoding="utf-8")


def test_cargo_failure_exits_in_build_range(
    monkeypatch: pytest.MonkeyPatch,
    cli_context: CLIContext,
    make_runner: Callable[..., FakeToolsRunner],
) -> None:
    failing = make_runner(cargo_code=101)
    ctx = CLIContext(
        workspace=cli_context.workspace,
        toolchain=cli_context.toolchain,
        options=cli_context.options,
        console=MockConsole(),
        runner=failing,
        env=cli_context.env,
    )
    monkeypatch.setattr(run_cmd, "build_context", lambda **_: Ok(ctx))

    result = runner.invoke(app, ["--example", "hello"])

    assert result.exit_code == ErrorCode.BUILD_ERROR
    assert failing.tool_calls("wasm-bindgen") == []


def test_context_error_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        run_cmd, "build_context", lambda **_: Err(UsageError("could not find Cargo.toml"))
    )

    result = runner.invoke(app, ["--example", "hello"])

    assert result.exit_code == ErrorCode.USER_ERROR


@pytest.mark.parametrize(
    "args",
    [
        ["--example", "hello", "--port", "abc"],
        ["--example", "hello", "--port", "70000"],
        ["--bin"],
        ["--example", "hello", "--profile"],
    ],
)
def test_parser_rejections_exit_with_user_error(
    args: list[str], capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as exc:
        main(args=args)

    assert exc.value.code == ErrorCode.USER_ERROR
    assert "Error" in capsys.readouterr().err


def test_main_success_exits_zero(cli_context: CLIContext) -> None:
    with pytest.raises(SystemExit) as exc:
        main(args=["--example", "hello", "--build-only"])

    assert exc.value.code == ErrorCode.OK


def test_ctrl_c_before_serving_exits_interrupted(monkeypatch: pytest.MonkeyPatch) -> None:
    def interrupted(**_: object) -> None:
        raise KeyboardInterrupt

    monkeypatch.setattr(run_cmd, "build_context", interrupted)

    with pytest.raises(SystemExit) as exc:
        main(args=["--example", "hello"])

    assert exc.value.code == ErrorCode.INTERRUPTED


def test_captured_env_reaches_every_child(
    cli_context: CLIContext, fake_runner: FakeToolsRunner
) -> None:
    result = runner.invoke(app, ["--example", "hello", "--build-only"])

    assert result.exit_code == ErrorCode.OK, result.output
    assert len(fake_runner.envs) == 2
    assert all(env == cli_context.env for env in fake_runner.envs)
