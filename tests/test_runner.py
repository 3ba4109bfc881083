"""Tests for the subprocess-backed command runner."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from android_bootstrap.errors import LaunchError, NotFoundError
from android_bootstrap.runner import CommandResult, SubprocessRunner


@pytest.fixture
def real_runner() -> SubprocessRunner:
    return SubprocessRunner(env=None, platform=sys.platform)


class TestCommandResult:
    def test_ok(self) -> None:
        assert CommandResult(0).ok
        assert not CommandResult(2).ok

    def test_tail(self) -> None:
        result = CommandResult(1, "\n".join(f"line {i}" for i in range(30)), "boom")
        assert result.tail(2) == "line 29\nboom"


class TestSubprocessRunner:
    def test_captures_output(self, real_runner) -> None:
        result = real_runner.run(sys.executable, ["-c", "print('hello')"])
        assert result.ok
        assert result.stdout.strip() == "hello"

    def test_nonzero_exit(self, real_runner) -> None:
        result = real_runner.run(
            sys.executable, ["-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"]
        )
        assert result.returncode == 3
        assert result.stderr == "bad"

    def test_feeds_stdin(self, real_runner) -> None:
        result = real_runner.run(
            sys.executable, ["-c", "import sys; print(sys.stdin.read().count('y'))"], input="y\ny\n"
        )
        assert result.stdout.strip() == "2"

    def test_uses_context_env(self) -> None:
        env = {"BOOTSTRAP_MARKER": "42"}
        if "SYSTEMROOT" in os.environ:
            env["SYSTEMROOT"] = os.environ["SYSTEMROOT"]
        runner = SubprocessRunner(env=env)

        result = runner.run(
            sys.executable, ["-c", "import os; print(os.environ['BOOTSTRAP_MARKER'])"]
        )
        assert result.stdout.strip() == "42"

    def test_missing_program(self, real_runner, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError):
            real_runner.run(tmp_path / "no-such-tool", ["--version"])

    def test_spawn_detached(self, real_runner) -> None:
        process = real_runner.spawn(sys.executable, ["-c", "pass"])
        assert process.wait(timeout=30) == 0

    def test_spawn_missing_program(self, real_runner, tmp_path: Path) -> None:
        with pytest.raises(LaunchError):
            real_runner.spawn(tmp_path / "no-such-emulator", ["-avd", "dev"])
