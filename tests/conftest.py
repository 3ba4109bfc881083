from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest
from loguru import logger

from android_bootstrap.context import BootstrapContext
from android_bootstrap.runner import CommandResult
from android_bootstrap.sdk import SdkEnvironment, SdkSource

Handler = Callable[[list[str]], CommandResult]


class FakeRunner:
    """Records commands and answers them from per-tool handlers."""

    def __init__(self):
        self.handlers: dict[str, Handler] = {}
        self.calls: list[tuple[str, list[str], Optional[str]]] = []
        self.spawned: list[tuple[str, list[str]]] = []

    def on(self, tool: str, handler: Handler):
        self.handlers[tool] = handler

    def run(self, program, args: Sequence[str], input: Optional[str] = None) -> CommandResult:
        name = Path(str(program)).stem
        self.calls.append((name, list(args), input))
        handler = self.handlers.get(name)
        return handler(list(args)) if handler else CommandResult(0)

    def spawn(self, program, args: Sequence[str]):
        self.spawned.append((Path(str(program)).stem, list(args)))
        return None

    def calls_to(self, tool: str) -> list[list[str]]:
        return [args for name, args, _ in self.calls if name == tool]


def make_tool(root: Path, *parts: str) -> Path:
    path = root.joinpath(*parts)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


@pytest.fixture(autouse=True)
def _silence_logs():
    yield
    logger.remove()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def ctx(tmp_path: Path, runner: FakeRunner, sleeps: list[float]) -> BootstrapContext:
    project = tmp_path / "project"
    project.mkdir()
    return BootstrapContext(
        env={"PATH": "/usr/bin"},
        project_dir=project,
        platform="linux",
        runner=runner,
        sleep=sleeps.append,
        profile_path=tmp_path / ".profile",
        java_search_roots=[],
    )


@pytest.fixture
def sdk(tmp_path: Path) -> SdkEnvironment:
    root = tmp_path / "sdk"
    root.mkdir()
    return SdkEnvironment(root=root, source=SdkSource.ANDROID_HOME)
