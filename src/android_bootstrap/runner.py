"""Command execution for SDK tools.

Every component talks to external binaries through a CommandRunner so the
whole flow can be exercised against a fake in tests.
"""

import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence, Union

from loguru import logger

from .errors import LaunchError, NotFoundError

Program = Union[str, Path]


@dataclass
class CommandResult:
    """Outcome of a finished command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def tail(self, lines: int = 20) -> str:
        """Last lines of combined output, for error messages."""
        text = (self.stdout + "\n" + self.stderr).strip()
        return "\n".join(text.splitlines()[-lines:])


class CommandRunner(Protocol):
    def run(
        self, program: Program, args: Sequence[str], input: Optional[str] = None
    ) -> CommandResult: ...

    def spawn(self, program: Program, args: Sequence[str]) -> subprocess.Popen: ...


class SubprocessRunner:
    """Runs commands with subprocess using a shared environment mapping.

    The mapping is held by reference, so updates made through the
    bootstrap context (JAVA_HOME, PATH) reach every later command.
    """

    def __init__(self, env: Optional[dict[str, str]] = None, platform: str = sys.platform):
        self.env = env if env is not None else dict(os.environ)
        self.platform = platform

    def run(
        self, program: Program, args: Sequence[str], input: Optional[str] = None
    ) -> CommandResult:
        cmd = [str(program), *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                input=input,
                capture_output=True,
                text=True,
                env=self.env,
            )
        except OSError as e:
            raise NotFoundError(f"Cannot run {program}: {e}") from e
        return CommandResult(result.returncode, result.stdout, result.stderr)

    def spawn(self, program: Program, args: Sequence[str]) -> subprocess.Popen:
        cmd = [str(program), *args]
        logger.debug(f"Spawning: {' '.join(cmd)}")

        kwargs = {}
        if self.platform.startswith("win"):
            kwargs["creationflags"] = (
                subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
            )
        else:
            kwargs["start_new_session"] = True  # Survives our exit

        try:
            return subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                env=self.env,
                **kwargs,
            )
        except OSError as e:
            raise LaunchError(f"Cannot start {program}: {e}") from e
