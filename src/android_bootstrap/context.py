"""Explicit configuration context threaded through every bootstrap step.

The context takes one copy of os.environ when it is built; after that every
step reads and updates that copy, and user-level persistence happens only in
persist_user_env().
"""

import os
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from .runner import CommandRunner, SubprocessRunner


def default_java_roots(platform: str, env: dict[str, str]) -> list[Path]:
    """Well-known JDK installation roots for a platform."""
    if platform.startswith("win"):
        program_files = Path(env.get("ProgramFiles", r"C:\Program Files"))
        return [
            program_files / "Java",
            program_files / "Eclipse Adoptium",
            program_files / "Microsoft",
            program_files / "Android" / "Android Studio",
        ]
    if platform == "darwin":
        return [
            Path("/Library/Java/JavaVirtualMachines"),
            Path.home() / "Library" / "Java" / "JavaVirtualMachines",
        ]
    return [Path("/usr/lib/jvm"), Path("/opt/java"), Path("/usr/java")]


@dataclass
class BootstrapContext:
    """Environment, platform and side-effect hooks for one bootstrap run."""

    env: dict[str, str] = field(default_factory=lambda: dict(os.environ))
    project_dir: Path = field(default_factory=Path.cwd)
    platform: str = sys.platform
    runner: Optional[CommandRunner] = None
    sleep: Callable[[float], None] = time.sleep
    profile_path: Path = field(default_factory=lambda: Path.home() / ".profile")
    java_search_roots: Optional[list[Path]] = None

    def __post_init__(self):
        self.project_dir = Path(self.project_dir)
        if self.runner is None:
            self.runner = SubprocessRunner(self.env, self.platform)
        if self.java_search_roots is None:
            self.java_search_roots = default_java_roots(self.platform, self.env)

    @property
    def is_windows(self) -> bool:
        return self.platform.startswith("win")

    @property
    def pathsep(self) -> str:
        return ";" if self.is_windows else ":"

    def prepend_path(self, directory: Path):
        """Put a directory at the front of the context PATH."""
        current = self.env.get("PATH", "")
        self.env["PATH"] = str(directory) + (self.pathsep + current if current else "")


def persist_user_env(ctx: BootstrapContext, name: str, value: str) -> bool:
    """Persist an environment variable for future user sessions.

    Windows stores it in the user registry via setx; elsewhere an export line
    is appended to the user's profile once.

    Returns:
        True if the value was persisted (or already was).
    """
    if ctx.is_windows:
        result = ctx.runner.run("setx", [name, value])
        if not result.ok:
            logger.warning(f"setx {name} failed: {result.tail(3)}")
        return result.ok

    line = f'export {name}="{value}"'
    try:
        if ctx.profile_path.exists():
            if line in ctx.profile_path.read_text().splitlines():
                return True
        with open(ctx.profile_path, "a") as f:
            f.write(f"\n{line}\n")
    except OSError as e:
        logger.warning(f"Could not persist {name} to {ctx.profile_path}: {e}")
        return False

    logger.info(f"Persisted {name} to {ctx.profile_path}")
    return True
