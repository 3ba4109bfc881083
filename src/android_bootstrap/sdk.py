"""SDK root discovery and tool lookup."""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from loguru import logger

from .context import BootstrapContext
from .errors import NotFoundError

LOCAL_PROPERTIES = "local.properties"

# Searched after the tool's own home directory, in this order
CANDIDATE_DIRS = [
    ("cmdline-tools", "latest", "bin"),
    ("cmdline-tools", "bin"),
    ("tools", "bin"),
    ("tools",),
    (),
]

TOOL_HOMES = {
    "emulator": ("emulator",),
    "adb": ("platform-tools",),
}

WINDOWS_SUFFIXES = {
    "sdkmanager": ".bat",
    "avdmanager": ".bat",
    "emulator": ".exe",
    "adb": ".exe",
}

KNOWN_TOOLS = ["sdkmanager", "avdmanager", "emulator", "adb"]

_ESCAPE = re.compile(r"\\(u[0-9a-fA-F]{4}|.)")


class SdkSource(str, Enum):
    CONFIG_FILE = "local.properties"
    ANDROID_HOME = "ANDROID_HOME"
    ANDROID_SDK_ROOT = "ANDROID_SDK_ROOT"
    NONE = "none"


@dataclass(frozen=True)
class SdkEnvironment:
    """A located SDK installation."""

    root: Path
    source: SdkSource


@dataclass(frozen=True)
class ToolBinary:
    name: str
    path: Optional[Path]

    @property
    def found(self) -> bool:
        return self.path is not None


def unescape_property(value: str) -> str:
    r"""Decode backslash escapes in a properties value (C\:\\sdk -> C:\sdk).

    \uXXXX becomes the code point; any other escaped character stands for itself.
    """

    def decode(match: re.Match) -> str:
        escaped = match.group(1)
        if len(escaped) == 5:
            return chr(int(escaped[1:], 16))
        return escaped

    return _ESCAPE.sub(decode, value)


def read_sdk_dir(properties_file: Path) -> Optional[str]:
    """Return the unescaped sdk.dir entry of a local.properties file."""
    if not properties_file.is_file():
        return None

    for line in properties_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith(("#", "!")) or "=" not in line:
            continue
        key, value = line.split("=", 1)
        if key.strip() == "sdk.dir":
            return unescape_property(value.strip())

    return None


def locate_sdk(ctx: BootstrapContext) -> SdkEnvironment:
    """Find the SDK root.

    Checks local.properties in the project directory, then ANDROID_HOME,
    then ANDROID_SDK_ROOT. Sources pointing at a missing directory are skipped.

    Raises:
        NotFoundError: If no source names an existing directory.
    """
    candidates = [
        (SdkSource.CONFIG_FILE, read_sdk_dir(ctx.project_dir / LOCAL_PROPERTIES)),
        (SdkSource.ANDROID_HOME, ctx.env.get("ANDROID_HOME")),
        (SdkSource.ANDROID_SDK_ROOT, ctx.env.get("ANDROID_SDK_ROOT")),
    ]

    for source, value in candidates:
        if not value:
            continue
        root = Path(value).expanduser()
        if root.is_dir():
            logger.debug(f"SDK root {root} (from {source.value})")
            return SdkEnvironment(root=root, source=source)
        logger.debug(f"Ignoring {source.value}: {root} is not a directory")

    raise NotFoundError(
        "Android SDK not found. Set sdk.dir in local.properties, "
        "ANDROID_HOME or ANDROID_SDK_ROOT."
    )


def tool_candidates(sdk: SdkEnvironment, name: str, platform: str) -> list[Path]:
    """All paths checked for a tool, highest priority first."""
    dirs = []
    if name in TOOL_HOMES:
        dirs.append(sdk.root.joinpath(*TOOL_HOMES[name]))
    dirs.extend(sdk.root.joinpath(*parts) for parts in CANDIDATE_DIRS)

    names = [name]
    if platform.startswith("win"):
        names.insert(0, name + WINDOWS_SUFFIXES.get(name, ".exe"))

    return [d / n for d in dirs for n in names]


def resolve_tool(sdk: SdkEnvironment, name: str, platform: str) -> Optional[Path]:
    """Return the first existing candidate for a tool, or None."""
    for candidate in tool_candidates(sdk, name, platform):
        if candidate.is_file():
            return candidate
    return None


def resolve_tools(sdk: SdkEnvironment, platform: str) -> list[ToolBinary]:
    return [ToolBinary(name, resolve_tool(sdk, name, platform)) for name in KNOWN_TOOLS]
