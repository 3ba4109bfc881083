"""JAVA_HOME discovery for sdkmanager and avdmanager."""

from pathlib import Path
from typing import Optional

from loguru import logger

from .context import BootstrapContext, persist_user_env


def java_executable(home: Path, windows: bool) -> Path:
    return home / "bin" / ("java.exe" if windows else "java")


def find_java_home(ctx: BootstrapContext) -> Optional[Path]:
    """Pick a JDK from the well-known roots.

    The lexicographically greatest directory name wins; this is a rough
    stand-in for "newest" and does not compare versions.
    """
    candidates = []
    for root in ctx.java_search_roots:
        if not root.is_dir():
            continue
        candidates.extend(d for d in root.iterdir() if d.is_dir())

    if not candidates:
        return None

    best = max(candidates, key=lambda d: d.name)
    mac_home = best / "Contents" / "Home"
    return mac_home if mac_home.is_dir() else best


def ensure_java_home(ctx: BootstrapContext) -> bool:
    """Make sure JAVA_HOME points at a usable JDK.

    Sets JAVA_HOME and PATH in the context and persists JAVA_HOME for future
    sessions. Never raises; a missing JDK is only warned about.

    Returns:
        True if JAVA_HOME is usable afterwards.
    """
    current = ctx.env.get("JAVA_HOME")
    if current and java_executable(Path(current), ctx.is_windows).is_file():
        logger.debug(f"JAVA_HOME already set: {current}")
        return True

    home = find_java_home(ctx)
    if home is None:
        logger.warning("No JDK found; set JAVA_HOME manually if sdkmanager fails")
        return False

    ctx.env["JAVA_HOME"] = str(home)
    persist_user_env(ctx, "JAVA_HOME", str(home))
    ctx.prepend_path(home / "bin")
    logger.info(f"JAVA_HOME set to {home}")
    return True
