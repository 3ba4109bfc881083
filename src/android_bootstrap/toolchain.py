"""Install the SDK command-line tools (sdkmanager, avdmanager) when missing."""

import os
import shutil
import stat
import tempfile
import zipfile
from pathlib import Path
from typing import Optional

import httpx
from loguru import logger

from .context import BootstrapContext
from .errors import DownloadError, ExtractError
from .sdk import SdkEnvironment, resolve_tool

CMDLINE_TOOLS_BUILD = "11076708"
CMDLINE_TOOLS_URL = (
    "https://dl.google.com/android/repository/commandlinetools-{os}-{build}_latest.zip"
)
DOWNLOAD_TIMEOUT = 300.0


def cmdline_tools_url(platform: str) -> str:
    if platform.startswith("win"):
        os_name = "win"
    elif platform == "darwin":
        os_name = "mac"
    else:
        os_name = "linux"
    return CMDLINE_TOOLS_URL.format(os=os_name, build=CMDLINE_TOOLS_BUILD)


def download_archive(url: str, dest: Path):
    """Stream a remote archive to disk.

    Raises:
        DownloadError: On any HTTP or transport failure.
    """
    logger.info(f"Downloading {url}")
    try:
        with httpx.stream("GET", url, follow_redirects=True, timeout=DOWNLOAD_TIMEOUT) as resp:
            resp.raise_for_status()
            with open(dest, "wb") as f:
                for chunk in resp.iter_bytes():
                    f.write(chunk)
    except httpx.HTTPError as e:
        raise DownloadError(f"Failed to download {url}: {e}") from e
    except OSError as e:
        raise DownloadError(f"Failed to write {dest}: {e}") from e


def extract_archive(archive: Path, staging: Path) -> Path:
    """Unzip into staging and return the directory holding the tools.

    The official archive has a single top-level cmdline-tools/ directory;
    anything else falls back to the first directory found.
    """
    try:
        with zipfile.ZipFile(archive) as zf:
            zf.extractall(staging)
    except (zipfile.BadZipFile, OSError) as e:
        raise ExtractError(f"Failed to extract {archive}: {e}") from e

    expected = staging / "cmdline-tools"
    if expected.is_dir():
        return expected

    for entry in sorted(staging.iterdir()):
        if entry.is_dir():
            logger.debug(f"Unexpected archive layout, using {entry.name}/")
            return entry

    raise ExtractError(f"No tool directory found in {archive}")


def _mark_executable(bin_dir: Path):
    # zipfile drops permission bits
    if not bin_dir.is_dir():
        return
    for tool in bin_dir.iterdir():
        if tool.is_file():
            tool.chmod(tool.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def ensure_cmdline_tools(
    ctx: BootstrapContext,
    sdk: SdkEnvironment,
    archive: Optional[Path] = None,
) -> bool:
    """Make sure sdkmanager resolves, installing cmdline-tools/latest if needed.

    Args:
        ctx: Bootstrap context
        sdk: Located SDK
        archive: Local command-line tools zip to use instead of downloading

    Returns:
        True if sdkmanager is available afterwards.

    Raises:
        DownloadError: If the archive could not be fetched.
        ExtractError: If the archive could not be unpacked.
    """
    if resolve_tool(sdk, "sdkmanager", ctx.platform):
        return True

    user_supplied = archive is not None and Path(archive).is_file()
    if user_supplied:
        archive = Path(archive)
        logger.info(f"Installing command-line tools from {archive}")
    elif archive is not None:
        logger.warning(f"Archive {archive} not found, downloading instead")

    try:
        staging = Path(tempfile.mkdtemp(prefix=".cmdline-tools-", dir=sdk.root))
    except OSError as e:
        raise ExtractError(f"Cannot create staging directory in {sdk.root}: {e}") from e

    downloaded = None
    try:
        if not user_supplied:
            try:
                fd, tmp_name = tempfile.mkstemp(prefix="cmdline-tools-", suffix=".zip")
                os.close(fd)
            except OSError as e:
                raise DownloadError(f"Cannot create temporary archive: {e}") from e
            downloaded = archive = Path(tmp_name)
            download_archive(cmdline_tools_url(ctx.platform), archive)

        tools_dir = extract_archive(archive, staging)

        target = sdk.root / "cmdline-tools" / "latest"
        try:
            if target.exists():
                shutil.rmtree(target)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(tools_dir), str(target))
            if not ctx.is_windows:
                _mark_executable(target / "bin")
        except OSError as e:
            raise ExtractError(f"Failed to move command-line tools to {target}: {e}") from e

        logger.info(f"Installed command-line tools to {target}")
    finally:
        shutil.rmtree(staging, ignore_errors=True)
        if downloaded is not None:
            downloaded.unlink(missing_ok=True)

    return resolve_tool(sdk, "sdkmanager", ctx.platform) is not None
