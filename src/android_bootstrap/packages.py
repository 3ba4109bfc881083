"""SDK package installation through sdkmanager."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from .context import BootstrapContext
from .errors import InstallError, NotFoundError
from .sdk import SdkEnvironment, resolve_tool
from .toolchain import ensure_cmdline_tools

DEFAULT_API_LEVEL = 33
DEFAULT_VARIANT = "google_apis;x86_64"

# Enough answers for every license prompt sdkmanager may show
LICENSE_ANSWERS = "y\n" * 32


@dataclass(frozen=True)
class PackageSpec:
    """The SDK packages needed to run an emulator for one API level."""

    api_level: int = DEFAULT_API_LEVEL
    variant: str = DEFAULT_VARIANT

    @property
    def platform(self) -> str:
        return f"platforms;android-{self.api_level}"

    @property
    def system_image(self) -> str:
        return f"system-images;android-{self.api_level};{self.variant}"

    def packages(self) -> list[str]:
        return ["platform-tools", "emulator", self.platform, self.system_image]


def install_packages(
    ctx: BootstrapContext,
    sdk: SdkEnvironment,
    spec: PackageSpec,
    archive: Optional[Path] = None,
):
    """Install the packages of a PackageSpec into the SDK root.

    Installs the command-line tools first when sdkmanager is missing.

    Raises:
        NotFoundError: If sdkmanager is still missing after installation.
        InstallError: If sdkmanager exits nonzero.
    """
    sdkmanager = resolve_tool(sdk, "sdkmanager", ctx.platform)
    if sdkmanager is None:
        ensure_cmdline_tools(ctx, sdk, archive)
        sdkmanager = resolve_tool(sdk, "sdkmanager", ctx.platform)
    if sdkmanager is None:
        raise NotFoundError(f"sdkmanager not found under {sdk.root}")

    packages = spec.packages()
    logger.info(f"Installing SDK packages: {', '.join(packages)}")

    args = [f"--sdk_root={sdk.root}", *packages, "--verbose"]
    result = ctx.runner.run(sdkmanager, args, input=LICENSE_ANSWERS)
    if not result.ok:
        raise InstallError(
            f"sdkmanager exited with {result.returncode}:\n{result.tail()}"
        )
