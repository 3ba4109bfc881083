"""AVD provisioning through avdmanager."""

import re
from dataclasses import dataclass

from loguru import logger

from .context import BootstrapContext
from .errors import CreationError, NotFoundError
from .packages import DEFAULT_API_LEVEL, DEFAULT_VARIANT, PackageSpec
from .sdk import SdkEnvironment, resolve_tool

DEFAULT_AVD_NAME = "bootstrap_avd"
DEFAULT_DEVICE_PROFILE = "pixel"

_NAME_LINE = re.compile(r"^\s*Name:\s*(\S.*?)\s*$")


@dataclass
class VirtualDevice:
    """A named AVD built from a system image and a device profile."""

    name: str = DEFAULT_AVD_NAME
    api_level: int = DEFAULT_API_LEVEL
    variant: str = DEFAULT_VARIANT
    device_profile: str = DEFAULT_DEVICE_PROFILE

    @property
    def system_image(self) -> str:
        return PackageSpec(self.api_level, self.variant).system_image


def _avdmanager(ctx: BootstrapContext, sdk: SdkEnvironment):
    path = resolve_tool(sdk, "avdmanager", ctx.platform)
    if path is None:
        raise NotFoundError(f"avdmanager not found under {sdk.root}")
    return path


def parse_avd_names(output: str) -> list[str]:
    """Extract AVD names from `avdmanager list avd` output."""
    names = []
    for line in output.splitlines():
        match = _NAME_LINE.match(line)
        if match:
            names.append(match.group(1))
    return names


def list_avds(ctx: BootstrapContext, sdk: SdkEnvironment) -> list[str]:
    """List existing AVD names.

    Raises:
        NotFoundError: If avdmanager is missing.
        CreationError: If avdmanager cannot list AVDs.
    """
    result = ctx.runner.run(_avdmanager(ctx, sdk), ["list", "avd"])
    if not result.ok:
        raise CreationError(
            f"avdmanager list avd exited with {result.returncode}:\n{result.tail()}"
        )
    return parse_avd_names(result.stdout)


def ensure_avd(ctx: BootstrapContext, sdk: SdkEnvironment, device: VirtualDevice) -> bool:
    """Create an AVD unless one with the same name exists.

    Only the name is compared; an existing AVD with a different image is
    left untouched.

    Returns:
        True if the AVD was created, False if it already existed.

    Raises:
        NotFoundError: If avdmanager is missing.
        CreationError: If avdmanager exits nonzero.
    """
    avdmanager = _avdmanager(ctx, sdk)

    if device.name in list_avds(ctx, sdk):
        logger.info(f"AVD '{device.name}' already exists")
        return False

    args = [
        "create",
        "avd",
        "-n",
        device.name,
        "-k",
        device.system_image,
        "--device",
        device.device_profile,
        "--force",
    ]
    result = ctx.runner.run(
        avdmanager,
        args,
        input="no\n",  # Don't create custom hardware profile
    )
    if not result.ok:
        raise CreationError(
            f"Failed to create AVD '{device.name}' ({result.returncode}):\n{result.tail()}"
        )

    logger.info(f"Created AVD: {device.name}")
    return True
