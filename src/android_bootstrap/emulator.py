"""Emulator launch and readiness polling."""

import re
from enum import Enum
from pathlib import Path

from loguru import logger

from .context import BootstrapContext
from .errors import LaunchError
from .sdk import SdkEnvironment, resolve_tool

POLL_ATTEMPTS = 60
POLL_INTERVAL = 3

EMULATOR_FLAGS = ["-netdelay", "none", "-netspeed", "full"]

_EMULATOR_SERIAL = re.compile(r"^emulator-\d+\s", re.MULTILINE)


class ReadinessState(str, Enum):
    PENDING = "pending"
    READY = "ready"
    TIMED_OUT = "timed_out"


def has_emulator(devices_output: str) -> bool:
    """Whether `adb devices` output lists an emulator serial."""
    return _EMULATOR_SERIAL.search(devices_output + "\n") is not None


def wait_for_emulator(
    ctx: BootstrapContext,
    adb: Path,
    attempts: int = POLL_ATTEMPTS,
    interval: float = POLL_INTERVAL,
) -> ReadinessState:
    """Poll `adb devices` until an emulator shows up.

    Runs at most `attempts` polls, sleeping `interval` seconds between them.
    """
    for attempt in range(1, attempts + 1):
        result = ctx.runner.run(adb, ["devices"])
        if has_emulator(result.stdout):
            logger.info(f"Emulator visible to adb after {attempt} poll(s)")
            return ReadinessState.READY
        if attempt < attempts:
            ctx.sleep(interval)

    logger.warning(
        f"Emulator not visible to adb after {attempts} polls; it may still be booting"
    )
    return ReadinessState.TIMED_OUT


def launch_emulator(
    ctx: BootstrapContext,
    sdk: SdkEnvironment,
    avd_name: str,
    attempts: int = POLL_ATTEMPTS,
    interval: float = POLL_INTERVAL,
) -> ReadinessState:
    """Start an AVD detached and wait for adb to see it.

    The emulator process is not tracked after launch; a timeout leaves it
    running.

    Returns:
        READY, TIMED_OUT, or PENDING when adb is unavailable to poll with.

    Raises:
        LaunchError: If the emulator binary is missing.
    """
    emulator = resolve_tool(sdk, "emulator", ctx.platform)
    if emulator is None:
        raise LaunchError(f"emulator binary not found under {sdk.root}")

    logger.info(f"Starting emulator for AVD '{avd_name}'")
    ctx.runner.spawn(emulator, ["-avd", avd_name, *EMULATOR_FLAGS])

    adb = resolve_tool(sdk, "adb", ctx.platform)
    if adb is None:
        logger.warning("adb not found; not waiting for the emulator")
        return ReadinessState.PENDING

    return wait_for_emulator(ctx, adb, attempts, interval)
