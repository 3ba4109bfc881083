"""Tests for SDK package installation."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from android_bootstrap.errors import InstallError, NotFoundError
from android_bootstrap.packages import PackageSpec, install_packages
from android_bootstrap.runner import CommandResult
from conftest import make_tool


class TestPackageSpec:
    def test_identifiers(self) -> None:
        spec = PackageSpec(api_level=33, variant="google_apis;x86_64")
        assert spec.packages() == [
            "platform-tools",
            "emulator",
            "platforms;android-33",
            "system-images;android-33;google_apis;x86_64",
        ]

    def test_pure(self) -> None:
        assert PackageSpec(33, "google_apis;x86_64").packages() == PackageSpec(
            33, "google_apis;x86_64"
        ).packages()

    def test_system_image(self) -> None:
        assert PackageSpec(30, "default;x86").system_image == "system-images;android-30;default;x86"


class TestInstallPackages:
    def test_invokes_sdkmanager(self, ctx, sdk, runner) -> None:
        make_tool(sdk.root, "cmdline-tools", "latest", "bin", "sdkmanager")

        install_packages(ctx, sdk, PackageSpec(30, "default;x86"))

        assert runner.calls_to("sdkmanager") == [
            [
                f"--sdk_root={sdk.root}",
                "platform-tools",
                "emulator",
                "platforms;android-30",
                "system-images;android-30;default;x86",
                "--verbose",
            ]
        ]

    def test_accepts_licenses(self, ctx, sdk, runner) -> None:
        make_tool(sdk.root, "cmdline-tools", "latest", "bin", "sdkmanager")
        install_packages(ctx, sdk, PackageSpec())

        _, _, stdin = runner.calls[0]
        assert stdin.startswith("y\n")

    def test_nonzero_exit(self, ctx, sdk, runner) -> None:
        make_tool(sdk.root, "cmdline-tools", "latest", "bin", "sdkmanager")
        runner.on("sdkmanager", lambda args: CommandResult(1, "", "Failed to find package"))

        with pytest.raises(InstallError, match="Failed to find package"):
            install_packages(ctx, sdk, PackageSpec())

    def test_installs_cmdline_tools_first(self, ctx, sdk, runner, tmp_path: Path) -> None:
        archive = tmp_path / "tools.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("cmdline-tools/bin/sdkmanager", "#!/bin/sh\n")

        install_packages(ctx, sdk, PackageSpec(), archive)

        assert (sdk.root / "cmdline-tools" / "latest" / "bin" / "sdkmanager").is_file()
        assert len(runner.calls_to("sdkmanager")) == 1

    def test_sdkmanager_still_missing(self, ctx, sdk, runner, tmp_path: Path) -> None:
        archive = tmp_path / "tools.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("cmdline-tools/bin/lint", "#!/bin/sh\n")

        with pytest.raises(NotFoundError):
            install_packages(ctx, sdk, PackageSpec(), archive)
        assert runner.calls == []
