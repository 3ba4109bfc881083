"""
android-bootstrap: prepare an Android SDK and emulator for development

  android-bootstrap setup --name dev --api 33 --variant "google_apis;x86_64"
  android-bootstrap setup --tools-zip ./commandlinetools.zip --no-start
  android-bootstrap doctor
  android-bootstrap avds
  android-bootstrap start dev
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .avd import DEFAULT_AVD_NAME, VirtualDevice, ensure_avd, list_avds
from .context import BootstrapContext
from .emulator import ReadinessState, launch_emulator
from .errors import BootstrapError
from .java import ensure_java_home
from .log import setup_logger
from .packages import DEFAULT_API_LEVEL, DEFAULT_VARIANT, PackageSpec, install_packages
from .sdk import locate_sdk, resolve_tools

app = typer.Typer(
    name="android-bootstrap",
    help="Locate the Android SDK, install packages, create an AVD and start it",
    no_args_is_help=True,
)

console = Console()


def setup_environment(
    ctx: BootstrapContext,
    device: VirtualDevice,
    start: bool = True,
    tools_zip: Optional[Path] = None,
    fix_java: bool = False,
) -> Optional[ReadinessState]:
    """Run the full bootstrap: locate, install, provision, launch.

    Returns:
        Emulator readiness, or None when start is False.
    """
    sdk = locate_sdk(ctx)
    console.print(f"SDK: {sdk.root} [dim]({sdk.source.value})[/dim]")

    if fix_java:
        ensure_java_home(ctx)

    install_packages(ctx, sdk, PackageSpec(device.api_level, device.variant), tools_zip)

    if ensure_avd(ctx, sdk, device):
        console.print(f"[green]Created AVD: {device.name}[/green]")
    else:
        console.print(f"[dim]AVD '{device.name}' already exists[/dim]")

    if not start:
        return None
    return launch_emulator(ctx, sdk, device.name)


def _report_readiness(state: ReadinessState, name: str):
    if state == ReadinessState.READY:
        console.print(f"[green]Emulator running: {name}[/green]")
    elif state == ReadinessState.TIMED_OUT:
        console.print("[yellow]Emulator started but adb has not seen it yet[/yellow]")
    else:
        console.print("[yellow]Emulator started (adb not available to check)[/yellow]")


@app.command()
def setup(
    name: str = typer.Option(DEFAULT_AVD_NAME, "--name", "-n", help="AVD name"),
    api: int = typer.Option(DEFAULT_API_LEVEL, "--api", "-a", help="Android API level"),
    variant: str = typer.Option(
        DEFAULT_VARIANT, "--variant", help="System image variant, e.g. google_apis;x86_64"
    ),
    start: bool = typer.Option(True, "--start/--no-start", help="Launch the emulator"),
    tools_zip: Optional[Path] = typer.Option(
        None, "--tools-zip", help="Local command-line tools archive"
    ),
    fix_java: bool = typer.Option(False, "--fix-java", help="Find and set JAVA_HOME"),
    project_dir: Path = typer.Option(
        Path("."), "--project-dir", "-p", help="Directory containing local.properties"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Install SDK packages, create the AVD and start it."""
    setup_logger(verbose)
    ctx = BootstrapContext(project_dir=project_dir)
    device = VirtualDevice(name=name, api_level=api, variant=variant)

    try:
        state = setup_environment(ctx, device, start, tools_zip, fix_java)
    except BootstrapError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if state is not None:
        _report_readiness(state, name)


@app.command()
def start(
    name: str = typer.Argument(..., help="AVD name"),
    project_dir: Path = typer.Option(
        Path("."), "--project-dir", "-p", help="Directory containing local.properties"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Start an existing AVD and wait for adb to see it."""
    setup_logger(verbose)
    ctx = BootstrapContext(project_dir=project_dir)

    try:
        sdk = locate_sdk(ctx)
        state = launch_emulator(ctx, sdk, name)
    except BootstrapError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    _report_readiness(state, name)


@app.command()
def avds(
    project_dir: Path = typer.Option(
        Path("."), "--project-dir", "-p", help="Directory containing local.properties"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """List existing AVDs."""
    setup_logger(verbose)
    ctx = BootstrapContext(project_dir=project_dir)

    try:
        sdk = locate_sdk(ctx)
        names = list_avds(ctx, sdk)
    except BootstrapError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not names:
        console.print("[dim]No AVDs found[/dim]")
        return

    for avd_name in names:
        console.print(f"  - {avd_name}")


@app.command()
def doctor(
    project_dir: Path = typer.Option(
        Path("."), "--project-dir", "-p", help="Directory containing local.properties"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Show the located SDK and which tools resolve."""
    setup_logger(verbose)
    ctx = BootstrapContext(project_dir=project_dir)

    try:
        sdk = locate_sdk(ctx)
    except BootstrapError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold]SDK root:[/bold] {sdk.root}")
    console.print(f"  Source: {sdk.source.value}")
    console.print(f"  JAVA_HOME: {ctx.env.get('JAVA_HOME') or '[dim]unset[/dim]'}")

    table = Table(title="SDK Tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Path")

    missing = 0
    for tool in resolve_tools(sdk, ctx.platform):
        if tool.found:
            table.add_row(tool.name, str(tool.path))
        else:
            missing += 1
            table.add_row(tool.name, "[red]missing[/red]")

    console.print(table)
    if missing:
        console.print(f"[yellow]{missing} tool(s) missing; run 'setup' to install[/yellow]")


if __name__ == "__main__":
    app()
