"""``ghidra-app plan``: show what a build would fetch, without fetching."""

from __future__ import annotations

import typer
from rich.table import Table

from ghidra_app.cli.console import console
from ghidra_app.config import BuildSettings
from ghidra_app.core.artifact_table import PINNED_TABLE
from ghidra_app.core.builder import make_plan
from ghidra_app.errors import GhidraAppError


def plan_cmd(
    arch: str | None = typer.Option(
        None,
        "--arch",
        "-a",
        help="Target x86-64 or arm64 [default: detect].",
    ),
    build_natives: bool | None = typer.Option(
        None,
        "--build-natives/--no-build-natives",
        help="Force or forbid building native binaries.",
    ),
) -> None:
    """Print the resolved build plan for the pinned artifacts."""
    settings = BuildSettings()
    try:
        plan = make_plan(arch=arch, build_natives=build_natives)
    except GhidraAppError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    host = plan.host_arch.value if plan.host_arch is not None else "not needed"
    console.print(
        f"[bold]Target:[/bold] {plan.arch.value}   "
        f"[bold]Host:[/bold] {host}   "
        f"[bold]Pins:[/bold] {PINNED_TABLE.version}"
    )
    if plan.build_natives:
        console.print(
            f"[bold]Natives:[/bold] build with gradle "
            f"buildNatives_{plan.arch.native_target}"
            + (" (cross-build)" if plan.cross_build else "")
        )
    elif plan.arch.has_prebuilt_natives:
        console.print("[bold]Natives:[/bold] prebuilt")
    else:
        console.print("[bold]Natives:[/bold] [yellow]prebuilt x86-64 under emulation[/yellow]")

    table = Table(title="Artifacts")
    table.add_column("Role", style="cyan")
    table.add_column("File", style="green")
    table.add_column("SHA-256")
    table.add_column("Cached", justify="center")

    roles = [("bundle JDK", plan.bundle_jdk), ("Ghidra", plan.ghidra)]
    if plan.gradle is not None:
        roles.append(("Gradle", plan.gradle))
    if plan.build_jdk is not None and plan.build_jdk != plan.bundle_jdk:
        roles.append(("build JDK", plan.build_jdk))

    for role, artifact in roles:
        cached = (settings.cache / artifact.filename).is_file()
        table.add_row(
            role,
            artifact.filename,
            artifact.sha256[:16] + "…",
            "[green]Yes[/green]" if cached else "[dim]No[/dim]",
        )
    console.print(table)
