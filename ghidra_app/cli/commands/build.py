"""``ghidra-app build``: download, verify and assemble Ghidra.app.

Fetches (or reuses from the cache) the JDK and Ghidra distribution,
verifies their checksums, builds the bundle and, when needed, compiles
the native binaries with Gradle.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.panel import Panel

from ghidra_app.cli.console import configure_logging, console
from ghidra_app.config import BuildSettings
from ghidra_app.core.builder import BundleBuilder, make_plan
from ghidra_app.core.cache import ArtifactCache
from ghidra_app.core.latest_release import resolve_latest_ghidra
from ghidra_app.errors import GhidraAppError


def build_cmd(
    arch: str | None = typer.Option(
        None,
        "--arch",
        "-a",
        help="Include the JDK for x86-64 or arm64 [default: detect].",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Build the bundle even if the output already exists.",
    ),
    output: Path = typer.Option(
        Path("Ghidra.app"),
        "--output",
        "-o",
        help="Use this as the output name.",
    ),
    build_natives: bool | None = typer.Option(
        None,
        "--build-natives/--no-build-natives",
        help="Force or forbid building native binaries [default: when upstream has none].",
    ),
    latest: bool = typer.Option(
        False,
        "--latest",
        help="Use the latest upstream Ghidra release instead of the pinned one.",
    ),
    cache_dir: Path | None = typer.Option(
        None,
        "--cache",
        help="Download cache directory [default: $GHIDRA_APP_BUILD_CACHE or ./cache].",
    ),
    icon: Path | None = typer.Option(
        None,
        "--icon",
        help="Icon file to use instead of the bundled ghidra.icns.",
    ),
) -> None:
    """Build a macOS application bundle for Ghidra."""
    settings = BuildSettings()
    configure_logging(settings.log_level)

    cache = ArtifactCache(cache_dir or settings.cache, timeout=settings.http_timeout)
    try:
        ghidra = None
        if latest:
            ghidra = resolve_latest_ghidra(
                api_url=settings.github_api,
                repo=settings.ghidra_repo,
                timeout=settings.http_timeout,
            )
        plan = make_plan(
            arch=arch,
            output=output,
            force=force,
            build_natives=build_natives,
            ghidra=ghidra,
            icon=icon,
        )
        result = BundleBuilder(cache).build(plan)
    except GhidraAppError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    for warning in result.warnings:
        console.print(f"[bold yellow]Warning:[/bold yellow] {warning}")

    natives = "built" if result.natives_built else (
        "prebuilt" if result.arch.has_prebuilt_natives else "x86-64 (emulated)"
    )
    console.print()
    console.print(
        Panel(
            "\n".join([
                "[bold green]Bundle built![/bold green]",
                "",
                f"[bold]App:[/bold]           {result.app}",
                f"[bold]Architecture:[/bold]  {result.arch.value}",
                f"[bold]Ghidra:[/bold]        {result.distribution.version} "
                f"({result.distribution.channel})",
                f"[bold]Natives:[/bold]       {natives}",
            ]),
            title="[bold]ghidra-app[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
