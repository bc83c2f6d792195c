"""Main Typer application: registers the CLI commands.

Entry point: ``ghidra-app`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from ghidra_app.cli.commands.build import build_cmd
from ghidra_app.cli.commands.plan import plan_cmd

app = typer.Typer(
    name="ghidra-app",
    help="Build a double-clickable macOS Ghidra.app bundle.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="build", help="Download, verify and assemble the bundle.")(build_cmd)
app.command(name="plan", help="Show the resolved build plan without downloading.")(plan_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
