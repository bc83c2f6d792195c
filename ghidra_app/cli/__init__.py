"""ghidra-app CLI: Typer-based command-line interface.

Provides the ``ghidra-app`` command with subcommands for building a
bundle and previewing the resolved build plan.

All output uses Rich for formatted terminal display.
"""
