"""main.py – Umbrella CLI entry point for flagreg.

Imports and registers every subcommand typer app.  All dependencies are
required, so an import failure is a packaging bug and is not masked.

Single-command modules are registered as flat ``app.command()`` entries.
Only true multi-command modules (currently only ``cfg``) use
``add_typer()``.
"""

import importlib

import typer

from flagreg import __version__

app = typer.Typer(
    help="Compile-time flag registry: resolve and query platform, option and user flags.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Typical workflow:[/bold]
  flagreg triple x86_64-linux-gnu          Normalize a triple, show its flags
  flagreg query unix windows               Is the flag set for the target?
  flagreg query linux --host               ...or for the host?
  flagreg list -t aarch64-apple-darwin     All flags of a target
  flagreg reference                        Built-in flag reference tables
  flagreg check -D without_ffi             Enforce safety guards

[dim]Commands read defaults from flagreg.toml when one is found.
Run 'flagreg cfg init' to create one, or 'flagreg <cmd> --help' for details.[/dim]""",
)

# ---------------------------------------------------------------------------
# Subcommand registry
# ---------------------------------------------------------------------------

# Single-command modules – registered as flat commands via app.command().
_SINGLE_COMMANDS: list[tuple[str, str, str]] = [
    ("query", "flagreg.query", "Query whether compile-time flags are set."),
    ("list", "flagreg.listing", "List the flags set for the target or host."),
    ("triple", "flagreg.triple_cli", "Normalize a target triple and show its flags."),
    ("reference", "flagreg.reference", "Show the reference listing of built-in flags."),
    ("check", "flagreg.check", "Check flags against safety guards."),
]

# Multi-command modules – registered as groups via app.add_typer().
_MULTI_COMMANDS: list[tuple[str, str, str]] = [
    ("cfg", "flagreg.cfg", "Read and edit flagreg.toml programmatically."),
]


# Register single-command modules as flat commands.
for _name, _module, _help in _SINGLE_COMMANDS:
    _mod = importlib.import_module(_module)
    _epilog = getattr(_mod.app.info, "epilog", None)
    if not isinstance(_epilog, str):
        _epilog = None
    app.command(name=_name, help=_help, epilog=_epilog)(_mod.main)

# Register multi-command modules as groups (Typer sub-apps).
for _name, _module, _help in _MULTI_COMMANDS:
    app.add_typer(importlib.import_module(_module).app, name=_name, help=_help)


@app.command("version")
def version() -> None:
    """Print the flagreg version."""
    typer.echo(f"flagreg {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
