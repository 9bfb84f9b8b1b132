"""triple_cli.py – Parse a target triple and show the flags it produces."""

import typer
from rich.console import Console
from rich.table import Table

from flagreg.cli import JsonOption, error_exit, json_print
from flagreg.derive import derive_flags
from flagreg.triple import TripleError, parse_triple

app = typer.Typer(
    help="Normalize a target triple and show its platform flags.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

flagreg triple amd64-pc-windows-msvc

flagreg triple arm64-apple-darwin23.1.0 --json

flagreg triple armv7-linux-gnueabihf""",
)


@app.command()
def main(
    triple: str = typer.Argument(..., help="Target triple, e.g. x86_64-unknown-linux-gnu."),
    json_output: bool = JsonOption,
) -> None:
    """Show normalized components, pointer width, platform and derived flags."""
    try:
        parsed = parse_triple(triple)
    except TripleError as exc:
        error_exit(str(exc), json_mode=json_output)

    platform = parsed.platform_flags()
    derived = derive_flags(set(platform))

    if json_output:
        data = parsed.to_dict()
        data["platform_flags"] = platform
        data["derived_flags"] = derived
        json_print(data)
        return

    table = Table(title=str(parsed), title_justify="left", show_header=False)
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for category, name in parsed.components():
        table.add_row(category.title, name)
    table.add_row("Pointer width", f"{parsed.pointer_width} bits")
    table.add_row("Derived flags", ", ".join(derived) or "-")
    Console().print(table)


def main_entry() -> None:
    """Run the triple CLI app."""
    app()


if __name__ == "__main__":
    main_entry()
