"""reference.py – Print the reference tables of built-in flags.

One Rich table per category, in documentation order.  ``--category``
restricts the output to a single table.
"""

import typer
from rich.console import Console
from rich.table import Table

from flagreg.catalog import Category, flags_in
from flagreg.cli import JsonOption, error_exit, json_print

app = typer.Typer(
    help="Show the reference listing of built-in flags.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

flagreg reference                         Every category

flagreg reference --category os           Operating system flags only

flagreg reference --json                  Machine-readable listing

[dim]Categories: architecture, vendor, os, abi, compiler-option,
stdlib-feature, language-feature, codegen-feature,
compiler-build-feature, user-code-feature.[/dim]""",
)


def _parse_category(value: str, json_mode: bool) -> Category:
    try:
        return Category(value)
    except ValueError:
        error_exit(
            f"Unknown category '{value}'. Choose from: {[c.value for c in Category]}",
            json_mode=json_mode,
        )


@app.callback(invoke_without_command=True)
def main(
    category: str | None = typer.Option(None, "--category", "-c", help="Only this category."),
    json_output: bool = JsonOption,
) -> None:
    """Print the built-in flags, grouped by category."""
    categories = [_parse_category(category, json_output)] if category else list(Category)

    if json_output:
        json_print([info.to_dict() for cat in categories for info in flags_in(cat)])
        return

    console = Console()
    for cat in categories:
        table = Table(title=cat.title, title_justify="left")
        table.add_column("Flag", style="bold")
        table.add_column("Description")
        entries = flags_in(cat)
        for info in entries:
            suffix = " [dim](derived)[/dim]" if info.derived else ""
            table.add_row(info.name, info.description + suffix)
        if not entries:
            table.add_row("[dim]-[/dim]", "[dim]Any flag passed with -D / --define[/dim]")
        console.print(table)
        console.print()


def main_entry() -> None:
    """Run the reference CLI app."""
    app()


if __name__ == "__main__":
    main_entry()
