"""listing.py – Show the resolved flags of the target or host context.

Prints a Rich table of every set flag with its category, origin and
description.  ``--all`` also lists built-in flags that are unset.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from flagreg.catalog import EXCLUSIVE_CATEGORIES, REFERENCE, Category, describe
from flagreg.cli import (
    ConfigOption,
    DebugOption,
    DefineOption,
    DocsOption,
    HostOption,
    HostTripleOption,
    InterpretedOption,
    JsonOption,
    ReleaseOption,
    StaticOption,
    TargetOption,
    VerboseOption,
    get_config,
    json_print,
    resolve_flags,
)
from flagreg.flags import Context, Flag, Origin
from flagreg.registry import FlagRegistry

app = typer.Typer(
    help="List the flags set for the target or host.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

flagreg list                                  Flags of the configured target

flagreg list -t aarch64-apple-darwin --release

flagreg list --host --json                    Host context as JSON

flagreg list --all                            Include unset built-in flags""",
)


def _origin_of(category: Category) -> Origin:
    if category in EXCLUSIVE_CATEGORIES:
        return Origin.TARGET
    if category is Category.COMPILER_OPTION:
        return Origin.OPTION
    return Origin.USER


def collect_rows(registry: FlagRegistry, *, include_unset: bool = False) -> list[Flag]:
    """Set flags of *registry*, plus unset built-ins when *include_unset*."""
    rows = registry.set_flags()
    if include_unset:
        known = {flag.name for flag in rows}
        rows += [
            Flag(info.name, False, _origin_of(info.category), derived=info.derived)
            for info in REFERENCE
            if info.name not in known
        ]
    return rows


def _row_dict(registry: FlagRegistry, flag: Flag) -> dict[str, object]:
    data = flag.to_dict()
    data["category"] = registry.category(flag.name).value
    info = describe(flag.name)
    data["description"] = info.description if info else ""
    return data


def _render(console: Console, registry: FlagRegistry, context: Context, rows: list[Flag]) -> None:
    table = Table(title=f"{context.value} flags ({registry.triple})", title_justify="left")
    table.add_column("Flag", style="bold")
    table.add_column("Set")
    table.add_column("Category")
    table.add_column("Origin")
    table.add_column("Description", style="dim")
    for flag in rows:
        info = describe(flag.name)
        origin = flag.origin.value + (" (derived)" if flag.derived else "")
        table.add_row(
            flag.name,
            "[green]yes[/green]" if flag.value else "[red]no[/red]",
            registry.category(flag.name).title,
            origin if flag.value else "",
            info.description if info else "",
        )
    console.print(table)


@app.callback(invoke_without_command=True)
def main(
    host: bool = HostOption,
    show_all: bool = typer.Option(False, "--all", "-a", help="Include unset built-in flags."),
    target: str | None = TargetOption,
    host_triple: str | None = HostTripleOption,
    define: list[str] = DefineOption,
    release: bool | None = ReleaseOption,
    debug: bool | None = DebugOption,
    static: bool | None = StaticOption,
    docs: bool | None = DocsOption,
    interpreted: bool | None = InterpretedOption,
    config_root: Path | None = ConfigOption,
    json_output: bool = JsonOption,
    verbose: bool = VerboseOption,
) -> None:
    """List resolved flags."""
    ctx = resolve_flags(
        target=target,
        host_triple=host_triple,
        defines=define,
        release=release,
        debug=debug,
        static=static,
        docs=docs,
        interpreted=interpreted,
        cfg=get_config(config_root, json_mode=json_output),
        json_mode=json_output,
        verbose=verbose,
    )
    context = Context.HOST if host else Context.TARGET
    registry = ctx.registry(context)
    rows = collect_rows(registry, include_unset=show_all)

    if json_output:
        json_print(
            {
                "context": context.value,
                "triple": str(registry.triple),
                "cross_compiling": ctx.cross_compiling,
                "flags": [_row_dict(registry, flag) for flag in rows],
            }
        )
        return

    _render(Console(), registry, context, rows)


def main_entry() -> None:
    """Run the list CLI app."""
    app()


if __name__ == "__main__":
    main_entry()
