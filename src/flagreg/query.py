"""query.py – Ask whether compile-time flags are set.

Prints one ``NAME true|false`` line per queried flag.  Unknown flags are
simply ``false``; querying never fails.

Usage::

    flagreg query unix windows
    flagreg query foo bar -D foo
    flagreg query linux --host --host-triple x86_64-linux-gnu --target aarch64-apple-darwin
    flagreg query preview_mt --exit-code && echo "multithreaded"
"""

from pathlib import Path

import typer

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
from flagreg.flags import Context
from flagreg.registry import normalize_flag_name

app = typer.Typer(
    help="Query whether compile-time flags are set.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

flagreg query unix windows                     Query the configured target

flagreg query foo -D foo                       User defines are flags too

flagreg query linux --host --host-triple x86_64-linux-gnu -t wasm32-wasi

flagreg query release --exit-code              Exit 1 when any flag is unset

[dim]Flag names may be written bare (unix), as symbols (:unix) or as
string literals ("unix").[/dim]""",
)


@app.command()
def main(
    names: list[str] = typer.Argument(..., help="Flag names to query."),
    host: bool = HostOption,
    exit_code: bool = typer.Option(
        False, "--exit-code", help="Exit with status 1 if any queried flag is unset."
    ),
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
    """Print whether each flag is set for the target (or host)."""
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
    results = {normalize_flag_name(name): ctx.query(name, context) for name in names}

    if json_output:
        json_print(
            {
                "context": context.value,
                "triple": str(ctx.registry(context).triple),
                "flags": results,
            }
        )
    else:
        for name, value in results.items():
            typer.echo(f"{name} {'true' if value else 'false'}")

    if exit_code and not all(results.values()):
        raise typer.Exit(code=1)


def main_entry() -> None:
    """Run the query CLI app."""
    app()


if __name__ == "__main__":
    main_entry()
