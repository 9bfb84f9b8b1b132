"""check.py – Validate a build configuration against safety guards.

Resolves the target flags like ``flagreg list`` would, then verifies that
mutually exclusive platform categories are consistent and that every
guarded flag is accompanied by its acknowledgement flag.

Usage::

    flagreg check -D without_interpreter                         # fails
    flagreg check -D without_interpreter -D i_know_what_im_doing # passes
"""

from pathlib import Path

import typer

from flagreg.cli import (
    ConfigOption,
    DebugOption,
    DefineOption,
    DocsOption,
    InterpretedOption,
    JsonOption,
    ReleaseOption,
    StaticOption,
    TargetOption,
    VerboseOption,
    error_exit,
    get_config,
    json_print,
    resolve_flags,
)
from flagreg.guards import BUILTIN_RULES, check_guards, rules_from_mapping
from flagreg.registry import FlagConflictError, check_exclusive

app = typer.Typer(
    help="Check flags against safety guards.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

flagreg check                                   Check the configured build

flagreg check -D without_ffi --json             Machine-readable result

[bold]Guards:[/bold]

Compiler build features (without_ffi, without_interpreter,
without_playground) require -D i_know_what_im_doing.  Add project
guards in the guards table of flagreg.toml.""",
)


@app.callback(invoke_without_command=True)
def main(
    target: str | None = TargetOption,
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
    """Exit 1 if the resolved flags violate a guard."""
    cfg = get_config(config_root, json_mode=json_output)
    ctx = resolve_flags(
        target=target,
        defines=define,
        release=release,
        debug=debug,
        static=static,
        docs=docs,
        interpreted=interpreted,
        cfg=cfg,
        json_mode=json_output,
        verbose=verbose,
    )

    try:
        check_exclusive(ctx.target)
    except FlagConflictError as exc:
        error_exit(str(exc), json_mode=json_output)

    rules = [*BUILTIN_RULES, *rules_from_mapping(cfg.guards)]
    violations = check_guards(ctx.target, rules)

    if json_output:
        json_print(
            {
                "triple": str(ctx.target.triple),
                "ok": not violations,
                "violations": [v.to_dict() for v in violations],
            }
        )
        if violations:
            raise typer.Exit(code=1)
        return

    if violations:
        for violation in violations:
            typer.secho(f"✗ {violation.message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.secho(f"✓ {len(rules)} guard(s) satisfied for {ctx.target.triple}", fg=typer.colors.GREEN)


def main_entry() -> None:
    """Run the check CLI app."""
    app()


if __name__ == "__main__":
    main_entry()
