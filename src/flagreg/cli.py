"""Shared CLI utilities for flagreg tools.

Provides common Typer options, flag-context resolution, and standardised
output / error helpers so that every command gets consistent ``--target``
and ``-D`` support, error reporting, and JSON output without boilerplate.

Usage in a command::

    import typer
    from flagreg.cli import TargetOption, DefineOption, resolve_flags, error_exit

    app = typer.Typer()

    @app.callback(invoke_without_command=True)
    def main(target: str | None = TargetOption, define: list[str] = DefineOption) -> None:
        ctx = resolve_flags(target=target, defines=define)
        ...
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from flagreg.config import ProjectConfig, load_config
from flagreg.registry import FlagContext, build_context
from flagreg.triple import Triple, TripleError, parse_triple

# Re-usable Typer options
TargetOption: str | None = typer.Option(
    None,
    "--target",
    "-t",
    help="Target triple, or a target name from flagreg.toml (default: the configured target).",
)
DefineOption: list[str] = typer.Option(
    [],
    "--define",
    "-D",
    help="Define a user flag (repeatable).",
)
HostOption: bool = typer.Option(False, "--host", help="Query the host context instead of the target.")
HostTripleOption: str | None = typer.Option(
    None,
    "--host-triple",
    help="Host triple when cross-compiling (default: the configured host, else the target).",
)
JsonOption: bool = typer.Option(False, "--json", help="Output results as JSON.")
VerboseOption: bool = typer.Option(False, "--verbose", "-v", help="Print flag resolution details to stderr.")
ReleaseOption: bool | None = typer.Option(None, "--release/--no-release", help="Compile in release mode.")
DebugOption: bool | None = typer.Option(None, "--debug/--no-debug", help="Emit debug info (default: on).")
StaticOption: bool | None = typer.Option(None, "--static/--no-static", help="Link statically.")
DocsOption: bool | None = typer.Option(None, "--docs/--no-docs", help="Documentation generator run.")
InterpretedOption: bool | None = typer.Option(None, "--interpreted/--no-interpreted", help="Interpreter run.")
ConfigOption: Path | None = typer.Option(
    None,
    "--config-root",
    help="Directory holding flagreg.toml (default: search upwards from cwd).",
)


# ---------------------------------------------------------------------------
# Standardised output helpers
# ---------------------------------------------------------------------------

_err_console = Console(stderr=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {escape(msg)}", highlight=False)
    raise typer.Exit(code=code)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2))


def info(msg: str, *, verbose: bool) -> None:
    """Print a dim diagnostic line to stderr when *verbose* is set."""
    if verbose:
        _err_console.print(f"[dim]{escape(msg)}[/dim]", highlight=False)


# ---------------------------------------------------------------------------
# Flag context resolution
# ---------------------------------------------------------------------------


def get_config(root: Path | None = None, *, json_mode: bool = False) -> ProjectConfig:
    """Load the project config, exiting with a readable error if it is invalid."""
    try:
        return load_config(root)
    except (FileNotFoundError, KeyError, ValueError) as exc:
        error_exit(str(exc), json_mode=json_mode)


def _parse(text: str, *, json_mode: bool) -> Triple:
    try:
        return parse_triple(text)
    except TripleError as exc:
        error_exit(str(exc), json_mode=json_mode)


def _resolve_triples(
    target_text: str | None, host_text: str | None, *, json_mode: bool
) -> tuple[Triple, Triple]:
    """Return ``(target, host)``.  Without a host triple the host is the target."""
    if not target_text:
        error_exit(
            "No target triple given; pass --target or set [target] triple in flagreg.toml.",
            json_mode=json_mode,
        )
    target = _parse(target_text, json_mode=json_mode)
    host = _parse(host_text, json_mode=json_mode) if host_text else target
    return target, host


def resolve_flags(
    *,
    target: str | None = None,
    host_triple: str | None = None,
    defines: list[str] | None = None,
    release: bool | None = None,
    debug: bool | None = None,
    static: bool | None = None,
    docs: bool | None = None,
    interpreted: bool | None = None,
    cfg: ProjectConfig | None = None,
    json_mode: bool = False,
    verbose: bool = False,
) -> FlagContext:
    """Resolve the target and host flag registries for one invocation.

    Settings from flagreg.toml come first; command-line defines are added
    to the configured ones and command-line switches and triples override
    configured ones.
    """
    if cfg is None:
        cfg = get_config(json_mode=json_mode)

    triple_text, profile_defines = cfg.resolve_target(target)
    target_triple, host = _resolve_triples(
        triple_text, host_triple or cfg.host_triple, json_mode=json_mode
    )

    options = cfg.options.merged(
        release=release,
        debug=debug,
        static=static,
        docs=docs,
        interpreted=interpreted,
    )
    all_defines = [*cfg.defines, *profile_defines, *(defines or [])]

    try:
        ctx = build_context(target_triple, host, options, all_defines)
    except ValueError as exc:
        error_exit(str(exc), json_mode=json_mode)

    if cfg.path is not None:
        info(f"config: {cfg.path}", verbose=verbose)
    info(f"target: {ctx.target.triple}", verbose=verbose)
    info(f"host: {ctx.host.triple}", verbose=verbose)
    info(f"cross-compiling: {'yes' if ctx.cross_compiling else 'no'}", verbose=verbose)
    if all_defines:
        info(f"defines: {', '.join(all_defines)}", verbose=verbose)
    return ctx
