"""flagreg cfg: Programmatic editor for flagreg.toml.

Uses tomlkit for format-preserving round-trip editing (comments,
ordering, and whitespace are retained).

Usage::

    flagreg cfg init
    flagreg cfg show [KEY]
    flagreg cfg define preview_mt
    flagreg cfg undefine preview_mt
    flagreg cfg set-target x86_64-unknown-linux-gnu
    flagreg cfg set-host aarch64-apple-darwin
    flagreg cfg set-option release true
    flagreg cfg add-target rpi arm-unknown-linux-gnueabihf -D without_openssl
    flagreg cfg remove-target rpi
"""

import contextlib
import os
from pathlib import Path
from typing import NoReturn

import tomlkit
import typer

from flagreg.config import CONFIG_FILENAME, find_root
from flagreg.options import OPTION_NAMES
from flagreg.registry import normalize_flag_name, validate_define
from flagreg.triple import TripleError, parse_triple

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fail(msg: str) -> NoReturn:
    typer.secho(f"Error: {msg}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _find_root() -> Path:
    """Walk up from cwd to find flagreg.toml, or exit with an error."""
    root = find_root()
    if root is not None:
        return root
    typer.secho(
        f"Error: Could not find {CONFIG_FILENAME} in any parent directory.\n"
        "Run this command from within a project, or use 'flagreg cfg init' first.",
        fg=typer.colors.RED,
        err=True,
    )
    raise typer.Exit(code=1)


def _load_toml(root: Path | None = None) -> tuple[tomlkit.TOMLDocument, Path]:
    """Load flagreg.toml as a tomlkit document, preserving formatting."""
    if root is None:
        root = _find_root()
    toml_path = root / CONFIG_FILENAME
    if not toml_path.exists():
        typer.secho(f"Error: {toml_path} not found.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    doc = tomlkit.parse(toml_path.read_text(encoding="utf-8"))
    return doc, toml_path


def _save_toml(doc: tomlkit.TOMLDocument, path: Path) -> None:
    """Write tomlkit document back atomically, preserving formatting."""
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp_path.write_text(tomlkit.dumps(doc), encoding="utf-8")
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise


def _table(doc: tomlkit.TOMLDocument, key: str):
    """Return the top-level table *key*, creating it if missing."""
    table = doc.get(key)
    if table is None:
        table = tomlkit.table()
        doc[key] = table
    return table


def _check_triple(triple: str) -> str:
    try:
        return str(parse_triple(triple))
    except TripleError as exc:
        _fail(str(exc))


def _check_define(name: str) -> str:
    try:
        return validate_define(normalize_flag_name(name))
    except ValueError as exc:
        _fail(str(exc))


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in ("true", "yes", "on", "1"):
        return True
    if lowered in ("false", "no", "off", "0"):
        return False
    _fail(f"Expected true or false, got '{value}'")


# ---------------------------------------------------------------------------
# Typer app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="Read and edit flagreg.toml programmatically.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]
  flagreg cfg init                               Create flagreg.toml here
  flagreg cfg show defines.flags                 Read a config value
  flagreg cfg define preview_mt                  Add a project-wide define
  flagreg cfg set-option release true           Set a compiler option
  flagreg cfg add-target wasm wasm32-wasi        Add a named target

[dim]Supports dotted key paths for nested TOML tables
(e.g. 'targets.rpi.triple').[/dim]""",
)


@app.command("init")
def init(
    triple: str | None = typer.Option(None, "--triple", help="Default target triple."),
) -> None:
    """Create an empty flagreg.toml in the current directory (idempotent)."""
    toml_path = Path.cwd() / CONFIG_FILENAME
    if toml_path.exists():
        typer.secho(f"{CONFIG_FILENAME} already exists (no changes made).", fg=typer.colors.YELLOW)
        return

    doc = tomlkit.document()
    doc.add(tomlkit.comment("flagreg project configuration"))
    if triple is not None:
        target = tomlkit.table()
        target.add("triple", _check_triple(triple))
        doc["target"] = target
    defines = tomlkit.table()
    defines.add("flags", tomlkit.array())
    doc["defines"] = defines
    _save_toml(doc, toml_path)
    typer.secho(f"Created {toml_path}", fg=typer.colors.GREEN)


@app.command("show")
def show(
    key: str | None = typer.Argument(
        None, help="Dot-separated key to show, e.g. 'targets.rpi.triple'"
    ),
) -> None:
    """Show the current config, or a specific key."""
    doc, _ = _load_toml()

    if key is None:
        typer.echo(tomlkit.dumps(doc))
        return

    current = doc
    for part in key.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            typer.secho(f"Key '{key}' not found.", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

    if isinstance(current, dict):
        typer.echo(tomlkit.dumps(current))
    else:
        typer.echo(str(current))


@app.command("define")
def define(
    name: str = typer.Argument(..., help="Flag to define for every build."),
    target: str | None = typer.Option(
        None, "--target", "-t", help="Define only for this named target."
    ),
) -> None:
    """Add a project-wide user flag (or one for a named target)."""
    name = _check_define(name)
    doc, toml_path = _load_toml()

    if target is not None:
        targets = doc.get("targets", {})
        if target not in targets:
            _fail(f"Target '{target}' not found. Available: {list(targets.keys())}")
        section = targets[target]
        key, scope = "defines", f"targets.{target}.defines"
    else:
        section = _table(doc, "defines")
        key, scope = "flags", "defines.flags"

    flags = section.get(key)
    if flags is None:
        section[key] = tomlkit.array()
        flags = section[key]
    if name in flags:
        typer.secho(f"'{name}' is already defined in {scope}.", fg=typer.colors.YELLOW)
        return

    flags.append(name)
    _save_toml(doc, toml_path)
    typer.secho(f"Defined '{name}' in {scope}. Now: {[str(f) for f in flags]}", fg=typer.colors.GREEN)


@app.command("undefine")
def undefine(
    name: str = typer.Argument(..., help="Flag to remove."),
    target: str | None = typer.Option(
        None, "--target", "-t", help="Remove from this named target."
    ),
) -> None:
    """Remove a user flag (idempotent)."""
    name = normalize_flag_name(name)
    doc, toml_path = _load_toml()

    if target is not None:
        section = doc.get("targets", {}).get(target, {})
        flags, scope = section.get("defines"), f"targets.{target}.defines"
    else:
        flags, scope = doc.get("defines", {}).get("flags"), "defines.flags"

    if flags is None or name not in flags:
        typer.secho(f"'{name}' not in {scope} (already removed).", fg=typer.colors.YELLOW)
        return

    flags.remove(name)
    _save_toml(doc, toml_path)
    typer.secho(f"Removed '{name}' from {scope}. Now: {[str(f) for f in flags]}", fg=typer.colors.GREEN)


@app.command("set-target")
def set_target(
    triple: str = typer.Argument(..., help="Default target triple."),
) -> None:
    """Set the default target triple."""
    normalized = _check_triple(triple)
    doc, toml_path = _load_toml()
    _table(doc, "target")["triple"] = normalized
    _save_toml(doc, toml_path)
    typer.secho(f"Set target.triple = {normalized!r}", fg=typer.colors.GREEN)


@app.command("set-host")
def set_host(
    triple: str = typer.Argument(..., help="Host triple used when cross-compiling."),
) -> None:
    """Set the host triple (omit it to build natively)."""
    normalized = _check_triple(triple)
    doc, toml_path = _load_toml()
    _table(doc, "host")["triple"] = normalized
    _save_toml(doc, toml_path)
    typer.secho(f"Set host.triple = {normalized!r}", fg=typer.colors.GREEN)


@app.command("set-option")
def set_option(
    name: str = typer.Argument(..., help=f"Compiler option: {', '.join(sorted(OPTION_NAMES))}."),
    value: str = typer.Argument(..., help="true or false."),
) -> None:
    """Set a compiler option default."""
    if name not in OPTION_NAMES:
        _fail(f"Unknown compiler option '{name}'. Known: {sorted(OPTION_NAMES)}")
    parsed = _parse_bool(value)
    doc, toml_path = _load_toml()
    _table(doc, "options")[name] = parsed
    _save_toml(doc, toml_path)
    typer.secho(f"Set options.{name} = {str(parsed).lower()}", fg=typer.colors.GREEN)


@app.command("add-target")
def add_target(
    name: str = typer.Argument(..., help="Target name (e.g. 'rpi')."),
    triple: str = typer.Argument(..., help="Target triple."),
    defines: list[str] = typer.Option([], "--define", "-D", help="Defines for this target."),
) -> None:
    """Add a named target section to flagreg.toml (idempotent)."""
    normalized = _check_triple(triple)
    checked = [_check_define(d) for d in defines]
    doc, toml_path = _load_toml()
    targets = doc.get("targets")
    if targets is None:
        targets = tomlkit.table(is_super_table=True)
        doc["targets"] = targets

    if name in targets:
        typer.secho(f"Target '{name}' already exists (no changes made).", fg=typer.colors.YELLOW)
        return

    tgt = tomlkit.table()
    tgt.add("triple", normalized)
    if checked:
        tgt.add("defines", checked)
    targets[name] = tgt
    _save_toml(doc, toml_path)
    typer.secho(f"Added [targets.{name}] ({normalized}) to {CONFIG_FILENAME}", fg=typer.colors.GREEN)


@app.command("remove-target")
def remove_target(
    name: str = typer.Argument(..., help="Target name to remove."),
) -> None:
    """Remove a named target section (idempotent)."""
    doc, toml_path = _load_toml()
    targets = doc.get("targets", {})
    if name not in targets:
        typer.secho(f"Target '{name}' not found (already removed).", fg=typer.colors.YELLOW)
        return

    del targets[name]
    _save_toml(doc, toml_path)
    typer.secho(f"Removed [targets.{name}] from {CONFIG_FILENAME}", fg=typer.colors.GREEN)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main_entry() -> None:
    app()


if __name__ == "__main__":
    main_entry()
